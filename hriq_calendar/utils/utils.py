"""
Module de fonctions utilitaires

Ce module contient les fonctions pures de normalisation utilisées par le
scraper et par les rapports :
- Noms des collaborateurs (qualificatif AM/PM, nom court)
- Types de congés (libellé et couleur)
- Clés de date ISO
- Construction des enregistrements congés / jours fériés
"""

import re
from typing import Dict, Optional, Tuple

from hriq_calendar.config import (
    LEAVE_TYPES, LEAVE_TYPE_ALIASES, DEFAULT_LEAVE_COLOR, NAME_MAP
)


_PERIOD_SUFFIX = re.compile(r'^(?P<name>.*?)\s*\((?P<period>AM|PM)\)\s*$', re.IGNORECASE)
_NUMBERED_VARIANT = re.compile(r'^(?P<base>\S+)\s+\d+$')
_FULL_DATE = re.compile(r'^(\d{4})-(\d{2})-(\d{2})$')


# ============================================================
# NOMS DES COLLABORATEURS
# ============================================================

def canonicalize(raw_name: str) -> Tuple[str, Optional[str]]:
    """
    Sépare un nom du portail de son éventuel qualificatif "(AM)" / "(PM)".

    Un nom sans qualificatif final est renvoyé tel quel : la fonction est
    donc idempotente.

    Args:
        raw_name: Nom tel qu'affiché par le portail

    Returns:
        Tuple (nom_canonique, période) avec période "AM", "PM" ou None

    Exemples:
        >>> canonicalize("LIM YI HWEE (JOEY) (PM)")
        ('LIM YI HWEE (JOEY)', 'PM')
        >>> canonicalize("LIM YI HWEE (JOEY)")
        ('LIM YI HWEE (JOEY)', None)
    """
    match = _PERIOD_SUFFIX.match(raw_name or "")
    if not match or not match.group('name'):
        return raw_name, None
    return match.group('name'), match.group('period').upper()


def display_name(canonical_name: str) -> str:
    """
    Retourne le nom court d'un collaborateur, ou le nom lui-même s'il
    n'est pas dans NAME_MAP.

    Exemple:
        >>> display_name("TAN WEN XIAN (ALLEN)")
        'Allen'
    """
    return NAME_MAP.get(canonical_name, canonical_name)


# ============================================================
# TYPES DE CONGÉS
# ============================================================

def normalize_leave_code(code: str) -> str:
    """Compacte les espaces d'un code ("WFH  2" -> "WFH 2")."""
    return " ".join((code or "").split())


def leave_meta(code: str) -> Dict[str, str]:
    """
    Retourne le libellé et la couleur d'un code de congé.

    Les variantes connues passent par LEAVE_TYPE_ALIASES ; une variante
    numérotée inconnue ("WFH 3") retombe sur son code de base s'il existe.
    Un code inconnu garde son code comme libellé et prend la couleur grise
    par défaut.

    Args:
        code: Code court du portail (ex: "SL", "WFH 2")

    Returns:
        Dictionnaire {"label": ..., "color": ...}

    Exemples:
        >>> leave_meta("WFH 2")
        {'label': 'Work From Home', 'color': '#9b59b6'}
        >>> leave_meta("XYZ")
        {'label': 'XYZ', 'color': '#999999'}
    """
    key = normalize_leave_code(code)
    key = LEAVE_TYPE_ALIASES.get(key, key)

    if key not in LEAVE_TYPES:
        variant = _NUMBERED_VARIANT.match(key)
        if variant and variant.group('base') in LEAVE_TYPES:
            key = variant.group('base')

    meta = LEAVE_TYPES.get(key)
    if meta is None:
        return {"label": code, "color": DEFAULT_LEAVE_COLOR}
    return {"label": meta["name"], "color": meta["color"]}


# ============================================================
# CLÉS DE DATE
# ============================================================

def full_date(year: int, month: int, day: int) -> str:
    """
    Construit la clé ISO "YYYY-MM-DD" utilisée pour trier et comparer.

    Exemple:
        >>> full_date(2026, 2, 9)
        '2026-02-09'
    """
    return f"{int(year):04d}-{int(month):02d}-{int(day):02d}"


def split_full_date(text: str) -> Tuple[int, int, int]:
    """
    Inverse de full_date().

    Returns:
        Tuple (jour, mois, année)

    Raises:
        ValueError: si le texte n'est pas au format YYYY-MM-DD
    """
    match = _FULL_DATE.match(text or "")
    if not match:
        raise ValueError(f"Date ISO invalide : {text!r}")
    year, month, day = (int(g) for g in match.groups())
    return day, month, year


# ============================================================
# CONSTRUCTION DES ENREGISTREMENTS
# ============================================================

def build_holiday(day: int, month: int, year: int, name: str) -> Dict:
    """Construit un jour férié au format du fichier JSON."""
    return {
        "date": day,
        "fullDate": full_date(year, month, day),
        "month": month,
        "year": year,
        "name": name,
    }


def build_leave_record(day: int, month: int, year: int, entry) -> Dict:
    """
    Construit un congé normalisé à partir d'une entrée brute.

    Le qualificatif AM/PM peut venir du code ("SL (AM)") ou du nom
    ("NOM (AM)") ; celui du code l'emporte.

    Args:
        day, month, year: Jour concerné
        entry: RawEntry (employee, leave_code, period)

    Returns:
        Dictionnaire au format "leaves" du fichier JSON

    Exemple:
        >>> from hriq_calendar.scraper.parser import RawEntry
        >>> build_leave_record(5, 1, 2026, RawEntry("TAN WEN XIAN (ALLEN)", "WFH 2", "AM"))["displayName"]
        'Allen'
    """
    employee, name_period = canonicalize(entry.employee)
    meta = leave_meta(entry.leave_code)

    return {
        "date": day,
        "fullDate": full_date(year, month, day),
        "month": month,
        "year": year,
        "employee": employee,
        "leaveType": entry.leave_code,
        "period": entry.period or name_period,
        "displayName": display_name(employee),
        "leaveTypeName": meta["label"],
        "color": meta["color"],
    }
