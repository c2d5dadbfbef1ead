"""
Analyse du texte des cellules du calendrier

Une seule grammaire, deux points d'entrée :
- parse_cell_rows() : lignes de la grille, soit deux segments (nom, " - CODE"),
  soit un texte combiné "NOM - CODE (AM)"
- parse_flat_lines() : texte de la vue détaillée, une entrée par ligne

Les deux produisent des RawEntry. Une ligne illisible est ignorée (log DEBUG),
jamais devinée.
"""

import re
from typing import Iterable, List, NamedTuple, Optional, Tuple, Union

from hriq_calendar.logging import get_logger

logger = get_logger()

SEPARATOR = " - "

_LEADING_DASH = re.compile(r'^[\s\-–]+')
_TRAILING_PERIOD = re.compile(r'\s*\((AM|PM)\)\s*$', re.IGNORECASE)
_DAY_NUMBER = re.compile(r'^\s*(\d{1,2})')
_HOLIDAY = re.compile(r'^\s*\d{1,2}\s+(.+)$', re.DOTALL)
_QUOTED_ARG = re.compile(r"\(\s*['\"]([^'\"]+)['\"]")
_BARE_ARG = re.compile(r"\(\s*([\w\-/]+)\s*[,)]")


class RawEntry(NamedTuple):
    employee: str
    leave_code: str
    period: Optional[str] = None


class CellText(NamedTuple):
    """Texte brut lu dans une cellule de la grille."""
    date_label: str
    holiday_label: Optional[str] = None
    rows: Tuple[Union[str, Tuple[str, str]], ...] = ()
    more_ref: Optional[str] = None


class ParsedCell(NamedTuple):
    day: int
    holiday_name: Optional[str]
    entries: List[RawEntry]
    has_overflow: bool = False
    overflow_token: Optional[str] = None


def _clean(text: Optional[str]) -> str:
    # Espaces insécables, retours à la ligne et espaces multiples -> un espace
    return " ".join((text or "").split())


def _split_period(text: str) -> Tuple[str, Optional[str]]:
    match = _TRAILING_PERIOD.search(text)
    if not match:
        return text.strip(), None
    return text[:match.start()].strip(), match.group(1).upper()


# ============================================================
# DATE ET JOUR FÉRIÉ
# ============================================================

def parse_day_number(date_label: Optional[str]) -> Optional[int]:
    """
    Extrait le jour du mois (1 ou 2 chiffres en tête du libellé).

    Exemples:
        >>> parse_day_number("1   New Year's Day(SG)")
        1
        >>> parse_day_number("")
    """
    match = _DAY_NUMBER.match(date_label or "")
    if not match:
        return None
    day = int(match.group(1))
    return day if 1 <= day <= 31 else None


def parse_holiday_name(holiday_label: Optional[str]) -> Optional[str]:
    """
    Extrait le nom d'un jour férié ("chiffres + texte").

    Exemple:
        >>> parse_holiday_name("1   New Year's Day(SG)")
        "New Year's Day(SG)"
    """
    match = _HOLIDAY.match(holiday_label or "")
    if not match:
        return None
    return _clean(match.group(1)) or None


# ============================================================
# ENTRÉES "NOM - CODE (AM|PM)"
# ============================================================

def parse_entry_text(text: Optional[str]) -> Optional[RawEntry]:
    """
    Analyse un texte combiné "NOM - CODE" ou "NOM - CODE (AM|PM)".

    Le nom est tout ce qui précède le DERNIER " - " ; le code peut contenir
    des espaces et des chiffres.

    Returns:
        RawEntry ou None si le nom ou le code est vide

    Exemple:
        >>> parse_entry_text("TAN WEN XIAN (ALLEN) - WFH 2 (AM)")
        RawEntry(employee='TAN WEN XIAN (ALLEN)', leave_code='WFH 2', period='AM')
    """
    text = _LEADING_DASH.sub("", _clean(text))
    index = text.rfind(SEPARATOR)
    if index < 0:
        return None

    name = text[:index].strip()
    code, period = _split_period(text[index + len(SEPARATOR):])
    code = _LEADING_DASH.sub("", code)

    if not name or not code:
        return None
    return RawEntry(name, code, period)


def parse_entry_segments(name_segment: Optional[str], type_segment: Optional[str]) -> Optional[RawEntry]:
    """
    Analyse une ligne rendue en deux segments : le nom, puis " - CODE".

    Si le segment type est vide, le segment nom est traité comme un texte
    combiné.
    """
    type_text = _LEADING_DASH.sub("", _clean(type_segment))
    if not type_text:
        return parse_entry_text(name_segment)

    name = _clean(name_segment)
    code, period = _split_period(type_text)

    if not name or not code:
        return None
    return RawEntry(name, code, period)


def parse_cell_rows(rows: Iterable[Union[str, Tuple[str, str]]]) -> List[RawEntry]:
    """
    Adaptateur grille : chaque ligne est un couple (nom, type) ou un texte.

    Returns:
        Entrées valides, dans l'ordre de la cellule
    """
    entries = []
    for row in rows:
        if isinstance(row, str):
            entry = parse_entry_text(row)
        else:
            entry = parse_entry_segments(*row)

        if entry is None:
            logger.debug(f"Ligne ignorée (format inconnu) : {row!r}")
            continue
        entries.append(entry)
    return entries


def parse_flat_lines(text: Optional[str]) -> List[RawEntry]:
    """
    Adaptateur vue détaillée : une entrée "NOM - CODE (AM|PM)" par ligne.

    Les lignes d'en-tête ou de mise en page sont ignorées.
    """
    entries = []
    for line in (text or "").splitlines():
        if not line.strip():
            continue
        entry = parse_entry_text(line)
        if entry is None:
            logger.debug(f"Ligne ignorée dans la vue détaillée : {line.strip()!r}")
            continue
        entries.append(entry)
    return entries


# ============================================================
# CELLULE COMPLÈTE
# ============================================================

def extract_overflow_token(reference: Optional[str]) -> Optional[str]:
    """
    Extrait le jeton de recherche du lien "+N more".

    Le lien porte soit un appel JavaScript (on prend le premier argument),
    soit une URL classique (renvoyée telle quelle).

    Exemples:
        >>> extract_overflow_token("javascript:ShowMore('2026-01-15')")
        '2026-01-15'
        >>> extract_overflow_token("ViewLeaveCalendarDetail.aspx?date=2026-01-15")
        'ViewLeaveCalendarDetail.aspx?date=2026-01-15'
    """
    reference = (reference or "").strip()
    if not reference or reference == "#":
        return None

    match = _QUOTED_ARG.search(reference) or _BARE_ARG.search(reference)
    if match:
        return match.group(1)

    if reference.lower().startswith("javascript:"):
        return None
    return reference


def parse_cell(cell: CellText) -> Optional[ParsedCell]:
    """
    Analyse une cellule complète.

    Returns:
        ParsedCell, ou None pour une cellule sans numéro de jour
        (cases vides de début / fin de grille)
    """
    day = parse_day_number(cell.date_label)
    if day is None:
        return None

    holiday_name = parse_holiday_name(cell.holiday_label) if cell.holiday_label else None
    has_overflow = cell.more_ref is not None

    return ParsedCell(
        day=day,
        holiday_name=holiday_name,
        entries=parse_cell_rows(cell.rows),
        has_overflow=has_overflow,
        overflow_token=extract_overflow_token(cell.more_ref) if has_overflow else None,
    )
