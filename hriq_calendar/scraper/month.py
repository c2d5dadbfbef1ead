"""Module de scraping d'un mois du calendrier des congés"""

import time
from typing import Dict, Iterable, List, Optional, Tuple

from playwright.sync_api import Error as PlaywrightError, Locator, Page, TimeoutError as PlaywrightTimeoutError

from hriq_calendar.config import (
    MONTH_SELECT, YEAR_SELECT, DEPARTMENT_CHECKBOX_SELECTORS, SHOW_BUTTON_SELECTORS,
    CALENDAR_GRID_SELECTOR, DAY_CELL_SELECTOR, DATE_LABEL_SELECTOR, HOLIDAY_LABEL_SELECTOR,
    LEAVE_ROW_SELECTOR, LEAVE_NAME_SELECTOR, LEAVE_TYPE_SELECTOR, LEAVE_TEXT_SELECTOR,
    MORE_LINK_SELECTOR, CALENDAR_TIMEOUT, FILTER_TIMEOUT, SETTLE_DELAY, COMPANY_HOLIDAYS
)
from hriq_calendar.logging import get_logger
from hriq_calendar.scraper.browser import locate, save_debug_artifacts
from hriq_calendar.scraper.overflow import resolve_overflow
from hriq_calendar.scraper.parser import CellText, ParsedCell, RawEntry, parse_cell
from hriq_calendar.utils import build_holiday, build_leave_record, month_name

logger = get_logger()


# ============================================================
# ÉTAPE 1 : CHOIX DU MOIS
# ============================================================

def select_month(page: Page, month: int, year: int) -> bool:
    """
    Positionne les listes déroulantes mois / année du portail.

    Returns:
        True si les deux listes ont été positionnées
    """
    try:
        page.select_option(MONTH_SELECT, str(month))
        page.select_option(YEAR_SELECT, str(year))
        page.wait_for_load_state("networkidle")
        # Pas de signal observable après le choix : délai fixe
        time.sleep(SETTLE_DELAY)
        logger.info(f"📆 Mois sélectionné : {month}/{year}")
        return True
    except PlaywrightError as e:
        logger.warning(f"⚠️ Impossible de sélectionner {month}/{year}, mois affiché conservé : {e}")
        return False


def read_displayed_month(page: Page) -> Tuple[Optional[int], Optional[int], Optional[str]]:
    """
    Lit le mois réellement affiché dans les listes déroulantes.

    Returns:
        Tuple (mois, année, nom_du_mois), avec None pour ce qui est illisible
    """
    try:
        month_value = page.locator(MONTH_SELECT).input_value()
        year_value = page.locator(YEAR_SELECT).input_value()
        label = page.locator(f"{MONTH_SELECT} option:checked").first.inner_text()
    except PlaywrightError as e:
        logger.debug(f"Listes déroulantes illisibles : {e}")
        return None, None, None

    month = int(month_value) if month_value.strip().isdigit() else None
    year = int(year_value) if year_value.strip().isdigit() else None
    return month, year, label.strip() or None


# ============================================================
# ÉTAPE 2 : FILTRE "MON DÉPARTEMENT"
# ============================================================

def apply_department_filter(page: Page) -> bool:
    """
    Coche la vue département puis clique sur "Show".

    Un contrôle absent n'est pas bloquant : on garde la vue par défaut.

    Returns:
        True si le calendrier a été rafraîchi avec le filtre
    """
    try:
        checkbox = locate(page, DEPARTMENT_CHECKBOX_SELECTORS)
        if checkbox is None:
            logger.warning("⚠️ Case 'département' introuvable, vue par défaut")
        elif not checkbox.is_checked():
            checkbox.check()
            time.sleep(SETTLE_DELAY)

        show_button = locate(page, SHOW_BUTTON_SELECTORS)
        if show_button is None:
            logger.warning("⚠️ Bouton 'Show' introuvable, calendrier non rafraîchi")
            return False

        show_button.click()
        try:
            page.wait_for_load_state("networkidle", timeout=FILTER_TIMEOUT)
        except PlaywrightTimeoutError:
            logger.debug("Pas de fin de chargement après 'Show', on continue")
        page.wait_for_selector(CALENDAR_GRID_SELECTOR, timeout=CALENDAR_TIMEOUT)
        return True

    except PlaywrightError as e:
        logger.warning(f"⚠️ Filtre département non appliqué, vue par défaut : {e}")
        return False


# ============================================================
# ÉTAPE 3 : LECTURE DE LA GRILLE
# ============================================================

def _first_text(scope: Locator, selector: str) -> Optional[str]:
    found = scope.locator(selector)
    if found.count() == 0:
        return None
    return found.first.inner_text()


def read_cell(cell: Locator) -> Optional[CellText]:
    """
    Lit le texte structuré d'une cellule : libellé de date, jour férié,
    lignes de congés et lien "+N more" éventuel.
    """
    date_label = _first_text(cell, DATE_LABEL_SELECTOR)
    if date_label is None:
        return None

    rows = []
    leave_rows = cell.locator(LEAVE_ROW_SELECTOR)
    for i in range(leave_rows.count()):
        row = leave_rows.nth(i)
        name = _first_text(row, LEAVE_NAME_SELECTOR)
        leave_type = _first_text(row, LEAVE_TYPE_SELECTOR)
        if name is not None and leave_type is not None:
            rows.append((name, leave_type))
            continue
        text = _first_text(row, LEAVE_TEXT_SELECTOR)
        if text:
            rows.append(text)

    more_ref = None
    more_link = cell.locator(MORE_LINK_SELECTOR)
    if more_link.count() > 0:
        link = more_link.first
        more_ref = " ".join(
            value for value in (link.get_attribute("onclick"), link.get_attribute("href")) if value
        )

    return CellText(
        date_label=date_label,
        holiday_label=_first_text(cell, HOLIDAY_LABEL_SELECTOR),
        rows=tuple(rows),
        more_ref=more_ref,
    )


def read_calendar_cells(page: Page) -> List[ParsedCell]:
    """
    Lit et analyse toutes les cellules de jour de la grille.

    Une cellule illisible est ignorée, les autres sont conservées.
    """
    cells = page.locator(DAY_CELL_SELECTOR)
    parsed = []

    for i in range(cells.count()):
        try:
            cell_text = read_cell(cells.nth(i))
        except PlaywrightError as e:
            logger.warning(f"Cellule {i} illisible, ignorée : {e}")
            continue
        if cell_text is None:
            continue

        cell = parse_cell(cell_text)
        if cell is not None:
            parsed.append(cell)

    return parsed


# ============================================================
# ÉTAPES 4-6 : RÉSOLUTION, ENRICHISSEMENT, ASSEMBLAGE
# ============================================================

def merge_company_holidays(
    holidays: List[Dict],
    month: int,
    year: int,
    company_holidays: Iterable[Dict] = COMPANY_HOLIDAYS
) -> List[Dict]:
    """
    Ajoute les jours fériés de l'entreprise du mois, sans doublon.

    Un jour férié déjà lu sur le portail pour le même (jour, mois, année)
    est conservé, l'entrée statique est alors ignorée.

    Returns:
        Nouvelle liste triée par jour
    """
    merged = list(holidays)
    known = {(h["date"], h["month"], h["year"]) for h in merged}

    for holiday in company_holidays:
        key = (holiday["date"], holiday["month"], holiday["year"])
        if holiday["month"] != month or holiday["year"] != year or key in known:
            continue
        merged.append(build_holiday(holiday["date"], month, year, holiday["name"]))
        known.add(key)

    return sorted(merged, key=lambda h: h["date"])


def assemble_month(
    month: int,
    year: int,
    cells: Iterable[ParsedCell],
    resolved: Optional[Dict[int, List[RawEntry]]] = None,
    name: Optional[str] = None,
    company_holidays: Iterable[Dict] = COMPANY_HOLIDAYS
) -> Dict:
    """
    Construit le MonthRecord à partir des cellules analysées.

    Les entrées de `resolved` (vues détaillées) remplacent celles de la
    grille pour le même jour.

    Args:
        month, year: Mois concerné
        cells: Cellules analysées de la grille
        resolved: Entrées complètes par jour pour les jours tronqués
        name: Nom du mois affiché par le portail (sinon nom anglais)
        company_holidays: Jours fériés de l'entreprise

    Returns:
        Dictionnaire {month, year, monthName, holidays, leaves}
    """
    entries_by_day: Dict[int, List[RawEntry]] = {}
    holidays: Dict[int, Dict] = {}

    for cell in cells:
        entries_by_day.setdefault(cell.day, []).extend(cell.entries)
        if cell.holiday_name and cell.day not in holidays:
            holidays[cell.day] = build_holiday(cell.day, month, year, cell.holiday_name)

    for day, entries in (resolved or {}).items():
        entries_by_day[day] = list(entries)

    leaves = [
        build_leave_record(day, month, year, entry)
        for day in sorted(entries_by_day)
        for entry in entries_by_day[day]
    ]

    return {
        "month": month,
        "year": year,
        "monthName": name or month_name(month),
        "holidays": merge_company_holidays(list(holidays.values()), month, year, company_holidays),
        "leaves": leaves,
    }


def resolve_overflow_cells(page: Page, cells: Iterable[ParsedCell]) -> Dict[int, List[RawEntry]]:
    """Ouvre la vue détaillée de chaque jour tronqué, un jour à la fois."""
    resolved = {}
    for cell in cells:
        if not cell.has_overflow:
            continue
        if not cell.overflow_token:
            logger.warning(f"⚠️ Jour {cell.day} tronqué mais lien illisible, entrées partielles conservées")
            continue
        entries = resolve_overflow(page.context, cell.day, cell.overflow_token)
        if entries is not None:
            resolved[cell.day] = entries
    return resolved


def extract_month(page: Page, month: int, year: int, debug_dir=None) -> Dict:
    """
    Extrait un mois complet du calendrier.

    Étapes : choix du mois, filtre département, lecture de la grille,
    résolution des jours tronqués, enrichissement. Un contrôle manquant
    dégrade le résultat sans l'interrompre.

    Args:
        page: Page Playwright positionnée sur le calendrier
        month: Mois cible (1-12)
        year: Année cible
        debug_dir: Dossier des captures de debug (optionnel)

    Returns:
        MonthRecord du mois réellement affiché
    """
    logger.info(f"Traitement du mois : {month_name(month)} {year}")

    selected = select_month(page, month, year)
    apply_department_filter(page)

    # Les données sont rangées sous le mois réellement affiché
    shown_month, shown_year, shown_name = read_displayed_month(page)
    if shown_month and shown_year:
        if (shown_month, shown_year) != (month, year):
            logger.warning(
                f"⚠️ Le portail affiche {shown_month:02d}/{shown_year} au lieu de {month:02d}/{year}"
            )
        month, year = shown_month, shown_year
    else:
        shown_name = None
        if not selected:
            logger.warning(f"⚠️ Mois affiché illisible, données rangées sous {month:02d}/{year}")

    save_debug_artifacts(page, debug_dir, f"calendar-{year:04d}-{month:02d}")

    cells = read_calendar_cells(page)
    truncated = [cell for cell in cells if cell.has_overflow]
    logger.info(f"Cellules lues : {len(cells)} ({len(truncated)} jours tronqués)")

    resolved = resolve_overflow_cells(page, truncated)
    record = assemble_month(month, year, cells, resolved, name=shown_name)

    logger.info(
        f"✅ {record['monthName']} {year} : {len(record['leaves'])} congés, "
        f"{len(record['holidays'])} jours fériés"
    )
    return record
