"""
Résolution des jours tronqués ("+N more")

La grille n'affiche qu'une partie des congés de certains jours. La vue
détaillée du jour est ouverte dans un onglet séparé du même contexte (la
page du calendrier garde ses listes déroulantes et son filtre), lue puis
refermée. Son contenu REMPLACE les entrées lues dans la grille.

En cas d'échec (ouverture, délai dépassé), on garde les entrées partielles :
un jour en échec ne fait jamais échouer le mois.
"""

import time
from typing import List, Optional
from urllib.parse import quote, urljoin

from playwright.sync_api import BrowserContext, Error as PlaywrightError

from hriq_calendar.config import (
    CALENDAR_URL, OVERFLOW_URL_TEMPLATE, OVERFLOW_ROW_SELECTOR, OVERFLOW_TIMEOUT
)
from hriq_calendar.logging import get_logger
from hriq_calendar.scraper.browser import wait_until
from hriq_calendar.scraper.parser import RawEntry, parse_flat_lines

logger = get_logger()


def overflow_url(token: str) -> str:
    """
    Construit l'URL de la vue détaillée à partir du jeton du lien.

    Exemples:
        >>> overflow_url("ViewLeaveDetail.aspx?d=15")
        'https://essportal.goldbell.com.sg/LEAVE/Leave/eLeave/ViewLeaveDetail.aspx?d=15'
        >>> overflow_url("2026-01-15").endswith("?date=2026-01-15")
        True
    """
    if any(marker in token for marker in (".aspx", "/", "?")):
        return urljoin(CALENDAR_URL, token)
    return OVERFLOW_URL_TEMPLATE.format(token=quote(token))


def read_detail_lines(page) -> List[str]:
    """Texte de chaque ligne de congé de la vue détaillée, une ligne par entrée."""
    rows = page.locator(OVERFLOW_ROW_SELECTOR)
    return [" ".join(text.split()) for text in rows.all_inner_texts()]


def resolve_overflow(
    context: BrowserContext,
    day: int,
    token: str,
    timeout: float = OVERFLOW_TIMEOUT
) -> Optional[List[RawEntry]]:
    """
    Lit la liste complète des congés d'un jour tronqué.

    Seules les lignes de congé de la vue sont lues (pas l'en-tête ni le pied
    de page). L'attente se termine quand le nombre de lignes ne bouge plus
    entre deux scrutations.

    Args:
        context: Contexte navigateur de la session connectée
        day: Jour du mois (pour les logs)
        token: Jeton extrait du lien "+N more"
        timeout: Attente maximale du contenu (ms), chargement compris

    Returns:
        Liste complète des entrées, ou None si la vue n'a pas pu être lue
    """
    url = overflow_url(token)
    logger.debug(f"Jour {day} tronqué, ouverture de {url}")

    page = None
    try:
        started = time.monotonic()
        page = context.new_page()
        page.goto(url, wait_until="domcontentloaded", timeout=timeout)
        remaining = max(timeout - (time.monotonic() - started) * 1000, 0)

        rows = page.locator(OVERFLOW_ROW_SELECTOR)
        previous = -1

        def rows_settled() -> bool:
            nonlocal previous
            count = rows.count()
            settled = count > 0 and count == previous
            previous = count
            return settled

        wait_until(rows_settled, remaining)

        entries = parse_flat_lines("\n".join(read_detail_lines(page)))
        if not entries:
            logger.warning(f"⚠️ Vue détaillée du jour {day} sans entrée lisible, entrées partielles conservées")
            return None

        logger.info(f"Jour {day} : {len(entries)} entrées dans la vue détaillée")
        return entries

    except (PlaywrightError, TimeoutError) as e:
        logger.warning(f"⚠️ Vue détaillée du jour {day} illisible, entrées partielles conservées : {e}")
        return None

    finally:
        if page is not None:
            try:
                page.close()
            except PlaywrightError as e:
                logger.debug(f"Fermeture de la vue détaillée du jour {day} : {e}")
