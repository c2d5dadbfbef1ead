"""Outils Playwright partagés : recherche d'éléments, attentes bornées, captures de debug"""

import time
from pathlib import Path
from typing import Callable, Optional, Sequence, TypeVar, Union

from playwright.sync_api import Error as PlaywrightError, Locator, Page

from hriq_calendar.config import POLL_INTERVAL
from hriq_calendar.logging import get_logger

logger = get_logger()

T = TypeVar("T")

# Une stratégie est un sélecteur CSS ou une fonction page -> Locator
Strategy = Union[str, Callable[[Page], Locator]]


def locate(page: Page, strategies: Sequence[Strategy]) -> Optional[Locator]:
    """
    Essaie les stratégies dans l'ordre et retourne le premier élément trouvé.

    Args:
        page: Page Playwright
        strategies: Sélecteurs CSS ou fonctions page -> Locator

    Returns:
        Locator du premier élément trouvé, ou None si aucune stratégie ne marche

    Exemple:
        >>> field = locate(page, ['input[name*="UserID"]', 'input[type="text"]'])
        >>> submit = locate(page, [lambda p: p.get_by_role("button", name="Sign in")])
    """
    for strategy in strategies:
        try:
            candidate = page.locator(strategy) if isinstance(strategy, str) else strategy(page)
            if candidate.count() > 0:
                logger.debug(f"Élément trouvé avec : {strategy}")
                return candidate.first
        except PlaywrightError as e:
            logger.debug(f"Stratégie {strategy} en échec : {e}")
    return None


def wait_until(predicate: Callable[[], T], timeout: float, interval: float = POLL_INTERVAL) -> T:
    """
    Interroge `predicate` jusqu'à obtenir une valeur vraie.

    Args:
        predicate: Fonction sans argument, la valeur vraie est renvoyée
        timeout: Durée maximale (ms, comme Playwright)
        interval: Pause entre deux essais (s)

    Raises:
        TimeoutError: si la condition n'est pas remplie à temps
    """
    deadline = time.monotonic() + timeout / 1000
    while True:
        result = predicate()
        if result:
            return result
        if time.monotonic() >= deadline:
            raise TimeoutError(f"Condition non remplie après {timeout:.0f} ms")
        time.sleep(interval)


def save_debug_artifacts(page: Page, debug_dir: Optional[Path], name: str) -> None:
    """Sauvegarde une capture d'écran et le HTML de la page (si debug_dir est défini)."""
    if not debug_dir:
        return
    try:
        debug_path = Path(debug_dir)
        debug_path.mkdir(parents=True, exist_ok=True)
        page.screenshot(path=str(debug_path / f"{name}.png"), full_page=True)
        (debug_path / f"{name}.html").write_text(page.content(), encoding="utf-8")
        logger.info(f"📸 Capture de debug sauvegardée : {debug_path / name}.png")
    except (PlaywrightError, OSError) as e:
        logger.warning(f"Impossible de sauvegarder la capture {name} : {e}")
