"""
Pipeline complet de scraping du calendrier des congés

Connexion au portail, ouverture du calendrier, extraction séquentielle des
3 mois (précédent, courant, suivant) sur une seule page, archivage de
chaque mois puis écriture du fichier agrégé. Le navigateur est toujours
fermé, succès ou échec.

Les erreurs fatales sont levées (voir hriq_calendar.exceptions) ; seul le
script appelant décide du code de sortie.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from playwright.sync_api import Error as PlaywrightError, Page, TimeoutError as PlaywrightTimeoutError, sync_playwright

from hriq_calendar.config import (
    Settings, LOGIN_URL, CALENDAR_URL, LOGIN_INDICATOR,
    USER_ID_SELECTORS, PASSWORD_SELECTORS, SIGN_IN_SELECTORS, CALENDAR_GRID_SELECTOR,
    PAGE_LOAD_TIMEOUT, LOGIN_FORM_TIMEOUT, LOGIN_TIMEOUT, CALENDAR_TIMEOUT,
    BROWSER_ARGS, VIEWPORT, USER_AGENT
)
from hriq_calendar.exceptions import (
    AuthenticationError, CalendarNotFoundError, HriqError, LoginFormError, MissingCredentialsError
)
from hriq_calendar.logging import get_logger
from hriq_calendar.scraper.browser import locate, save_debug_artifacts
from hriq_calendar.scraper.month import extract_month
from hriq_calendar.store import build_aggregate, iso_timestamp, write_aggregate, write_month_archive
from hriq_calendar.utils import month_name, month_window

logger = get_logger()

HIDE_WEBDRIVER_SCRIPT = "Object.defineProperty(navigator, 'webdriver', { get: () => false });"


@dataclass
class ScrapeResult:
    """Résultat d'une exécution du pipeline."""

    aggregate: Dict
    aggregate_path: Path
    archive_paths: List[Path] = field(default_factory=list)
    failed_months: List[Tuple[int, int]] = field(default_factory=list)

    @property
    def leave_count(self) -> int:
        return len(self.aggregate["leaves"])

    @property
    def holiday_count(self) -> int:
        return len(self.aggregate["holidays"])


def validate_credentials(settings: Settings) -> None:
    if not settings.has_credentials:
        raise MissingCredentialsError(
            "Identifiants manquants : renseignez HRIQ_USER_ID et HRIQ_PASSWORD dans le fichier .env"
        )


def login(page: Page, settings: Settings) -> None:
    """
    Se connecte au portail.

    Raises:
        LoginFormError: champ ou bouton introuvable
        AuthenticationError: toujours sur la page de connexion après l'envoi
    """
    logger.info("🔐 Connexion au portail...")
    page.goto(LOGIN_URL, wait_until="networkidle", timeout=PAGE_LOAD_TIMEOUT)

    try:
        page.wait_for_selector('input[type="password"]', timeout=LOGIN_FORM_TIMEOUT)
    except PlaywrightTimeoutError:
        logger.warning("⚠️ Formulaire de connexion non détecté")
        save_debug_artifacts(page, settings.debug_dir, "login-error")

    user_field = locate(page, USER_ID_SELECTORS)
    if user_field is None:
        raise LoginFormError("Champ identifiant introuvable")
    password_field = locate(page, PASSWORD_SELECTORS)
    if password_field is None:
        raise LoginFormError("Champ mot de passe introuvable")

    user_field.fill(settings.user_id)
    password_field.fill(settings.password)

    sign_in = locate(page, SIGN_IN_SELECTORS)
    if sign_in is None:
        raise LoginFormError("Bouton de connexion introuvable")

    sign_in.click()
    try:
        page.wait_for_url(lambda url: LOGIN_INDICATOR not in url.lower(), timeout=LOGIN_TIMEOUT)
    except PlaywrightTimeoutError:
        save_debug_artifacts(page, settings.debug_dir, "login-failed")
        raise AuthenticationError(f"Échec de connexion, toujours sur {page.url} : vérifiez les identifiants")

    logger.info(f"✅ Connecté ({page.url})")


def open_calendar(page: Page) -> None:
    """
    Ouvre le calendrier des congés.

    Raises:
        CalendarNotFoundError: la grille ne s'affiche pas à temps
    """
    logger.info("📅 Ouverture du calendrier des congés...")
    try:
        page.goto(CALENDAR_URL, wait_until="networkidle", timeout=PAGE_LOAD_TIMEOUT)
        page.wait_for_selector(CALENDAR_GRID_SELECTOR, timeout=CALENDAR_TIMEOUT)
    except PlaywrightError as e:
        raise CalendarNotFoundError(f"Calendrier introuvable : {e}") from e


def scrape_months(
    page: Page,
    months: Sequence[Tuple[int, int]],
    settings: Settings,
    scraped_at: str
) -> Tuple[List[Dict], List[Path], List[Tuple[int, int]]]:
    """
    Extrait les mois un par un sur la même page et archive chacun
    immédiatement.

    Un mois en échec est journalisé et sauté, les autres sont conservés.
    Si le portail renvoie un mois déjà extrait (liste déroulante bloquée),
    le doublon est ignoré et le mois demandé compte comme en échec.

    Returns:
        Tuple (MonthRecords, chemins des archives, mois en échec)
    """
    records, archives, failed = [], [], []
    collected = set()

    for month, year in months:
        try:
            record = extract_month(page, month, year, debug_dir=settings.debug_dir)
        except PlaywrightError as e:
            logger.error(f"❌ Erreur pour {month_name(month)} {year} : {e}")
            failed.append((month, year))
            continue

        shown = (record["month"], record["year"])
        if shown in collected:
            logger.warning(
                f"⚠️ {month_name(month)} {year} demandé mais {shown[0]:02d}/{shown[1]} "
                f"déjà extrait : doublon ignoré"
            )
            failed.append((month, year))
            continue

        collected.add(shown)
        records.append(record)
        archives.append(write_month_archive(record, settings.output_dir, scraped_at))

    return records, archives, failed


def run_pipeline(settings: Settings, today: Optional[date] = None, now: Optional[datetime] = None) -> ScrapeResult:
    """
    Exécute le scraping complet.

    Args:
        settings: Paramètres d'exécution
        today: Date de référence de la fenêtre de 3 mois (défaut : aujourd'hui)
        now: Horodatage de l'exécution (défaut : maintenant)

    Returns:
        ScrapeResult

    Raises:
        MissingCredentialsError, LoginFormError, AuthenticationError,
        CalendarNotFoundError, HriqError (aucun mois extrait)
    """
    validate_credentials(settings)

    scraped_at = iso_timestamp(now)
    months = month_window(today or date.today())
    logger.info("Mois à extraire : " + ", ".join(f"{m:02d}/{y}" for m, y in months))

    with sync_playwright() as p:
        browser = p.chromium.launch(headless=settings.headless, args=BROWSER_ARGS)
        try:
            context = browser.new_context(
                ignore_https_errors=True, viewport=VIEWPORT, user_agent=USER_AGENT
            )
            context.add_init_script(HIDE_WEBDRIVER_SCRIPT)
            page = context.new_page()

            login(page, settings)
            open_calendar(page)
            records, archives, failed = scrape_months(page, months, settings, scraped_at)
        finally:
            browser.close()
            logger.info("🔒 Navigateur fermé")

    if not records:
        # Le fichier agrégé précédent reste en place
        raise HriqError("Aucun mois extrait, fichier agrégé non modifié")

    aggregate = build_aggregate(records, scraped_at)
    aggregate_path = write_aggregate(aggregate, settings.output_dir)

    return ScrapeResult(
        aggregate=aggregate,
        aggregate_path=aggregate_path,
        archive_paths=archives,
        failed_months=failed,
    )
