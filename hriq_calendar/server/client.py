"""Client du webhook : demande un scraping frais au serveur distant."""

import requests

from hriq_calendar.config import REMOTE_TIMEOUT, Settings
from hriq_calendar.logging import get_logger

logger = get_logger()


def trigger_remote_scrape(settings: Settings, timeout: float = REMOTE_TIMEOUT) -> bool:
    """
    Demande au serveur webhook de relancer le scraper.

    Comme le bouton "Refresh" du site, un échec n'est jamais bloquant : il
    est journalisé et les données en cache restent utilisables.

    Returns:
        True si le serveur a répondu que le scraping est terminé
    """
    if not settings.webhook_url:
        logger.info("Pas de HRIQ_WEBHOOK_URL configurée, données en cache utilisées")
        return False

    try:
        response = requests.post(
            f"{settings.webhook_url}/scrape",
            headers={"Authorization": f"Bearer {settings.webhook_token or ''}"},
            timeout=timeout,
        )
    except requests.RequestException as e:
        logger.warning(f"⚠️ Webhook injoignable : {e}")
        return False

    if not response.ok:
        logger.warning(f"⚠️ Webhook en échec ({response.status_code}) : {response.text[:200]}")
        return False

    logger.info("✅ Scraping distant terminé")
    return True
