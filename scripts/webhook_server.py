#!/usr/bin/env python3
"""
Serveur webhook HRIQ

Permet au site de relancer le scraper à distance.

Utilisation :
    python scripts/webhook_server.py

Variables (.env) :
    HRIQ_WEBHOOK_TOKEN  token attendu (Authorization: Bearer ... ou ?token=...)
    PORT                port d'écoute (défaut 3847)
"""

import sys
from pathlib import Path

# Ajouter le répertoire parent au path pour pouvoir importer hriq_calendar
sys.path.insert(0, str(Path(__file__).parent.parent))

from hriq_calendar.config import load_settings
from hriq_calendar.logging import setup_logger
from hriq_calendar.server import create_app


def main():
    logger = setup_logger(log_file="hriq_webhook.log")
    settings = load_settings()
    app = create_app(settings)

    logger.info(f"HRIQ Webhook Server sur le port {settings.port}")
    logger.info(f"Health check : http://localhost:{settings.port}/health")
    logger.info(f"Scraping : POST http://localhost:{settings.port}/scrape (token requis)")

    app.run(host="0.0.0.0", port=settings.port, threaded=True)


if __name__ == "__main__":
    main()
