#!/usr/bin/env python3
"""
Script principal du HRIQ Leave Calendar Scraper

Ce script orchestre l'ensemble du processus :
1. Connexion au portail et scraping des 3 mois (précédent, courant, suivant)
2. Écriture de website/data/leaves.json et des archives mensuelles
3. Export CSV (et rapport Excel avec --excel)

Prérequis :
- Fichier .env avec HRIQ_USER_ID et HRIQ_PASSWORD
- Dépendances installées (pip install -e .)
- Navigateur Playwright installé (playwright install chromium)

Utilisation :
    python scripts/main.py
    python scripts/main.py --headed --excel
    python scripts/main.py --remote      # demande le scraping au serveur webhook

Codes de sortie :
    0 succès, 1 erreur, 2 identifiants manquants, 3 échec de connexion,
    130 interruption manuelle
"""

import argparse
import dataclasses
import sys
from datetime import date
from pathlib import Path

# Ajouter le répertoire parent au path pour pouvoir importer hriq_calendar
sys.path.insert(0, str(Path(__file__).parent.parent))

from hriq_calendar.config import OUTPUT_CSV, OUTPUT_EXCEL, load_settings
from hriq_calendar.exceptions import AuthenticationError, HriqError, MissingCredentialsError
from hriq_calendar.logging import setup_logger
from hriq_calendar.report import create_excel_report, leaves_for_day, month_stats
from hriq_calendar.scraper import run_pipeline
from hriq_calendar.server import trigger_remote_scrape
from hriq_calendar.store import export_csv


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Scraper du calendrier des congés HRIQ")
    headless = parser.add_mutually_exclusive_group()
    headless.add_argument("--headless", dest="headless", action="store_true", default=None,
                          help="Navigateur sans interface (défaut)")
    headless.add_argument("--headed", dest="headless", action="store_false",
                          help="Navigateur visible")
    parser.add_argument("--output-dir", type=Path, help="Dossier de sortie (défaut : website/data)")
    parser.add_argument("--log-file", default="hriq_scraper.log", help="Fichier de log")
    parser.add_argument("--debug", action="store_true", help="Logs détaillés")
    parser.add_argument("--excel", action="store_true", help="Génère aussi le rapport Excel")
    parser.add_argument("--remote", action="store_true",
                        help="Demande le scraping au serveur webhook au lieu de scraper localement")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Fonction principale du programme"""
    args = parse_args(argv)

    logger = setup_logger(log_file=args.log_file, level="DEBUG" if args.debug else "INFO")

    settings = load_settings()
    overrides = {}
    if args.headless is not None:
        overrides["headless"] = args.headless
    if args.output_dir:
        overrides["output_dir"] = args.output_dir
    settings = dataclasses.replace(settings, **overrides)

    if args.remote:
        return 0 if trigger_remote_scrape(settings) else 1

    try:
        logger.info("=" * 60)
        logger.info("🚀 HRIQ Leave Calendar Scraper - Démarrage")
        logger.info("=" * 60)

        result = run_pipeline(settings)
        aggregate = result.aggregate

        export_csv(aggregate, settings.output_dir / OUTPUT_CSV)
        if args.excel:
            create_excel_report(aggregate, settings.output_dir / OUTPUT_EXCEL)

        logger.info("=" * 60)
        logger.info("✅ Traitement terminé avec succès")
        logger.info("=" * 60)
        logger.info(f"📊 Congés trouvés : {result.leave_count}")
        logger.info(f"🎉 Jours fériés : {result.holiday_count}")
        for month in aggregate["months"]:
            stats = month_stats(aggregate, month["month"], month["year"])
            logger.info(
                f"  {month['monthName']} {month['year']} : {stats['totalLeaves']} congés, "
                f"{stats['uniqueEmployees']} collaborateurs, {stats['workingDays']} jours ouvrés"
            )
        if result.failed_months:
            logger.warning(
                "⚠️ Mois non extraits : " + ", ".join(f"{m:02d}/{y}" for m, y in result.failed_months)
            )

        today = date.today()
        on_leave = leaves_for_day(aggregate, today.day, today.month, today.year)
        logger.info(f"Aujourd'hui : {', '.join(l['displayName'] for l in on_leave) or 'personne en congé'}")
        logger.info(f"Fichier : {result.aggregate_path}")
        return 0

    except KeyboardInterrupt:
        logger.warning("\n⚠️ Interruption manuelle détectée")
        return 130

    except MissingCredentialsError as e:
        logger.error(f"❌ {e}")
        return 2

    except AuthenticationError as e:
        logger.error(f"❌ {e}")
        return 3

    except HriqError as e:
        logger.error(f"❌ Échec du scraping : {e}")
        return 1

    except Exception as e:
        logger.exception(f"❌ Erreur fatale : {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
