"""
Serveur webhook HRIQ

Permet de relancer le scraper à distance (bouton "Refresh" du site).

Endpoints :
    GET  /health  - Contrôle de vie
    GET  /status  - État du dernier scraping
    POST /scrape  - Lance le scraper (token obligatoire)

Un seul scraping à la fois : une demande pendant une exécution est refusée
immédiatement (409), jamais mise en file d'attente.
"""

import hmac
import subprocess
import sys
import threading
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from flask import Flask, jsonify, request

from hriq_calendar.config import BASE_DIR, MAIN_SCRIPT, SCRAPE_TIMEOUT, Settings
from hriq_calendar.exceptions import AlreadyRunningError
from hriq_calendar.logging import get_logger
from hriq_calendar.store import iso_timestamp

logger = get_logger()


class ScrapeRunner:
    """
    Lance le scraper en garantissant au plus une exécution simultanée.

    Args:
        execute: Fonction lancée à chaque scraping (défaut : scripts/main.py
            dans un sous-processus)
        command: Commande du sous-processus
        timeout: Durée maximale du sous-processus (s)
    """

    def __init__(
        self,
        execute: Optional[Callable[[], None]] = None,
        command: Optional[List[str]] = None,
        timeout: float = SCRAPE_TIMEOUT
    ):
        self.command = command or [sys.executable, str(MAIN_SCRIPT)]
        self.timeout = timeout
        self._execute = execute or self._run_subprocess
        self._run_lock = threading.Lock()
        self._status_lock = threading.Lock()
        self._status = {
            "running": False,
            "lastRun": None,
            "lastResult": None,
            "lastError": None,
        }

    @property
    def status(self) -> Dict:
        with self._status_lock:
            return dict(self._status)

    def run(self) -> None:
        """
        Exécute un scraping complet.

        Raises:
            AlreadyRunningError: un scraping est déjà en cours
            Exception: l'erreur du scraping, après mise à jour du statut
        """
        if not self._run_lock.acquire(blocking=False):
            raise AlreadyRunningError("Scraper already running")

        try:
            with self._status_lock:
                self._status["running"] = True
                self._status["lastRun"] = iso_timestamp()
            logger.info("Démarrage du scraper...")

            try:
                self._execute()
            except Exception as e:
                self._finish("error", str(e))
                logger.error(f"❌ Erreur du scraper : {e}")
                raise

            self._finish("success", None)
            logger.info("✅ Scraper terminé avec succès")
        finally:
            self._run_lock.release()

    def _finish(self, result: str, error: Optional[str]) -> None:
        with self._status_lock:
            self._status["running"] = False
            self._status["lastResult"] = result
            self._status["lastError"] = error

    def _run_subprocess(self) -> None:
        completed = subprocess.run(
            self.command, cwd=str(BASE_DIR), timeout=self.timeout,
            capture_output=True, text=True
        )
        if completed.returncode != 0:
            tail = (completed.stderr or completed.stdout or "").strip().splitlines()[-5:]
            raise RuntimeError(
                f"Scraper exited with code {completed.returncode}: " + " | ".join(tail)
            )


def _extract_token() -> Optional[str]:
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header[len("Bearer "):].strip() or None
    return request.args.get("token")


def _token_matches(token: Optional[str], expected: Optional[str]) -> bool:
    # Aucun token configuré : tout est refusé
    if not token or not expected:
        return False
    return hmac.compare_digest(token.encode("utf-8"), expected.encode("utf-8"))


def create_app(settings: Settings, runner: Optional[ScrapeRunner] = None) -> Flask:
    """
    Construit l'application Flask du webhook.

    Args:
        settings: Paramètres d'exécution (token du webhook)
        runner: ScrapeRunner à utiliser (défaut : sous-processus)
    """
    app = Flask(__name__)
    runner = runner or ScrapeRunner()
    app.config["SCRAPE_RUNNER"] = runner

    if not settings.webhook_token:
        logger.warning("⚠️ HRIQ_WEBHOOK_TOKEN non défini : POST /scrape refusera toutes les demandes")

    @app.after_request
    def add_cors_headers(response):
        response.headers["Access-Control-Allow-Origin"] = "*"
        response.headers["Access-Control-Allow-Methods"] = "GET, POST, OPTIONS"
        response.headers["Access-Control-Allow-Headers"] = "Content-Type, Authorization"
        return response

    @app.get("/health")
    def health():
        return jsonify(status="ok", timestamp=datetime.now(timezone.utc).isoformat())

    @app.get("/status")
    def status():
        return jsonify(runner.status)

    @app.post("/scrape")
    def scrape():
        if not _token_matches(_extract_token(), settings.webhook_token):
            logger.warning(f"Demande /scrape refusée (token invalide) depuis {request.remote_addr}")
            return jsonify(error="Unauthorized"), 401

        try:
            runner.run()
        except AlreadyRunningError as e:
            return jsonify(success=False, error=str(e)), 409
        except Exception as e:
            return jsonify(success=False, error=str(e)), 500

        return jsonify(success=True, message="Scraper completed")

    @app.errorhandler(404)
    def not_found(_error):
        return jsonify(error="Not found"), 404

    @app.errorhandler(405)
    def method_not_allowed(_error):
        return jsonify(error="Not found"), 404

    return app
