"""
Journalisation partagée du scraper, du serveur webhook et des rapports

Un seul logger nommé "hriq_calendar" : les modules le récupèrent avec
get_logger(), seuls les scripts d'entrée appellent setup_logger().

Utilisation :
    from hriq_calendar.logging import get_logger

    logger = get_logger()
    logger.warning("Bouton 'Show' introuvable, calendrier non rafraîchi")
"""

import logging
import sys
from pathlib import Path
from typing import Iterable, Optional, Union

LOGGER_NAME = "hriq_calendar"

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Bibliothèques trop bavardes au niveau INFO (serveur Flask, requests)
NOISY_LOGGERS = ("werkzeug", "urllib3")


def setup_logger(
    name: str = LOGGER_NAME,
    log_file: Optional[Union[str, Path]] = None,
    level: Union[int, str] = logging.INFO,
    quiet: Iterable[str] = NOISY_LOGGERS
) -> logging.Logger:
    """
    Configure le logger du projet : console (stdout) et fichier optionnel.

    Un second appel ne duplique pas les handlers ; il met seulement à jour
    le niveau (cas de --debug) et ajoute le fichier s'il manquait.

    Args:
        name: Nom du logger
        log_file: Fichier de log (None = console uniquement)
        level: Niveau minimum, entier ou nom ("DEBUG", "INFO"...)
        quiet: Loggers tiers ramenés au niveau WARNING

    Returns:
        Logger configuré

    Exemple:
        >>> logger = setup_logger(log_file="hriq_scraper.log", level="DEBUG")
        >>> logger.debug("Sélecteur trouvé : #ddlMonth")
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    has_console = any(type(h) is logging.StreamHandler for h in logger.handlers)
    if not has_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file).resolve()
        known = {Path(h.baseFilename) for h in logger.handlers if isinstance(h, logging.FileHandler)}
        if log_path not in known:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_path, encoding='utf-8')
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    for handler in logger.handlers:
        handler.setLevel(level)

    for noisy in quiet:
        logging.getLogger(noisy).setLevel(logging.WARNING)

    return logger


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    return logging.getLogger(name)
