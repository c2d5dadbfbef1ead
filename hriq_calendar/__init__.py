"""
HRIQ Leave Calendar Scraper

Package principal contenant tous les modules du projet.
"""

__version__ = "1.0.0"

from .config import Settings, load_settings
from .logging import setup_logger, get_logger
from .exceptions import *
from .utils import *
from .store import build_aggregate, load_aggregate
from .scraper import run_pipeline
from .report import month_stats, create_excel_report
