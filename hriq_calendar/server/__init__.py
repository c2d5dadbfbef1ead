"""Module du serveur webhook et de son client"""

from .webhook import ScrapeRunner, create_app
from .client import trigger_remote_scrape

__all__ = ['ScrapeRunner', 'create_app', 'trigger_remote_scrape']
