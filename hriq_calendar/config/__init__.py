"""Module de configuration"""

from .config import *
