"""Module de logging"""

from .logger import setup_logger, get_logger, LOGGER_NAME

__all__ = ['setup_logger', 'get_logger', 'LOGGER_NAME']
