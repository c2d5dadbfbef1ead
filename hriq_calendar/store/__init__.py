"""Module de persistance"""

from .store import *

__all__ = [
    'LEAVE_COLUMNS',
    'iso_timestamp',
    'archive_filename',
    'empty_aggregate',
    'build_aggregate',
    'build_month_archive',
    'write_json',
    'write_month_archive',
    'write_aggregate',
    'load_aggregate',
    'export_csv',
]
