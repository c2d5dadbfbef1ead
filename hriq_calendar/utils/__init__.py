"""Module de fonctions utilitaires"""

from .utils import *
from .calendar_utils import *

__all__ = [
    'canonicalize',
    'display_name',
    'normalize_leave_code',
    'leave_meta',
    'full_date',
    'split_full_date',
    'build_holiday',
    'build_leave_record',
    'days_in_month',
    'month_name',
    'shift_month',
    'month_window',
    'working_days',
]
