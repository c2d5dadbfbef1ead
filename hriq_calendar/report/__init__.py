"""Module de statistiques et de rapport Excel"""

from .stats import leaves_for_day, holiday_for_day, month_stats, employee_summary
from .excel_generator import create_excel_report

__all__ = [
    'leaves_for_day',
    'holiday_for_day',
    'month_stats',
    'employee_summary',
    'create_excel_report',
]
