"""Module de scraping du calendrier des congés"""

from .parser import RawEntry, CellText, ParsedCell, parse_cell, parse_cell_rows, parse_flat_lines
from .month import assemble_month, extract_month, merge_company_holidays
from .session import ScrapeResult, run_pipeline

__all__ = [
    'RawEntry',
    'CellText',
    'ParsedCell',
    'parse_cell',
    'parse_cell_rows',
    'parse_flat_lines',
    'assemble_month',
    'extract_month',
    'merge_company_holidays',
    'ScrapeResult',
    'run_pipeline',
]
