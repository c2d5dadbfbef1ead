import calendar
from datetime import date
from typing import Iterable, List, Tuple

from hriq_calendar.config import MONTH_NAMES


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def month_name(month: int) -> str:
    return MONTH_NAMES[month - 1]


def shift_month(month: int, year: int, delta: int) -> Tuple[int, int]:
    """Décale (mois, année) de `delta` mois, passage d'année compris."""
    index = year * 12 + (month - 1) + delta
    return index % 12 + 1, index // 12


def month_window(today: date) -> List[Tuple[int, int]]:
    """
    Fenêtre glissante de 3 mois autour de `today`.

    Returns:
        [(mois, année)] pour le mois précédent, le mois courant et le suivant

    Exemple:
        >>> month_window(date(2026, 1, 15))
        [(12, 2025), (1, 2026), (2, 2026)]
    """
    return [shift_month(today.month, today.year, delta) for delta in (-1, 0, 1)]


def working_days(year: int, month: int, holiday_days: Iterable[int] = ()) -> int:
    """
    Nombre de jours ouvrés du mois : jours du mois moins les week-ends et
    les jours fériés tombant en semaine.
    """
    holidays = set(holiday_days)
    count = 0
    for day in range(1, days_in_month(year, month) + 1):
        if calendar.weekday(year, month, day) >= 5 or day in holidays:
            continue
        count += 1
    return count
