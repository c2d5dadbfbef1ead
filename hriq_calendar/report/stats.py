"""
Statistiques sur le fichier agrégé

Mêmes règles que le site : tout est filtré sur le (mois, année) affiché,
jamais sur un "mois courant" global, puisque le fichier couvre 3 mois.
"""

from typing import Dict, List, Optional

import pandas as pd

from hriq_calendar.utils import working_days


def leaves_for_day(aggregate: Dict, day: int, month: int, year: int) -> List[Dict]:
    """Congés d'un jour précis (correspondance exacte jour + mois + année)."""
    return [
        leave for leave in aggregate.get("leaves", [])
        if leave["date"] == day and leave["month"] == month and leave["year"] == year
    ]


def holiday_for_day(aggregate: Dict, day: int, month: int, year: int) -> Optional[Dict]:
    """Jour férié d'un jour précis (au plus un)."""
    for holiday in aggregate.get("holidays", []):
        if holiday["date"] == day and holiday["month"] == month and holiday["year"] == year:
            return holiday
    return None


def month_stats(aggregate: Dict, month: int, year: int) -> Dict:
    """
    Statistiques d'un mois.

    Returns:
        {
          "totalLeaves": nombre de congés du mois,
          "uniqueEmployees": nombre de collaborateurs distincts en congé,
          "holidays": nombre de jours fériés du mois,
          "workingDays": jours du mois - week-ends - jours fériés en semaine
        }
    """
    leaves = [l for l in aggregate.get("leaves", []) if l["month"] == month and l["year"] == year]
    holidays = [h for h in aggregate.get("holidays", []) if h["month"] == month and h["year"] == year]

    return {
        "totalLeaves": len(leaves),
        "uniqueEmployees": len({l["employee"] for l in leaves}),
        "holidays": len(holidays),
        "workingDays": working_days(year, month, (h["date"] for h in holidays)),
    }


def employee_summary(aggregate: Dict) -> pd.DataFrame:
    """
    Jours de congé par collaborateur et par type.

    Une demi-journée (AM / PM) compte pour 0.5.

    Returns:
        DataFrame indexé par displayName, une colonne par libellé de congé
        plus une colonne "Total"
    """
    df = pd.DataFrame(aggregate.get("leaves", []))
    if df.empty:
        return pd.DataFrame(columns=["Total"])

    df["days"] = df["period"].apply(lambda period: 0.5 if period in ("AM", "PM") else 1.0)
    summary = df.pivot_table(
        index="displayName", columns="leaveTypeName", values="days",
        aggfunc="sum", fill_value=0.0
    )
    summary.columns.name = None
    summary["Total"] = summary.sum(axis=1)
    return summary.sort_index()
