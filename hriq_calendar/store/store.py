"""
Module de persistance des données de congés

Le fichier agrégé (leaves.json) est le contrat avec le site : il est
entièrement réécrit à chaque exécution. Chaque mois est aussi archivé dans
son propre fichier (leaves-YYYY-MM.json), réécrit si le mois est rescrapé.

Format commun :
    {
      "scrapedAt": "2026-01-15T08:00:00.000Z",
      "months": [{"month": 1, "year": 2026, "monthName": "January"}],
      "holidays": [...],   # triés par fullDate
      "leaves": [...]      # triés par fullDate
    }
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterable, Optional, Union

import pandas as pd

from hriq_calendar.config import ARCHIVE_PATTERN, OUTPUT_JSON
from hriq_calendar.logging import get_logger

logger = get_logger()

LEAVE_COLUMNS = [
    "date", "fullDate", "month", "year", "employee", "leaveType",
    "period", "displayName", "leaveTypeName", "color",
]


def iso_timestamp(moment: Optional[datetime] = None) -> str:
    """
    Horodatage ISO-8601 UTC au format JavaScript (millisecondes + "Z").

    Exemple:
        >>> iso_timestamp(datetime(2026, 1, 15, 8, 0, tzinfo=timezone.utc))
        '2026-01-15T08:00:00.000Z'
    """
    moment = (moment or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def archive_filename(year: int, month: int) -> str:
    """
    Exemple:
        >>> archive_filename(2026, 2)
        'leaves-2026-02.json'
    """
    return ARCHIVE_PATTERN.format(year=year, month=month)


def empty_aggregate() -> Dict:
    return {"scrapedAt": None, "months": [], "holidays": [], "leaves": []}


def build_aggregate(records: Iterable[Dict], scraped_at: str) -> Dict:
    """
    Fusionne des MonthRecord en un seul document.

    Les jours fériés et les congés sont triés par fullDate (tri stable :
    l'ordre d'origine est gardé pour un même jour).

    Args:
        records: MonthRecord dans l'ordre de scraping
        scraped_at: Horodatage ISO de l'exécution

    Returns:
        Dictionnaire au format du fichier agrégé
    """
    months, holidays, leaves = [], [], []
    for record in records:
        months.append({
            "month": record["month"],
            "year": record["year"],
            "monthName": record["monthName"],
        })
        holidays.extend(record["holidays"])
        leaves.extend(record["leaves"])

    return {
        "scrapedAt": scraped_at,
        "months": months,
        "holidays": sorted(holidays, key=lambda h: h["fullDate"]),
        "leaves": sorted(leaves, key=lambda l: l["fullDate"]),
    }


def build_month_archive(record: Dict, scraped_at: str) -> Dict:
    """Archive d'un mois : même format que le fichier agrégé, limité à ce mois."""
    return build_aggregate([record], scraped_at)


def write_json(path: Union[str, Path], payload: Dict) -> Path:
    """Écrit (en écrasant) un JSON indenté en UTF-8."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)
        f.write("\n")
    return path


def write_month_archive(record: Dict, output_dir: Union[str, Path], scraped_at: str) -> Path:
    path = Path(output_dir) / archive_filename(record["year"], record["month"])
    write_json(path, build_month_archive(record, scraped_at))
    logger.info(f"💾 Archive du mois : {path}")
    return path


def write_aggregate(aggregate: Dict, output_dir: Union[str, Path]) -> Path:
    path = Path(output_dir) / OUTPUT_JSON
    write_json(path, aggregate)
    logger.info(f"💾 Fichier agrégé : {path}")
    return path


def load_aggregate(path: Union[str, Path]) -> Dict:
    """
    Relit un fichier agrégé.

    Un fichier absent ou illisible donne un document vide (scrapedAt = None)
    au lieu d'une exception, comme côté site ("Data not available").
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        logger.warning(f"Fichier de données absent : {path}")
        return empty_aggregate()
    except (OSError, json.JSONDecodeError) as e:
        logger.warning(f"Fichier de données illisible ({path}) : {e}")
        return empty_aggregate()

    aggregate = empty_aggregate()
    aggregate.update({key: data.get(key, aggregate[key]) for key in aggregate})
    return aggregate


def export_csv(aggregate: Dict, path: Union[str, Path]) -> Path:
    """Exporte les congés à plat en CSV (une ligne par congé)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    df = pd.DataFrame(aggregate.get("leaves", []), columns=LEAVE_COLUMNS)
    df.to_csv(path, index=False, encoding="utf-8")
    logger.info(f"CSV créé : {path} ({len(df)} lignes)")
    return path
