"""Module de génération du rapport Excel"""

import calendar
from collections import defaultdict
from pathlib import Path
from typing import Dict, List, Union

import openpyxl
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from hriq_calendar.config import (
    WEEKDAY_LETTERS, HEADER_FILL, NAME_FILL, TOTAL_FILL, WE_FILL,
    HOLIDAY_FILL, BORDER, EXCEL_COLUMN_WIDTHS
)
from hriq_calendar.logging import get_logger
from hriq_calendar.report.stats import employee_summary, month_stats
from hriq_calendar.utils import days_in_month

logger = get_logger()


def color_fill(color: str) -> PatternFill:
    """PatternFill plein à partir d'une couleur "#rrggbb"."""
    rgb = color.lstrip("#").upper()
    return PatternFill(start_color=rgb, end_color=rgb, fill_type="solid")


def leave_code_label(leave: Dict) -> str:
    """
    Texte affiché dans une case : code du congé, suffixé de la demi-journée.

    Exemple:
        >>> leave_code_label({"leaveType": "SL", "period": "AM"})
        'SL-AM'
    """
    if leave.get("period"):
        return f"{leave['leaveType']}-{leave['period']}"
    return leave["leaveType"]


def write_header_cell(ws, row: int, col: int, value, size: int = 10):
    cell = ws.cell(row=row, column=col, value=value)
    cell.fill = HEADER_FILL
    cell.font = Font(bold=True, color="FFFFFF", size=size)
    cell.alignment = Alignment(horizontal='center', vertical='center', wrap_text=True)
    cell.border = BORDER
    return cell


def write_legend(ws, leaves: List[Dict], row: int = 2):
    """Écrit la légende des types de congés présents (libellé sur sa couleur)."""
    ws.cell(row=row, column=1, value="LÉGENDE").font = Font(bold=True, size=10)

    seen = {}
    for leave in leaves:
        seen.setdefault(leave["leaveTypeName"], leave["color"])

    for offset, (label, color) in enumerate(sorted(seen.items())):
        col = 2 + offset * 3
        cell = ws.cell(row=row, column=col, value=label)
        cell.fill = color_fill(color)
        cell.font = Font(bold=True, size=8, color="FFFFFF")
        cell.alignment = Alignment(horizontal='center', vertical='center', wrap_text=True)
        cell.border = BORDER
        ws.merge_cells(start_row=row, start_column=col, end_row=row, end_column=col + 2)

    ws.row_dimensions[row].height = 22


def create_summary_sheet(wb, aggregate: Dict):
    """Crée la feuille de synthèse (jours de congé par collaborateur et par type)."""
    logger.info("Création de la feuille Synthèse...")

    ws = wb.active
    ws.title = "Synthèse"

    summary = employee_summary(aggregate)
    headers = ["Collaborateur"] + [str(c) for c in summary.columns]
    for col, header in enumerate(headers, 1):
        write_header_cell(ws, 1, col, header, size=11)
    ws.row_dimensions[1].height = 30

    row = 2
    for name, values in summary.iterrows():
        ws.cell(row=row, column=1, value=name).border = BORDER
        for col, value in enumerate(values, 2):
            cell = ws.cell(row=row, column=col, value=float(value))
            cell.border = BORDER
            cell.number_format = '0.0'
            cell.alignment = Alignment(horizontal='right', vertical='center')
        row += 1

    # Ligne TOTAL
    total = ws.cell(row=row, column=1, value="TOTAL")
    total.font = Font(bold=True)
    total.fill = TOTAL_FILL
    total.border = BORDER
    for col in range(2, len(headers) + 1):
        cl = get_column_letter(col)
        cell = ws.cell(row=row, column=col, value=f"=SUM({cl}2:{cl}{row - 1})" if row > 2 else 0)
        cell.font = Font(bold=True)
        cell.fill = TOTAL_FILL
        cell.border = BORDER
        cell.number_format = '0.0'

    ws.column_dimensions['A'].width = EXCEL_COLUMN_WIDTHS['collaborateur']
    for col in range(2, len(headers) + 1):
        ws.column_dimensions[get_column_letter(col)].width = EXCEL_COLUMN_WIDTHS['metrics']
    ws.freeze_panes = 'A2'


def create_month_sheet(wb, aggregate: Dict, month: int, year: int, month_name: str):
    """Crée la feuille d'un mois : collaborateurs en lignes, jours en colonnes."""
    nb_days = days_in_month(year, month)
    leaves = [l for l in aggregate["leaves"] if l["month"] == month and l["year"] == year]
    holiday_days = {h["date"]: h["name"] for h in aggregate["holidays"] if h["month"] == month and h["year"] == year}

    ws = wb.create_sheet(f"{month_name} {year}"[:31])
    logger.debug(f"Feuille {month_name} {year}")

    # Titre + légende
    ws.merge_cells(start_row=1, start_column=1, end_row=1, end_column=nb_days + 1)
    title = ws.cell(row=1, column=1, value=f"PLANNING {month_name.upper()} {year}")
    title.font = Font(bold=True, size=14, color="FFFFFF")
    title.fill = HEADER_FILL
    title.alignment = Alignment(horizontal='center', vertical='center')
    ws.row_dimensions[1].height = 25
    write_legend(ws, leaves)

    # En-têtes
    write_header_cell(ws, 5, 1, "")
    write_header_cell(ws, 6, 1, "Collaborateur")
    for day in range(1, nb_days + 1):
        write_header_cell(ws, 5, day + 1, WEEKDAY_LETTERS[calendar.weekday(year, month, day)], size=8)
        header = write_header_cell(ws, 6, day + 1, day)
        if day in holiday_days:
            header.fill = HOLIDAY_FILL
            header.font = Font(bold=True, color="000000", size=10)

    # Données
    by_employee = defaultdict(lambda: defaultdict(list))
    for leave in leaves:
        by_employee[leave["displayName"]][leave["date"]].append(leave)

    data_start_row = 7
    for idx, name in enumerate(sorted(by_employee)):
        row_num = data_start_row + idx
        cell = ws.cell(row=row_num, column=1, value=name)
        cell.fill = NAME_FILL if idx % 2 == 0 else PatternFill()
        cell.font = Font(size=9, bold=True)
        cell.border = BORDER

        for day in range(1, nb_days + 1):
            cell = ws.cell(row=row_num, column=day + 1)
            cell.border = BORDER
            cell.alignment = Alignment(horizontal='center', vertical='center')
            cell.font = Font(size=7, bold=True)

            day_leaves = by_employee[name].get(day, [])
            if day_leaves:
                cell.value = "/".join(leave_code_label(l) for l in day_leaves)
                cell.fill = color_fill(day_leaves[0]["color"])
            elif day in holiday_days:
                cell.fill = HOLIDAY_FILL
            elif calendar.weekday(year, month, day) >= 5:
                cell.fill = WE_FILL

    # Totaux
    stats = month_stats(aggregate, month, year)
    total_row = data_start_row + len(by_employee)
    label = ws.cell(row=total_row, column=1, value="TOTAL congés")
    label.font = Font(bold=True, size=9)
    label.fill = TOTAL_FILL
    label.border = BORDER
    for day in range(1, nb_days + 1):
        weight = sum(0.5 if l["period"] else 1 for l in leaves if l["date"] == day)
        cell = ws.cell(row=total_row, column=day + 1, value=weight or "")
        cell.font = Font(bold=True, size=9)
        cell.fill = TOTAL_FILL
        cell.border = BORDER
        cell.alignment = Alignment(horizontal='center', vertical='center')

    note = ws.cell(
        row=total_row + 2, column=1,
        value=(
            f"📋 {stats['totalLeaves']} congés | {stats['uniqueEmployees']} collaborateurs | "
            f"{stats['workingDays']} jours ouvrés | {stats['holidays']} jours fériés"
        )
    )
    note.font = Font(size=9, italic=True)

    ws.column_dimensions['A'].width = EXCEL_COLUMN_WIDTHS['collaborateur']
    for col in range(2, nb_days + 2):
        ws.column_dimensions[get_column_letter(col)].width = EXCEL_COLUMN_WIDTHS['day']
    ws.freeze_panes = 'B7'


def create_excel_report(aggregate: Dict, output_file: Union[str, Path]) -> Path:
    """
    Crée le rapport Excel complet.

    Args:
        aggregate: Contenu du fichier agrégé
        output_file: Chemin du fichier Excel de sortie
    """
    logger.info("Génération du fichier Excel...")

    wb = openpyxl.Workbook()
    create_summary_sheet(wb, aggregate)
    for month in aggregate.get("months", []):
        create_month_sheet(wb, aggregate, month["month"], month["year"], month["monthName"])

    output_path = Path(output_file)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(output_path)
    logger.info(f"Fichier Excel créé : {output_path}")
    return output_path
