# mic_core/exports/renderers.py
"""
Incident-log report writers: CSV, JSON and a styled XLSX workbook.

All writers take the same flat rows (see build_rows) and return bytes, so
the view only decides content type and filename.
"""
from __future__ import annotations

import csv
import io
import json
import logging
from collections import OrderedDict
from datetime import date, datetime
from typing import Dict, Iterable, List, Sequence

from django.core.serializers.json import DjangoJSONEncoder
from django.utils import timezone
from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from mic_core.common.dates import shift_months, start_of_month, start_of_year
from mic_core.incidents.aggregation import category_label
from mic_core.incidents.types import IncidentLogRow

logger = logging.getLogger("mic.exports")

PERIOD_ALL = "all"
PERIOD_MONTH = "month"
PERIOD_YEAR = "year"
PERIODS = (PERIOD_ALL, PERIOD_MONTH, PERIOD_YEAR)

PERIOD_TITLES = {
    PERIOD_ALL: "Alle Incidenten",
    PERIOD_MONTH: "Afgelopen Maand",
    PERIOD_YEAR: "Afgelopen Jaar",
}

# (header, key, xlsx width)
COLUMNS = (
    ("Datum", "log_date", 15),
    ("Cliënt", "client", 20),
    ("Type Incident", "incident_type", 25),
    ("Categorie", "category", 15),
    ("Locatie", "location", 15),
    ("Ernst", "severity", 12),
    ("Tijdstip", "time_of_day", 15),
    ("Trigger", "triggered_by", 15),
    ("Interventie Succesvol", "intervention", 15),
    ("Notities", "notes", 40),
)

NOTES_MAX = 100

TITLE = "MIC Incidenten Rapport"
FOOTER = "MIC-Registratie | Vertrouwelijk document"
SECURITY_NOTICE = (
    "Dit document bevat gevoelige informatie en mag alleen worden gedeeld met geautoriseerde medewerkers."
)

HEADER_BLUE = "2B5A9B"
TITLE_BG = "EFF3FA"
ROW_FILLS = ("F5F5F5", "FFFFFF")
GOOD = "008000"
BAD = "B22222"
MEDIUM = "FF8C00"


def period_start(period: str, today: date | None = None) -> date | None:
    """
    month -> first day of the previous month
    year  -> 1 January of the previous year
    all   -> no lower bound
    """
    if period not in PERIODS:
        raise ValueError(f"Onbekende periode: {period}")

    today = today or timezone.localdate()
    if period == PERIOD_MONTH:
        return shift_months(start_of_month(today), -1)
    if period == PERIOD_YEAR:
        return start_of_year(today).replace(year=today.year - 1)
    return None


def _truncate(text: str | None, limit: int = NOTES_MAX) -> str:
    value = text or ""
    return value if len(value) <= limit else value[: limit - 3] + "..."


def build_rows(logs: Iterable[IncidentLogRow]) -> List[Dict[str, object]]:
    rows: List[Dict[str, object]] = []
    for log in logs:
        itype = log.incident_type
        rows.append(
            {
                "log_date": log.log_date.strftime("%d-%m-%Y"),
                "client": log.client_name or "",
                "incident_type": itype.name if itype.id is not None else "",
                "category": category_label(itype.category) if itype.category else "",
                "location": log.location or "",
                "severity": log.severity if log.severity is not None else "",
                "time_of_day": log.time_of_day.strftime("%H:%M") if log.time_of_day else "",
                "triggered_by": log.triggered_by or "",
                "intervention": "Ja" if log.intervention_successful else "Nee",
                "notes": _truncate(log.notes),
            }
        )
    return rows


# ============================================================================
# CSV / JSON
# ============================================================================

def render_csv(rows: Sequence[Dict[str, object]]) -> bytes:
    buf = io.StringIO()
    writer = csv.writer(buf, delimiter=";")
    writer.writerow([header for header, _, _ in COLUMNS])
    for row in rows:
        writer.writerow([row[key] for _, key, _ in COLUMNS])

    # BOM so Excel opens the accents correctly
    return buf.getvalue().encode("utf-8-sig")


def render_json(records: Sequence[Dict[str, object]], *, include_metadata: bool = True) -> bytes:
    if not include_metadata:
        payload: object = list(records)
    else:
        payload = {
            "metadata": {
                "exportDate": timezone.now(),
                "recordCount": len(records),
                "fields": list(records[0].keys()) if records else [],
            },
            "data": list(records),
        }
    return json.dumps(payload, cls=DjangoJSONEncoder, ensure_ascii=False, indent=2).encode("utf-8")


def json_records(logs: Iterable[IncidentLogRow]) -> List[Dict[str, object]]:
    """Machine-readable variant of build_rows: raw values, untruncated notes."""
    out: List[Dict[str, object]] = []
    for log in logs:
        out.append(
            OrderedDict(
                id=log.id,
                created_at=log.created_at,
                log_date=log.log_date,
                count=log.count,
                user_id=log.user_id,
                client_id=log.client_id,
                client=log.client_name,
                incident_type_id=log.incident_type_id,
                incident_type=log.incident_type.name if log.incident_type.id is not None else None,
                category=log.incident_type.category,
                location=log.location,
                severity=log.severity,
                time_of_day=log.time_of_day,
                triggered_by=log.triggered_by,
                intervention_successful=log.intervention_successful,
                notes=log.notes,
            )
        )
    return out


# ============================================================================
# XLSX
# ============================================================================

def _fill(color: str) -> PatternFill:
    return PatternFill(start_color=color, end_color=color, fill_type="solid")


def _severity_color(value) -> str:
    if value in ("", None):
        return GOOD
    level = int(value)
    if level >= 4:
        return BAD
    if level == 3:
        return MEDIUM
    return GOOD


def _write_statistics(ws, rows: Sequence[Dict[str, object]], first_row: int) -> int:
    """
    Two small tables (per category, per severity) side by side.
    Returns the last row written.
    """
    per_category: "OrderedDict[str, int]" = OrderedDict()
    per_severity: "OrderedDict[str, int]" = OrderedDict()
    for row in rows:
        cat = str(row["category"] or "Onbekend")
        sev = str(row["severity"] or "Onbekend")
        per_category[cat] = per_category.get(cat, 0) + 1
        per_severity[sev] = per_severity.get(sev, 0) + 1

    bold = Font(name="Arial", size=12, bold=True, color=HEADER_BLUE)
    ws.cell(row=first_row, column=1, value="Statistieken").font = Font(name="Arial", size=14, bold=True, color=HEADER_BLUE)

    header_row = first_row + 1
    ws.cell(row=header_row, column=1, value="Per categorie").font = bold
    ws.cell(row=header_row, column=4, value="Per ernst").font = bold

    last = header_row
    for offset, (name, count) in enumerate(per_category.items(), start=1):
        ws.cell(row=header_row + offset, column=1, value=name)
        ws.cell(row=header_row + offset, column=2, value=count)
        last = max(last, header_row + offset)

    for offset, (name, count) in enumerate(sorted(per_severity.items()), start=1):
        ws.cell(row=header_row + offset, column=4, value=name)
        ws.cell(row=header_row + offset, column=5, value=count)
        last = max(last, header_row + offset)

    return last


def render_xlsx(rows: Sequence[Dict[str, object]], *, period: str = PERIOD_ALL, include_statistics: bool = True) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = "Incident Logs"
    ws.page_setup.orientation = "landscape"
    ws.page_setup.paperSize = ws.PAPERSIZE_A4

    last_col = get_column_letter(len(COLUMNS))

    # --- Title + timestamp ---
    ws.merge_cells(f"A1:{last_col}1")
    title = ws["A1"]
    title.value = f"{TITLE} - {PERIOD_TITLES.get(period, PERIOD_TITLES[PERIOD_ALL])}"
    title.font = Font(name="Arial", size=16, bold=True, color=HEADER_BLUE)
    title.alignment = Alignment(horizontal="center", vertical="center")
    title.fill = _fill(TITLE_BG)

    ws.merge_cells(f"A2:{last_col}2")
    stamp = ws["A2"]
    stamp.value = f"Gegenereerd op: {timezone.localtime().strftime('%d-%m-%Y %H:%M:%S')}"
    stamp.font = Font(name="Arial", size=10, italic=True)
    stamp.alignment = Alignment(horizontal="center")

    # --- Header row ---
    thin = Side(style="thin")
    header_border = Border(top=thin, left=thin, bottom=thin, right=thin)
    header_font = Font(name="Arial", size=12, bold=True, color="FFFFFF")
    header_fill = _fill(HEADER_BLUE)

    for idx, (header, _, width) in enumerate(COLUMNS, start=1):
        cell = ws.cell(row=3, column=idx, value=header)
        cell.font = header_font
        cell.fill = header_fill
        cell.alignment = Alignment(horizontal="center", vertical="center")
        cell.border = header_border
        ws.column_dimensions[get_column_letter(idx)].width = width
    ws.row_dimensions[3].height = 25

    # --- Data rows ---
    grid = Side(style="thin", color="E0E0E0")
    row_border = Border(top=grid, left=grid, bottom=grid, right=grid)
    keys = [key for _, key, _ in COLUMNS]
    intervention_col = keys.index("intervention") + 1
    severity_col = keys.index("severity") + 1

    for i, row in enumerate(rows):
        r = 4 + i
        fill = _fill(ROW_FILLS[i % 2])
        for c, key in enumerate(keys, start=1):
            cell = ws.cell(row=r, column=c, value=row[key])
            cell.font = Font(name="Arial", size=10)
            cell.fill = fill
            cell.border = row_border

            if c == intervention_col:
                cell.font = Font(name="Arial", size=10, color=GOOD if row[key] == "Ja" else BAD)
                cell.alignment = Alignment(horizontal="center")
            elif c == severity_col:
                color = _severity_color(row[key])
                cell.font = Font(name="Arial", size=10, color=color, bold=color == BAD)
                cell.alignment = Alignment(horizontal="center")

    last_data_row = 3 + len(rows)
    ws.auto_filter.ref = f"A3:{last_col}{last_data_row}"
    ws.freeze_panes = "A4"

    # --- Statistics + footer ---
    last_row = last_data_row
    if include_statistics and rows:
        last_row = _write_statistics(ws, rows, last_data_row + 2)

    footer_row = last_row + 2
    ws.merge_cells(f"A{footer_row}:{last_col}{footer_row}")
    footer = ws[f"A{footer_row}"]
    footer.value = FOOTER
    footer.font = Font(name="Arial", size=8, italic=True, color="888888")
    footer.alignment = Alignment(horizontal="center")

    ws.merge_cells(f"A{footer_row + 1}:{last_col}{footer_row + 1}")
    notice = ws[f"A{footer_row + 1}"]
    notice.value = SECURITY_NOTICE
    notice.font = Font(name="Arial", size=8, bold=True, color=BAD)
    notice.alignment = Alignment(horizontal="center")

    buf = io.BytesIO()
    wb.save(buf)
    logger.info("XLSX rendered rows=%s period=%s", len(rows), period)
    return buf.getvalue()


def export_filename(period: str, extension: str, today: date | datetime | None = None) -> str:
    day = today or timezone.localdate()
    return f"mic-incidents-{period}-{day.isoformat()}.{extension}"
