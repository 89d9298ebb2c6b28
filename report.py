# Version: v1.0.0
"""
report.py – Build, save and summarise the validation report.

The JSON report (``validation_results.json`` by default) is the primary
output.  An Excel copy can be written as well for users who prefer to
filter the error list in a spreadsheet.
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence

import openpyxl
from openpyxl.styles import Alignment, Font, PatternFill

from logger import get_logger
from models import ValidationError, ValidationReport

log = get_logger()

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
DEFAULT_REPORT_FILE = "validation_results.json"


def _schema_label(path: Path, schema_dir: Optional[Path]) -> str:
    """Path relative to *schema_dir* when it lies inside, absolute otherwise."""
    resolved = path.resolve()
    if schema_dir is not None:
        try:
            return resolved.relative_to(schema_dir.resolve()).as_posix()
        except ValueError:
            pass
    return str(resolved)


def build_report(
    document_path: str | Path,
    used_schema_files: Sequence[str | Path],
    errors: Sequence[ValidationError],
    schema_dir: Optional[str | Path] = None,
) -> ValidationReport:
    """
    Assemble the report.  The timestamp is taken now, not when validation
    started; duplicate schema paths are dropped keeping the first occurrence.
    """
    base = Path(schema_dir) if schema_dir is not None else None
    labels = [_schema_label(Path(p), base) for p in used_schema_files]

    return ValidationReport(
        checked_file=Path(document_path).name,
        timestamp=datetime.now().strftime(TIMESTAMP_FORMAT),
        errors=list(errors),
        used_schema_files=list(dict.fromkeys(labels)),
    )


def write_report_json(report: ValidationReport, report_path: str | Path = DEFAULT_REPORT_FILE) -> Path:
    """Write *report* as indented JSON, replacing any previous report."""
    p = Path(report_path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps(report.to_dict(), indent=2, ensure_ascii=False), encoding="utf-8")
    log.info("Report written to: %s", p.resolve())
    return p


def write_report_xlsx(report: ValidationReport, xlsx_path: str | Path) -> Path:
    """
    Write *report* as an Excel workbook.

    Sheet "Fehler" holds one row per error (filterable, header frozen);
    sheet "Zusammenfassung" holds the run metadata.
    """
    p = Path(xlsx_path)
    p.parent.mkdir(parents=True, exist_ok=True)

    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Fehler"

    headers = ["Zeile", "Pfad", "Meldung", "Zeileninhalt"]
    ws.append(headers)
    header_fill = PatternFill(start_color="D3D3D3", end_color="D3D3D3", fill_type="solid")
    for col_num in range(1, len(headers) + 1):
        cell = ws.cell(row=1, column=col_num)
        cell.fill = header_fill
        cell.font = Font(bold=True)
        cell.alignment = Alignment(horizontal="center", vertical="center")

    for error in report.errors:
        ws.append([error.line, error.source_location, error.message, error.offending_line])

    ws.column_dimensions["A"].width = 8
    ws.column_dimensions["B"].width = 40
    ws.column_dimensions["C"].width = 100
    ws.column_dimensions["D"].width = 60
    ws.freeze_panes = "A2"
    ws.auto_filter.ref = f"A1:D{ws.max_row}"

    summary = wb.create_sheet("Zusammenfassung")
    summary.append(["Geprüfte Datei", report.checked_file])
    summary.append(["Zeitpunkt", report.timestamp])
    summary.append(["Gültig", "ja" if report.is_valid else "nein"])
    summary.append(["Anzahl Fehler", len(report.errors)])
    for schema_file in report.used_schema_files:
        summary.append(["XSD-Datei", schema_file])
    summary.column_dimensions["A"].width = 20
    summary.column_dimensions["B"].width = 60

    wb.save(p)
    wb.close()
    log.info("Excel report written to: %s", p.resolve())
    return p


def summary_line(report: ValidationReport, report_path: str | Path = DEFAULT_REPORT_FILE) -> str:
    if report.is_valid:
        return "Die XML-Datei ist gültig."
    return f"Es wurden {len(report.errors)} Fehler gefunden. Siehe '{report_path}'."
