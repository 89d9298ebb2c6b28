# Version: v1.0.0
"""
logger.py – Centralised logging for the GAEB XML validator.

Supports simultaneous output to:
  • stderr           (always; stdout is kept for the one-line result)
  • a log file       (optional, text format, path resolved by caller)
  • an Excel file    (optional, .xlsx format for users without a text editor
                      habit)

The Excel log has an auto-filter, a frozen header row and color-coded
ERROR/WARNING rows.
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import openpyxl
from openpyxl.styles import Alignment, Font, PatternFill


_LOG_FORMAT = "%(asctime)s  %(levelname)-8s  %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_LEVEL_STYLES = {
    "ERROR":   (PatternFill(start_color="FFE6E6", end_color="FFE6E6", fill_type="solid"),
                Font(color="CC0000", bold=True)),
    "WARNING": (PatternFill(start_color="FFF4E6", end_color="FFF4E6", fill_type="solid"),
                Font(color="FF8800")),
}


class _XLSXHandler(logging.Handler):
    """
    Writes log records as rows of an Excel (.xlsx) workbook.

    Columns: timestamp, level, module, message.  The workbook is saved every
    10 records and on close().
    """

    _HEADERS = ["Timestamp", "Level", "Module", "Message"]

    def __init__(self, xlsx_path: Path) -> None:
        super().__init__()
        self._xlsx_path = xlsx_path
        self._xlsx_path.parent.mkdir(parents=True, exist_ok=True)

        self._wb = openpyxl.Workbook()
        self._ws = self._wb.active
        self._ws.title = "Log"
        self._ws.append(self._HEADERS)

        header_fill = PatternFill(start_color="D3D3D3", end_color="D3D3D3", fill_type="solid")
        for col_num in range(1, len(self._HEADERS) + 1):
            cell = self._ws.cell(row=1, column=col_num)
            cell.fill = header_fill
            cell.font = Font(bold=True)
            cell.alignment = Alignment(horizontal="center", vertical="center")

        for letter, width in zip("ABCD", (20, 10, 18, 100)):
            self._ws.column_dimensions[letter].width = width
        self._ws.freeze_panes = "A2"
        self._ws.auto_filter.ref = "A1:D1"

        self._wb.save(self._xlsx_path)
        self._row_number = 2

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self._ws.append([
                datetime.fromtimestamp(record.created),
                record.levelname,
                record.module,
                record.getMessage(),
            ])

            style = _LEVEL_STYLES.get(record.levelname)
            if style:
                fill, font = style
                for col_num in range(1, len(self._HEADERS) + 1):
                    cell = self._ws.cell(row=self._row_number, column=col_num)
                    cell.fill = fill
                    cell.font = font

            self._row_number += 1
            if self._row_number % 10 == 0:
                self._wb.save(self._xlsx_path)
        except Exception:
            self.handleError(record)

    def close(self) -> None:
        """Save the workbook with the auto-filter spanning all rows."""
        if getattr(self, "_wb", None) is not None:
            self._ws.auto_filter.ref = f"A1:D{self._ws.max_row}"
            self._wb.save(self._xlsx_path)
            self._wb.close()
            self._wb = None
        super().close()


def setup_logger(
    log_file: Optional[str | Path] = None,
    xlsx_file: Optional[str | Path] = None,
    level: int = logging.WARNING,
    name: str = "gaeb",
) -> logging.Logger:
    """
    Configure and return the application logger.

    Parameters
    ----------
    log_file:
        Path of the log file to write.  ``None`` means console only.
    xlsx_file:
        Path of the Excel log file.  ``None`` disables Excel logging.
    level:
        Log level for the logger and all its handlers.
    name:
        Logger name (defaults to ``"gaeb"``).

    Returns
    -------
    logging.Logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Avoid duplicate handlers when called more than once (e.g. unit tests)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(_LOG_FORMAT, datefmt=_DATE_FORMAT)

    # ── Console handler ──────────────────────────────────────────────────────
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # ── File handler (optional) ───────────────────────────────────────────────
    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
        logger.info("Log file: %s", log_path.resolve())

    # ── Excel handler (optional) ──────────────────────────────────────────────
    if xlsx_file is not None:
        xlsx_path = Path(xlsx_file)
        xlsx_handler = _XLSXHandler(xlsx_path)
        xlsx_handler.setLevel(level)
        logger.addHandler(xlsx_handler)
        logger.info("Excel log file: %s", xlsx_path.resolve())

    return logger


def get_logger(name: str = "gaeb") -> logging.Logger:
    """Return the already-configured logger (or a fresh unconfigured one)."""
    return logging.getLogger(name)
