#!/usr/bin/env python3
# Version: v1.0.0
"""
main.py – CLI entry point for the GAEB XML validator.

Usage examples
--------------
# Validate against the schemas next to the executable:
python main.py Angebot.X84

# Use another schema directory and also write an Excel report:
python main.py Angebot.X84 --schemas ./GAEB-XSD_schema_files --xlsx results.xlsx

# Log to auto-named file:
python main.py Angebot.X84 --log 1 --loglevel INFO

Exit codes
----------
0  document is valid
1  document is invalid (see the report)
2  run aborted (missing file, syntax error, no matching schema, ...)
"""

from __future__ import annotations

import argparse
import datetime
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

# ── Locate config.toml and schemas relative to executable (handles PyInstaller) ─

def _get_application_dir() -> Path:
    """
    Get the directory where the application is located.

    Handles both:
    - Normal Python script execution: Returns script directory
    - PyInstaller bundled executable: Returns executable directory (not temp _MEI directory)
    """
    if getattr(sys, 'frozen', False):
        return Path(sys.executable).parent.resolve()
    else:
        return Path(__file__).parent.resolve()

_SCRIPT_DIR = _get_application_dir()

try:
    import tomllib  # Python 3.11+
except ModuleNotFoundError:
    import tomli as tomllib  # type: ignore[no-redef]


DEFAULT_CONFIG: Dict[str, Any] = {
    "defaults": {
        "schema_dir": "GAEB-XSD_schema_files",
        "report_file": "validation_results.json",
        "xlsx_report_file": "",
        "log_file_template": "{yyyy}-{mm}-{dd}_{appname}.log",
        "xlsx_log_file_template": "",
    },
}


def _load_config(config_path: Path) -> Dict[str, Any]:
    """
    Parse config.toml and merge it over DEFAULT_CONFIG.

    A missing file is not an error; the defaults are used as they are.
    """
    config = {"defaults": dict(DEFAULT_CONFIG["defaults"])}
    if not config_path.exists():
        return config

    with open(config_path, "rb") as f:
        loaded = tomllib.load(f)
    config["defaults"].update(loaded.get("defaults", {}))
    return config


def _resolve_schema_dir(schemas_arg: Optional[str], config: Dict[str, Any]) -> Path:
    """--schemas wins; otherwise config value, relative to the application dir."""
    if schemas_arg:
        return Path(schemas_arg).expanduser().resolve()
    schema_dir = Path(config["defaults"]["schema_dir"]).expanduser()
    if not schema_dir.is_absolute():
        schema_dir = _SCRIPT_DIR / schema_dir
    return schema_dir


def _resolve_log_path(log_arg: str, config: Dict[str, Any]) -> Optional[str]:
    """
    Resolve the --log argument to a file path (or None for console-only).

    '1'  → auto-named from config template
    else → treat as a literal path
    """
    if not log_arg:
        return None
    if log_arg == "1":
        return _expand_template(config["defaults"]["log_file_template"])
    return log_arg


def _resolve_xlsx_log_path(log_arg: str, config: Dict[str, Any]) -> Optional[str]:
    """Excel log path from config template, only when --log is given."""
    if not log_arg:
        return None
    template: str = config["defaults"].get("xlsx_log_file_template", "")
    if not template or not template.strip():
        return None
    return _expand_template(template)


def _expand_template(template: str) -> str:
    """Replace datetime and appname placeholders in *template*."""
    now  = datetime.datetime.now()
    name = Path(sys.argv[0]).stem
    return (
        template
        .replace("{yyyy}",    now.strftime("%Y"))
        .replace("{mm}",      now.strftime("%m"))
        .replace("{dd}",      now.strftime("%d"))
        .replace("{HH}",      now.strftime("%H"))
        .replace("{MM}",      now.strftime("%M"))
        .replace("{SS}",      now.strftime("%S"))
        .replace("{appname}", name)
    )


# ─────────────────────────────────────────────────────────────────────────────
# CLI
# ─────────────────────────────────────────────────────────────────────────────


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="validate_gaeb",
        description=(
            "Validate a GAEB XML file against the XSD schema matching its "
            "namespace and write the result to validation_results.json."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    parser.add_argument(
        "xml_file",
        metavar="XML_FILE",
        help="Path of the XML file to validate.",
    )
    parser.add_argument(
        "--schemas",
        metavar="DIR",
        help="Schema directory (default: from config.toml, next to executable).",
    )
    parser.add_argument(
        "--report",
        metavar="FILE",
        help="JSON report path (default: validation_results.json in the working directory).",
    )
    parser.add_argument(
        "--xlsx",
        metavar="FILE",
        help="Also write the report as an Excel workbook.",
    )
    parser.add_argument(
        "--log",
        metavar="FILE|1",
        default="",
        help=(
            "Log file path, or '1' to use the auto-named template from "
            "config.toml.  Omit to log to console only."
        ),
    )
    parser.add_argument(
        "--loglevel",
        metavar="LEVEL",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Log level: DEBUG, INFO, WARNING (default), ERROR.",
    )
    parser.add_argument(
        "--cfg",
        metavar="FILE",
        default=str(_SCRIPT_DIR / "config.toml"),
        help="Path to config.toml (default: config.toml next to executable).",
    )
    return parser


# ─────────────────────────────────────────────────────────────────────────────
# Main
# ─────────────────────────────────────────────────────────────────────────────


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_parser()
    args   = parser.parse_args(argv)

    config = _load_config(Path(args.cfg))
    defaults = config["defaults"]

    from logger import setup_logger

    log_level = getattr(logging, args.loglevel, logging.WARNING)
    logger = setup_logger(
        log_file=_resolve_log_path(args.log, config),
        xlsx_file=_resolve_xlsx_log_path(args.log, config),
        level=log_level,
    )

    xml_path    = Path(args.xml_file).expanduser().resolve()
    schema_dir  = _resolve_schema_dir(args.schemas, config)
    report_path = args.report or defaults["report_file"]
    xlsx_path   = args.xlsx or defaults.get("xlsx_report_file") or None

    logger.info("GAEB XML validator starting")
    logger.info("Config: %s", args.cfg)
    logger.info("Input file: %s", xml_path)
    logger.info("Schema directory: %s", schema_dir)

    from errors import GaebValidatorError
    from report import summary_line, write_report_json, write_report_xlsx
    from validate_xml import validate_xml

    try:
        report = validate_xml(xml_path, schema_dir)
    except GaebValidatorError as e:
        logger.error("Validation aborted: %s", e)
        print(f"Fehler: {e}")
        return 2

    try:
        write_report_json(report, report_path)
        if xlsx_path:
            write_report_xlsx(report, xlsx_path)
    except OSError as e:
        logger.error("Report could not be written: %s", e)
        print(f"Fehler: Bericht konnte nicht geschrieben werden: {e}")
        return 2

    print(summary_line(report, report_path))
    return 0 if report.is_valid else 1


if __name__ == "__main__":
    sys.exit(main())
