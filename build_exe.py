#!/usr/bin/env python3
# Version: v1.0.0
"""
build_exe.py – Package the GAEB XML validator as a single executable.

    pip install ".[build]"
    python build_exe.py

The result lands in dist/validate_gaeb/ together with config.toml and the
GAEB-XSD_schema_files directory.  main.py looks for both next to the
executable, so the whole directory is what gets shipped.
"""

from __future__ import annotations

import importlib.util
import os
import shutil
import subprocess
import sys
from pathlib import Path

PROJECT_DIR = Path(__file__).parent.resolve()
ENTRY_POINT = PROJECT_DIR / "main.py"
APP_NAME    = "validate_gaeb"
DIST_DIR    = PROJECT_DIR / "dist" / APP_NAME

# source → name inside DIST_DIR
RUNTIME_FILES: dict[Path, str] = {
    PROJECT_DIR / "config.toml": "config.toml",
}
RUNTIME_DIRS: dict[Path, str] = {
    PROJECT_DIR / "GAEB-XSD_schema_files": "GAEB-XSD_schema_files",
}

# lxml and openpyxl load these lazily
HIDDEN_IMPORTS = [
    "lxml.etree",
    "lxml._elementpath",
    "openpyxl.styles.stylesheet",
    "tomllib",
]


def _build_pyinstaller_command() -> list[str]:
    cmd = [
        sys.executable, "-m", "PyInstaller",
        "--noconfirm",
        "--clean",
        "--onefile",
        "--console",
        f"--name={APP_NAME}",
        f"--distpath={DIST_DIR}",
    ]
    for module in HIDDEN_IMPORTS:
        cmd += ["--hidden-import", module]

    # openpyxl reads bundled XML templates when saving a workbook
    spec = importlib.util.find_spec("openpyxl")
    if spec is not None and spec.origin:
        cmd += ["--add-data", f"{Path(spec.origin).parent}{os.pathsep}openpyxl"]

    cmd.append(str(ENTRY_POINT))
    return cmd


def _copy_runtime_files(dist_dir: Path) -> list[Path]:
    """Place config.toml and the schema directory next to the executable."""
    copied: list[Path] = []
    dist_dir.mkdir(parents=True, exist_ok=True)

    for src, name in RUNTIME_FILES.items():
        if not src.exists():
            print(f"  skipped (missing): {src}", file=sys.stderr)
            continue
        copied.append(Path(shutil.copy2(src, dist_dir / name)))

    for src, name in RUNTIME_DIRS.items():
        if not src.is_dir():
            print(f"  skipped (missing): {src}/", file=sys.stderr)
            continue
        dest = dist_dir / name
        if dest.exists():
            shutil.rmtree(dest)
        copied.append(Path(shutil.copytree(src, dest)))
        print(f"  {name}/: {len(list(dest.glob('*.xsd')))} schema file(s)")

    return copied


def main() -> int:
    if importlib.util.find_spec("PyInstaller") is None:
        print('PyInstaller is missing; run: pip install ".[build]"', file=sys.stderr)
        return 1

    for d in (PROJECT_DIR / "dist", PROJECT_DIR / "build"):
        shutil.rmtree(d, ignore_errors=True)

    result = subprocess.run(_build_pyinstaller_command(), cwd=PROJECT_DIR)
    if result.returncode != 0:
        print(f"PyInstaller failed with exit code {result.returncode}", file=sys.stderr)
        return result.returncode

    for path in _copy_runtime_files(DIST_DIR):
        print(f"  copied: {path}")
    print(f"Ship the directory {DIST_DIR}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
