# Version: v1.0.0
"""
schema_resolver.py – Collect every schema file needed to compile the entry schema.

GAEB schemas build on each other through ``xs:redefine``.  Starting at the
matched schema, the redefine links are followed depth-first; each file is
visited once, so cyclic and diamond-shaped link graphs terminate and never
produce duplicates.  Links are resolved against the schema directory (not
against the referring file), and links to files that do not exist are
skipped silently.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Set

from logger import get_logger
from schema_index import DEFAULT_SCANNER, SchemaScanner, read_schema_text

log = get_logger()


def resolve(
    entry_path: str | Path,
    schema_dir: str | Path,
    scanner: SchemaScanner = DEFAULT_SCANNER,
) -> List[Path]:
    """
    Return the resolved schema set: *entry_path* first, then every file it
    transitively redefines, in first-visit order.
    """
    schema_dir = Path(schema_dir)
    visited: Set[Path] = set()
    result: List[Path] = []

    def _visit(path: Path) -> None:
        key = path.resolve()
        if key in visited:
            return
        visited.add(key)
        result.append(path)

        for location in scanner.redefine_locations(read_schema_text(path)):
            linked = schema_dir / location
            if linked.is_file():
                _visit(linked)
            else:
                log.info("Redefine target %s (from %s) not found, skipped", location, path.name)

    _visit(Path(entry_path))
    log.info("Resolved %d schema file(s): %s", len(result), [p.name for p in result])
    return result
