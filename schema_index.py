# Version: v1.0.0
"""
schema_index.py – Find the schema file that belongs to an XML document.

The schema directory holds one XSD per GAEB exchange phase / version, each
declaring its own targetNamespace.  Compiling all of them just to read that
attribute would be slow, so files are only pre-scanned as text:

  • index()  – one SchemaCandidate per *.xsd file with a detectable namespace
  • match()  – the candidate whose namespace equals the document's namespace

The text pre-scan lives behind SchemaScanner so it can be replaced by a real
(lightweight) XML parse without touching the indexer or the resolver.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import List, Optional, Sequence

from errors import AccessDeniedError, DirectoryNotFoundError, NoMatchingSchemaError
from logger import get_logger
from models import SchemaCandidate

log = get_logger()

SCHEMA_SUFFIX = ".xsd"


# ─────────────────────────────────────────────────────────────────────────────
# Text pre-scan
# ─────────────────────────────────────────────────────────────────────────────


class SchemaScanner:
    """Extracts the few facts the indexer and resolver need from raw XSD text."""

    def target_namespace(self, text: str) -> Optional[str]:
        raise NotImplementedError

    def redefine_locations(self, text: str) -> List[str]:
        raise NotImplementedError


class RegexSchemaScanner(SchemaScanner):
    """
    Regex implementation of SchemaScanner.

    Only the exact spellings below are recognised.  In particular, schema
    links other than ``<xs:redefine schemaLocation="...">`` (xs:include,
    xs:import, other prefixes, attribute order) are not discovered here;
    lxml still follows them on its own while compiling.
    """

    _NAMESPACE_RE = re.compile(r'targetNamespace="(.*?)"')
    _REDEFINE_RE = re.compile(r'<xs:redefine\s+schemaLocation="(.*?)"')

    def target_namespace(self, text: str) -> Optional[str]:
        match = self._NAMESPACE_RE.search(text)
        return match.group(1) if match else None

    def redefine_locations(self, text: str) -> List[str]:
        return self._REDEFINE_RE.findall(text)


DEFAULT_SCANNER: SchemaScanner = RegexSchemaScanner()


def read_schema_text(path: Path) -> str:
    """Read a schema file as text, mapping permission problems to AccessDeniedError."""
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except PermissionError as e:
        raise AccessDeniedError(f"Keine Berechtigung für Zugriff auf: {path}") from e
    except OSError as e:
        raise AccessDeniedError(f"XSD-Datei konnte nicht gelesen werden: {path} ({e})") from e


# ─────────────────────────────────────────────────────────────────────────────
# Indexer
# ─────────────────────────────────────────────────────────────────────────────


def list_schema_files(schema_dir: Path) -> List[Path]:
    """
    Return all *.xsd files directly inside *schema_dir*, sorted by name.

    Sorting makes "first file wins" in match() independent of the
    filesystem's enumeration order.
    """
    if not schema_dir.is_dir():
        raise DirectoryNotFoundError(f"Schema-Verzeichnis nicht gefunden: {schema_dir}")
    try:
        entries = list(schema_dir.iterdir())
    except PermissionError as e:
        raise AccessDeniedError(f"Keine Berechtigung für Zugriff auf: {schema_dir}") from e

    return sorted(
        (p for p in entries if p.suffix.lower() == SCHEMA_SUFFIX and p.is_file()),
        key=lambda p: p.name,
    )


def index(
    schema_dir: str | Path,
    scanner: SchemaScanner = DEFAULT_SCANNER,
) -> List[SchemaCandidate]:
    """
    Pre-scan every schema file in *schema_dir* for its targetNamespace.

    Files without a detectable namespace are left out.
    """
    schema_dir = Path(schema_dir)
    candidates: List[SchemaCandidate] = []

    for path in list_schema_files(schema_dir):
        namespace = scanner.target_namespace(read_schema_text(path))
        if namespace is None:
            log.debug("No targetNamespace in %s, skipped", path.name)
            continue
        log.debug("Schema %s → %s", path.name, namespace)
        candidates.append(SchemaCandidate(path=path, target_namespace=namespace))

    log.info("Indexed %d schema file(s) in %s", len(candidates), schema_dir)
    return candidates


# ─────────────────────────────────────────────────────────────────────────────
# Matcher
# ─────────────────────────────────────────────────────────────────────────────


def match(candidates: Sequence[SchemaCandidate], target_namespace: str) -> SchemaCandidate:
    """Return the first candidate declaring exactly *target_namespace*."""
    hits = [c for c in candidates if c.target_namespace == target_namespace]
    if not hits:
        raise NoMatchingSchemaError(target_namespace)

    if len(hits) > 1:
        log.warning(
            "%d schema files declare namespace %s (%s); using %s",
            len(hits), target_namespace,
            ", ".join(c.path.name for c in hits), hits[0].path.name,
        )
    log.info("Matched namespace %s to %s", target_namespace, hits[0].path.name)
    return hits[0]
