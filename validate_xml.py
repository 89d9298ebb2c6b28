# Version: v1.0.0
"""
validate_xml.py – Validate a GAEB XML document against its XSD schema family.

Steps of one run (each returns its result to the next, nothing is shared):

    1. load_document()        parse the XML, read the root namespace
    2. schema_index.index()   pre-scan the schema directory
    3. schema_index.match()   pick the schema declaring that namespace
    4. schema_resolver.resolve()  follow xs:redefine links
    5. compile_and_validate() compile with lxml, collect every diagnostic
    6. report.build_report()

Steps 1–5 raise errors.GaebValidatorError subclasses for fatal problems.
Schema violations inside the document are returned as ValidationError
records instead.
"""

from __future__ import annotations

import io
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple
from urllib.parse import urlparse
from urllib.request import url2pathname

from lxml import etree

import schema_index
import schema_resolver
from errors import (
    AccessDeniedError,
    NamespaceMissingError,
    SchemaCompilationError,
    XmlFileNotFoundError,
    XmlSyntaxError,
)
from logger import get_logger
from models import ValidationError, ValidationReport
from report import build_report

log = get_logger()


# ─────────────────────────────────────────────────────────────────────────────
# Diagnostic classification
# ─────────────────────────────────────────────────────────────────────────────

HINT_UNEXPECTED_ELEMENT = "unexpected element found"
HINT_INVALID_VALUE = "invalid value found"
HINT_GENERAL = "general validation error"

HINT_TEXT: Dict[str, str] = {
    HINT_UNEXPECTED_ELEMENT: "Ein unerwartetes Element wurde gefunden.",
    HINT_INVALID_VALUE:      "Ein ungültiger Wert wurde gefunden.",
    HINT_GENERAL:            "Allgemeiner Validierungsfehler.",
}

# Evaluated top to bottom on the lower-cased message, first match wins.
# libxml2 phrases its messages differently from other validators, so its
# wording sits next to the generic phrase of the same category.
HINT_RULES: List[Tuple[Callable[[str], bool], str]] = [
    (lambda m: "unexpected child" in m,                  HINT_UNEXPECTED_ELEMENT),
    (lambda m: "this element is not expected" in m,      HINT_UNEXPECTED_ELEMENT),
    (lambda m: "value" in m and "must be one of" in m,   HINT_INVALID_VALUE),
    (lambda m: "[facet 'enumeration']" in m,             HINT_INVALID_VALUE),
]


def classify(message: str) -> str:
    """Return the hint category for a validator message."""
    lowered = message.lower()
    for predicate, hint in HINT_RULES:
        if predicate(lowered):
            return hint
    return HINT_GENERAL


def offending_line(lines: Sequence[str], line_number: Optional[int]) -> Optional[str]:
    """Return the trimmed text of 1-based *line_number*, or None if unavailable."""
    if line_number is None or line_number < 1 or line_number > len(lines):
        return None
    return lines[line_number - 1].strip()


def to_validation_error(
    message: str,
    source_location: str,
    line_number: Optional[int],
    lines: Sequence[str],
) -> ValidationError:
    hint = classify(message)
    return ValidationError(
        source_location=source_location,
        message=f"{message} Hinweis: {HINT_TEXT[hint]}",
        hint=hint,
        offending_line=offending_line(lines, line_number),
        line=line_number,
    )


# ─────────────────────────────────────────────────────────────────────────────
# XML loading
# ─────────────────────────────────────────────────────────────────────────────


def _safe_parser() -> etree.XMLParser:
    """Parser that never loads DTDs, external entities or network resources."""
    return etree.XMLParser(load_dtd=False, resolve_entities=False, no_network=True)


def load_document(xml_path: str | Path) -> Tuple[etree._ElementTree, str]:
    """Parse *xml_path* and return the tree together with its root namespace."""
    path = Path(xml_path)
    if not path.is_file():
        raise XmlFileNotFoundError(f"XML-Datei nicht gefunden: {path}")

    try:
        tree = etree.parse(str(path), _safe_parser())
    except etree.XMLSyntaxError as e:
        raise XmlSyntaxError(f"XML-Syntaxfehler: {e}") from e
    except PermissionError as e:
        raise AccessDeniedError(f"Keine Berechtigung für Zugriff auf: {path}") from e
    except OSError as e:
        raise XmlFileNotFoundError(f"XML-Datei konnte nicht gelesen werden: {path} ({e})") from e

    namespace = etree.QName(tree.getroot()).namespace
    if not namespace:
        raise NamespaceMissingError("Kein Namespace gefunden.")

    log.info("Loaded %s (namespace %s)", path.name, namespace)
    return tree, namespace


def _document_lines(path: Path, tree: etree._ElementTree) -> List[str]:
    """
    Split the document into lines the way libxml2 numbers them.

    Only \\n ends a line (after \\r\\n and a lone \\r are normalised);
    str.splitlines() would also split on U+2028, U+0085, VT and FF.
    """
    encoding = tree.docinfo.encoding or "utf-8"
    try:
        text = path.read_text(encoding=encoding, errors="replace")
    except OSError as e:
        raise XmlFileNotFoundError(f"XML-Datei konnte nicht gelesen werden: {path} ({e})") from e
    return text.replace("\r\n", "\n").replace("\r", "\n").split("\n")


# ─────────────────────────────────────────────────────────────────────────────
# Schema compilation
# ─────────────────────────────────────────────────────────────────────────────


def _url_key(url: str) -> str:
    if url.startswith("file:"):
        url = url2pathname(urlparse(url).path)
    return str(Path(url).resolve())


class _SchemaSetResolver(etree.Resolver):
    """
    Serves the already loaded schema documents to the XSD compiler.

    Any URL outside the schema set returns None, which hands it back to
    lxml's default loader.
    """

    def __init__(self, documents: Dict[str, bytes]) -> None:
        super().__init__()
        self._documents = documents

    def resolve(self, system_url, public_id, context):
        content = self._documents.get(_url_key(system_url))
        if content is None:
            return None
        log.debug("Serving schema %s from the resolved set", system_url)
        return self.resolve_string(content, context, base_url=system_url)


def compile_schema_set(resolved_set: Sequence[str | Path]) -> etree.XMLSchema:
    """
    Load every schema file of *resolved_set* and compile the set.

    The first entry is the entry schema; the others are reached through its
    schemaLocation links and are served from memory while compiling.
    """
    if not resolved_set:
        raise SchemaCompilationError("Keine XSD-Dateien zum Kompilieren.")

    documents: Dict[str, bytes] = {}
    for raw in resolved_set:
        path = Path(raw).resolve()
        if str(path) in documents:
            continue
        try:
            content = path.read_bytes()
        except PermissionError as e:
            raise AccessDeniedError(f"Keine Berechtigung für Zugriff auf: {path}") from e
        except OSError as e:
            raise AccessDeniedError(f"XSD-Datei konnte nicht gelesen werden: {path} ({e})") from e
        try:
            etree.parse(io.BytesIO(content), _safe_parser(), base_url=str(path))
        except etree.XMLSyntaxError as e:
            raise SchemaCompilationError(f"XSD-Syntaxfehler in {path.name}: {e}") from e
        documents[str(path)] = content

    parser = _safe_parser()
    parser.resolvers.add(_SchemaSetResolver(documents))

    entry = str(Path(resolved_set[0]).resolve())
    try:
        entry_doc = etree.parse(io.BytesIO(documents[entry]), parser, base_url=entry)
        schema = etree.XMLSchema(entry_doc)
    except (etree.XMLSchemaParseError, etree.XMLSyntaxError) as e:
        raise SchemaCompilationError(f"XSD-Schema konnte nicht kompiliert werden: {e}") from e

    log.info("Compiled schema set of %d file(s)", len(documents))
    return schema


# ─────────────────────────────────────────────────────────────────────────────
# Validation
# ─────────────────────────────────────────────────────────────────────────────


def collect_diagnostics(
    schema: etree.XMLSchema,
    tree: etree._ElementTree,
    lines: Sequence[str],
) -> List[ValidationError]:
    """Validate *tree* and convert every entry of the schema's error log."""
    schema.validate(tree)
    errors: List[ValidationError] = []
    for entry in schema.error_log:
        line_number = entry.line if entry.line and entry.line > 0 else None
        errors.append(to_validation_error(entry.message, entry.filename, line_number, lines))
    return errors


def compile_and_validate(
    resolved_set: Sequence[str | Path],
    document_path: str | Path,
    tree: Optional[etree._ElementTree] = None,
) -> List[ValidationError]:
    """
    Compile *resolved_set* and validate *document_path* against it.

    *tree* may be passed when the document has already been parsed.
    """
    path = Path(document_path)
    if tree is None:
        tree, _ = load_document(path)

    schema = compile_schema_set(resolved_set)
    errors = collect_diagnostics(schema, tree, _document_lines(path, tree))

    if errors:
        log.info("%s: %d validation error(s)", path.name, len(errors))
    else:
        log.info("%s is valid", path.name)
    return errors


def validate_xml(
    xml_path: str | Path,
    schema_dir: str | Path,
    scanner: schema_index.SchemaScanner = schema_index.DEFAULT_SCANNER,
) -> ValidationReport:
    """
    Run the full check of *xml_path* against the schemas in *schema_dir*.

    Returns the report; writing it is up to the caller.
    """
    tree, namespace = load_document(xml_path)
    candidates = schema_index.index(schema_dir, scanner)
    entry = schema_index.match(candidates, namespace)
    resolved = schema_resolver.resolve(entry.path, schema_dir, scanner)
    errors = compile_and_validate(resolved, xml_path, tree=tree)
    return build_report(xml_path, resolved, errors, schema_dir=schema_dir)
