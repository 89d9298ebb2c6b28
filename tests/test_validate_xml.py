import pytest

import validate_xml as vx
from conftest import (
    INVALID_VALUE_XML,
    NS,
    UNEXPECTED_ELEMENT_XML,
    VALID_XML,
    write,
)
from errors import (
    AccessDeniedError,
    DirectoryNotFoundError,
    NamespaceMissingError,
    NoMatchingSchemaError,
    SchemaCompilationError,
    XmlFileNotFoundError,
    XmlSyntaxError,
)


# ── classification ───────────────────────────────────────────────────────────


@pytest.mark.parametrize(
    "message, hint",
    [
        ("The element 'a' has an Unexpected Child element 'b'.", vx.HINT_UNEXPECTED_ELEMENT),
        ("Element '{urn:x}b': This element is not expected.", vx.HINT_UNEXPECTED_ELEMENT),
        ("The VALUE 'x' is invalid, it Must Be One Of 'a', 'b'.", vx.HINT_INVALID_VALUE),
        ("Element 'b': [facet 'enumeration'] The value 'x' is not an element of the set.",
         vx.HINT_INVALID_VALUE),
        ("The value 'x' is too long.", vx.HINT_GENERAL),
        ("Missing child element(s).", vx.HINT_GENERAL),
    ],
)
def test_classify(message, hint):
    assert vx.classify(message) == hint


def test_classify_unexpected_child_wins_over_invalid_value():
    message = "unexpected child 'b'; its value must be one of 'x'"

    assert vx.classify(message) == vx.HINT_UNEXPECTED_ELEMENT


def test_offending_line():
    lines = ["<a>", "    <b>text</b>   ", "</a>"]

    assert vx.offending_line(lines, 2) == "<b>text</b>"
    assert vx.offending_line(lines, 4) is None
    assert vx.offending_line(lines, None) is None
    assert vx.offending_line(lines, 0) is None


def test_to_validation_error_appends_localised_hint():
    error = vx.to_validation_error("Element 'x': This element is not expected.", "doc.xml", 1, ["  <x/>"])

    assert error.message == (
        "Element 'x': This element is not expected. Hinweis: Ein unerwartetes Element wurde gefunden."
    )
    assert error.hint == vx.HINT_UNEXPECTED_ELEMENT
    assert error.offending_line == "<x/>"
    assert error.source_location == "doc.xml"


# ── document loading ─────────────────────────────────────────────────────────


def test_load_document_returns_namespace(xml_file):
    tree, namespace = vx.load_document(xml_file(VALID_XML))

    assert namespace == NS
    assert tree.getroot().tag == f"{{{NS}}}order"


def test_load_document_missing_file(tmp_path):
    with pytest.raises(XmlFileNotFoundError, match="XML-Datei nicht gefunden"):
        vx.load_document(tmp_path / "missing.xml")


def test_load_document_syntax_error(xml_file):
    with pytest.raises(XmlSyntaxError, match="XML-Syntaxfehler"):
        vx.load_document(xml_file("<order xmlns='urn:x'><item></order>"))


def test_load_document_without_namespace(xml_file):
    with pytest.raises(NamespaceMissingError):
        vx.load_document(xml_file("<order><item/></order>"))


# ── compilation ──────────────────────────────────────────────────────────────


def test_compile_schema_set(order_schema_dir):
    schema = vx.compile_schema_set([order_schema_dir / "order.xsd", order_schema_dir / "order_base.xsd"])

    assert schema is not None


def test_compile_inconsistent_schema(tmp_path):
    broken = write(
        tmp_path / "broken.xsd",
        '<xs:schema xmlns:xs="http://www.w3.org/2001/XMLSchema" targetNamespace="urn:b">'
        '<xs:element name="root" type="UndefinedType"/></xs:schema>',
    )

    with pytest.raises(SchemaCompilationError):
        vx.compile_schema_set([broken])


def test_compile_malformed_schema_file(tmp_path):
    broken = write(tmp_path / "broken.xsd", "<xs:schema")

    with pytest.raises(SchemaCompilationError, match="broken.xsd"):
        vx.compile_schema_set([broken])


def test_compile_empty_set():
    with pytest.raises(SchemaCompilationError):
        vx.compile_schema_set([])


# ── end to end ───────────────────────────────────────────────────────────────


def test_valid_document(order_schema_dir, xml_file):
    report = vx.validate_xml(xml_file(VALID_XML), order_schema_dir)

    assert report.is_valid is True
    assert report.errors == []
    assert report.checked_file == "order.xml"
    assert report.used_schema_files == ["order.xsd", "order_base.xsd"]


def test_unexpected_element(order_schema_dir, xml_file):
    report = vx.validate_xml(xml_file(UNEXPECTED_ELEMENT_XML), order_schema_dir)

    assert report.is_valid is False
    assert len(report.errors) == 1
    error = report.errors[0]
    assert error.hint == vx.HINT_UNEXPECTED_ELEMENT
    assert error.line == 5
    assert error.offending_line == "<colour>red</colour>"
    assert error.message.endswith("Hinweis: Ein unerwartetes Element wurde gefunden.")
    assert error.source_location.endswith("order.xml")


def test_invalid_enumeration_value(order_schema_dir, xml_file):
    report = vx.validate_xml(xml_file(INVALID_VALUE_XML), order_schema_dir)

    assert not report.is_valid
    assert any(e.hint == vx.HINT_INVALID_VALUE for e in report.errors)
    assert all(e.offending_line == "<status>pending</status>" for e in report.errors)


def test_compile_and_validate_parses_document_itself(order_schema_dir, xml_file):
    resolved = [order_schema_dir / "order.xsd", order_schema_dir / "order_base.xsd"]

    errors = vx.compile_and_validate(resolved, xml_file(UNEXPECTED_ELEMENT_XML))

    assert len(errors) == 1


def test_no_matching_schema(order_schema_dir, xml_file):
    doc = xml_file('<other xmlns="urn:example:other"/>')

    with pytest.raises(NoMatchingSchemaError, match="urn:example:other"):
        vx.validate_xml(doc, order_schema_dir)


def test_missing_schema_directory(tmp_path, xml_file):
    with pytest.raises(DirectoryNotFoundError):
        vx.validate_xml(xml_file(VALID_XML), tmp_path / "missing")


def test_line_text_ignores_unicode_line_separators(order_schema_dir, xml_file):
    text = UNEXPECTED_ELEMENT_XML.replace("<name>Widget</name>", "<name>Wid\u2028get</name>")

    report = vx.validate_xml(xml_file(text), order_schema_dir)

    assert report.errors[0].line == 5
    assert report.errors[0].offending_line == "<colour>red</colour>"


def test_line_text_with_crlf_line_ends(order_schema_dir, tmp_path):
    doc = tmp_path / "crlf.xml"
    doc.write_bytes(UNEXPECTED_ELEMENT_XML.replace("\n", "\r\n").encode("utf-8"))

    report = vx.validate_xml(doc, order_schema_dir)

    assert report.errors[0].offending_line == "<colour>red</colour>"


def test_load_document_unreadable_file(xml_file, monkeypatch):
    doc = xml_file(VALID_XML)

    def _fail(*args, **kwargs):
        raise OSError("Error reading file: Input/output error")

    monkeypatch.setattr(vx.etree, "parse", _fail)

    with pytest.raises(XmlFileNotFoundError, match="konnte nicht gelesen werden"):
        vx.load_document(doc)


def test_load_document_permission_denied(xml_file, monkeypatch):
    doc = xml_file(VALID_XML)

    def _deny(*args, **kwargs):
        raise PermissionError("denied")

    monkeypatch.setattr(vx.etree, "parse", _deny)

    with pytest.raises(AccessDeniedError):
        vx.load_document(doc)
