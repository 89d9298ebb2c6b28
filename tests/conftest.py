from __future__ import annotations

import logging
from pathlib import Path

import pytest

NS = "urn:example:order"

ORDER_BASE_XSD = """<?xml version="1.0" encoding="UTF-8"?>
<xs:schema xmlns:xs="http://www.w3.org/2001/XMLSchema"
           xmlns="urn:example:order"
           targetNamespace="urn:example:order"
           elementFormDefault="qualified">
  <xs:complexType name="ItemType">
    <xs:sequence>
      <xs:element name="name" type="xs:string"/>
      <xs:element name="status" type="StatusType"/>
    </xs:sequence>
  </xs:complexType>
  <xs:simpleType name="StatusType">
    <xs:restriction base="xs:string">
      <xs:enumeration value="open"/>
      <xs:enumeration value="closed"/>
    </xs:restriction>
  </xs:simpleType>
</xs:schema>
"""

ORDER_XSD = """<?xml version="1.0" encoding="UTF-8"?>
<xs:schema xmlns:xs="http://www.w3.org/2001/XMLSchema"
           xmlns="urn:example:order"
           targetNamespace="urn:example:order"
           elementFormDefault="qualified">
  <xs:redefine schemaLocation="order_base.xsd"/>
  <xs:element name="order">
    <xs:complexType>
      <xs:sequence>
        <xs:element name="item" type="ItemType" maxOccurs="unbounded"/>
      </xs:sequence>
    </xs:complexType>
  </xs:element>
</xs:schema>
"""

VALID_XML = """<?xml version="1.0" encoding="UTF-8"?>
<order xmlns="urn:example:order">
  <item>
    <name>Widget</name>
    <status>open</status>
  </item>
</order>
"""

UNEXPECTED_ELEMENT_XML = """<?xml version="1.0" encoding="UTF-8"?>
<order xmlns="urn:example:order">
  <item>
    <name>Widget</name>
    <colour>red</colour>
    <status>open</status>
  </item>
</order>
"""

INVALID_VALUE_XML = """<?xml version="1.0" encoding="UTF-8"?>
<order xmlns="urn:example:order">
  <item>
    <name>Widget</name>
    <status>pending</status>
  </item>
</order>
"""


def write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def schema_stub(namespace: str | None = None, redefines: tuple = ()) -> str:
    """Minimal schema text for tests that only pre-scan, never compile."""
    ns_attr = f' targetNamespace="{namespace}"' if namespace else ""
    links = "".join(f'  <xs:redefine schemaLocation="{loc}"/>\n' for loc in redefines)
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<xs:schema xmlns:xs="http://www.w3.org/2001/XMLSchema"{ns_attr}>\n'
        f"{links}"
        "</xs:schema>\n"
    )


@pytest.fixture
def order_schema_dir(tmp_path: Path) -> Path:
    schema_dir = tmp_path / "schemas"
    write(schema_dir / "order.xsd", ORDER_XSD)
    write(schema_dir / "order_base.xsd", ORDER_BASE_XSD)
    return schema_dir


@pytest.fixture
def xml_file(tmp_path: Path):
    def _make(text: str, name: str = "order.xml") -> Path:
        return write(tmp_path / "docs" / name, text)
    return _make


@pytest.fixture(autouse=True)
def _reset_gaeb_logger():
    yield
    logger = logging.getLogger("gaeb")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
