# Version: v1.0.0
"""
errors.py – Fatal conditions of a validation run.

Every exception here aborts the run before a report is written.  Schema
violations found inside a well-formed document are *not* exceptions; they
end up as ValidationError records in the report (see models.py).
"""

from __future__ import annotations


class GaebValidatorError(Exception):
    """Base class for all fatal validator errors."""


class DirectoryNotFoundError(GaebValidatorError):
    """The schema directory does not exist."""


class AccessDeniedError(GaebValidatorError):
    """The schema directory (or a file in it) cannot be read."""


class XmlFileNotFoundError(GaebValidatorError):
    """The XML document to check does not exist."""


class NoMatchingSchemaError(XmlFileNotFoundError):
    """No schema file declares the document's target namespace."""

    def __init__(self, namespace: str) -> None:
        super().__init__(f"Keine passende XSD mit Namespace {namespace} gefunden.")
        self.namespace = namespace


class XmlSyntaxError(GaebValidatorError):
    """The XML document is not well-formed."""


class NamespaceMissingError(GaebValidatorError):
    """The document's root element has no namespace."""


class SchemaCompilationError(GaebValidatorError):
    """The collected schema files do not compile into one consistent schema."""
