# Version: v1.0.0
"""
models.py – Records passed between the validator steps.

All of them are frozen: a SchemaCandidate per pre-scanned schema file, a
ValidationError per diagnostic and one ValidationReport per run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class SchemaCandidate:
    path: Path
    target_namespace: Optional[str] = None


@dataclass(frozen=True)
class ValidationError:
    source_location: str          # file name / URI reported by the validator
    message: str                  # original message + localised hint suffix
    hint: str                     # one of the HINT_* categories in validate_xml.py
    offending_line: Optional[str] = None
    line: Optional[int] = None    # 1-based, None when the validator gave none

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.source_location,
            "message": self.message,
            "full_line": self.offending_line,
        }


@dataclass(frozen=True)
class ValidationReport:
    checked_file: str
    timestamp: str                # YYYY-MM-DD HH:MM:SS, local time
    errors: List[ValidationError] = field(default_factory=list)
    used_schema_files: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "checked_file": self.checked_file,
            "timestamp": self.timestamp,
            "is_valid": self.is_valid,
            "errors": [e.to_dict() for e in self.errors],
            "used_xsd_files": list(self.used_schema_files),
        }
