"""Recoverable parse conditions and the renderer-facing validation error."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any


class DiagnosticCode(str, Enum):
    MALFORMED_HEADER_LINE = "MalformedHeaderLine"
    DUPLICATE_HEADER_KEY = "DuplicateHeaderKey"
    UNTERMINATED_HEADER = "UnterminatedHeader"
    UNTERMINATED_CODE_LISTING = "UnterminatedCodeListing"
    MISSING_REQUIRED_METADATA_KEY = "MissingRequiredMetadataKey"


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A condition noticed while parsing; never stops the parse."""

    code: DiagnosticCode
    message: str
    severity: str = "warning"
    line: int | None = None  # 1-indexed, relative to the text that stage scanned

    def asdict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "message": self.message,
            "severity": self.severity,
            "line": self.line,
        }


class MissingRequiredMetadataKey(ValueError):
    """Raised when a record lacks keys the renderer contract requires."""

    def __init__(self, missing: Iterable[str]) -> None:
        self.missing = tuple(missing)
        super().__init__(f"missing required metadata keys: {', '.join(self.missing)}")
