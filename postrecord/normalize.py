"""Text normalization applied before header and block parsing."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

LOGGER = logging.getLogger(__name__)

BYTE_ORDER_MARK = "\ufeff"

_LINE_PATTERN = re.compile(r"[^\n]*\n|[^\n]+\Z")


@dataclass(slots=True)
class NormalizationResult:
    """Outcome of the normalization stage."""

    text: str
    steps: list[str] = field(default_factory=list)


def _strip_byte_order_mark(value: str) -> tuple[str, bool]:
    if value.startswith(BYTE_ORDER_MARK):
        return value[len(BYTE_ORDER_MARK):], True
    return value, False


def _normalize_newlines(value: str) -> tuple[str, bool]:
    if "\r" not in value:
        return value, False
    return value.replace("\r\n", "\n").replace("\r", "\n"), True


def normalize_text(value: str | None) -> NormalizationResult:
    """Normalize raw document text so line-oriented scanning sees plain ``\\n`` lines.

    Normalization Order:
    1. Strip a leading byte-order mark
    2. Convert ``\\r\\n`` and lone ``\\r`` line endings to ``\\n``

    Args:
        value: Input text to normalize (None becomes empty string)

    Returns:
        NormalizationResult with normalized text and the steps taken
    """
    steps: list[str] = []

    if value is None:
        value = ""
    value, mutated = _strip_byte_order_mark(value)
    if mutated:
        steps.append("strip_bom")

    value, mutated = _normalize_newlines(value)
    if mutated:
        steps.append("normalize_newlines")

    LOGGER.debug("normalized text", extra={"steps": steps, "length": len(value)})

    return NormalizationResult(text=value, steps=steps)


def split_lines(value: str) -> list[str]:
    """Split on ``\\n`` only, keeping line endings.

    Unlike ``str.splitlines`` this leaves form feeds, ``\\u2028`` and the other
    Unicode line boundaries inside the line they appear in.
    """
    return [match.group(0) for match in _LINE_PATTERN.finditer(value)]
