"""Metadata header extraction."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

import structlog

from postrecord.diagnostics import Diagnostic, DiagnosticCode
from postrecord.formats import DEFAULT_FORMATS, HeaderFormat
from postrecord.normalize import split_lines

LOGGER = structlog.get_logger(__name__)

_QUOTES = ('"', "'")


@dataclass(slots=True)
class HeaderResult:
    metadata: dict[str, str]
    body: str
    header_format: str | None = None
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.header_format is not None


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in _QUOTES:
        return value[1:-1]
    return value


def _split_pair(line: str, header_format: HeaderFormat) -> tuple[str, str] | None:
    key, sep, value = line.partition(header_format.separator)
    if not sep:
        return None
    key = key.strip()
    if not key or any(char.isspace() for char in key):
        return None
    return key, _unquote(value.strip())


class HeaderParser:
    """Splits a leading metadata header off a document.

    A header is recognized only when the first line is the opening delimiter of
    one of the configured formats and a matching closing delimiter follows.
    Anything else leaves the text untouched.
    """

    def __init__(self, formats: Sequence[HeaderFormat] = DEFAULT_FORMATS) -> None:
        self.formats = tuple(formats)

    def parse(self, text: str) -> HeaderResult:
        lines = split_lines(text)
        if not lines:
            return HeaderResult(metadata={}, body=text)

        header_format = next((fmt for fmt in self.formats if fmt.opens(lines[0])), None)
        if header_format is None:
            return HeaderResult(metadata={}, body=text)

        close_index = next(
            (index for index in range(1, len(lines)) if header_format.closes(lines[index])),
            None,
        )
        if close_index is None:
            LOGGER.warning("header.unterminated", header_format=header_format.name)
            return HeaderResult(
                metadata={},
                body=text,
                diagnostics=[
                    Diagnostic(
                        code=DiagnosticCode.UNTERMINATED_HEADER,
                        message=f"opening '{header_format.open}' has no closing "
                        f"'{header_format.close}'; treated as body text",
                        line=1,
                    )
                ],
            )

        metadata: dict[str, str] = {}
        diagnostics: list[Diagnostic] = []
        for line_no, raw in enumerate(lines[1:close_index], start=2):
            line = raw.strip()
            if not line:
                continue
            if header_format.comment and line.startswith(header_format.comment):
                continue

            pair = _split_pair(line, header_format)
            if pair is None:
                LOGGER.warning("header.malformed_line", line=line_no, content=line)
                diagnostics.append(
                    Diagnostic(
                        code=DiagnosticCode.MALFORMED_HEADER_LINE,
                        message=f"skipped header line without a valid "
                        f"'key{header_format.separator} value' pair",
                        line=line_no,
                    )
                )
                continue

            key, value = pair
            if key in metadata:
                LOGGER.warning("header.duplicate_key", line=line_no, key=key)
                diagnostics.append(
                    Diagnostic(
                        code=DiagnosticCode.DUPLICATE_HEADER_KEY,
                        message=f"key '{key}' repeated; last value wins",
                        line=line_no,
                    )
                )
            metadata[key] = value

        return HeaderResult(
            metadata=metadata,
            body="".join(lines[close_index + 1:]),
            header_format=header_format.name,
            diagnostics=diagnostics,
        )


def parse_header(
    text: str, *, formats: Sequence[HeaderFormat] = DEFAULT_FORMATS
) -> HeaderResult:
    return HeaderParser(formats).parse(text)
