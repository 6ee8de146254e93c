"""Line-oriented block segmentation of a document body."""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass

import structlog

from postrecord.diagnostics import Diagnostic, DiagnosticCode
from postrecord.normalize import split_lines
from postrecord.record import Block, CodeListing, Heading, Paragraph, ReferenceItem

LOGGER = structlog.get_logger(__name__)

_HEADING_PATTERN = re.compile(r"^(#+)(.*)$")
_BACKTICK_OPEN_PATTERN = re.compile(r"^(`{3,})[ \t]*([^`\s]*)[^`]*$")
_BACKTICK_CLOSE_PATTERN = re.compile(r"^(`{3,})[ \t]*$")
_LIQUID_OPEN_PATTERN = re.compile(r"^\{%-?\s*highlight\s+(\S+)[^%]*-?%\}\s*$")
_LIQUID_CLOSE_PATTERN = re.compile(r"^\{%-?\s*endhighlight\s*-?%\}\s*$")
_REFERENCE_PATTERN = re.compile(r"^\[([^\]]+)\]:[ \t]*(.*)$")


@dataclass(slots=True)
class _OpenFence:
    style: str
    marker: str
    language_tag: str | None
    start: int
    line_no: int

    def closed_by(self, line: str) -> bool:
        if self.style == "liquid":
            return _LIQUID_CLOSE_PATTERN.match(line) is not None
        match = _BACKTICK_CLOSE_PATTERN.match(line)
        return match is not None and len(match.group(1)) >= len(self.marker)


def _open_fence(line: str, *, offset: int, line_no: int, liquid: bool) -> _OpenFence | None:
    match = _BACKTICK_OPEN_PATTERN.match(line)
    if match:
        return _OpenFence(
            style="backtick",
            marker=match.group(1),
            language_tag=match.group(2) or None,
            start=offset,
            line_no=line_no,
        )
    if liquid:
        match = _LIQUID_OPEN_PATTERN.match(line)
        if match:
            return _OpenFence(
                style="liquid",
                marker="{% highlight %}",
                language_tag=match.group(1),
                start=offset,
                line_no=line_no,
            )
    return None


class ContentSegmenter:
    """Iterable over the blocks of ``body``.

    Each call to ``iter()`` rescans the body from the start, so the sequence
    is lazy and can be consumed more than once. Diagnostics from the most
    recent full scan are available on ``diagnostics``.
    """

    def __init__(self, body: str, *, liquid_highlight: bool = True) -> None:
        self.body = body
        self.liquid_highlight = liquid_highlight
        self._diagnostics: list[Diagnostic] = []

    @property
    def diagnostics(self) -> tuple[Diagnostic, ...]:
        return tuple(self._diagnostics)

    def __iter__(self) -> Iterator[Block]:
        return self._scan()

    def _scan(self) -> Iterator[Block]:
        diagnostics: list[Diagnostic] = []
        self._diagnostics = diagnostics

        paragraph: list[str] = []
        paragraph_start = 0
        paragraph_end = 0
        fence: _OpenFence | None = None
        code_lines: list[str] = []
        offset = 0

        for line_no, raw in enumerate(split_lines(self.body), start=1):
            line = raw.rstrip("\n")
            line_start, offset = offset, offset + len(raw)

            if fence is not None:
                if fence.closed_by(line):
                    yield CodeListing(
                        language_tag=fence.language_tag,
                        text="\n".join(code_lines),
                        start=fence.start,
                        end=offset,
                    )
                    fence = None
                    code_lines = []
                else:
                    code_lines.append(line)
                continue

            opened = _open_fence(
                line, offset=line_start, line_no=line_no, liquid=self.liquid_highlight
            )
            heading = _HEADING_PATTERN.match(line) if opened is None else None
            reference = (
                _REFERENCE_PATTERN.match(line) if opened is None and heading is None else None
            )

            if opened is None and heading is None and reference is None and line.strip():
                if not paragraph:
                    paragraph_start = line_start
                paragraph.append(line)
                paragraph_end = offset
                continue

            if paragraph:
                yield Paragraph(text="\n".join(paragraph), start=paragraph_start, end=paragraph_end)
                paragraph = []

            if opened is not None:
                fence = opened
            elif heading is not None:
                yield Heading(
                    level=len(heading.group(1)),
                    text=heading.group(2).strip(),
                    start=line_start,
                    end=offset,
                )
            elif reference is not None:
                yield ReferenceItem(
                    index=reference.group(1),
                    text=reference.group(2).strip(),
                    start=line_start,
                    end=offset,
                )

        if paragraph:
            yield Paragraph(text="\n".join(paragraph), start=paragraph_start, end=paragraph_end)

        if fence is not None:
            LOGGER.warning(
                "segment.unterminated_code_listing",
                line=fence.line_no,
                language_tag=fence.language_tag,
            )
            diagnostics.append(
                Diagnostic(
                    code=DiagnosticCode.UNTERMINATED_CODE_LISTING,
                    message="code listing has no closing delimiter; extended to end of input",
                    line=fence.line_no,
                )
            )
            yield CodeListing(
                language_tag=fence.language_tag,
                text="\n".join(code_lines),
                terminated=False,
                start=fence.start,
                end=offset,
            )


def segment(body: str, *, liquid_highlight: bool = True) -> ContentSegmenter:
    return ContentSegmenter(body, liquid_highlight=liquid_highlight)
