"""Pipeline orchestration: raw text in, ContentRecord plus diagnostics out."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from time import perf_counter
from typing import Any

import structlog

from postrecord import formats, metrics, normalize
from postrecord.diagnostics import Diagnostic, DiagnosticCode
from postrecord.header import HeaderParser
from postrecord.record import ContentRecord, build_record
from postrecord.segmenter import ContentSegmenter
from postrecord.settings import Settings, get_settings

LOGGER = structlog.get_logger(__name__)


@dataclass(slots=True)
class ParseResult:
    record: ContentRecord
    diagnostics: list[Diagnostic] = field(default_factory=list)
    missing_keys: list[str] = field(default_factory=list)
    steps: list[str] = field(default_factory=list)
    header_format: str | None = None
    latency_ms: float = 0.0
    version: str = ""

    @property
    def valid(self) -> bool:
        return not self.missing_keys

    def asdict(self) -> dict[str, Any]:
        return {
            **self.record.to_dict(),
            "diagnostics": [diagnostic.asdict() for diagnostic in self.diagnostics],
            "missing_keys": list(self.missing_keys),
            "steps": list(self.steps),
            "header_format": self.header_format,
            "latency_ms": self.latency_ms,
            "version": self.version,
        }


def parse_document(text: str, *, settings: Settings | None = None) -> ParseResult:
    """Parse one document; recoverable problems are reported, never raised."""

    settings = settings or get_settings()
    start = perf_counter()
    LOGGER.info("pipeline.start", length=len(text))

    normalized = normalize.normalize_text(text)
    header = HeaderParser(formats.resolve_formats(settings.header_formats_file)).parse(
        normalized.text
    )
    segmenter = ContentSegmenter(header.body, liquid_highlight=settings.liquid_highlight)
    record = build_record(header.metadata, segmenter)

    diagnostics = [*header.diagnostics, *segmenter.diagnostics]
    missing = record.missing_keys(settings.required_metadata_keys)
    if missing:
        LOGGER.warning("pipeline.missing_required_keys", missing=missing)
        diagnostics.extend(
            Diagnostic(
                code=DiagnosticCode.MISSING_REQUIRED_METADATA_KEY,
                message=f"metadata key '{key}' is required by the renderer",
                severity="error",
            )
            for key in missing
        )

    latency_ms = (perf_counter() - start) * 1000
    metrics.observe_parse(
        latency_ms=latency_ms,
        header_format=header.header_format,
        blocks=record.blocks,
        diagnostics=diagnostics,
    )

    LOGGER.info(
        "pipeline.end",
        header_format=header.header_format,
        blocks=len(record.blocks),
        diagnostics=len(diagnostics),
        latency_ms=latency_ms,
    )

    return ParseResult(
        record=record,
        diagnostics=diagnostics,
        missing_keys=missing,
        steps=normalized.steps,
        header_format=header.header_format,
        latency_ms=latency_ms,
        version=settings.service_version,
    )


def parse_file(path: Path, *, settings: Settings | None = None) -> ParseResult:
    return parse_document(path.read_text(encoding="utf-8"), settings=settings)
