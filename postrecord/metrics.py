"""Prometheus metrics helpers."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

REGISTRY = CollectorRegistry()

PARSE_LATENCY = Histogram(
    "post_record_parse_latency_seconds",
    "Latency of document parse runs",
    buckets=(0.0005, 0.001, 0.002, 0.005, 0.01, 0.02, 0.05, 0.1, 0.25),
    registry=REGISTRY,
)

DOCUMENTS_TOTAL = Counter(
    "post_record_documents_total",
    "Number of documents parsed",
    labelnames=("header",),
    registry=REGISTRY,
)

BLOCKS_TOTAL = Counter(
    "post_record_blocks_total",
    "Number of blocks produced, grouped by kind",
    labelnames=("kind",),
    registry=REGISTRY,
)

DIAGNOSTICS_TOTAL = Counter(
    "post_record_diagnostics_total",
    "Number of parse diagnostics, grouped by code",
    labelnames=("code",),
    registry=REGISTRY,
)


def observe_parse(
    *,
    latency_ms: float,
    header_format: str | None,
    blocks: Sequence[Any],
    diagnostics: Sequence[Any],
) -> None:
    PARSE_LATENCY.observe(latency_ms / 1000.0)
    DOCUMENTS_TOTAL.labels(header=header_format or "none").inc()
    for block in blocks:
        BLOCKS_TOTAL.labels(kind=getattr(block, "kind", "unknown")).inc()
    for diagnostic in diagnostics:
        code = getattr(diagnostic, "code", None)
        DIAGNOSTICS_TOTAL.labels(code=getattr(code, "value", str(code))).inc()


def render_metrics() -> tuple[bytes, str]:
    payload = generate_latest(REGISTRY)
    return payload, CONTENT_TYPE_LATEST
