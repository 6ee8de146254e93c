"""Header format loading: which delimiter conventions count as a metadata header."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from threading import RLock
from typing import Any

import yaml

_FORMAT_CACHE: dict[Path, tuple[float, FormatStore]] = {}
_FORMAT_LOCK = RLock()


@dataclass(frozen=True, slots=True)
class HeaderFormat:
    """One recognized header convention."""

    name: str
    open: str
    close: str
    separator: str = ":"
    comment: str | None = "#"

    def opens(self, line: str) -> bool:
        return line.rstrip() == self.open

    def closes(self, line: str) -> bool:
        return line.rstrip() == self.close


DEFAULT_FORMATS: tuple[HeaderFormat, ...] = (
    HeaderFormat(name="yaml", open="---", close="---", separator=":"),
    HeaderFormat(name="toml", open="+++", close="+++", separator="="),
)


@dataclass(slots=True)
class FormatStore:
    formats: list[HeaderFormat] = field(default_factory=list)


def _parse_format(raw: Any, *, position: int) -> HeaderFormat:
    if not isinstance(raw, dict):
        raise ValueError(f"Header format #{position} must be a mapping, got {type(raw)!r}")

    opening = raw.get("open")
    if not isinstance(opening, str) or not opening.strip():
        raise ValueError(f"Header format #{position} must define a non-empty 'open' delimiter")
    closing = raw.get("close", opening)
    if not isinstance(closing, str) or not closing.strip():
        raise ValueError(f"Header format #{position} has an empty 'close' delimiter")

    separator = raw.get("separator", ":")
    if not isinstance(separator, str) or not separator:
        raise ValueError(f"Header format #{position} has an empty 'separator'")

    comment = raw.get("comment", "#")
    return HeaderFormat(
        name=str(raw.get("name") or f"format-{position}"),
        open=opening.strip(),
        close=closing.strip(),
        separator=separator,
        comment=str(comment) if comment else None,
    )


def load_formats(path: Path, *, use_cache: bool = True) -> FormatStore:
    resolved = path.resolve()
    try:
        mtime = resolved.stat().st_mtime
    except FileNotFoundError as exc:
        raise FileNotFoundError(f"Header formats file {resolved} not found") from exc

    if use_cache:
        with _FORMAT_LOCK:
            cached = _FORMAT_CACHE.get(resolved)
            if cached and cached[0] == mtime:
                return cached[1]

    data = yaml.safe_load(resolved.read_text(encoding="utf-8"))
    if data is None:
        raise ValueError(f"Header formats file {resolved} is empty")

    entries = data.get("header_formats") if isinstance(data, dict) else data
    if not isinstance(entries, list) or not entries:
        raise ValueError(f"Header formats file {resolved} must list at least one format")

    store = FormatStore(
        formats=[_parse_format(raw, position=index) for index, raw in enumerate(entries, 1)]
    )

    if use_cache:
        with _FORMAT_LOCK:
            _FORMAT_CACHE[resolved] = (mtime, store)

    return store


def resolve_formats(path: Path | None) -> tuple[HeaderFormat, ...]:
    """Return the configured formats, or the built-in ones when no file is set."""

    if path is None:
        return DEFAULT_FORMATS
    return tuple(load_formats(path).formats)


def invalidate_format_cache(path: Path | None = None) -> None:
    """Clear cached format entries (all or a specific file)."""

    with _FORMAT_LOCK:
        if path is None:
            _FORMAT_CACHE.clear()
        else:
            _FORMAT_CACHE.pop(path.resolve(), None)
