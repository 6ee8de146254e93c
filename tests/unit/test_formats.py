"""Tests for header format configuration."""

from __future__ import annotations

from pathlib import Path

import pytest
from postrecord import formats

REPO_ROOT = Path(__file__).resolve().parents[2]


@pytest.fixture(autouse=True)
def _clear_cache():
    formats.invalidate_format_cache()
    yield
    formats.invalidate_format_cache()


def write(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "formats.yaml"
    path.write_text(content, encoding="utf-8")
    return path


def test_defaults_when_no_file() -> None:
    assert formats.resolve_formats(None) == formats.DEFAULT_FORMATS
    assert [fmt.name for fmt in formats.DEFAULT_FORMATS] == ["yaml", "toml"]


def test_bundled_config_matches_defaults() -> None:
    store = formats.load_formats(REPO_ROOT / "config" / "header_formats.yaml")
    assert tuple(store.formats) == formats.DEFAULT_FORMATS


def test_load_formats_fills_defaults(tmp_path: Path) -> None:
    path = write(tmp_path, "header_formats:\n  - open: ';;;'\n")
    (fmt,) = formats.load_formats(path).formats

    assert fmt == formats.HeaderFormat(
        name="format-1", open=";;;", close=";;;", separator=":", comment="#"
    )


def test_bare_list_is_accepted(tmp_path: Path) -> None:
    path = write(tmp_path, "- name: wiki\n  open: '%%%'\n  close: '%%%'\n  comment: null\n")
    store = formats.load_formats(path)
    (fmt,) = store.formats
    assert fmt.name == "wiki"
    assert fmt.comment is None


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        formats.load_formats(tmp_path / "absent.yaml")


@pytest.mark.parametrize(
    "content",
    [
        "",
        "header_formats: []\n",
        "header_formats:\n  - close: '---'\n",
        "header_formats:\n  - open: '---'\n    separator: ''\n",
        "header_formats:\n  - just-a-string\n",
    ],
)
def test_invalid_files_raise(tmp_path: Path, content: str) -> None:
    with pytest.raises(ValueError):
        formats.load_formats(write(tmp_path, content))


def test_cache_returns_same_store_until_invalidated(tmp_path: Path) -> None:
    path = write(tmp_path, "header_formats:\n  - open: '---'\n")
    first = formats.load_formats(path)
    assert formats.load_formats(path) is first

    formats.invalidate_format_cache(path)
    assert formats.load_formats(path) is not first


def test_uncached_load(tmp_path: Path) -> None:
    path = write(tmp_path, "header_formats:\n  - open: '---'\n")
    assert formats.load_formats(path, use_cache=False) is not formats.load_formats(
        path, use_cache=False
    )
