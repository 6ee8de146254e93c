"""End-to-end parse of the bundled article."""

from __future__ import annotations

from pathlib import Path

import pytest
from postrecord.pipeline import parse_file
from postrecord.record import CodeListing, Heading, ReferenceItem
from postrecord.settings import Settings

REPO_ROOT = Path(__file__).resolve().parents[2]
ARTICLE = REPO_ROOT / "content" / "2014-03-02-lambdas-and-effectively-final.md"


@pytest.fixture(scope="module")
def result():
    return parse_file(ARTICLE, settings=Settings())


def test_metadata(result) -> None:
    assert dict(result.record.metadata) == {
        "layout": "post",
        "title": "Java 8 lambdas: what can they capture?",
    }
    assert result.valid is True
    assert result.diagnostics == []


def test_block_sequence(result) -> None:
    kinds = [block.kind for block in result.record.blocks]
    assert kinds == [
        "heading",
        "paragraph",
        "heading",
        "paragraph",
        "code",
        "heading",
        "paragraph",
        "code",
        "paragraph",
        "code",
        "heading",
        "paragraph",
        "code",
        "heading",
        "paragraph",
        "reference",
        "reference",
    ]


def test_headings(result) -> None:
    assert result.record.headings() == [
        Heading(1, "Java 8 lambdas: what can they capture?"),
        Heading(2, "Anonymous classes before Java 8"),
        Heading(2, "Effectively final"),
        Heading(2, "Fields are different"),
        Heading(2, "Working around the restriction"),
    ]


def test_code_listings_are_java(result) -> None:
    listings = result.record.code_listings()
    assert {listing.language_tag for listing in listings} == {"java"}
    assert all(listing.terminated for listing in listings)
    assert listings[1] == CodeListing(
        "java",
        'String greeting = "Hello";\nRunnable r = () -> System.out.println(greeting);',
    )


def test_references(result) -> None:
    assert [ref.index for ref in result.record.references()] == ["1", "2"]
    assert isinstance(result.record.blocks[-1], ReferenceItem)


def test_spans_point_into_body(result) -> None:
    text = ARTICLE.read_text(encoding="utf-8")
    body = text.split("---\n", 2)[2]
    for block in result.record.blocks:
        assert block.text.split("\n")[0].strip() in body[block.start:block.end]


def test_reparse_is_equal(result) -> None:
    assert parse_file(ARTICLE, settings=Settings()).record == result.record
