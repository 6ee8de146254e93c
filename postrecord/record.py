"""Content record model: metadata plus an ordered, closed set of block kinds."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import asdict, dataclass, field
from types import MappingProxyType
from typing import Any, ClassVar

from postrecord.diagnostics import MissingRequiredMetadataKey


@dataclass(frozen=True, slots=True)
class Heading:
    kind: ClassVar[str] = "heading"

    level: int
    text: str
    start: int = field(default=0, compare=False)
    end: int = field(default=0, compare=False)


@dataclass(frozen=True, slots=True)
class Paragraph:
    kind: ClassVar[str] = "paragraph"

    text: str
    start: int = field(default=0, compare=False)
    end: int = field(default=0, compare=False)


@dataclass(frozen=True, slots=True)
class CodeListing:
    kind: ClassVar[str] = "code"

    language_tag: str | None
    text: str
    terminated: bool = True
    start: int = field(default=0, compare=False)
    end: int = field(default=0, compare=False)


@dataclass(frozen=True, slots=True)
class ReferenceItem:
    kind: ClassVar[str] = "reference"

    index: str
    text: str
    start: int = field(default=0, compare=False)
    end: int = field(default=0, compare=False)


Block = Heading | Paragraph | CodeListing | ReferenceItem


def block_to_dict(block: Block) -> dict[str, Any]:
    return {"kind": block.kind, **asdict(block)}


@dataclass(frozen=True, slots=True)
class ContentRecord:
    """The parsed form of one document, handed to a renderer.

    ``metadata`` is exposed as a read-only mapping and ``blocks`` as a tuple,
    so a record cannot change after construction.
    """

    metadata: Mapping[str, str] = field(default_factory=dict)
    blocks: tuple[Block, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))
        object.__setattr__(self, "blocks", tuple(self.blocks))

    @property
    def title(self) -> str | None:
        return self.metadata.get("title")

    @property
    def layout(self) -> str | None:
        return self.metadata.get("layout")

    def headings(self) -> list[Heading]:
        return [block for block in self.blocks if isinstance(block, Heading)]

    def paragraphs(self) -> list[Paragraph]:
        return [block for block in self.blocks if isinstance(block, Paragraph)]

    def code_listings(self) -> list[CodeListing]:
        return [block for block in self.blocks if isinstance(block, CodeListing)]

    def references(self) -> list[ReferenceItem]:
        return [block for block in self.blocks if isinstance(block, ReferenceItem)]

    def missing_keys(self, required: Iterable[str]) -> list[str]:
        return [key for key in required if key not in self.metadata]

    def to_dict(self) -> dict[str, Any]:
        return {
            "metadata": dict(self.metadata),
            "blocks": [block_to_dict(block) for block in self.blocks],
        }


def build_record(metadata: Mapping[str, str], blocks: Iterable[Block]) -> ContentRecord:
    return ContentRecord(metadata=metadata, blocks=tuple(blocks))


def validate_record(record: ContentRecord, required_keys: Iterable[str]) -> ContentRecord:
    """Raise MissingRequiredMetadataKey unless every required key is present."""

    missing = record.missing_keys(required_keys)
    if missing:
        raise MissingRequiredMetadataKey(missing)
    return record
