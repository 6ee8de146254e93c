"""Parse blog-post text into a metadata header and an ordered block sequence."""

from postrecord.diagnostics import Diagnostic, DiagnosticCode, MissingRequiredMetadataKey
from postrecord.header import HeaderParser, HeaderResult, parse_header
from postrecord.pipeline import ParseResult, parse_document, parse_file
from postrecord.record import (
    Block,
    CodeListing,
    ContentRecord,
    Heading,
    Paragraph,
    ReferenceItem,
    build_record,
    validate_record,
)
from postrecord.segmenter import ContentSegmenter, segment

__all__ = [
    "Block",
    "CodeListing",
    "ContentRecord",
    "ContentSegmenter",
    "Diagnostic",
    "DiagnosticCode",
    "HeaderParser",
    "HeaderResult",
    "Heading",
    "MissingRequiredMetadataKey",
    "Paragraph",
    "ParseResult",
    "ReferenceItem",
    "build_record",
    "parse_document",
    "parse_file",
    "parse_header",
    "segment",
    "validate_record",
]
