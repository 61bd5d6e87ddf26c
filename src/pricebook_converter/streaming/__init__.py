"""Streaming XML transform: event stream, indentation fixer, transformer."""

from pricebook_converter.streaming.events import (
    ElementComplete,
    RawChunk,
    StreamEvent,
    iter_events,
    serialize,
)
from pricebook_converter.streaming.indentation import fix_chunk, indentation_for
from pricebook_converter.streaming.transformer import (
    XML_DECLARATION,
    StreamingTransformer,
)

__all__ = [
    "ElementComplete",
    "RawChunk",
    "StreamEvent",
    "StreamingTransformer",
    "XML_DECLARATION",
    "fix_chunk",
    "indentation_for",
    "iter_events",
    "serialize",
]
