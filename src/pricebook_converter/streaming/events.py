"""Single ordered event stream over an XML document.

The stream interleaves two kinds of events:

- ``ElementComplete``: a captured element (and its whole subtree) has been
  parsed. Handlers may mutate it in place.
- ``RawChunk``: one serialized fragment of output text, in document order.

Chunks for a captured element are generated lazily, after its
``ElementComplete`` has been handed to the consumer, so any mutation made by
the consumer is what gets serialized, without the layout whitespace inside
it. Everything outside captured elements, layout included, is written
verbatim as it is scanned and released from memory.
"""

from __future__ import annotations

from collections.abc import Collection, Iterator
from dataclasses import dataclass
from typing import IO
from xml.sax.saxutils import escape as _sax_escape

from lxml import etree

from pricebook_converter.core.exceptions import ParsingError

XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"

# Double quotes are escaped everywhere, including text. The chunk fixer
# downstream restores them.
_ENTITIES = {'"': "&quot;"}


@dataclass(frozen=True)
class RawChunk:
    """A fragment of serialized output."""

    text: str


@dataclass(frozen=True)
class ElementComplete:
    """A captured element has been fully parsed and is not yet serialized."""

    name: str
    element: etree._Element


StreamEvent = RawChunk | ElementComplete


def local_name(element: etree._Element) -> str:
    return etree.QName(element).localname


def escape(value: str) -> str:
    return _sax_escape(value, _ENTITIES)


def qualified_tag(element: etree._Element) -> str:
    name = local_name(element)
    return f"{element.prefix}:{name}" if element.prefix else name


def qualified_attribute(key: str, nsmap: dict[str | None, str]) -> str:
    """Map an lxml ``{uri}local`` attribute key back to ``prefix:local``."""
    if not key.startswith("{"):
        return key
    uri, name = key[1:].split("}", 1)
    if uri == XML_NAMESPACE:
        return f"xml:{name}"
    for prefix, namespace in nsmap.items():
        if prefix and namespace == uri:
            return f"{prefix}:{name}"
    return name


def start_tag_chunks(element: etree._Element) -> Iterator[str]:
    """``<name``, one chunk per namespace declaration and attribute, then ``>``."""
    yield f"<{qualified_tag(element)}"

    parent = element.getparent()
    inherited = parent.nsmap if parent is not None else {}
    for prefix, uri in element.nsmap.items():
        if inherited.get(prefix) != uri:
            declaration = "xmlns" if prefix is None else f"xmlns:{prefix}"
            yield f' {declaration}="{escape(uri)}"'

    for key, value in element.attrib.items():
        yield f' {qualified_attribute(key, element.nsmap)}="{escape(value)}"'

    yield ">"


def end_tag_chunk(element: etree._Element) -> str:
    return f"</{qualified_tag(element)}>"


def text_chunks(value: str | None, keep_layout: bool = False) -> Iterator[str]:
    """Escaped text.

    Whitespace-only text is dropped unless ``keep_layout`` is set.
    """
    if not value:
        return
    if keep_layout or value.strip():
        yield escape(value)


def serialize(element: etree._Element) -> Iterator[str]:
    """Serialize a complete subtree into chunks.

    The subtree's own layout whitespace is dropped; the element's tail
    lies outside it and is not written.
    """
    yield from start_tag_chunks(element)
    yield from text_chunks(element.text)
    for child in element:
        if isinstance(child.tag, str):
            yield from serialize(child)
        yield from text_chunks(child.tail)
    yield end_tag_chunk(element)


def _release(element: etree._Element) -> None:
    """Drop a fully written element and its already written siblings."""
    element.clear(keep_tail=False)
    parent = element.getparent()
    if parent is None:
        return
    while element.getprevious() is not None:
        del parent[0]


def iter_events(
    source: str | IO[bytes],
    capture: Collection[str] = (),
) -> Iterator[StreamEvent]:
    """Scan ``source`` once and yield events in document order.

    Args:
        source: File path or binary file object.
        capture: Local names of elements to hand over complete before they
            are serialized. Captured elements are not nested: inside one,
            further matches are part of its subtree.

    Raises:
        ParsingError: if the document is not well-formed.
    """
    context = etree.iterparse(
        source,
        events=("start", "end"),
        remove_comments=True,
        remove_pis=True,
        huge_tree=True,
    )
    captured: etree._Element | None = None
    # Text becomes known only at the parser's next event: an element's text
    # once its first child starts or it ends, a tail once the next sibling
    # starts or the parent ends.
    pending: tuple[etree._Element, str] | None = None

    try:
        for event, element in context:
            if captured is not None:
                if event == "end" and element is captured:
                    captured = None
                    yield ElementComplete(local_name(element), element)
                    for chunk in serialize(element):
                        yield RawChunk(chunk)
                    pending = (element, "tail")
                continue

            if pending is not None:
                yield from _flush(pending)
                pending = None

            if event == "start":
                if local_name(element) in capture:
                    captured = element
                    continue
                for chunk in start_tag_chunks(element):
                    yield RawChunk(chunk)
                pending = (element, "text")
            else:
                yield RawChunk(end_tag_chunk(element))
                pending = (element, "tail")

        if pending is not None:
            yield from _flush(pending)
    except etree.XMLSyntaxError as e:
        raise ParsingError(
            f"Malformed XML: {e.msg}",
            context={"line": e.lineno, "column": e.offset},
        ) from e


def _flush(pending: tuple[etree._Element, str]) -> Iterator[RawChunk]:
    element, which = pending
    if which == "text":
        for chunk in text_chunks(element.text, keep_layout=True):
            yield RawChunk(chunk)
        return
    for chunk in text_chunks(element.tail, keep_layout=True):
        yield RawChunk(chunk)
    _release(element)
