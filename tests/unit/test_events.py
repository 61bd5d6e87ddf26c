"""Tests for the ordered XML event stream."""

from __future__ import annotations

import io

import pytest

from pricebook_converter.core.exceptions import ParsingError
from pricebook_converter.streaming.events import (
    ElementComplete,
    RawChunk,
    escape,
    iter_events,
    serialize,
)


def _source(xml: str) -> io.BytesIO:
    return io.BytesIO(xml.encode("utf-8"))


def _chunks(xml: str, capture=()) -> list[str]:
    return [
        e.text for e in iter_events(_source(xml), capture=capture) if isinstance(e, RawChunk)
    ]


class TestChunking:
    def test_start_tag_split_into_fragments(self):
        chunks = _chunks('<root><item id="1" kind="a">x</item></root>')
        assert chunks == [
            "<root",
            ">",
            "<item",
            ' id="1"',
            ' kind="a"',
            ">",
            "x",
            "</item>",
            "</root>",
        ]

    def test_outer_layout_passed_through(self):
        xml = "<root>\n    <a>1</a>\n    <b>2</b>\n</root>"
        assert "".join(_chunks(xml)) == xml

    def test_layout_dropped_only_inside_captured_elements(self):
        xml = (
            "<root>\n"
            "    <head>\n        <c>USD</c>\n        <d>x</d>\n    </head>\n\n"
            "    <body>\n        <e>1</e>\n    </body>\n"
            "</root>"
        )
        chunks = _chunks(xml, capture={"head"})
        assert "".join(chunks) == (
            "<root>\n"
            "    <head><c>USD</c><d>x</d></head>\n\n"
            "    <body>\n        <e>1</e>\n    </body>\n"
            "</root>"
        )

    def test_whitespace_chunk_kept_whole(self):
        chunks = _chunks("<root>\n\n  <a>1</a></root>")
        assert chunks[2] == "\n\n  "

    def test_mixed_content_text_kept(self):
        chunks = _chunks("<root>before<a>1</a>after</root>")
        assert "".join(chunks) == "<root>before<a>1</a>after</root>"

    def test_empty_element_written_as_pair(self):
        assert "".join(_chunks("<root><a/></root>")) == "<root><a></a></root>"

    def test_quotes_over_escaped(self):
        chunks = _chunks('<root>{"a":1}</root>')
        assert '{&quot;a&quot;:1}' in chunks

    def test_ampersand_and_brackets_escaped(self):
        assert "".join(_chunks("<root>a &amp; b &lt; c</root>")) == "<root>a &amp; b &lt; c</root>"

    def test_default_namespace_declared_once(self):
        xml = '<root xmlns="urn:x"><child>1</child></root>'
        assert "".join(_chunks(xml)) == '<root xmlns="urn:x"><child>1</child></root>'

    def test_prefixed_namespace_kept(self):
        xml = '<p:root xmlns:p="urn:p"><p:child p:attr="v">1</p:child></p:root>'
        assert "".join(_chunks(xml)) == xml

    def test_xml_lang_attribute_prefix(self):
        xml = '<root><name xml:lang="x-default">List</name></root>'
        assert ' xml:lang="x-default"' in _chunks(xml)

    def test_comments_and_pis_dropped(self):
        xml = "<root><!-- note --><?pi data?><a>1</a></root>"
        assert "".join(_chunks(xml)) == "<root><a>1</a></root>"

    def test_escape_helper(self):
        assert escape('a<b>&"c"') == "a&lt;b&gt;&amp;&quot;c&quot;"


class TestCapture:
    XML = (
        "<root>\n"
        "  <head><c>USD</c></head>\n"
        "  <body><t id=\"1\"><v>1</v></t><t id=\"2\"><v>2</v></t></body>\n"
        "</root>"
    )

    def test_complete_event_precedes_its_chunks(self):
        events = list(iter_events(_source(self.XML), capture={"head"}))
        index = next(i for i, e in enumerate(events) if isinstance(e, ElementComplete))
        assert events[index].name == "head"
        assert events[index + 1] == RawChunk("<head")

    def test_one_event_per_captured_element(self):
        events = list(iter_events(_source(self.XML), capture={"t"}))
        completes = [e for e in events if isinstance(e, ElementComplete)]
        assert [e.element.get("id") for e in completes] == ["1", "2"]

    def test_mutation_before_resume_is_serialized(self):
        output = []
        for event in iter_events(_source(self.XML), capture={"head", "t"}):
            if isinstance(event, ElementComplete):
                if event.name == "head":
                    event.element[0].text = "RON"
                else:
                    event.element[0].text = "9"
                continue
            output.append(event.text)
        assert "".join(output) == (
            "<root>\n  <head><c>RON</c></head>\n  "
            '<body><t id="1"><v>9</v></t><t id="2"><v>9</v></t></body>\n</root>'
        )

    def test_uncaptured_document_unchanged_by_capture(self):
        plain = "".join(_chunks(self.XML))
        captured = "".join(_chunks(self.XML, capture={"head", "t"}))
        assert plain == captured

    def test_capture_not_nested(self):
        xml = "<root><t><t>inner</t></t></root>"
        events = list(iter_events(_source(xml), capture={"t"}))
        assert sum(isinstance(e, ElementComplete) for e in events) == 1

    def test_written_siblings_released(self):
        xml = "<root>" + "".join(f"<t>{i}</t>" for i in range(5)) + "</root>"
        events = iter_events(_source(xml), capture={"t"})
        completes = []
        for event in events:
            if isinstance(event, ElementComplete):
                completes.append(event.element)
                if len(completes) == 4:
                    # siblings already written have been dropped from the tree
                    assert len(event.element.getparent()) <= 3
        assert len(completes) == 5


class TestSerialize:
    def test_subtree(self):
        from lxml import etree

        element = etree.fromstring('<a x="1"><b>t</b> tail <c/></a>')
        assert "".join(serialize(element)) == '<a x="1"><b>t</b> tail <c></c></a>'


class TestErrors:
    def test_malformed_document_raises_parsing_error(self):
        with pytest.raises(ParsingError) as exc_info:
            list(iter_events(_source("<root><a></root>")))
        assert exc_info.value.context["line"] == 1

    def test_empty_document(self):
        with pytest.raises(ParsingError):
            list(iter_events(_source("")))

