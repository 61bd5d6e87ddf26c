"""Restores the pricebook's conventional indentation on streamed chunks.

The streaming writer drops the whitespace-only text inside the header and the
price tables it rewrites, so their children would otherwise run together on
one line. Layout elsewhere in the document is passed through unchanged.
Rather than tracking nesting depth, the fixer keys on the literal tag
fragments the writer emits and inserts the indentation the pricebook layout
uses for them.
"""

from __future__ import annotations

INDENT = "    "

# Tag-open fragments are matched exactly: the writer emits "<name" on its own,
# with attributes as separate chunks, so "<parent" never matches "<parent-id".
_INDENT_LEVELS: dict[str, int] = {
    "</header>": 2,
    "<currency": 3,
    "<display-name": 3,
    "<online-flag": 3,
    "<parent": 3,
    "</price-table>": 3,
    "<amount": 4,
    "<price-info": 4,
}

_OVER_ESCAPED_QUOTE = "&quot;"


def indent_by(levels: int) -> str:
    """Newline followed by ``levels`` indentation steps."""
    return "\n" + INDENT * levels


def indentation_for(chunk: str) -> str | None:
    """Prefix to write before ``chunk``, or None when it needs none."""
    levels = _INDENT_LEVELS.get(chunk)
    if levels is None:
        return None
    return indent_by(levels)


def unescape_quotes(chunk: str) -> str:
    """Turn over-escaped ``&quot;`` back into a literal double quote."""
    return chunk.replace(_OVER_ESCAPED_QUOTE, '"')


def fix_chunk(chunk: str) -> str:
    """Apply the indentation prefix and the quoting fix to one raw chunk.

    The result is returned as a single string, so feeding it back through
    fix_chunk leaves it unchanged.
    """
    prefix = indentation_for(chunk) or ""
    return prefix + unescape_quotes(chunk)
