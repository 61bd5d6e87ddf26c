"""Streaming pricebook transformer.

Drives one pass over the input, rewriting the header and converting every
price table as they complete, and writes the re-indented output through a
single sequential writer.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from pathlib import Path
from typing import IO

from lxml import etree

from pricebook_converter.conversion.pricing import (
    convert_price,
    convert_price_info,
    format_price,
)
from pricebook_converter.core.exceptions import FileAccessError, InvalidInputError
from pricebook_converter.core.models import ExchangeContext, TransformState, TransformStats
from pricebook_converter.streaming.events import ElementComplete, iter_events, local_name
from pricebook_converter.streaming.indentation import fix_chunk

logger = logging.getLogger(__name__)

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'


def _children(element: etree._Element, name: str) -> list[etree._Element]:
    return [
        child
        for child in element
        if isinstance(child.tag, str) and local_name(child) == name
    ]


class StreamingTransformer:
    """Rewrites a pricebook into another currency in a single streaming pass.

    States: idle -> streaming_header -> streaming_price_table -> finalizing
    -> done, with error reachable from any of them.

    Usage:
        transformer = StreamingTransformer(context)
        stats = transformer.run("input.xml")
    """

    def __init__(self, context: ExchangeContext) -> None:
        self.context = context
        self.state = TransformState.IDLE
        self.stats = TransformStats()
        self._handlers: dict[str, Callable[[etree._Element], None]] = {
            "header": self._rewrite_header,
            "price-table": self._convert_price_table,
        }

    # --- Public API ---

    def transform(self, source: str | IO[bytes], sink: IO[str]) -> TransformStats:
        """Stream ``source`` into ``sink``.

        Leaves the transformer in ``finalizing``: closing and publishing the
        sink is the caller's job (run() does it for files).

        Raises:
            ParsingError: input is not well-formed.
            InvalidInputError: a price could not be converted.
            FileAccessError: the sink could not be written.
        """
        self.stats = TransformStats()
        self.state = TransformState.STREAMING_HEADER
        try:
            sink.write(XML_DECLARATION)
            for event in iter_events(source, capture=self._handlers):
                if isinstance(event, ElementComplete):
                    self._handlers[event.name](event.element)
                    continue
                sink.write(fix_chunk(event.text))
                self.stats.chunks += 1
        except OSError as e:
            self.state = TransformState.ERROR
            raise FileAccessError(
                f"Failed while streaming pricebook: {e}",
                context={"path": str(self.context.output_path), "operation": "stream"},
            ) from e
        except Exception:
            self.state = TransformState.ERROR
            raise

        self.state = TransformState.FINALIZING
        return self.stats

    def run(self, input_path: str | Path) -> TransformStats:
        """Transform ``input_path`` into the context's output path.

        Output is written to a temporary sibling file and moved into place
        only after it has been fully written and synced. On failure the
        output path is left untouched.
        """
        output_path = Path(self.context.output_path)
        temp_path = output_path.with_name(f".{output_path.name}.part")
        logger.info(
            "Converting %s -> %s (currency=%s, rate=%s)",
            input_path,
            output_path,
            self.context.currency,
            self.context.exchange_rate,
        )

        try:
            source = open(input_path, "rb")
        except OSError as e:
            self.state = TransformState.ERROR
            raise FileAccessError(
                f"Cannot read input file: {input_path}",
                context={"path": str(input_path), "operation": "read"},
            ) from e

        with source:
            try:
                sink = open(temp_path, "w", encoding="utf-8", newline="")
            except OSError as e:
                self.state = TransformState.ERROR
                raise FileAccessError(
                    f"Cannot write output file: {output_path}",
                    context={"path": str(output_path), "operation": "write"},
                ) from e

            try:
                with sink:
                    self.transform(source, sink)
                    sink.flush()
                    os.fsync(sink.fileno())
                os.replace(temp_path, output_path)
            except OSError as e:
                self.state = TransformState.ERROR
                temp_path.unlink(missing_ok=True)
                raise FileAccessError(
                    f"Cannot publish output file: {output_path}",
                    context={"path": str(output_path), "operation": "replace"},
                ) from e
            except BaseException:
                self.state = TransformState.ERROR
                temp_path.unlink(missing_ok=True)
                raise

        self.state = TransformState.DONE
        logger.info(
            "Wrote %s: %d price tables, %d amounts, %d price-info maps",
            output_path,
            self.stats.price_tables,
            self.stats.amounts,
            self.stats.price_infos,
        )
        return self.stats

    # --- Element handlers ---

    def _rewrite_header(self, header: etree._Element) -> None:
        """Point the header at the target currency and the new pricebook id."""
        currencies = _children(header, "currency")
        if currencies:
            currency = currencies[0]
        else:
            namespace = etree.QName(header).namespace
            tag = f"{{{namespace}}}currency" if namespace else "currency"
            currency = etree.SubElement(header, tag)
            header.insert(0, currency)
        currency.text = self.context.currency
        header.set("pricebook-id", self.context.pricebook_id)

        self.stats.headers += 1
        self.state = TransformState.STREAMING_PRICE_TABLE
        logger.info(
            "Header rewritten: pricebook-id=%s currency=%s",
            self.context.pricebook_id,
            self.context.currency,
        )

    def _convert_price_table(self, table: etree._Element) -> None:
        """Convert every amount tier and the price-info map in place."""
        self.state = TransformState.STREAMING_PRICE_TABLE
        rate = self.context.exchange_rate
        try:
            amounts = _children(table, "amount")
            for amount in amounts:
                amount.text = format_price(
                    convert_price(amount.text or "", rate, element="amount")
                )

            infos = [
                info for info in _children(table, "price-info")
                if info.text and info.text.strip()
            ]
            for info in infos:
                info.text = convert_price_info(info.text, rate)
        except InvalidInputError as e:
            e.context.setdefault("product_id", table.get("product-id"))
            e.context.setdefault("line", table.sourceline)
            raise

        self.stats.price_tables += 1
        self.stats.amounts += len(amounts)
        self.stats.price_infos += len(infos)
        logger.debug(
            "Converted price-table %s: %d amounts, %d price-info",
            table.get("product-id"),
            len(amounts),
            len(infos),
        )
