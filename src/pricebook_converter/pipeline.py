"""End-to-end conversion: stream the pricebook, then validate it once."""

from __future__ import annotations

import logging
from pathlib import Path

from pricebook_converter.core.config import ConverterConfig
from pricebook_converter.core.models import ConversionOutcome, ExchangeContext
from pricebook_converter.streaming.transformer import StreamingTransformer
from pricebook_converter.validation.xsd import DocumentValidator, read_bytes

logger = logging.getLogger(__name__)


def convert_pricebook(
    input_path: str | Path,
    output_path: str | Path,
    config: ConverterConfig,
    validator: DocumentValidator | None = None,
) -> ConversionOutcome:
    """Convert ``input_path`` into ``output_path`` and validate the result.

    The schema is read and compiled before any output is produced, so a
    missing or broken schema fails the run without touching the output path.
    The document is checked only after it has been fully written and moved
    into place. An invalid result is reported in the outcome, not raised.

    Raises:
        InvalidCurrencyCodeError, InvalidInputError, ParsingError,
        FileAccessError, SchemaError: all fatal.
    """
    context = ExchangeContext(
        currency=config.currency,
        exchange_rate=config.exchange_rate,
        output_path=Path(output_path),
    )

    schema = None
    if config.validate_output:
        validator = validator or DocumentValidator()
        schema = validator.compile_schema(
            read_bytes(config.xsd_path, "schema file"),
            schema_url=str(Path(config.xsd_path).resolve()),
        )

    transformer = StreamingTransformer(context)
    stats = transformer.run(input_path)

    report = None
    if schema is not None:
        report = validator.check(read_bytes(output_path, "document"), schema)
        if not report.valid:
            logger.info(
                "%s does not conform to %s (%d violations)",
                output_path,
                config.xsd_path,
                len(report.errors),
            )

    return ConversionOutcome(output_path=Path(output_path), stats=stats, report=report)
