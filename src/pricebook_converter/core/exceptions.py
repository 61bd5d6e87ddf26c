"""Custom exception hierarchy for pricebook-converter."""

from typing import Any


class PricebookError(Exception):
    """Base exception for all pricebook-converter errors.

    All exceptions carry an optional `context` dict for structured error
    metadata that can be logged or serialized without parsing the message.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.context = context or {}


class ConfigError(PricebookError):
    """Invalid or missing configuration.

    Raised by load_config() during startup. Should be treated as fatal.

    Context keys:
        field: str - the config field that failed validation
        value: Any - the invalid value
    """


class InvalidCurrencyCodeError(ConfigError):
    """Currency code is not three Latin letters.

    Policy: fatal before any input is read.

    Context keys:
        value: str - the code exactly as supplied (not uppercased)
    """


class InvalidInputError(PricebookError):
    """A price or exchange rate is non-numeric, non-finite or not positive.

    Policy: abort the run. A half-converted pricebook is never written.

    Context keys:
        value: Any - the offending value
        element: str | None - the element it came from ("amount", "price-info")
    """


class ParsingError(PricebookError):
    """Input document is not well-formed XML.

    Policy: abort the stream. No output is finalized.

    Context keys:
        line: int | None - line reported by the parser
        column: int | None - column reported by the parser
    """


class FileAccessError(PricebookError):
    """Input, schema or output file could not be read or written.

    Policy: raise immediately.

    Context keys:
        path: str - the file involved
        operation: str - "read", "write", "stream" or "replace"
    """


class SchemaError(PricebookError):
    """Schema or finished document could not be parsed for validation.

    Distinct from an invalid document: a document that parses but violates
    the schema yields a ValidationReport, not this exception.

    Context keys:
        source: str - "schema" or "document"
    """
