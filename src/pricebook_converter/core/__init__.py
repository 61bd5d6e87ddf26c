"""pricebook_converter.core: Foundation types, config, and exceptions."""

from pricebook_converter.core.config import (
    DEFAULT_CURRENCY,
    DEFAULT_EXCHANGE_RATE,
    DEFAULT_XSD_PATH,
    ConverterConfig,
    load_config,
)
from pricebook_converter.core.exceptions import (
    ConfigError,
    FileAccessError,
    InvalidCurrencyCodeError,
    InvalidInputError,
    ParsingError,
    PricebookError,
    SchemaError,
)
from pricebook_converter.core.models import (
    ConversionOutcome,
    CurrencyCode,
    ExchangeContext,
    PricebookId,
    SchemaViolation,
    TransformState,
    TransformStats,
    ValidationReport,
)

__all__ = [
    # Type aliases
    "CurrencyCode",
    "PricebookId",
    # Enums
    "TransformState",
    # Models
    "ExchangeContext",
    "TransformStats",
    "SchemaViolation",
    "ValidationReport",
    "ConversionOutcome",
    # Config
    "ConverterConfig",
    "DEFAULT_CURRENCY",
    "DEFAULT_EXCHANGE_RATE",
    "DEFAULT_XSD_PATH",
    "load_config",
    # Exceptions
    "PricebookError",
    "ConfigError",
    "InvalidCurrencyCodeError",
    "InvalidInputError",
    "ParsingError",
    "FileAccessError",
    "SchemaError",
]
