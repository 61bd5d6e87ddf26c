"""Pure conversion helpers: price rounding and currency code validation."""

from pricebook_converter.conversion.currency import validate_currency_code
from pricebook_converter.conversion.pricing import (
    convert_price,
    convert_price_info,
    format_price,
)

__all__ = [
    "convert_price",
    "convert_price_info",
    "format_price",
    "validate_currency_code",
]
