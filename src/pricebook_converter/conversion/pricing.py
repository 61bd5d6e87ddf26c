"""Price conversion with the "ends in 4 or 9" rounding rule."""

from __future__ import annotations

import json
import logging
from decimal import ROUND_CEILING, Decimal, InvalidOperation

from pricebook_converter.core.exceptions import InvalidInputError

logger = logging.getLogger(__name__)

Number = Decimal | float | int | str

_ROUNDING_STEP = Decimal(5)


def _to_decimal(value: Number, what: str, element: str | None = None) -> Decimal:
    """Coerce a parsed number into a finite, positive Decimal."""
    if isinstance(value, bool):
        raise InvalidInputError(
            f"{what} must be numeric, got {value!r}",
            context={"value": value, "element": element},
        )
    try:
        # str() keeps floats at their shortest repr (5.03, not 5.0299999...)
        result = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as e:
        raise InvalidInputError(
            f"{what} is not a number: {value!r}",
            context={"value": value, "element": element},
        ) from e
    if not result.is_finite() or result <= 0:
        raise InvalidInputError(
            f"{what} must be a positive number, got {value!r}",
            context={"value": value, "element": element},
        )
    return result


def convert_price(price: Number, exchange_rate: Number, element: str | None = None) -> int:
    """Convert a price and round it up so it ends in 4 or 9.

    The product is rounded up (never to nearest) to the next multiple of 5,
    then 1 is subtracted. A product already on a multiple of 5 stays there,
    so 500 becomes 499.

    Args:
        price: Price in the source currency.
        exchange_rate: Multiplier into the target currency.
        element: Name of the element the price came from, for diagnostics.

    Returns:
        The converted whole-unit price.

    Raises:
        InvalidInputError: if either value is non-numeric, non-finite or <= 0.

    Example:
        >>> convert_price(200.75, 4.98)
        999
        >>> convert_price(100.50, 5.03)
        509
    """
    amount = _to_decimal(price, "price", element)
    rate = _to_decimal(exchange_rate, "exchange rate", element)
    steps = (amount * rate / _ROUNDING_STEP).to_integral_value(rounding=ROUND_CEILING)
    return int(steps * _ROUNDING_STEP) - 1


def format_price(value: int | Decimal) -> str:
    """Plain decimal string: no symbol, no thousands separator."""
    if isinstance(value, Decimal):
        return format(value, "f")
    return str(value)


def convert_price_info(text: str, exchange_rate: Number) -> str:
    """Convert every price in a JSON ``{date: price}`` payload.

    Keys keep their original order. Output is compact JSON, matching the
    layout the payload is stored in.
    """
    try:
        prices = json.loads(text, parse_float=Decimal, parse_int=Decimal)
    except json.JSONDecodeError as e:
        raise InvalidInputError(
            f"price-info is not valid JSON: {e.msg}",
            context={"value": text, "element": "price-info"},
        ) from e

    if not isinstance(prices, dict):
        raise InvalidInputError(
            f"price-info must be a JSON object, got {type(prices).__name__}",
            context={"value": text, "element": "price-info"},
        )

    converted = {
        date: convert_price(price, exchange_rate, element="price-info")
        for date, price in prices.items()
    }
    logger.debug("Converted %d price-info entries", len(converted))
    return json.dumps(converted, separators=(",", ":"), ensure_ascii=False)
