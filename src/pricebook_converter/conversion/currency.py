"""ISO-4217-shaped currency code validation."""

from __future__ import annotations

import re

from pricebook_converter.core.exceptions import InvalidCurrencyCodeError

_CURRENCY_CODE = re.compile(r"[A-Z]{3}")


def validate_currency_code(code: str) -> str:
    """Uppercase and validate a three-letter currency code.

    Any three Latin letters pass; the code is not looked up in the
    ISO 4217 registry.

    Raises:
        InvalidCurrencyCodeError: if the uppercased code is not exactly three
            letters A-Z. The original input is kept in ``context["value"]``.
    """
    if not isinstance(code, str):
        raise InvalidCurrencyCodeError(
            f"Invalid currency code: {code!r}",
            context={"field": "currency", "value": code},
        )
    normalized = code.upper()
    if not _CURRENCY_CODE.fullmatch(normalized):
        raise InvalidCurrencyCodeError(
            f"Invalid currency code: {code!r}",
            context={"field": "currency", "value": code},
        )
    return normalized
