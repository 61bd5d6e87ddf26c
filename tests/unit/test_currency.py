"""Tests for currency code validation."""

from __future__ import annotations

import pytest

from pricebook_converter.conversion.currency import validate_currency_code
from pricebook_converter.core.exceptions import ConfigError, InvalidCurrencyCodeError


class TestValidateCurrencyCode:
    def test_uppercases(self):
        assert validate_currency_code("usd") == "USD"

    def test_mixed_case(self):
        assert validate_currency_code("eUr") == "EUR"

    def test_already_uppercase(self):
        assert validate_currency_code("RON") == "RON"

    def test_unknown_code_still_passes(self):
        # Only the shape is checked, not the ISO 4217 registry
        assert validate_currency_code("abc") == "ABC"

    @pytest.mark.parametrize(
        "code",
        ["1bc", "EURO", "US", "", " USD", "USD\n", "US D", "ÄBC", "U$D"],
    )
    def test_rejects_malformed(self, code):
        with pytest.raises(InvalidCurrencyCodeError):
            validate_currency_code(code)

    def test_context_keeps_original_input(self):
        with pytest.raises(InvalidCurrencyCodeError) as exc_info:
            validate_currency_code("eu1")
        assert exc_info.value.context["value"] == "eu1"
        assert exc_info.value.context["field"] == "currency"

    def test_non_string_rejected(self):
        with pytest.raises(InvalidCurrencyCodeError):
            validate_currency_code(123)  # type: ignore[arg-type]

    def test_is_a_config_error(self):
        with pytest.raises(ConfigError):
            validate_currency_code("12")
