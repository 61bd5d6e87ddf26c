"""Configuration loading, validation, and access."""

from __future__ import annotations

import math
import os
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from pricebook_converter.core.exceptions import ConfigError, PricebookError

DEFAULT_CURRENCY = "RON"
DEFAULT_EXCHANGE_RATE = 5.03
DEFAULT_XSD_PATH = "pricebook.xsd"


class ConverterConfig(BaseModel):
    """Root configuration for a pricebook conversion run."""

    model_config = ConfigDict(frozen=True, extra="forbid", coerce_numbers_to_str=True)

    currency: str = DEFAULT_CURRENCY
    exchange_rate: float = DEFAULT_EXCHANGE_RATE
    xsd_path: str = DEFAULT_XSD_PATH
    validate_output: bool = True

    @field_validator("currency", mode="before")
    @classmethod
    def currency_is_iso_shaped(cls, v: object) -> str:
        from pricebook_converter.conversion.currency import validate_currency_code

        return validate_currency_code(str(v))

    @field_validator("exchange_rate")
    @classmethod
    def exchange_rate_positive(cls, v: float) -> float:
        if not math.isfinite(v) or v <= 0:
            raise ValueError("exchange_rate must be a positive number")
        return v

    def with_overrides(self, **overrides: object) -> ConverterConfig:
        """Return a copy with every non-None override applied and re-validated."""
        data = self.model_dump()
        data.update({k: v for k, v in overrides.items() if v is not None})
        try:
            return ConverterConfig.model_validate(data)
        except ValidationError as e:
            raise ConfigError(str(e), context={"source": "overrides"}) from e


def load_config(
    config_path: str | None = None,
    env_prefix: str = "PRICEBOOK_CONVERTER_",
) -> ConverterConfig:
    """Load configuration from environment + YAML file + defaults.

    Resolution order (highest priority first):
    1. Environment variables (PRICEBOOK_CONVERTER_EXCHANGE_RATE, etc.)
    2. YAML file at config_path
    3. Built-in defaults

    Command-line flags are applied on top by the CLI via with_overrides().
    """
    try:
        yaml_path = _resolve_config_path(config_path, env_prefix)
        base: dict = {}
        if yaml_path is not None:
            base = _load_yaml(yaml_path)

        merged = _merge_env_vars(base, env_prefix)
        return ConverterConfig.model_validate(merged)
    except Exception as e:
        if isinstance(e, PricebookError):
            raise
        raise ConfigError(str(e), context={"source": "load_config"}) from e


def _resolve_config_path(explicit: str | None, env_prefix: str) -> Path | None:
    """Determine config file path."""
    if explicit is not None:
        p = Path(explicit)
        if not p.exists():
            raise ConfigError(
                f"Config file not found: {explicit}",
                context={"field": "config_path", "value": explicit},
            )
        return p

    env_var = f"{env_prefix}CONFIG"
    env_path = os.environ.get(env_var)
    if env_path:
        p = Path(env_path)
        if not p.exists():
            raise ConfigError(
                f"Config file from {env_var} not found: {env_path}",
                context={"field": env_var, "value": env_path},
            )
        return p

    default = Path("pricebook-converter.yml")
    if default.exists():
        return default

    return None


def _load_yaml(path: Path) -> dict:
    """Load and parse YAML file."""
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(
                f"YAML config must be a mapping, got {type(data).__name__}",
                context={"field": "config_file", "value": str(path)},
            )
        return data
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Failed to parse YAML config: {e}",
            context={"field": "config_file", "value": str(path)},
        ) from e


def _merge_env_vars(base: dict, prefix: str) -> dict:
    """Overlay environment variables onto base config dict.

    The config is flat: the remainder after the prefix, lowercased, is the
    field name. Unknown names are rejected when the model is validated.
    Values are auto-cast: "true"/"false" -> bool, numeric strings -> int/float.
    """
    result = dict(base)

    for key, value in os.environ.items():
        if not key.startswith(prefix):
            continue

        field = key[len(prefix) :].lower()

        # Skip the CONFIG env var itself
        if field == "config":
            continue

        result[field] = _auto_cast(value)

    return result


def _auto_cast(value: str) -> str | int | float | bool:
    """Auto-cast string values from environment variables."""
    if value.lower() == "true":
        return True
    if value.lower() == "false":
        return False
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        pass
    return value
