"""Pydantic data models: the system's type contracts."""

from __future__ import annotations

import math
from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# --- Type Aliases ---

CurrencyCode = str
PricebookId = str

# --- Enumerations ---


class TransformState(StrEnum):
    """Lifecycle of a single streaming transform run."""

    IDLE = "idle"
    STREAMING_HEADER = "streaming_header"
    STREAMING_PRICE_TABLE = "streaming_price_table"
    FINALIZING = "finalizing"
    DONE = "done"
    ERROR = "error"


# --- Run Context ---


class ExchangeContext(BaseModel):
    """Immutable parameters shared by every handler of one run."""

    model_config = ConfigDict(frozen=True)

    currency: CurrencyCode
    exchange_rate: float
    output_path: Path

    @field_validator("currency")
    @classmethod
    def currency_shape(cls, v: str) -> str:
        from pricebook_converter.conversion.currency import validate_currency_code

        return validate_currency_code(v)

    @field_validator("exchange_rate")
    @classmethod
    def rate_positive(cls, v: float) -> float:
        if not math.isfinite(v) or v <= 0:
            raise ValueError(f"exchange_rate must be a positive number, got {v!r}")
        return v

    @property
    def pricebook_id(self) -> PricebookId:
        """Output file name without directories and without its last extension."""
        return self.output_path.stem


# --- Transform Results ---


class TransformStats(BaseModel):
    """Counters collected while streaming a pricebook."""

    headers: int = 0
    price_tables: int = 0
    amounts: int = 0
    price_infos: int = 0
    chunks: int = 0


class SchemaViolation(BaseModel):
    """A single diagnostic reported by XSD validation."""

    model_config = ConfigDict(frozen=True)

    line: int = 0
    column: int = 0
    message: str

    def __str__(self) -> str:
        return f"{self.line}:{self.column} {self.message}"


class ValidationReport(BaseModel):
    """Outcome of validating a finished document against a schema."""

    model_config = ConfigDict(frozen=True)

    valid: bool
    errors: list[SchemaViolation] = Field(default_factory=list)

    @model_validator(mode="after")
    def errors_match_validity(self) -> ValidationReport:
        if self.valid and self.errors:
            raise ValueError("a valid report cannot carry errors")
        if not self.valid and not self.errors:
            raise ValueError("an invalid report must carry at least one error")
        return self


class ConversionOutcome(BaseModel):
    """Everything a caller needs to report after a completed run."""

    model_config = ConfigDict(frozen=True)

    output_path: Path
    stats: TransformStats
    report: ValidationReport | None = None

    @property
    def is_valid(self) -> bool | None:
        """None when validation was skipped."""
        return None if self.report is None else self.report.valid
