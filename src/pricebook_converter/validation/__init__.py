"""Post-hoc XSD validation of converted pricebooks."""

from pricebook_converter.validation.xsd import DocumentValidator, read_bytes

__all__ = [
    "DocumentValidator",
    "read_bytes",
]
