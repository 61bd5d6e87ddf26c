"""XSD validation of finished pricebook documents."""

from __future__ import annotations

import logging
from pathlib import Path

from lxml import etree

from pricebook_converter.core.exceptions import FileAccessError, SchemaError
from pricebook_converter.core.models import SchemaViolation, ValidationReport

logger = logging.getLogger(__name__)


def read_bytes(path: str | Path, what: str = "file") -> bytes:
    """Read a whole file, mapping OS errors to FileAccessError."""
    try:
        return Path(path).read_bytes()
    except OSError as e:
        raise FileAccessError(
            f"Cannot read {what}: {path}",
            context={"path": str(path), "operation": "read"},
        ) from e


class DocumentValidator:
    """Validates XML documents against an XSD schema with lxml.

    A document that parses but breaks the schema is reported, never raised:
    the result is a ValidationReport with valid=False and the schema
    violations in the order lxml reports them. Only text that cannot be
    parsed at all (schema or document) raises SchemaError.
    """

    def __init__(self) -> None:
        self._parser = etree.XMLParser(
            huge_tree=True,
            no_network=True,
            resolve_entities=False,
        )

    def validate(
        self,
        document_text: str | bytes,
        schema_text: str | bytes,
        schema_url: str | None = None,
    ) -> ValidationReport:
        """Validate document text against schema text.

        Args:
            document_text: The finished document.
            schema_text: The XSD.
            schema_url: Location of the schema, used to resolve relative
                xs:include / xs:import references.
        """
        schema = self.compile_schema(schema_text, schema_url)
        return self.check(document_text, schema)

    def check(
        self,
        document_text: str | bytes,
        schema: etree.XMLSchema,
    ) -> ValidationReport:
        """Validate document text against an already compiled schema."""
        document = self._parse(document_text, source="document")

        if schema.validate(document):
            return ValidationReport(valid=True)

        errors = [
            SchemaViolation(line=entry.line, column=entry.column, message=entry.message)
            for entry in schema.error_log
        ]
        if not errors:
            errors = [SchemaViolation(message="Document does not conform to the schema")]
        logger.debug("Validation found %d schema violations", len(errors))
        return ValidationReport(valid=False, errors=errors)

    def validate_files(
        self,
        document_path: str | Path,
        schema_path: str | Path,
    ) -> ValidationReport:
        """Read both files and validate; relative schema references resolve
        against the schema's own location."""
        schema_text = read_bytes(schema_path, "schema file")
        document_text = read_bytes(document_path, "document")
        return self.validate(
            document_text,
            schema_text,
            schema_url=str(Path(schema_path).resolve()),
        )

    def compile_schema(
        self,
        schema_text: str | bytes,
        schema_url: str | None = None,
    ) -> etree.XMLSchema:
        """Parse and compile an XSD.

        Raises:
            SchemaError: if the schema cannot be parsed or compiled.
        """
        root = self._parse(schema_text, source="schema", base_url=schema_url)
        try:
            return etree.XMLSchema(root)
        except etree.XMLSchemaParseError as e:
            raise SchemaError(
                f"Invalid XSD schema: {e}",
                context={"source": "schema"},
            ) from e

    # --- Internals ---

    def _parse(
        self,
        text: str | bytes,
        source: str,
        base_url: str | None = None,
    ) -> etree._Element:
        # lxml refuses str input that carries an encoding declaration
        data = text.encode("utf-8") if isinstance(text, str) else text
        try:
            return etree.fromstring(data, self._parser, base_url=base_url)
        except etree.XMLSyntaxError as e:
            raise SchemaError(
                f"Cannot parse {source}: {e.msg}",
                context={"source": source, "line": e.lineno},
            ) from e

