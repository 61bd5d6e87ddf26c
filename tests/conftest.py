"""Shared pytest fixtures for pricebook-converter."""

from pathlib import Path

import pytest

from pricebook_converter.core.models import ExchangeContext

FIXTURES_DIR = Path(__file__).parent / "fixtures"

PRICEBOOK_NS = "http://www.demandware.com/xml/impex/pricebook/2006-10-31"


def make_pricebook(price_tables: str, header: str | None = None) -> str:
    """Build a small pricebook document around the given price-table XML."""
    if header is None:
        header = (
            '<header pricebook-id="old">\n'
            "            <currency>USD</currency>\n"
            "        </header>"
        )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<pricebooks xmlns="{PRICEBOOK_NS}">\n'
        "    <pricebook>\n"
        f"        {header}\n"
        "        <price-tables>\n"
        f"            {price_tables}\n"
        "        </price-tables>\n"
        "    </pricebook>\n"
        "</pricebooks>\n"
    )


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def sample_pricebook_path() -> Path:
    return FIXTURES_DIR / "usd-list-prices.xml"


@pytest.fixture
def schema_path() -> Path:
    return FIXTURES_DIR / "pricebook.xsd"


@pytest.fixture
def expected_output() -> str:
    return (FIXTURES_DIR / "newbook.expected.xml").read_text(encoding="utf-8")


@pytest.fixture
def pricebook_xml():
    """Factory for small pricebook documents, see make_pricebook()."""
    return make_pricebook


@pytest.fixture
def exchange_context(tmp_path: Path) -> ExchangeContext:
    return ExchangeContext(
        currency="RON",
        exchange_rate=5.03,
        output_path=tmp_path / "newbook.xml",
    )
