"""Integration test fixtures: real files on disk, no mocks."""

from __future__ import annotations

import shutil
from pathlib import Path

import pytest


@pytest.fixture
def workspace(tmp_path: Path, fixtures_dir: Path, monkeypatch) -> Path:
    """A working directory holding the sample pricebook and the default-named schema."""
    shutil.copy(fixtures_dir / "usd-list-prices.xml", tmp_path / "usd-list-prices.xml")
    shutil.copy(fixtures_dir / "pricebook.xsd", tmp_path / "pricebook.xsd")
    monkeypatch.chdir(tmp_path)
    for key in (
        "PRICEBOOK_CONVERTER_CONFIG",
        "PRICEBOOK_CONVERTER_CURRENCY",
        "PRICEBOOK_CONVERTER_EXCHANGE_RATE",
        "PRICEBOOK_CONVERTER_XSD_PATH",
        "PRICEBOOK_CONVERTER_VALIDATE_OUTPUT",
    ):
        monkeypatch.delenv(key, raising=False)
    return tmp_path


@pytest.fixture
def orphan_table_pricebook(workspace: Path, pricebook_xml) -> Path:
    """A well-formed pricebook whose price-table lacks the required product-id."""
    path = workspace / "orphan.xml"
    path.write_text(
        pricebook_xml('<price-table><amount quantity="1">10.00</amount></price-table>'),
        encoding="utf-8",
    )
    return path
