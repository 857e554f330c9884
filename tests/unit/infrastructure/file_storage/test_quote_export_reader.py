"""
Tests for QuoteExportReader.

Covers CSV and Excel exports, header normalization, invalid rows and
unsupported formats.
"""

import pytest
from openpyxl import Workbook

from src.domain.shared.exceptions import UnsupportedExportFormatError
from src.infrastructure.file_storage.quote_export_reader import QuoteExportReader


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture
def reader():
    return QuoteExportReader()


@pytest.fixture
def csv_export(tmp_path):
    """
    CSV export with display-style headers.

    Rows:
    - 10726: fully priced drayage quote
    - 10727: no prices, hazmat flag as text
    - abc: invalid quote id (skipped)
    """
    file_path = tmp_path / "shipping_quotes.csv"
    file_path.write_text(
        "Quote ID,Origin City,Origin Country,Destination City,Service Type,"
        "Cargo Weight,Weight Unit,Hazardous Material,Final Agreed Price,Email ID\n"
        '10726,Savannah,USA,Chicago,Drayage,"65,000",lbs,no,"$2,200.00",501\n'
        "10727,Seattle,USA,Miami,Ocean,5000,kg,yes,,502\n"
        "abc,Nowhere,USA,Nowhere,Ground,1,kg,,,503\n",
        encoding="utf-8",
    )
    return file_path


@pytest.fixture
def xlsx_export(tmp_path):
    file_path = tmp_path / "shipping_quotes.xlsx"
    workbook = Workbook()
    sheet = workbook.active
    sheet.append(["quote_id", "origin_city", "service_type", "initial_quote_amount"])
    sheet.append([1, "Savannah", "Drayage", 1800])
    sheet.append([2, "Houston", "Ground", 950.5])
    workbook.save(file_path)
    return file_path


# ============================================================================
# TESTS
# ============================================================================


def test_read_csv_export(reader, csv_export):
    """Test reading a CSV export with display-style headers."""
    quotes = reader.read(csv_export)

    assert [quote.quote_id for quote in quotes] == [10726, 10727]
    first, second = quotes
    assert first.origin_city == "Savannah"
    assert first.cargo_weight == 65000.0
    assert first.hazardous_material is False
    assert float(first.final_agreed_price) == 2200.0
    assert second.hazardous_material is True
    assert second.final_agreed_price is None
    assert not second.has_pricing


def test_read_xlsx_export(reader, xlsx_export):
    """Test reading the first sheet of an xlsx export."""
    quotes = reader.read(str(xlsx_export))

    assert [quote.quote_id for quote in quotes] == [1, 2]
    assert quotes[1].service_type == "Ground"
    assert float(quotes[1].initial_quote_amount) == 950.5


def test_unsupported_extension(reader, tmp_path):
    """Test that unknown extensions are rejected."""
    export = tmp_path / "quotes.json"
    export.write_text("[]")

    with pytest.raises(UnsupportedExportFormatError) as exc_info:
        reader.read(export)

    assert ".csv" in exc_info.value.supported


def test_legacy_xls_workbook_is_unsupported(reader, tmp_path):
    """Test that legacy .xls workbooks are rejected before any read."""
    export = tmp_path / "shipping_quotes.xls"
    export.write_bytes(b"\xd0\xcf\x11\xe0")

    with pytest.raises(UnsupportedExportFormatError) as exc_info:
        reader.read(export)

    assert ".xls" not in exc_info.value.supported
    assert ".xlsx" in exc_info.value.supported


def test_missing_file(reader, tmp_path):
    """Test FileNotFoundError for a missing export."""
    with pytest.raises(FileNotFoundError):
        reader.read(tmp_path / "missing.csv")


@pytest.mark.parametrize(
    "header,expected",
    [(" Origin City ", "origin_city"), ("QUOTE_ID", "quote_id"), ("final agreed price", "final_agreed_price")],
)
def test_normalize_column(header, expected):
    """Test header normalization to snake_case."""
    assert QuoteExportReader._normalize_column(header) == expected
