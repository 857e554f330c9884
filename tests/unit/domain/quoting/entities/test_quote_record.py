"""
Tests for QuoteRecord entity.
Covers: lenient parsing, price preference, immutability, row conversion.
"""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from src.domain.quoting.entities.quote_record import QuoteRecord


def test_numeric_strings_are_parsed():
    """Test that formatted numeric strings are parsed."""
    record = QuoteRecord(
        quote_id=10726,
        cargo_weight="65,000",
        cargo_length="40",
        number_of_pieces="2",
        final_agreed_price="$2,200.00",
    )

    assert record.cargo_weight == 65000.0
    assert record.cargo_length == 40.0
    assert record.number_of_pieces == 2
    assert record.final_agreed_price == Decimal("2200.00")


def test_oversized_integer_weight_becomes_missing():
    """Test that integers beyond float range are stored as missing."""
    record = QuoteRecord(quote_id=1, cargo_weight=10**400, final_agreed_price=10**400)

    assert record.cargo_weight is None
    assert record.final_agreed_price is None
    assert not record.has_pricing


def test_unparseable_values_become_missing():
    """Test that unreadable values become None instead of failing."""
    record = QuoteRecord(
        quote_id=1,
        cargo_weight="approx. heavy",
        number_of_pieces="several",
        initial_quote_amount="TBD",
        hazardous_material="maybe",
    )

    assert record.cargo_weight is None
    assert record.number_of_pieces is None
    assert record.initial_quote_amount is None
    assert record.hazardous_material is None


def test_blank_text_becomes_missing():
    """Test blank text normalization."""
    record = QuoteRecord(quote_id=1, origin_city="  ", service_type=" Drayage ")

    assert record.origin_city is None
    assert record.service_type == "Drayage"


def test_explicit_false_hazmat_is_kept():
    """Test that an explicit "no" hazmat answer stays False."""
    assert QuoteRecord(quote_id=1, hazardous_material="no").hazardous_material is False


def test_preferred_price_uses_final_agreed_price_first():
    """Test final agreed price preference."""
    record = QuoteRecord(quote_id=7, final_agreed_price=900, initial_quote_amount=1200)

    assert record.preferred_price == Decimal("900")
    assert record.has_pricing


def test_preferred_price_falls_back_to_initial_quote():
    """Test fallback to the initial quote amount."""
    record = QuoteRecord(quote_id=7, initial_quote_amount=1200)

    assert record.preferred_price == Decimal("1200")


def test_zero_final_price_is_still_a_price():
    """Test that a zero final price is not treated as missing."""
    record = QuoteRecord(quote_id=7, final_agreed_price=0, initial_quote_amount=1200)

    assert record.preferred_price == Decimal("0")


def test_record_without_price():
    """Test a record with no pricing at all."""
    record = QuoteRecord(quote_id=7)

    assert record.preferred_price is None
    assert not record.has_pricing


def test_record_is_frozen():
    """Test that QuoteRecord is immutable."""
    record = QuoteRecord(quote_id=1)

    with pytest.raises(ValidationError):
        record.origin_city = "Chicago"


def test_quote_id_is_required():
    """Test that quote_id is mandatory."""
    with pytest.raises(ValidationError):
        QuoteRecord(origin_city="Savannah")


def test_from_row_ignores_unknown_columns():
    """Test that from_row() drops columns it does not know."""
    record = QuoteRecord.from_row(
        {
            "quote_id": 5,
            "origin_city": "Savannah",
            "email_id": 991,
            "created_at": "2024-01-01",
        }
    )

    assert record.quote_id == 5
    assert record.origin_city == "Savannah"


def test_dimensions_tuple():
    """Test the (length, width, height) tuple."""
    record = QuoteRecord(quote_id=1, cargo_length=2, cargo_height=3)

    assert record.dimensions == (2.0, None, 3.0)


def test_to_dict_round_trips_through_json():
    """Test JSON serialization of a record."""
    record = QuoteRecord(quote_id=3, final_agreed_price="2200.50", hazardous_material=True)

    restored = QuoteRecord.model_validate_json(record.model_dump_json())

    assert restored == record
    assert record.to_dict()["final_agreed_price"] == "2200.50"


def test_str_shows_route():
    """Test string representation."""
    record = QuoteRecord(
        quote_id=2, origin_city="Savannah", destination_city="Chicago", service_type="Drayage"
    )

    assert str(record) == "Quote 2: Savannah -> Chicago (Drayage)"
