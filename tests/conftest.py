"""
Pytest Configuration and Shared Fixtures

Fixtures:
    - make_quote: factory building QuoteRecord instances with defaults
    - savannah_query: Savannah -> Chicago drayage query quote
    - savannah_pool: near-identical priced quote + unrelated ocean quote
    - engine: QuoteMatchingEngine with the default configuration

Usage:
    def test_something(make_quote, engine):
        matches = engine.find_matches(make_quote(quote_id=1), [make_quote(quote_id=2)])
"""

import logging
from typing import Any, Callable

import pytest

from src.domain.quoting.entities.quote_record import QuoteRecord
from src.domain.quoting.services.quote_matching_engine import QuoteMatchingEngine

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# ============================================================================
# QUOTE FIXTURES
# ============================================================================


@pytest.fixture
def make_quote() -> Callable[..., QuoteRecord]:
    """
    Factory for QuoteRecord with only the fields a test cares about.

    Examples:
        >>> quote = make_quote(quote_id=5, service_type="Ocean")
    """

    def _make(quote_id: int = 1, **fields: Any) -> QuoteRecord:
        return QuoteRecord(quote_id=quote_id, **fields)

    return _make


@pytest.fixture
def savannah_query() -> QuoteRecord:
    """Newly parsed drayage quote, Savannah GA -> Chicago IL, 65,000 lbs."""
    return QuoteRecord(
        quote_id=1,
        origin_city="Savannah",
        origin_state_province="GA",
        origin_country="USA",
        destination_city="Chicago",
        destination_state_province="IL",
        destination_country="USA",
        service_type="Drayage",
        cargo_weight=65000,
        weight_unit="lbs",
    )


@pytest.fixture
def savannah_pool() -> list[QuoteRecord]:
    """Historical pool: one near-identical priced quote, one unrelated quote."""
    return [
        QuoteRecord(
            quote_id=2,
            origin_city="Savannah",
            origin_state_province="GA",
            origin_country="USA",
            destination_city="Chicago",
            destination_state_province="IL",
            destination_country="USA",
            service_type="Drayage",
            cargo_weight=64000,
            weight_unit="lbs",
            final_agreed_price=2200,
        ),
        QuoteRecord(
            quote_id=3,
            origin_city="Seattle",
            origin_state_province="WA",
            origin_country="USA",
            destination_city="Miami",
            destination_state_province="FL",
            destination_country="USA",
            service_type="Ocean",
            cargo_weight=5000,
            weight_unit="kg",
            final_agreed_price=4100,
        ),
    ]


@pytest.fixture
def engine() -> QuoteMatchingEngine:
    return QuoteMatchingEngine()
