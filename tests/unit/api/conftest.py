"""
Common fixtures for API unit tests.

Provides shared test utilities:
- FastAPI TestClient
- Mock use case and repository injected through dependency_overrides
- Request payloads
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from src.api.main import app
from src.api.routers.matching import get_match_feedback_use_case, get_quote_matching_use_case
from src.api.routers.quotes import get_quote_repository
from src.application.models import MatchingRunSummary
from src.domain.quoting.value_objects import FeedbackStatistics


@pytest.fixture
def mock_quote_matching_use_case():
    """Mock for QuoteMatchingUseCase."""
    mock = MagicMock()
    mock.process_new_quotes = AsyncMock(
        return_value=MatchingRunSummary(processed=1, matches_created=1, results={1: 0.6923})
    )
    mock.rematch_quote = AsyncMock(return_value=MatchingRunSummary(processed=1))
    mock.get_matches = AsyncMock(return_value=[])
    return mock


@pytest.fixture
def mock_match_feedback_use_case():
    """Mock for MatchFeedbackUseCase."""
    mock = MagicMock()
    mock.submit_feedback = AsyncMock()
    mock.get_feedback = AsyncMock(return_value=[])
    mock.get_statistics = AsyncMock(return_value=FeedbackStatistics())
    return mock


@pytest.fixture
def mock_quote_repository():
    """Mock for RedisQuoteRepository."""
    mock = MagicMock()
    mock.save_many = AsyncMock(side_effect=lambda quotes: len(quotes))
    mock.get_quote_for_matching = AsyncMock(return_value=None)
    return mock


@pytest.fixture
def client(mock_quote_matching_use_case, mock_match_feedback_use_case, mock_quote_repository):
    """
    FastAPI TestClient with Redis-backed dependencies replaced by mocks.

    Server exceptions are returned as responses so the 500 handler can be
    asserted.
    """
    app.dependency_overrides[get_quote_matching_use_case] = lambda: mock_quote_matching_use_case
    app.dependency_overrides[get_match_feedback_use_case] = lambda: mock_match_feedback_use_case
    app.dependency_overrides[get_quote_repository] = lambda: mock_quote_repository
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


@pytest.fixture
def query_payload():
    return {
        "quote_id": 1,
        "origin_city": "Savannah",
        "origin_state_province": "GA",
        "origin_country": "USA",
        "destination_city": "Chicago",
        "destination_state_province": "IL",
        "destination_country": "USA",
        "service_type": "Drayage",
        "cargo_weight": 65000,
        "weight_unit": "lbs",
    }


@pytest.fixture
def candidates_payload(query_payload):
    return [
        {**query_payload, "quote_id": 2, "cargo_weight": 64000, "final_agreed_price": 2200},
        {
            "quote_id": 3,
            "origin_city": "Seattle",
            "origin_country": "USA",
            "destination_city": "Miami",
            "destination_country": "USA",
            "service_type": "Ocean",
            "cargo_weight": 5000,
            "weight_unit": "kg",
            "final_agreed_price": 4100,
        },
    ]
