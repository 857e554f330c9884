"""
Matching and Quote API Schemas

Request/response bodies of the /api/matching and /api/quotes routers.
Domain models (QuoteRecord, QuoteMatch) and application DTOs
(RunQuoteMatchingCommand, MatchingRunSummary) are used directly where they
already describe the HTTP payload.
"""

from typing import Dict, Optional

from pydantic import BaseModel, Field

from src.domain.quoting.entities.quote_record import QuoteRecord
from src.domain.quoting.value_objects.match_feedback import MatchFeedback
from src.domain.quoting.value_objects.quote_match import QuoteMatch


class FindMatchesRequest(BaseModel):
    """
    Stateless matching request: one query quote against a supplied pool.

    Attributes:
        query: Newly parsed quote
        candidates: Historical quotes to compare against
        min_score: Threshold override (0-1)
        max_matches: Result cap override
        weights: Attribute weight table override
    """

    query: QuoteRecord
    candidates: list[QuoteRecord] = Field(default_factory=list)
    min_score: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    max_matches: Optional[int] = Field(default=None, ge=0)
    weights: Optional[Dict[str, float]] = None

    model_config = {
        "json_schema_extra": {
            "example": {
                "query": {
                    "quote_id": 1,
                    "origin_city": "Savannah",
                    "origin_country": "USA",
                    "destination_city": "Chicago",
                    "destination_country": "USA",
                    "service_type": "Drayage",
                },
                "candidates": [
                    {
                        "quote_id": 2,
                        "origin_city": "Savannah",
                        "origin_country": "USA",
                        "destination_city": "Chicago",
                        "destination_country": "USA",
                        "service_type": "Drayage",
                        "final_agreed_price": 2200,
                    }
                ],
                "min_score": 0.5,
            }
        }
    }


class MatchListResponse(BaseModel):
    """Ranked matches and their count."""

    matches: list[QuoteMatch]
    count: int


class RematchRequest(BaseModel):
    """Optional overrides for POST /matching/quotes/{quote_id}/rematch."""

    min_score: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    max_matches: Optional[int] = Field(default=None, ge=1)


class SaveQuotesRequest(BaseModel):
    """Bulk upsert of historical quotes."""

    quotes: list[QuoteRecord] = Field(min_length=1)


class SaveQuotesResponse(BaseModel):
    saved: int


class FeedbackListResponse(BaseModel):
    """Feedback on one match, newest first."""

    feedback: list[MatchFeedback]
    count: int
