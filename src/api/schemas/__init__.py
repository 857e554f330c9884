"""
API Schemas Package

Contains shared Pydantic models for API Layer.
"""

from src.api.schemas.common import ErrorResponse
from src.api.schemas.matching import (
    FeedbackListResponse,
    FindMatchesRequest,
    MatchListResponse,
    RematchRequest,
    SaveQuotesRequest,
    SaveQuotesResponse,
)

__all__ = [
    "ErrorResponse",
    "FeedbackListResponse",
    "FindMatchesRequest",
    "MatchListResponse",
    "RematchRequest",
    "SaveQuotesRequest",
    "SaveQuotesResponse",
]
