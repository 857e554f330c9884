"""
API Router for Quote Matching

Responsibility:
    HTTP interface for finding similar historical quotes and managing stored
    matches. Thin layer that delegates to the Domain engine and the
    Application Layer use case via dependency injection.

Contains:
    - POST /matching/find - Stateless match of one quote against a given pool
    - POST /matching/run - Batch matching of stored quotes
    - POST /matching/quotes/{quote_id}/rematch - Recompute matches of one quote
    - GET  /matching/quotes/{quote_id} - Stored matches of one quote
    - POST /matching/quotes/{quote_id}/matches/{matched_id}/feedback - Rate a match
    - GET  /matching/quotes/{quote_id}/matches/{matched_id}/feedback - Feedback on a match
    - GET  /matching/feedback/stats - Aggregate feedback statistics

Does NOT contain:
    - Scoring rules (Domain Layer)
    - Redis access (Infrastructure Layer)
    - Error to status mapping (global handlers in main.py)
"""

import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, Query, status

from src.api.schemas.common import ErrorResponse
from src.api.schemas.matching import (
    FeedbackListResponse,
    FindMatchesRequest,
    MatchListResponse,
    RematchRequest,
)
from src.application.commands.run_quote_matching import RunQuoteMatchingCommand
from src.application.commands.submit_match_feedback import SubmitMatchFeedbackCommand
from src.application.models import MatchingRunSummary
from src.application.services.match_feedback_use_case import MatchFeedbackUseCase
from src.application.services.quote_matching_use_case import QuoteMatchingUseCase
from src.domain.quoting.services.quote_matching_engine import QuoteMatchingEngine
from src.domain.quoting.value_objects import FeedbackStatistics, MatchFeedback
from src.infrastructure.persistence.repositories import (
    RedisQuoteMatchRepository,
    RedisQuoteRepository,
)

logger = logging.getLogger(__name__)


# ============================================================================
# ROUTER CONFIGURATION
# ============================================================================

router = APIRouter(
    prefix="/matching",
    tags=["matching"],
    responses={
        400: {"model": ErrorResponse, "description": "Bad Request - Invalid matching options"},
        404: {"model": ErrorResponse, "description": "Not Found - Quote or match not found"},
        503: {"model": ErrorResponse, "description": "Service Unavailable - Storage error"},
        500: {"model": ErrorResponse, "description": "Internal Server Error"},
    },
)


# ============================================================================
# DEPENDENCY INJECTION
# ============================================================================


def get_matching_engine() -> QuoteMatchingEngine:
    """Matching engine with the default configuration."""
    return QuoteMatchingEngine()


def get_quote_matching_use_case() -> QuoteMatchingUseCase:
    """
    QuoteMatchingUseCase wired to the Redis repositories.

    The Redis client is created lazily on first repository access, so
    requests that fail validation never open a connection.
    """
    return QuoteMatchingUseCase(
        quote_repository=RedisQuoteRepository(),
        match_repository=RedisQuoteMatchRepository(),
    )


def get_match_feedback_use_case() -> MatchFeedbackUseCase:
    """MatchFeedbackUseCase wired to the Redis match repository."""
    return MatchFeedbackUseCase(match_repository=RedisQuoteMatchRepository())


# ============================================================================
# ENDPOINTS
# ============================================================================


@router.post(
    "/find",
    response_model=MatchListResponse,
    status_code=status.HTTP_200_OK,
    summary="Find similar quotes in a supplied pool",
    description=(
        "Scores every candidate against the query quote and returns the ranked "
        "matches above the threshold with suggested prices. Nothing is stored."
    ),
)
async def find_matches(
    request: FindMatchesRequest,
    engine: QuoteMatchingEngine = Depends(get_matching_engine),
) -> MatchListResponse:
    """
    Stateless matching.

    Examples:
        >>> curl -X POST "http://localhost:8000/api/matching/find" \\
        ...      -H "Content-Type: application/json" \\
        ...      -d '{"query": {"quote_id": 1, ...}, "candidates": [...]}'
        {"matches": [...], "count": 1}
    """
    matches = engine.find_matches(
        request.query,
        request.candidates,
        min_score=request.min_score,
        max_matches=request.max_matches,
        weights=request.weights,
    )
    logger.info(
        f"Quote {request.query.quote_id}: {len(matches)} match(es) "
        f"from {len(request.candidates)} candidate(s)"
    )
    return MatchListResponse(matches=matches, count=len(matches))


@router.post(
    "/run",
    response_model=MatchingRunSummary,
    status_code=status.HTTP_200_OK,
    summary="Match stored quotes against the historical store",
)
async def run_matching(
    command: RunQuoteMatchingCommand,
    use_case: QuoteMatchingUseCase = Depends(get_quote_matching_use_case),
) -> MatchingRunSummary:
    """Batch matching; per-quote failures are reported in the summary."""
    return await use_case.process_new_quotes(command)


@router.post(
    "/quotes/{quote_id}/rematch",
    response_model=MatchingRunSummary,
    status_code=status.HTTP_200_OK,
    summary="Recompute matches of one quote",
)
async def rematch_quote(
    quote_id: int,
    options: Optional[RematchRequest] = Body(default=None),
    use_case: QuoteMatchingUseCase = Depends(get_quote_matching_use_case),
) -> MatchingRunSummary:
    """Delete stored matches of the quote and run matching for it again."""
    options = options or RematchRequest()
    return await use_case.rematch_quote(
        quote_id, min_score=options.min_score, max_matches=options.max_matches
    )


@router.get(
    "/quotes/{quote_id}",
    response_model=MatchListResponse,
    status_code=status.HTTP_200_OK,
    summary="Stored matches of one quote",
)
async def get_quote_matches(
    quote_id: int,
    limit: int = Query(default=10, ge=1, le=100),
    min_score: float = Query(default=0.0, ge=0.0, le=1.0),
    use_case: QuoteMatchingUseCase = Depends(get_quote_matching_use_case),
) -> MatchListResponse:
    """Best stored matches first."""
    matches = await use_case.get_matches(quote_id, limit=limit, min_score=min_score)
    return MatchListResponse(matches=matches, count=len(matches))


@router.post(
    "/quotes/{quote_id}/matches/{matched_id}/feedback",
    response_model=MatchFeedback,
    status_code=status.HTTP_201_CREATED,
    summary="Rate a stored match",
    description=(
        "Thumbs up (1) or thumbs down (-1) on a stored match, with an optional "
        "reason and the price actually quoted. A user's later feedback on the "
        "same match replaces the earlier one."
    ),
)
async def submit_match_feedback(
    quote_id: int,
    matched_id: int,
    command: SubmitMatchFeedbackCommand,
    use_case: MatchFeedbackUseCase = Depends(get_match_feedback_use_case),
) -> MatchFeedback:
    """
    Examples:
        >>> curl -X POST \\
        ...   "http://localhost:8000/api/matching/quotes/10726/matches/10611/feedback" \\
        ...   -H "Content-Type: application/json" \\
        ...   -d '{"rating": 1, "feedback_reason": "good_match"}'
    """
    return await use_case.submit_feedback(quote_id, matched_id, command)


@router.get(
    "/quotes/{quote_id}/matches/{matched_id}/feedback",
    response_model=FeedbackListResponse,
    status_code=status.HTTP_200_OK,
    summary="Feedback on a stored match",
)
async def get_match_feedback(
    quote_id: int,
    matched_id: int,
    use_case: MatchFeedbackUseCase = Depends(get_match_feedback_use_case),
) -> FeedbackListResponse:
    feedback = await use_case.get_feedback(quote_id, matched_id)
    return FeedbackListResponse(feedback=feedback, count=len(feedback))


@router.get(
    "/feedback/stats",
    response_model=FeedbackStatistics,
    status_code=status.HTTP_200_OK,
    summary="Aggregate feedback statistics",
)
async def get_feedback_statistics(
    algorithm_version: Optional[str] = Query(default=None, max_length=64),
    use_case: MatchFeedbackUseCase = Depends(get_match_feedback_use_case),
) -> FeedbackStatistics:
    """Approval rate, average rating and price error, optionally per algorithm version."""
    return await use_case.get_statistics(algorithm_version=algorithm_version)
