"""
API Router for Historical Quotes

Contains:
    - POST /quotes - Bulk upsert of quote records
    - GET  /quotes/{quote_id} - One stored quote
"""

import logging

from fastapi import APIRouter, Depends, status

from src.api.schemas.common import ErrorResponse
from src.api.schemas.matching import SaveQuotesRequest, SaveQuotesResponse
from src.domain.quoting.entities.quote_record import QuoteRecord
from src.domain.shared.exceptions import QuoteNotFoundError
from src.infrastructure.persistence.repositories import RedisQuoteRepository

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/quotes",
    tags=["quotes"],
    responses={
        404: {"model": ErrorResponse, "description": "Not Found - Quote not found"},
        503: {"model": ErrorResponse, "description": "Service Unavailable - Storage error"},
    },
)


def get_quote_repository() -> RedisQuoteRepository:
    return RedisQuoteRepository()


@router.post(
    "",
    response_model=SaveQuotesResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Store historical quotes",
)
async def save_quotes(
    request: SaveQuotesRequest,
    repository: RedisQuoteRepository = Depends(get_quote_repository),
) -> SaveQuotesResponse:
    """Insert or replace quotes by quote_id."""
    saved = await repository.save_many(request.quotes)
    logger.info(f"Stored {saved} quote(s)")
    return SaveQuotesResponse(saved=saved)


@router.get(
    "/{quote_id}",
    response_model=QuoteRecord,
    status_code=status.HTTP_200_OK,
    summary="Get one stored quote",
)
async def get_quote(
    quote_id: int,
    repository: RedisQuoteRepository = Depends(get_quote_repository),
) -> QuoteRecord:
    quote = await repository.get_quote_for_matching(quote_id)
    if quote is None:
        raise QuoteNotFoundError(quote_id)
    return quote
