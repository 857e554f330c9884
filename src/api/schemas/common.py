"""
Common API Schemas

Shared Pydantic models used across all API routers.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    Standard error response model for all API errors.

    Attributes:
        code: Machine-readable error code (e.g., "QUOTE_NOT_FOUND")
        message: Human-readable error message
        details: Optional additional error context
    """

    code: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error message")
    details: Optional[Dict[str, Any]] = Field(
        default=None, description="Additional error context"
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "code": "QUOTE_NOT_FOUND",
                "message": "QuoteNotFoundError: Quote 10726 not found",
                "details": {"quote_id": 10726},
            }
        }
    }
