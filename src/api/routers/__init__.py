"""
API Routers Package

Contains all FastAPI routers grouped by functionality.

Architecture Notes:
    - Part of API Layer (Presentation)
    - Routers are thin wrappers around Domain services and Application use cases
    - All routers follow dependency injection pattern

Available Routers:
    - matching_router: matching and stored-match endpoints
    - quotes_router: historical quote storage endpoints
"""

from .matching import router as matching_router
from .quotes import router as quotes_router

__all__ = ["matching_router", "quotes_router"]
