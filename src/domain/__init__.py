"""
Domain Layer - Core Business Logic

Heart of the QuoteMatch application. Contains all business rules, entities,
value objects, and domain services. Framework-independent and highly testable.

Architecture:
    - Clean Architecture: Domain Layer is the center, no external dependencies
    - Domain-Driven Design: Entities, Value Objects, Services, Repositories
    - Dependency Inversion: Domain defines interfaces, Infrastructure implements

Subdomains:
    - quoting: historical quote matching and price suggestion
    - shared: Cross-subdomain concepts (exceptions)

Usage:
    >>> from src.domain import QuoteRecord, QuoteMatchingEngine, DomainException
    >>> # Alternative: Import from specific module
    >>> from src.domain.quoting.entities import QuoteRecord
"""

from .quoting import (
    MatchingConfig,
    PriceSuggestion,
    QuoteMatch,
    QuoteMatchingEngine,
    QuoteMatchingEngineProtocol,
    QuoteMatchRepositoryProtocol,
    QuoteRecord,
    QuoteRepositoryProtocol,
    SimilarityScore,
    find_matches,
)
from .shared import DomainException

__all__ = [
    # Quoting Subdomain
    "QuoteRecord",
    "SimilarityScore",
    "PriceSuggestion",
    "QuoteMatch",
    "MatchingConfig",
    "QuoteMatchingEngine",
    "QuoteMatchingEngineProtocol",
    "find_matches",
    "QuoteRepositoryProtocol",
    "QuoteMatchRepositoryProtocol",
    # Shared Domain
    "DomainException",
]
