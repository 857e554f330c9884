"""
Infrastructure Layer - External Dependencies

Implements technical capabilities that support the Domain Layer.

Architecture:
    - Implements Domain repository interfaces (Dependency Inversion)
    - Depends on external libraries (Redis, Polars)
    - No Domain business logic (only technical implementations)

Modules:
    - persistence: Redis connection pool and repositories
    - file_storage: Quote export reading (Polars)
"""
