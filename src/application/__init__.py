"""
Application Layer - Use Cases and Orchestration

Responsibility:
    Coordinates the flow of data between API, Domain and Infrastructure layers.

Contains:
    - Commands (CQRS write operations)
    - Application services (orchestration)
    - Shared DTOs (models)

Does NOT contain:
    - Domain business rules (belongs to Domain layer)
    - HTTP handling (belongs to API layer)
    - Infrastructure details (belongs to Infrastructure layer)
"""
