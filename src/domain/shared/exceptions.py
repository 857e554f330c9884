"""
Domain Layer Exceptions

This module defines the exception hierarchy for the Domain Layer.
All domain-specific exceptions inherit from DomainException.

Responsibility:
    - Base exception class for domain errors
    - Type-safe error handling across layers
    - Clear separation from framework exceptions

Architecture Notes:
    - Part of Shared Domain (used across all subdomains)
    - The matching core itself does not raise for bad quote data (scores degrade
      to 0 instead); these exceptions cover configuration, persistence and
      orchestration failures around it.
"""


class DomainException(Exception):
    """
    Base exception for all domain layer errors.

    Usage:
        - Catch this in Application Layer to handle all domain errors
        - API Layer converts to appropriate HTTP status codes

    Examples:
        >>> raise DomainException("Business rule violation")
    """

    def __init__(self, message: str) -> None:
        """
        Initialize domain exception with error message.

        Args:
            message: Human-readable error description
        """
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        """String representation of the exception."""
        return f"{self.__class__.__name__}: {self.message}"

    def __repr__(self) -> str:
        """Developer-friendly representation."""
        return f"{self.__class__.__name__}(message={self.message!r})"


class InvalidMatchingConfigError(DomainException):
    """
    Raised when a MatchingConfig cannot be built from the supplied values.

    This exception is raised when:
    - A weight is negative or not a number
    - min_score is outside [0, 1]
    - max_matches is negative

    Examples:
        >>> raise InvalidMatchingConfigError("min_score must be 0-1, got 1.5")
    """

    def __init__(self, message: str, field_name: str | None = None) -> None:
        """
        Initialize configuration error.

        Args:
            message: Error description
            field_name: Name of the offending configuration field (optional)
        """
        self.field_name = field_name
        super().__init__(message)


class InvalidQuoteMatchError(DomainException):
    """
    Raised when a QuoteMatch would violate its invariants.

    The only invariant the engine can break by construction is a self-match
    (source and matched quote ids equal).

    Examples:
        >>> raise InvalidQuoteMatchError("Quote 12 cannot match itself")
    """


class QuoteNotFoundError(DomainException):
    """
    Raised when a quote id is not present in the quote repository.

    Attributes:
        quote_id: Identifier that was looked up

    Examples:
        >>> raise QuoteNotFoundError(10726)
    """

    def __init__(self, quote_id: int, message: str | None = None) -> None:
        """
        Initialize not-found error.

        Args:
            quote_id: Identifier that was looked up
            message: Optional override for the default message
        """
        self.quote_id = quote_id
        super().__init__(message or f"Quote {quote_id} not found")


class MatchNotFoundError(DomainException):
    """
    Raised when no stored match exists for a (source, matched) quote pair.

    Examples:
        >>> raise MatchNotFoundError(10726, 10611)
    """

    def __init__(self, source_quote_id: int, matched_quote_id: int) -> None:
        self.source_quote_id = source_quote_id
        self.matched_quote_id = matched_quote_id
        super().__init__(
            f"No stored match of quote {matched_quote_id} for quote {source_quote_id}"
        )


class PersistenceError(DomainException):
    """
    Raised when the storage backend (Redis) fails.

    Infrastructure adapters wrap driver errors in this exception so that the
    Application and API layers never depend on redis-py exception types.

    Attributes:
        operation: Repository operation that failed (e.g. "save_matches")
        original_error: Underlying driver exception (optional)
    """

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        original_error: Exception | None = None,
    ) -> None:
        self.operation = operation
        self.original_error = original_error

        detailed_parts = [message]
        if operation:
            detailed_parts.append(f"Operation: {operation}")
        if original_error:
            detailed_parts.append(
                f"Original error: {type(original_error).__name__}: {original_error}"
            )

        super().__init__(" | ".join(detailed_parts))


class UnsupportedExportFormatError(DomainException):
    """
    Raised when a historical quote export has an unsupported file extension.

    Attributes:
        file_path: Path to the rejected export
        supported: Extensions the reader accepts

    Examples:
        >>> raise UnsupportedExportFormatError("quotes.json", [".csv", ".xlsx"])
    """

    def __init__(self, file_path: str, supported: list[str]) -> None:
        self.file_path = file_path
        self.supported = supported
        super().__init__(
            f"Unsupported export format for '{file_path}' "
            f"(supported: {', '.join(supported)})"
        )
