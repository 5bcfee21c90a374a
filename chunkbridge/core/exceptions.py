"""
Exception hierarchy for the ingestion pipeline.

Provides layered exception structure for validation, external service and
consistency errors. All exceptions include context for observability.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class IngestionException(Exception):
    """Base exception for all chunkbridge errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(IngestionException):
    """Raised when request input fails validation before any store write."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class StoreNotInitializedError(ValidationError):
    """Raised when the vector index handle has not been initialized."""

    def __init__(self, store: str = "vector_index") -> None:
        super().__init__("Database not yet initialized", details={"store": store})


class ExternalServiceError(IngestionException):
    """
    Base exception for failures of an external collaborator.

    Attributes:
        service: Collaborator that failed (embedding, vector_index, relational_store)
        operation: Operation that failed (embed, upsert, create, ...)
        transient: Whether the failure is eligible for retry
    """

    transient: bool = False

    def __init__(
        self,
        message: str,
        service: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize external service error.

        Args:
            message: Error message
            service: Name of the failing collaborator
            operation: Operation that failed
            details: Additional context
        """
        self.service = service
        self.operation = operation
        details = details or {}
        details["service"] = service
        if operation:
            details["operation"] = operation
        super().__init__(message, details)


class TransientExternalError(ExternalServiceError):
    """Rate limiting, quota or network failure; retried with backoff."""

    transient = True


class PermanentExternalError(ExternalServiceError):
    """Input rejected or otherwise non-retryable failure."""

    transient = False


class ParsingError(IngestionException):
    """Raised when text extraction from an uploaded document fails."""

    def __init__(
        self,
        message: str,
        file_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.file_path = file_path
        details = details or {}
        if file_path:
            details["file_path"] = file_path
        super().__init__(message, details)


class MetadataParseError(IngestionException):
    """Raised when caller-supplied metadata JSON is malformed (degraded to empty metadata)."""

    def __init__(self, message: str, raw: str | None = None) -> None:
        details = {}
        if raw is not None:
            details["raw_preview"] = raw[:100]
        super().__init__(message, details)


class PartialConsistencyError(IngestionException):
    """
    A vector was written but its relational row was not.

    Never raised to callers; logged so an external reconciliation job can
    find the orphaned vector by chunk_id.
    """

    def __init__(self, chunk_id: str, document_id: str, cause: str | None = None) -> None:
        self.chunk_id = chunk_id
        self.document_id = document_id
        details = {"chunk_id": chunk_id, "document_id": document_id}
        if cause:
            details["cause"] = cause
        super().__init__("Vector stored without relational row", details)


class IngestionTimeoutError(IngestionException):
    """Raised when a document ingestion exceeds its deadline."""

    def __init__(self, document_id: str, timeout_s: float) -> None:
        self.document_id = document_id
        self.timeout_s = timeout_s
        super().__init__(
            f"Ingestion of document {document_id} exceeded {timeout_s}s deadline",
            {"document_id": document_id, "timeout_s": timeout_s},
        )
