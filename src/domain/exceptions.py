"""
domain.exceptions - Custom exception hierarchy for the meal planner.

All domain-level errors inherit from DomainError so callers can catch
broad or specific exceptions as needed.
"""

from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for all domain-level errors."""


class NotInitializedError(DomainError):
    """Raised when the storage handle is requested before initialize() or after close()."""


class InitializationError(DomainError):
    """Raised when the store cannot be opened or the schema cannot be created."""


class ShutdownError(DomainError):
    """Raised when the storage handle cannot be released."""


class RepositoryError(DomainError):
    """Raised when a database operation fails.

    ``operation`` is a stable tag (CREATE_ERROR, UPDATE_ERROR, ...) so callers
    can tell phases apart without parsing the message.
    """

    def __init__(
        self,
        message: str,
        operation: str = "",
        entity_id: Optional[str] = None,
    ):
        super().__init__(message)
        self.operation = operation
        self.entity_id = entity_id


class NotFoundError(DomainError):
    """Raised when an update/delete/toggle targets an id that does not exist."""

    def __init__(self, entity_type: str, entity_id: str):
        super().__init__(f"{entity_type} not found: {entity_id}")
        self.entity_type = entity_type
        self.entity_id = entity_id


class ValidationError(DomainError):
    """Raised by the validation layer when input violates field constraints."""

    def __init__(self, message: str, field: str = "", errors: Optional[list[str]] = None):
        super().__init__(message)
        self.field = field
        self.errors = list(errors or [])
