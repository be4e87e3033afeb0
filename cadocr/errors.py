"""Errors raised by the application services."""

from __future__ import annotations


class DomainError(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainError, ValueError):
    """An input value was rejected."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.message = message
        super().__init__(f"validation failed for '{field}': {message}")


class ExternalServiceError(DomainError):
    """A call into an external service (database, model API, ...) failed."""

    def __init__(self, service: str, operation: str, message: str) -> None:
        self.service = service
        self.operation = operation
        self.message = message
        super().__init__(f"{service}.{operation} failed: {message}")