"""Exception hierarchy for the scoring engine."""

from __future__ import annotations


class VendorScopeError(Exception):
    """Base exception for all engine errors.

    Args:
        message: Human-readable error description.
        context: Optional dict of extra context for logging/debugging.
    """

    def __init__(self, message: str = "", context: dict | None = None) -> None:
        super().__init__(message)
        self.context = context or {}


class ProviderError(VendorScopeError):
    """Raised when the AI provider call fails or returns unusable data."""


class EmptyInputError(VendorScopeError):
    """Raised when scoring or classification receives an empty vendor or criteria set."""


class StorageError(VendorScopeError):
    """Raised when a storage backend cannot persist a value."""
