"""Failure taxonomy for suggestion cycles.

Only :class:`BackendError` is meant to reach the user; every other error
resolves the cycle quietly with no suggestion.
"""

from __future__ import annotations


class SuggestionError(RuntimeError):
    """Base error for the suggestion engine."""


class RequestCancelled(SuggestionError):
    """Raised when a request was superseded or cancelled by the host."""


class StaleSuggestion(SuggestionError):
    """Raised when the document changed while the request was in flight."""


class EmptySuggestion(SuggestionError):
    """Raised when the backend produced no usable text."""


class MalformedResponse(EmptySuggestion):
    """Raised when the backend payload has an unexpected shape."""


class BackendError(SuggestionError):
    """Raised for network, HTTP status, or timeout failures."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class BackendTimeout(BackendError):
    """Raised when the backend did not answer within the configured timeout."""


__all__ = [
    "BackendError",
    "BackendTimeout",
    "EmptySuggestion",
    "MalformedResponse",
    "RequestCancelled",
    "StaleSuggestion",
    "SuggestionError",
]
