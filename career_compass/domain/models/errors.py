"""
Error taxonomy for API and session failures.
Pure domain types with no transport dependencies.
"""

from __future__ import annotations
from typing import Dict, List, Optional


class ApiError(Exception):
    """Error raised for any failed API exchange."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        errors: Optional[Dict[str, List[str]]] = None
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.errors = errors

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status_code={self.status_code}, message={self.message!r})"

    @property
    def is_retryable(self) -> bool:
        """Transport failures, timeouts and 5xx responses are worth retrying by the user."""
        return self.status_code == 0 or self.status_code == 408 or self.status_code >= 500


class NetworkError(ApiError):
    """Connectivity or transport failure (status 0)."""

    def __init__(self, message: str = "Network request failed"):
        super().__init__(message, 0)


class RequestTimeoutError(ApiError):
    """The request did not settle before its timeout (status 408)."""

    def __init__(self, message: str = "Request timeout"):
        super().__init__(message, 408)


class ValidationError(ApiError):
    """4xx response, usually carrying a field -> messages map."""

    def field_messages(self, field: str) -> List[str]:
        """Messages attached to a single input field."""
        return list((self.errors or {}).get(field, []))


class ServerError(ApiError):
    """5xx response."""


class SessionExpiredError(Exception):
    """Raised locally when the inactivity monitor ends a session."""

    def __init__(self, inactive_minutes: float, message: str = "You have been logged out due to inactivity"):
        super().__init__(message)
        self.message = message
        self.inactive_minutes = inactive_minutes


def api_error_for_status(
    status_code: int,
    message: str,
    errors: Optional[Dict[str, List[str]]] = None
) -> ApiError:
    """Build the ApiError subclass matching a status code."""
    if status_code == 0:
        return NetworkError(message)
    if status_code == 408:
        error: ApiError = RequestTimeoutError(message)
        error.errors = errors
        return error
    if 400 <= status_code < 500:
        return ValidationError(message, status_code, errors)
    if status_code >= 500:
        return ServerError(message, status_code, errors)
    return ApiError(message, status_code, errors)
