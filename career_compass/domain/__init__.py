"""Domain layer - Pure business logic with no external dependencies."""

from .models.envelope import RequestDescriptor, RequestOptions, ResponseEnvelope
from .models.errors import ApiError, SessionExpiredError
from .models.session import SessionState, Theme

__all__ = [
    "RequestDescriptor",
    "RequestOptions",
    "ResponseEnvelope",
    "ApiError",
    "SessionExpiredError",
    "SessionState",
    "Theme",
]
