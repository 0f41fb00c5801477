"""Domain models package."""

from .envelope import (
    HttpMethod,
    UploadFile,
    MultipartBody,
    RequestOptions,
    RequestDescriptor,
    PaginationMeta,
    ResponseEnvelope,
)
from .errors import (
    ApiError,
    NetworkError,
    RequestTimeoutError,
    ValidationError,
    ServerError,
    SessionExpiredError,
    api_error_for_status,
)
from .session import (
    Theme,
    Notification,
    NotificationKind,
    User,
    UserPreferences,
    LoginCredentials,
    SignupCredentials,
    TokenPair,
    SessionState,
    AuthResult,
    TokenRefreshResult,
    InitResult,
)

__all__ = [
    "HttpMethod",
    "UploadFile",
    "MultipartBody",
    "RequestOptions",
    "RequestDescriptor",
    "PaginationMeta",
    "ResponseEnvelope",
    "ApiError",
    "NetworkError",
    "RequestTimeoutError",
    "ValidationError",
    "ServerError",
    "SessionExpiredError",
    "api_error_for_status",
    "Theme",
    "Notification",
    "NotificationKind",
    "User",
    "UserPreferences",
    "LoginCredentials",
    "SignupCredentials",
    "TokenPair",
    "SessionState",
    "AuthResult",
    "TokenRefreshResult",
    "InitResult",
]
