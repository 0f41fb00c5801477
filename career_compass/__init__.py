"""
Career Compass - asynchronous client and session layer for the resume/job-match backend.
"""

__version__ = "1.0.0"

__all__ = [
    "ApiClient",
    "SessionManager",
    "build_services",
    "retry_async",
]


# Lazy attribute access keeps `import career_compass.domain...` free of httpx imports.
def __getattr__(name: str):  # pragma: no cover - simple lazy loader
    if name == "ApiClient":
        from .application.api_client import ApiClient as _C
        return _C
    if name == "SessionManager":
        from .application.session_manager import SessionManager as _S
        return _S
    if name == "build_services":
        from .application.container import build_services as _b
        return _b
    if name == "retry_async":
        from .infrastructure.http.retry import retry_async as _r
        return _r
    raise AttributeError(f"module 'career_compass' has no attribute {name!r}")
