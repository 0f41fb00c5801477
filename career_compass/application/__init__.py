"""Application layer - Application services orchestrating API and session logic."""

from .api_client import ApiClient
from .auth_api import AuthApi
from .user_service import UserService
from .analysis_service import AnalysisService
from .session_manager import SessionManager
from .container import Services, build_services

__all__ = [
    "ApiClient",
    "AuthApi",
    "UserService",
    "AnalysisService",
    "SessionManager",
    "Services",
    "build_services",
]
