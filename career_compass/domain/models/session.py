"""
Session domain models - authentication and application state.
Pure business logic with no external dependencies.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional


class Theme(str, Enum):
    """Color scheme preference."""
    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"

    @classmethod
    def parse(cls, value: Any, default: Optional[Theme] = None) -> Theme:
        try:
            return cls(value)
        except ValueError:
            return default or cls.SYSTEM


class NotificationKind(Enum):
    """Kinds of user-facing notifications."""
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"
    SESSION_EXPIRED = "session_expired"


@dataclass(frozen=True)
class Notification:
    """A message surfaced to the user (toast, banner, CLI line)."""
    kind: NotificationKind
    title: str
    description: Optional[str] = None
    error: Optional[Exception] = None


@dataclass
class User:
    """Authenticated user record."""
    id: str
    email: str
    first_name: str = ""
    last_name: str = ""
    created_at: Optional[str] = None
    last_login: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    _KNOWN = ('id', 'email', 'firstName', 'lastName', 'createdAt', 'lastLogin')

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> User:
        """Create User from a backend payload (camelCase keys)."""
        return cls(
            id=str(data.get('id', '')),
            email=data.get('email', ''),
            first_name=data.get('firstName', ''),
            last_name=data.get('lastName', ''),
            created_at=data.get('createdAt'),
            last_login=data.get('lastLogin'),
            extra={k: v for k, v in data.items() if k not in cls._KNOWN},
        )

    def to_payload(self) -> Dict[str, Any]:
        out: Dict[str, Any] = dict(self.extra)
        out.update({
            'id': self.id,
            'email': self.email,
            'firstName': self.first_name,
            'lastName': self.last_name,
        })
        if self.created_at is not None:
            out['createdAt'] = self.created_at
        if self.last_login is not None:
            out['lastLogin'] = self.last_login
        return out


@dataclass
class UserPreferences:
    """Application and analysis preferences."""
    theme: Theme = Theme.SYSTEM
    language: str = "en"
    timezone: str = "UTC"
    email_notifications: Dict[str, bool] = field(default_factory=dict)
    analysis_defaults: Dict[str, Any] = field(default_factory=dict)
    privacy: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> UserPreferences:
        return cls(
            theme=Theme.parse(data.get('theme')),
            language=data.get('language', 'en'),
            timezone=data.get('timezone', 'UTC'),
            email_notifications=dict(data.get('emailNotifications') or {}),
            analysis_defaults=dict(data.get('analysisDefaults') or {}),
            privacy=dict(data.get('privacy') or {}),
        )

    def to_payload(self) -> Dict[str, Any]:
        return {
            'theme': self.theme.value,
            'language': self.language,
            'timezone': self.timezone,
            'emailNotifications': dict(self.email_notifications),
            'analysisDefaults': dict(self.analysis_defaults),
            'privacy': dict(self.privacy),
        }


@dataclass(frozen=True)
class LoginCredentials:
    email: str
    password: str

    def to_payload(self) -> Dict[str, Any]:
        return {'email': self.email, 'password': self.password}


@dataclass(frozen=True)
class SignupCredentials:
    email: str
    password: str
    first_name: str
    last_name: str
    confirm_password: str

    @property
    def passwords_match(self) -> bool:
        return self.password == self.confirm_password

    def to_payload(self) -> Dict[str, Any]:
        """Wire payload; the confirmation field is never transmitted."""
        return {
            'email': self.email,
            'password': self.password,
            'firstName': self.first_name,
            'lastName': self.last_name,
        }


@dataclass(frozen=True)
class TokenPair:
    """Access token with optional refresh token."""
    token: str
    refresh_token: Optional[str] = None

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> Optional[TokenPair]:
        token = data.get('token')
        if not token:
            return None
        return cls(token=str(token), refresh_token=data.get('refreshToken'))


@dataclass
class SessionState:
    """Process-wide session state, mutated only by the session manager."""
    is_initialized: bool = False
    is_authenticated: bool = False
    current_user: Optional[User] = None
    preferences: Optional[UserPreferences] = None
    theme: Theme = Theme.SYSTEM
    is_online: bool = True
    last_activity: datetime = field(default_factory=datetime.now)


@dataclass
class AuthResult:
    """Outcome of login/signup style operations; failures are returned, not raised."""
    success: bool
    user: Optional[User] = None
    token: Optional[str] = None
    message: Optional[str] = None
    errors: Optional[Dict[str, List[str]]] = None


@dataclass
class TokenRefreshResult:
    success: bool
    token: Optional[str] = None


@dataclass
class InitResult:
    """Outcome of application startup."""
    success: bool
    user: Optional[User] = None
    preferences: Optional[UserPreferences] = None
    errors: List[str] = field(default_factory=list)
