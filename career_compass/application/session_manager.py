"""
Session manager - Application service owning authentication and session state.
Persists credentials, enforces inactivity expiry, tracks connectivity and
propagates theme preferences.
"""

from __future__ import annotations
import asyncio
import copy
import json
import logging
from datetime import datetime, timedelta
from typing import Any, Awaitable, Callable, Dict, List, Optional, TypeVar

from ..domain.interfaces.environment import EnvironmentSignals, Notifier, Unsubscribe
from ..domain.interfaces.key_value_store import KeyValueStore
from ..domain.models.envelope import ResponseEnvelope
from ..domain.models.errors import ApiError, SessionExpiredError, ValidationError
from ..domain.models.session import (
    AuthResult,
    InitResult,
    LoginCredentials,
    Notification,
    NotificationKind,
    SessionState,
    SignupCredentials,
    Theme,
    TokenPair,
    TokenRefreshResult,
    User,
    UserPreferences,
)
from .auth_api import AuthApi
from .user_service import UserService

T = TypeVar('T')

STORAGE_TOKEN_KEY = 'career_compass_token'
STORAGE_USER_KEY = 'career_compass_user'
STORAGE_REFRESH_TOKEN_KEY = 'career_compass_refresh_token'
SESSION_KEYS = (STORAGE_TOKEN_KEY, STORAGE_USER_KEY, STORAGE_REFRESH_TOKEN_KEY)

ACTIVITY_EVENTS = frozenset({'mousedown', 'mousemove', 'keypress', 'scroll', 'touchstart'})
PROTECTED_ROUTES = ('/upload', '/results', '/history', '/profile', '/settings')

DEFAULT_MAX_INACTIVE_MINUTES = 30.0

Clock = Callable[[], datetime]
Scheduler = Callable[[float, Callable[[], None]], Any]


def session_is_active(last_activity: datetime, now: datetime, max_inactive_minutes: float) -> bool:
    """True while less than max_inactive_minutes have passed since last_activity."""
    return now - last_activity < timedelta(minutes=max_inactive_minutes)


def _loop_scheduler(delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
    return asyncio.get_running_loop().call_later(delay, callback)


class _NullNotifier:
    def notify(self, notification: Notification) -> None:
        pass


class SessionManager:
    """Owns SessionState and the three persisted session keys."""

    def __init__(
        self,
        auth_api: AuthApi,
        user_service: UserService,
        store: KeyValueStore,
        environment: EnvironmentSignals,
        notifier: Optional[Notifier] = None,
        max_inactive_minutes: float = DEFAULT_MAX_INACTIVE_MINUTES,
        clock: Optional[Clock] = None,
        scheduler: Optional[Scheduler] = None,
        logger: Optional[logging.Logger] = None
    ):
        self._auth = auth_api
        self._users = user_service
        self._store = store
        self._env = environment
        self._notifier = notifier or _NullNotifier()
        self._max_inactive_minutes = max_inactive_minutes
        self._clock = clock or datetime.now
        self._scheduler = scheduler or _loop_scheduler
        self._logger = logger or logging.getLogger(__name__)

        self._state = SessionState(is_online=environment.is_online(), last_activity=self._clock())
        self._timer: Optional[Any] = None
        self._expiry_task: Optional[asyncio.Task] = None
        self._intended_path: Optional[str] = None

        self._unsubscribers: List[Unsubscribe] = [
            environment.subscribe_activity(self._on_activity),
            environment.subscribe_connectivity(self._on_connectivity_change),
            environment.subscribe_color_scheme(self._on_color_scheme_change),
        ]

    # State access

    def get_state(self) -> SessionState:
        """Snapshot copy; mutating it never affects the manager."""
        return copy.deepcopy(self._state)

    @property
    def is_authenticated(self) -> bool:
        return self._state.is_authenticated

    @property
    def expiry_task(self) -> Optional[asyncio.Task]:
        """Pending forced-logout task started by the inactivity timer, if any."""
        return self._expiry_task

    def get_token(self) -> Optional[str]:
        """Read-only token accessor; used as the API client's token provider."""
        return self._store.get(STORAGE_TOKEN_KEY)

    def get_refresh_token(self) -> Optional[str]:
        return self._store.get(STORAGE_REFRESH_TOKEN_KEY)

    def get_stored_user(self) -> Optional[User]:
        raw = self._store.get(STORAGE_USER_KEY)
        if not raw:
            return None
        try:
            data = json.loads(raw)
        except ValueError:
            self._logger.warning("Discarding unreadable stored user record")
            return None
        return User.from_payload(data) if isinstance(data, dict) else None

    # Startup

    async def initialize(self) -> InitResult:
        """Restore a persisted session, load preferences and apply the theme."""
        self._logger.info("Starting session initialization")
        result = InitResult(success=False)

        token = self.get_token()
        stored_user = self.get_stored_user()

        if token and stored_user:
            current = await self._verify_stored_session(stored_user, result)
            if current:
                self._state.current_user = current
                self._state.is_authenticated = True
                result.user = current
                self.record_activity()
                try:
                    preferences = await self._fetch_preferences()
                except ApiError as e:
                    self._logger.error(f"Failed to load user preferences: {e.message}")
                    result.errors.append('Failed to load user preferences')
                else:
                    if preferences:
                        self._state.preferences = preferences
                        self._state.theme = preferences.theme
                        result.preferences = preferences
            else:
                await self._logout(notify=False)
        elif token or stored_user:
            # A token without its user (or the reverse) is not a usable session
            self._clear_credentials()

        self._apply_theme(self._state.theme)
        self._state.is_initialized = True
        result.success = True

        self._logger.info(
            f"Session initialization completed - authenticated: {self._state.is_authenticated}, "
            f"user: {self._state.current_user.email if self._state.current_user else None}, "
            f"theme: {self._state.theme.value}"
        )
        return result

    async def _verify_stored_session(self, stored_user: User, result: InitResult) -> Optional[User]:
        """Confirm the stored token with the backend.

        A 4xx means the token is no longer valid. Transport and server failures
        keep the stored user so an offline start does not log the user out.
        """
        try:
            envelope = await self._auth.profile()
        except ValidationError as e:
            self._logger.info(f"Stored session rejected ({e.status_code}); clearing credentials")
            return None
        except ApiError as e:
            self._logger.warning(f"Could not verify stored session: {e.message}")
            result.errors.append('Could not verify session; using stored profile')
            return stored_user

        data = envelope.data if envelope.success and isinstance(envelope.data, dict) else {}
        profile = data.get('user')
        if not isinstance(profile, dict):
            return None
        user = User.from_payload(profile)
        self._store.set(STORAGE_USER_KEY, json.dumps(user.to_payload()))
        return user

    # Authentication

    async def login(self, credentials: LoginCredentials) -> AuthResult:
        """Authenticate; failures are returned as AuthResult, never raised."""
        try:
            envelope = await self._auth.login(credentials)
        except ApiError as e:
            self._logger.error(f"Login error: {e.message}")
            return AuthResult(success=False, message=e.message or 'Network error. Please try again.', errors=e.errors)
        return await self._complete_authentication(envelope, 'Login', 'Welcome back!')

    async def signup(self, credentials: SignupCredentials) -> AuthResult:
        """Register; password confirmation is checked locally and never sent."""
        if not credentials.passwords_match:
            message = 'Passwords do not match'
            return AuthResult(success=False, message=message, errors={'confirmPassword': [message]})
        try:
            envelope = await self._auth.signup(credentials)
        except ApiError as e:
            self._logger.error(f"Signup error: {e.message}")
            return AuthResult(success=False, message=e.message or 'Network error. Please try again.', errors=e.errors)
        return await self._complete_authentication(envelope, 'Signup', 'Welcome!')

    async def _complete_authentication(self, envelope: ResponseEnvelope, action: str, greeting: str) -> AuthResult:
        data = envelope.data if envelope.success and isinstance(envelope.data, dict) else None
        pair = TokenPair.from_payload(data) if data else None
        user_payload = data.get('user') if data else None

        if pair is None or not isinstance(user_payload, dict):
            return AuthResult(
                success=False,
                message=envelope.message or f'{action} failed',
                errors=envelope.errors,
            )

        user = User.from_payload(user_payload)
        self._persist_credentials(user, pair)
        self._state.current_user = user
        self._state.is_authenticated = True
        self.record_activity()

        try:
            preferences = await self._fetch_preferences()
        except ApiError as e:
            self._logger.error(f"Failed to load preferences after {action.lower()}: {e.message}")
        else:
            if preferences:
                self._state.preferences = preferences
                self._apply_theme(preferences.theme)

        self._notify(NotificationKind.SUCCESS, greeting, f"Successfully logged in as {user.full_name or user.email}")
        self._logger.info(f"User {action.lower()} successful: {user.id} ({user.email})")
        return AuthResult(success=True, user=user, token=pair.token, message=f'{action} successful')

    async def logout(self) -> None:
        """Notify the backend best-effort, then clear all local session data."""
        await self._logout(notify=True)
        self._logger.info("User logout successful")

    async def _logout(self, notify: bool) -> None:
        token = self.get_token()
        try:
            if token:
                await self._auth.logout()
        except ApiError as e:
            self._logger.warning(f"Logout notification failed: {e.message}")
        finally:
            self._clear_credentials()
            self._cancel_timer()
            self._state.current_user = None
            self._state.is_authenticated = False
            self._state.preferences = None
            self._apply_theme(Theme.SYSTEM)
        if notify:
            self._notify(NotificationKind.INFO, 'Logged out successfully')

    async def refresh_token(self) -> TokenRefreshResult:
        """Exchange the refresh token for a new token pair; the user record is untouched."""
        refresh = self.get_refresh_token()
        if not refresh:
            return TokenRefreshResult(success=False)
        try:
            envelope = await self._auth.refresh(refresh)
        except ApiError as e:
            self._logger.error(f"Refresh token error: {e.message}")
            return TokenRefreshResult(success=False)

        pair = TokenPair.from_payload(envelope.data) if envelope.success and isinstance(envelope.data, dict) else None
        if pair is None:
            return TokenRefreshResult(success=False)

        self._store.set(STORAGE_TOKEN_KEY, pair.token)
        if pair.refresh_token:
            self._store.set(STORAGE_REFRESH_TOKEN_KEY, pair.refresh_token)
        self._logger.debug("Access token refreshed")
        return TokenRefreshResult(success=True, token=pair.token)

    async def with_token_refresh(self, operation: Callable[[], Awaitable[T]]) -> T:
        """Run operation; on a 401, refresh once and replay it once."""
        try:
            return await operation()
        except ApiError as e:
            if e.status_code != 401 or not self.get_refresh_token():
                raise
            self._logger.info("Access token rejected; attempting refresh")
            result = await self.refresh_token()
            if not result.success:
                raise
        return await operation()

    async def forgot_password(self, email: str) -> AuthResult:
        try:
            envelope = await self._auth.forgot_password(email)
        except ApiError as e:
            self._logger.error(f"Forgot password error: {e.message}")
            return AuthResult(success=False, message=e.message, errors=e.errors)
        return AuthResult(success=envelope.success, message=envelope.message or 'Password reset email sent')

    async def reset_password(self, token: str, password: str) -> AuthResult:
        try:
            envelope = await self._auth.reset_password(token, password)
        except ApiError as e:
            self._logger.error(f"Reset password error: {e.message}")
            return AuthResult(success=False, message=e.message, errors=e.errors)
        return AuthResult(success=envelope.success, message=envelope.message or 'Password reset successful')

    # Preferences and theme

    async def update_preferences(self, preferences: Dict[str, Any]) -> bool:
        """Send a partial preferences update and apply a changed theme."""
        try:
            envelope = await self._users.update_preferences(preferences)
        except ApiError as e:
            self._logger.error(f"Failed to update preferences: {e.message}")
            self._notify(NotificationKind.ERROR, 'Failed to update preferences', 'Please try again')
            return False

        if envelope.success and isinstance(envelope.data, dict):
            self._state.preferences = UserPreferences.from_payload(envelope.data)
            requested = preferences.get('theme')
            if requested:
                theme = Theme.parse(requested, self._state.theme)
                if theme != self._state.theme:
                    self._apply_theme(theme)
            self._notify(NotificationKind.SUCCESS, 'Preferences updated successfully')
            return True

        self._notify(NotificationKind.ERROR, 'Failed to update preferences')
        return False

    def set_theme(self, theme: Theme) -> None:
        """Apply an explicit theme locally; light and dark stay until changed."""
        self._apply_theme(Theme.parse(theme))

    def _apply_theme(self, theme: Theme) -> None:
        if theme == Theme.SYSTEM:
            dark = self._env.prefers_dark()
        else:
            dark = theme == Theme.DARK
        self._env.apply_color_scheme(dark)
        self._state.theme = theme

    async def _fetch_preferences(self) -> Optional[UserPreferences]:
        envelope = await self._users.get_preferences()
        if envelope.success and isinstance(envelope.data, dict):
            return UserPreferences.from_payload(envelope.data)
        return None

    # Routing

    def is_protected_route(self, path: str) -> bool:
        return any(path.startswith(route) for route in PROTECTED_ROUTES)

    def handle_unauthorized_access(self, intended_path: Optional[str] = None) -> None:
        """Remember where the user was going and ask them to log in."""
        self._notify(NotificationKind.ERROR, 'Authentication Required', 'Please log in to access this feature')
        if intended_path:
            self._intended_path = intended_path

    def consume_intended_path(self) -> Optional[str]:
        path, self._intended_path = self._intended_path, None
        return path

    # Inactivity

    def record_activity(self) -> None:
        """Reset the last-activity timestamp and restart the inactivity countdown."""
        self._state.last_activity = self._clock()
        self._reset_activity_timer()

    def is_session_active(self, max_inactive_minutes: Optional[float] = None) -> bool:
        limit = self._max_inactive_minutes if max_inactive_minutes is None else max_inactive_minutes
        return session_is_active(self._state.last_activity, self._clock(), limit)

    async def expire_if_inactive(self) -> bool:
        """Force logout when authenticated and past the inactivity window.

        An authenticated session still inside the window gets its timer
        re-armed for the time that is left.
        """
        if not self._state.is_authenticated:
            return False
        if self.is_session_active():
            self._reset_activity_timer(self._remaining_seconds())
            return False
        error = SessionExpiredError(self._max_inactive_minutes)
        self._logger.info(f"Session expired after {self._max_inactive_minutes} minutes of inactivity")
        self._notify(NotificationKind.SESSION_EXPIRED, 'Session Expired', error.message, error=error)
        await self._logout(notify=False)
        return True

    def _remaining_seconds(self) -> float:
        """Seconds left in the inactivity window, never more than the full window."""
        window = self._max_inactive_minutes * 60.0
        elapsed = (self._clock() - self._state.last_activity).total_seconds()
        return min(window, max(0.0, window - elapsed))

    def _reset_activity_timer(self, delay: Optional[float] = None) -> None:
        self._cancel_timer()
        if delay is None:
            delay = self._max_inactive_minutes * 60.0
        try:
            self._timer = self._scheduler(delay, self._on_inactivity_timeout)
        except RuntimeError:
            self._logger.debug("No running event loop; inactivity timer not armed")
            self._timer = None

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _on_inactivity_timeout(self) -> None:
        self._timer = None
        if not self._state.is_authenticated:
            return
        self._expiry_task = asyncio.ensure_future(self.expire_if_inactive())

    # Environment signals

    def _on_activity(self, event: str) -> None:
        if event in ACTIVITY_EVENTS:
            self.record_activity()

    def _on_connectivity_change(self, online: bool) -> None:
        self._state.is_online = online
        if online:
            self._notify(NotificationKind.SUCCESS, 'Connection restored')
        else:
            self._notify(NotificationKind.ERROR, 'Connection lost', 'Some features may not work offline')

    def _on_color_scheme_change(self, prefers_dark: bool) -> None:
        if self._state.theme == Theme.SYSTEM:
            self._env.apply_color_scheme(prefers_dark)

    # Persistence

    def _persist_credentials(self, user: User, pair: TokenPair) -> None:
        try:
            self._store.set(STORAGE_TOKEN_KEY, pair.token)
            self._store.set(STORAGE_USER_KEY, json.dumps(user.to_payload()))
            if pair.refresh_token:
                self._store.set(STORAGE_REFRESH_TOKEN_KEY, pair.refresh_token)
            else:
                self._store.remove(STORAGE_REFRESH_TOKEN_KEY)
        except Exception:
            # Never leave a partial credential set behind
            self._clear_credentials()
            raise

    def _clear_credentials(self) -> None:
        for key in SESSION_KEYS:
            self._store.remove(key)

    def _notify(
        self,
        kind: NotificationKind,
        title: str,
        description: Optional[str] = None,
        error: Optional[Exception] = None
    ) -> None:
        self._notifier.notify(Notification(kind=kind, title=title, description=description, error=error))

    def close(self) -> None:
        """Cancel the inactivity timer and detach from environment signals."""
        self._cancel_timer()
        if self._expiry_task is not None and not self._expiry_task.done():
            self._expiry_task.cancel()
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []
