"""
Environment signal hub and notifiers.
A host (UI shell, CLI, test) pushes interaction, connectivity and
color-scheme events into the hub; the session manager subscribes to it.
"""

from __future__ import annotations
import logging
from typing import Callable, List, Optional

from ...domain.interfaces.environment import Unsubscribe
from ...domain.models.session import Notification, NotificationKind


class _Channel:
    """Ordered list of subscribers for one event type."""

    def __init__(self):
        self._callbacks: List[Callable] = []

    def subscribe(self, callback: Callable) -> Unsubscribe:
        self._callbacks.append(callback)

        def _unsubscribe() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return _unsubscribe

    def emit(self, *args) -> None:
        for callback in list(self._callbacks):
            callback(*args)

    def __len__(self) -> int:
        return len(self._callbacks)


class SignalHub:
    """In-process EnvironmentSignals implementation."""

    def __init__(
        self,
        online: bool = True,
        prefers_dark: bool = False,
        logger: Optional[logging.Logger] = None
    ):
        self._logger = logger or logging.getLogger(__name__)
        self._online = online
        self._prefers_dark = prefers_dark
        self._applied_dark: Optional[bool] = None
        self._activity = _Channel()
        self._connectivity = _Channel()
        self._color_scheme = _Channel()

    # EnvironmentSignals protocol

    def is_online(self) -> bool:
        return self._online

    def prefers_dark(self) -> bool:
        return self._prefers_dark

    def apply_color_scheme(self, dark: bool) -> None:
        self._applied_dark = dark
        self._logger.debug(f"Applied {'dark' if dark else 'light'} color scheme")

    def subscribe_activity(self, callback: Callable[[str], None]) -> Unsubscribe:
        return self._activity.subscribe(callback)

    def subscribe_connectivity(self, callback: Callable[[bool], None]) -> Unsubscribe:
        return self._connectivity.subscribe(callback)

    def subscribe_color_scheme(self, callback: Callable[[bool], None]) -> Unsubscribe:
        return self._color_scheme.subscribe(callback)

    # Host side

    @property
    def applied_dark(self) -> Optional[bool]:
        """Last color scheme applied, None before the first apply."""
        return self._applied_dark

    @property
    def subscriber_count(self) -> int:
        return len(self._activity) + len(self._connectivity) + len(self._color_scheme)

    def emit_activity(self, event: str = 'mousedown') -> None:
        self._activity.emit(event)

    def set_online(self, online: bool) -> None:
        if online == self._online:
            return
        self._online = online
        self._connectivity.emit(online)

    def set_prefers_dark(self, prefers_dark: bool) -> None:
        if prefers_dark == self._prefers_dark:
            return
        self._prefers_dark = prefers_dark
        self._color_scheme.emit(prefers_dark)


class LoggingNotifier:
    """Notifier that writes notifications to a logger."""

    _LEVELS = {
        NotificationKind.SUCCESS: logging.INFO,
        NotificationKind.INFO: logging.INFO,
        NotificationKind.ERROR: logging.ERROR,
        NotificationKind.SESSION_EXPIRED: logging.WARNING,
    }

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._logger = logger or logging.getLogger(__name__)

    def notify(self, notification: Notification) -> None:
        text = notification.title
        if notification.description:
            text = f"{text}: {notification.description}"
        self._logger.log(self._LEVELS.get(notification.kind, logging.INFO), text)


class CollectingNotifier:
    """Notifier that keeps every notification in order."""

    def __init__(self):
        self.notifications: List[Notification] = []

    def notify(self, notification: Notification) -> None:
        self.notifications.append(notification)

    def kinds(self) -> List[NotificationKind]:
        return [n.kind for n in self.notifications]

    def titles(self) -> List[str]:
        return [n.title for n in self.notifications]
