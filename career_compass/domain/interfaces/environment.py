"""
Environment signal protocols.
Abstracts user-interaction, connectivity and color-scheme events plus
user-facing notifications so session logic runs without a UI.
"""

from __future__ import annotations
from typing import Callable, Protocol

from ..models.session import Notification

Unsubscribe = Callable[[], None]


class EnvironmentSignals(Protocol):
    """Protocol for the host environment (browser window, desktop shell, test double)."""

    def is_online(self) -> bool:
        """Current connectivity."""
        ...

    def prefers_dark(self) -> bool:
        """Current 'prefers dark color scheme' signal."""
        ...

    def apply_color_scheme(self, dark: bool) -> None:
        """Apply the resolved color scheme to the display."""
        ...

    def subscribe_activity(self, callback: Callable[[str], None]) -> Unsubscribe:
        """Subscribe to user-interaction events; callback receives the event name."""
        ...

    def subscribe_connectivity(self, callback: Callable[[bool], None]) -> Unsubscribe:
        """Subscribe to online/offline transitions."""
        ...

    def subscribe_color_scheme(self, callback: Callable[[bool], None]) -> Unsubscribe:
        """Subscribe to 'prefers dark' changes."""
        ...


class Notifier(Protocol):
    """Protocol for surfacing notifications to the user."""

    def notify(self, notification: Notification) -> None:
        ...
