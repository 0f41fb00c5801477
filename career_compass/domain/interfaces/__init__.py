"""Domain interfaces package - Protocols for ports."""

from .transport import Transport, RawResponse
from .key_value_store import KeyValueStore
from .environment import EnvironmentSignals, Notifier, Unsubscribe

__all__ = [
    "Transport",
    "RawResponse",
    "KeyValueStore",
    "EnvironmentSignals",
    "Notifier",
    "Unsubscribe",
]
