"""
Key-value store protocol interface.
Defines the persistence port used for session credentials.
"""

from __future__ import annotations
from typing import Optional, Protocol


class KeyValueStore(Protocol):
    """Protocol for string key-value persistence."""

    def get(self, key: str) -> Optional[str]:
        """Return the stored value or None."""
        ...

    def set(self, key: str, value: str) -> None:
        """Store a value under key."""
        ...

    def remove(self, key: str) -> None:
        """Remove key; removing a missing key is not an error."""
        ...
