"""Key-value store adapters."""

from .memory_store import InMemoryKeyValueStore
from .file_store import JsonFileKeyValueStore

__all__ = ['InMemoryKeyValueStore', 'JsonFileKeyValueStore']
