"""
JSON file key-value store.
Persists the session across CLI invocations.
"""

from __future__ import annotations
import json
import logging
import os
import threading
from typing import Dict, Optional


class JsonFileKeyValueStore:
    """Key-value store kept in a single JSON object on disk."""

    def __init__(self, path: str, logger: Optional[logging.Logger] = None):
        self._path = os.path.expanduser(path)
        self._lock = threading.RLock()
        self._logger = logger or logging.getLogger(__name__)

    @property
    def path(self) -> str:
        return self._path

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            data = self._load()
            data[key] = value
            self._save(data)

    def remove(self, key: str) -> None:
        with self._lock:
            data = self._load()
            if key in data:
                del data[key]
                self._save(data)

    def _load(self) -> Dict[str, str]:
        if not os.path.exists(self._path):
            return {}
        try:
            with open(self._path, 'r', encoding='utf-8') as fh:
                data = json.load(fh)
        except (OSError, ValueError) as e:
            self._logger.warning(f"Ignoring unreadable session store {self._path}: {e}")
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def _save(self, data: Dict[str, str]) -> None:
        directory = os.path.dirname(self._path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        tmp_path = f"{self._path}.tmp"
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        # Created owner-only (0600) before any data is written
        fd = os.open(tmp_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            json.dump(data, fh, indent=2, sort_keys=True)
        # Atomic replace keeps the three session keys consistent on disk
        os.replace(tmp_path, self._path)
