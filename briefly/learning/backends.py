"""
Storage backends for the learning cache.

A backend only moves a JSON-compatible snapshot in and out; the cache owns
the structure. ``InMemoryCacheBackend`` is used by tests,
``JsonFileCacheBackend`` in production.
"""

from __future__ import annotations

import copy
import json
import os
import tempfile
from abc import ABC, abstractmethod
from typing import Any

from briefly.observability.logging import get_logger
from briefly.observability.telemetry import counter

logger = get_logger(__name__)


class CacheBackend(ABC):
    """Load and persist a whole learning-cache snapshot."""

    @abstractmethod
    def load(self) -> dict[str, Any]:
        """Return the stored snapshot, or an empty dict if there is none."""

    @abstractmethod
    def save(self, data: dict[str, Any]) -> None:
        """Replace the stored snapshot with ``data``."""


class InMemoryCacheBackend(CacheBackend):
    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = copy.deepcopy(initial) if initial else {}
        self.save_count = 0

    def load(self) -> dict[str, Any]:
        return copy.deepcopy(self._data)

    def save(self, data: dict[str, Any]) -> None:
        self._data = copy.deepcopy(data)
        self.save_count += 1

    @property
    def data(self) -> dict[str, Any]:
        return self._data


class JsonFileCacheBackend(CacheBackend):
    """
    Single JSON file rewritten in full on every save.

    Writes go to a temp file in the same directory, then ``os.replace`` it
    over the target so a crash mid-write never leaves a truncated file.
    """

    def __init__(self, path: str) -> None:
        self.path = path

    def load(self) -> dict[str, Any]:
        if not os.path.exists(self.path):
            logger.info("No learning cache at %s, starting fresh", self.path)
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            counter("notegen.learning.load_error")
            logger.warning("Ignoring unreadable learning cache %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring learning cache %s: top level is not an object", self.path)
            return {}
        return data

    def save(self, data: dict[str, Any]) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(prefix=".notegen-cache-", suffix=".json", dir=directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except Exception:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
        counter("notegen.learning.saved")
        logger.debug("Saved learning cache to %s", self.path)
