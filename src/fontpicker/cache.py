"""Key-value caches used to persist the remote catalog between runs.

Every cache honours the same small contract: ``get`` returns ``None`` for
missing or expired keys and ``set`` takes a lifetime in minutes. File caches
never raise on I/O problems; a broken cache behaves like an empty one.
"""

from __future__ import annotations

from collections.abc import Callable
from hashlib import sha256
import json
import logging
from pathlib import Path
from threading import Lock
import time
from typing import Any, Protocol, runtime_checkable


logger = logging.getLogger(__name__)

Clock = Callable[[], float]


@runtime_checkable
class CatalogCache(Protocol):
    """Minimal cache contract consumed by the catalog store."""

    def get(self, key: str) -> Any | None: ...

    def set(self, key: str, value: Any, ttl_minutes: int) -> None: ...

    def delete(self, key: str) -> None: ...

    def clear(self) -> None: ...


def _expires_at(clock: Clock, ttl_minutes: int) -> float:
    return clock() + ttl_minutes * 60


class NullCache:
    """Cache that never stores anything."""

    def get(self, key: str) -> Any | None:
        return None

    def set(self, key: str, value: Any, ttl_minutes: int) -> None:
        return None

    def delete(self, key: str) -> None:
        return None

    def clear(self) -> None:
        return None


class MemoryCache:
    """In-process cache with per-key expiry."""

    def __init__(self, *, clock: Clock = time.time) -> None:
        self._clock = clock
        self._items: dict[str, tuple[float, Any]] = {}
        self._lock = Lock()

    def get(self, key: str) -> Any | None:
        with self._lock:
            item = self._items.get(key)
            if item is None:
                return None
            expires, value = item
            if expires <= self._clock():
                del self._items[key]
                return None
            return value

    def set(self, key: str, value: Any, ttl_minutes: int) -> None:
        if ttl_minutes <= 0:
            return
        with self._lock:
            self._items[key] = (_expires_at(self._clock, ttl_minutes), value)

    def delete(self, key: str) -> None:
        with self._lock:
            self._items.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._items.clear()


class FileCache:
    """JSON file cache storing one document per key under ``directory``."""

    SUFFIX = ".json"

    def __init__(self, directory: Path, *, clock: Clock = time.time) -> None:
        self.directory = Path(directory)
        self._clock = clock

    def path_for(self, key: str) -> Path:
        digest = sha256(key.encode("utf-8")).hexdigest()[:16]
        return self.directory / f"{digest}{self.SUFFIX}"

    def get(self, key: str) -> Any | None:
        path = self.path_for(key)
        if not path.exists():
            return None
        try:
            document = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.debug("Ignoring unreadable cache file %s", path)
            return None
        if not isinstance(document, dict):
            return None
        expires = document.get("expires")
        if not isinstance(expires, (int, float)) or expires <= self._clock():
            return None
        return document.get("value")

    def set(self, key: str, value: Any, ttl_minutes: int) -> None:
        if ttl_minutes <= 0:
            return
        path = self.path_for(key)
        document = {"key": key, "expires": _expires_at(self._clock, ttl_minutes), "value": value}
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = path.with_suffix(".tmp")
            tmp_path.write_text(json.dumps(document), encoding="utf-8")
            tmp_path.replace(path)
        except (OSError, TypeError, ValueError) as exc:
            logger.warning("Unable to write cache file %s: %s", path, exc)

    def delete(self, key: str) -> None:
        try:
            self.path_for(key).unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("Unable to delete cache entry '%s': %s", key, exc)

    def clear(self) -> None:
        if not self.directory.is_dir():
            return
        for path in self.directory.glob(f"*{self.SUFFIX}"):
            try:
                path.unlink()
            except OSError as exc:
                logger.warning("Unable to delete cache file %s: %s", path, exc)


__all__ = ["CatalogCache", "Clock", "FileCache", "MemoryCache", "NullCache"]
