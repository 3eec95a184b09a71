"""Catalog acquisition with cache, remote and bundled fallbacks.

Architecture
: `CatalogStore` owns one catalog generation at a time. The first lookup
  loads it from the cache, the provider's font list, or the bundled JSON file,
  in that order. Loading is serialised with a lock so concurrent callers
  trigger at most one remote request.
: Each source is read into a `FetchResult`; `select_catalog` then picks the
  first usable payload. Nothing in the acquisition path raises: a store whose
  every source failed simply serves an empty catalog.
: Only a payload obtained from the remote endpoint is written back to the
  cache.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from importlib import resources
import json
import logging
from pathlib import Path
from threading import RLock
from types import MappingProxyType
from typing import Any

from fontpicker.cache import CatalogCache, FileCache
from fontpicker.config import FontpickerConfig
from fontpicker.constants import CACHE_KEY, FALLBACK_RESOURCE
from fontpicker.exceptions import CatalogAcquisitionError, exception_hint
from fontpicker.remote import (
    CatalogFetcher,
    CatalogSource,
    FetchResult,
    RequestsCatalogFetcher,
    ensure_catalog_payload,
)
from fontpicker.user_dir import get_cache_dir
from fontpicker.utils import normalize_weights, unique


logger = logging.getLogger(__name__)

_DATA_PACKAGE = "fontpicker.data"


@dataclass(frozen=True, slots=True)
class CatalogEntry:
    """Catalog record for one font family."""

    slug: str
    family_name: str | None = None
    weights: tuple[int, ...] = ()
    styles: tuple[str, ...] = ()

    @classmethod
    def from_payload(cls, slug: str, data: Mapping[str, Any]) -> CatalogEntry:
        """Build an entry from a provider payload, tolerating missing fields."""
        family = data.get("familyName")
        raw_styles = data.get("styles")
        styles: list[str] = []
        if isinstance(raw_styles, (list, tuple)):
            styles = [str(style).strip().lower() for style in raw_styles if style is not None]
        return cls(
            slug=slug,
            family_name=family if isinstance(family, str) and family else None,
            weights=tuple(normalize_weights(data.get("weights"))),
            styles=tuple(unique(style for style in styles if style)),
        )

    def has_style(self, style: str) -> bool:
        wanted = style.lower()
        return any(label.lower() == wanted for label in self.styles)


Catalog = Mapping[str, CatalogEntry]


def parse_catalog(payload: Mapping[str, Any]) -> dict[str, CatalogEntry]:
    """Convert a slug-keyed JSON payload into catalog entries.

    Keys are normalised to lowercase; values that are not objects are skipped.
    """
    entries: dict[str, CatalogEntry] = {}
    for raw_slug, data in payload.items():
        if not isinstance(raw_slug, str) or not isinstance(data, Mapping):
            continue
        slug = raw_slug.strip().lower()
        if not slug:
            continue
        entries[slug] = CatalogEntry.from_payload(slug, data)
    return entries


def select_catalog(cached: FetchResult, remote: FetchResult, bundled: FetchResult) -> FetchResult:
    """Return the first usable result in cache, remote, bundled order."""
    for result in (cached, remote, bundled):
        if result.ok:
            return result
    reasons = [result.reason for result in (cached, remote, bundled) if result.reason]
    return FetchResult(source=CatalogSource.EMPTY, payload={}, reason="; ".join(reasons) or None)


def _resource_bytes(name: str) -> bytes:
    resource = resources.files(_DATA_PACKAGE) / name
    with resources.as_file(resource) as path:
        return path.read_bytes()


def load_bundled_catalog(path: Path | None = None) -> FetchResult:
    """Read the bundled fallback catalog; malformed files yield a failure."""
    origin = str(path) if path is not None else f"{_DATA_PACKAGE}/{FALLBACK_RESOURCE}"
    try:
        raw = path.read_bytes() if path is not None else _resource_bytes(FALLBACK_RESOURCE)
        payload = ensure_catalog_payload(json.loads(raw or b"{}"), origin=origin)
    except (OSError, ValueError, CatalogAcquisitionError) as exc:
        return FetchResult.failure(CatalogSource.BUNDLED, exception_hint(exc) or origin)
    return FetchResult.success(CatalogSource.BUNDLED, payload)


class CatalogStore:
    """Lazily loaded, memoised view of the font catalog."""

    def __init__(
        self,
        *,
        config: FontpickerConfig | None = None,
        fetcher: CatalogFetcher | None = None,
        cache: CatalogCache | None = None,
        fallback_path: Path | None = None,
    ) -> None:
        self.config = config or FontpickerConfig()
        self.fetcher = fetcher or RequestsCatalogFetcher(
            self.config.remote_url, timeout=self.config.timeout
        )
        self.cache = (
            cache if cache is not None else FileCache(get_cache_dir(cache_root=self.config.cache_dir))
        )
        self.fallback_path = (
            fallback_path if fallback_path is not None else self.config.fallback_path
        )
        self._lock = RLock()
        self._catalog: Catalog | None = None
        self._entries: dict[str, CatalogEntry] = {}
        self._generation = 0
        self._source: CatalogSource | None = None

    @property
    def generation(self) -> int:
        """Counter bumped every time a catalog is loaded."""
        return self._generation

    @property
    def source(self) -> CatalogSource | None:
        """Tier that served the current catalog, ``None`` before the first load."""
        return self._source

    def all(self) -> Catalog:
        """Return the entire catalog, loading it on first use."""
        catalog = self._catalog
        if catalog is not None:
            return catalog
        with self._lock:
            if self._catalog is None:
                result = self._load()
                self._catalog = MappingProxyType(parse_catalog(result.payload or {}))
                self._entries = {}
                self._source = result.source
                self._generation += 1
            return self._catalog

    def find(self, slug: str) -> CatalogEntry | None:
        """Find an entry by slug, case-insensitively."""
        key = slug.strip().lower()
        if not key:
            return None
        catalog = self.all()
        entry = self._entries.get(key)
        if entry is not None:
            return entry
        entry = catalog.get(key)
        if entry is not None:
            self._entries[key] = entry
        return entry

    def search(self, query: str = "", *, limit: int | None = None) -> list[CatalogEntry]:
        """Return entries whose slug or family name contains ``query``."""
        needle = query.strip().lower()
        matches = [
            entry
            for slug, entry in sorted(self.all().items())
            if not needle or needle in slug or needle in (entry.family_name or "").lower()
        ]
        return matches[:limit] if limit is not None else matches

    def reload(self, *, force_remote: bool = False) -> None:
        """Drop the loaded catalog; the next lookup loads a new generation.

        With ``force_remote`` the cached payload is discarded as well so the
        next load goes back to the provider.
        """
        with self._lock:
            self._catalog = None
            self._entries = {}
            self._source = None
            if force_remote:
                self._delete_cached()

    def __contains__(self, slug: object) -> bool:
        return isinstance(slug, str) and self.find(slug) is not None

    def __len__(self) -> int:
        return len(self.all())

    # ------------------------------------------------------------------ loading

    def _load(self) -> FetchResult:
        ttl = self.config.cache_ttl
        remote_enabled = not self.config.disable_remote_catalog
        use_cache = ttl > 0 and remote_enabled

        cached = (
            self._read_cache()
            if use_cache
            else FetchResult.failure(CatalogSource.CACHE, "catalog cache disabled")
        )
        if cached.ok:
            remote = FetchResult.failure(CatalogSource.REMOTE, "not requested")
        elif remote_enabled:
            remote = self._fetch_remote()
        else:
            remote = FetchResult.failure(CatalogSource.REMOTE, "remote catalog disabled")
        if cached.ok or remote.ok:
            bundled = FetchResult.failure(CatalogSource.BUNDLED, "not requested")
        else:
            bundled = load_bundled_catalog(self.fallback_path)

        result = select_catalog(cached, remote, bundled)
        if result.source is CatalogSource.EMPTY:
            logger.warning("No font catalog available: %s", result.reason)
        else:
            logger.debug(
                "Font catalog loaded from %s (%d entries)",
                result.source.value,
                len(result.payload or {}),
            )

        if result.source is CatalogSource.REMOTE and use_cache:
            self._write_cache(result.payload or {}, ttl)
        return result

    def _read_cache(self) -> FetchResult:
        try:
            data = self.cache.get(CACHE_KEY)
        except Exception as exc:
            logger.warning("Catalog cache read failed: %s", exc)
            return FetchResult.failure(CatalogSource.CACHE, str(exc))
        if isinstance(data, Mapping) and data:
            return FetchResult.success(CatalogSource.CACHE, dict(data))
        return FetchResult.failure(CatalogSource.CACHE, "cache miss")

    def _fetch_remote(self) -> FetchResult:
        try:
            result = self.fetcher.fetch()
        except Exception as exc:
            result = FetchResult.failure(CatalogSource.REMOTE, exception_hint(exc) or repr(exc))
        if not result.ok:
            logger.warning("Remote font catalog unavailable, using fallback: %s", result.reason)
        return result

    def _write_cache(self, payload: dict[str, Any], ttl: int) -> None:
        try:
            self.cache.set(CACHE_KEY, payload, ttl)
        except Exception as exc:
            logger.warning("Catalog cache write failed: %s", exc)

    def _delete_cached(self) -> None:
        try:
            self.cache.delete(CACHE_KEY)
        except Exception as exc:
            logger.warning("Catalog cache delete failed: %s", exc)


__all__ = [
    "Catalog",
    "CatalogEntry",
    "CatalogSource",
    "CatalogStore",
    "load_bundled_catalog",
    "parse_catalog",
    "select_catalog",
]
