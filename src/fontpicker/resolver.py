"""Match free-form user input to catalog entries."""

from __future__ import annotations

import re
from urllib.parse import urlsplit

from fontpicker.catalog import CatalogEntry, CatalogStore
from fontpicker.constants import PROVIDER_HOST
from fontpicker.utils import slugify_value


_FAMILY_PATH = re.compile(r"^/family/([a-z0-9-]+)$", re.IGNORECASE)


def looks_like_url(value: str) -> bool:
    """Detect whether a value should be treated as a URL before parsing."""
    return "://" in value or f"{PROVIDER_HOST}/" in value.lower()


def slug_from_url(value: str) -> str | None:
    """Extract the family slug from a provider family page URL.

    Only ``https://fonts.bunny.net/family/<slug>`` style URLs are accepted;
    the scheme may be omitted.
    """
    candidate = value if "://" in value else f"https://{value.lstrip('/')}"
    try:
        parts = urlsplit(candidate)
        host = (parts.hostname or "").lower()
    except ValueError:
        return None
    if host != PROVIDER_HOST:
        return None
    match = _FAMILY_PATH.match(parts.path)
    if match is None:
        return None
    return match.group(1).lower()


class FontResolver:
    """Resolve slugs, provider URLs, and family names against a catalog store.

    Strategies are tried in a fixed order and every hit is memoised under the
    original input. The memo belongs to one catalog generation and is dropped
    as soon as the store loads a new one.
    """

    def __init__(self, store: CatalogStore) -> None:
        self.store = store
        self._memo: dict[str, CatalogEntry] = {}
        self._generation: int | None = None

    def parse(self, value: str) -> CatalogEntry | None:
        """Return the catalog entry matching ``value`` or ``None``."""
        if not isinstance(value, str):
            return None
        value = value.strip()
        if not value:
            return None
        self._sync_generation()

        entry = self._memo.get(value)
        if entry is not None:
            return entry

        normalized = value.lower()
        entry = self._memo.get(normalized)
        if entry is not None:
            return self._remember(entry, value)

        entry = self.store.find(normalized)
        if entry is not None:
            return self._remember(entry, value, normalized)

        slug_candidate = slugify_value(value)
        if slug_candidate and slug_candidate != normalized:
            entry = self.store.find(slug_candidate)
            if entry is not None:
                return self._remember(entry, value, slug_candidate)

        if looks_like_url(value):
            # A URL that is not a family page never matches as a slug either.
            slug = slug_from_url(value)
            entry = self.store.find(slug) if slug else None
            return self._remember(entry, value) if entry is not None else None

        entry = self.store.find(slug_candidate) if slug_candidate else None
        if entry is not None:
            return self._remember(entry, value)
        return None

    def clear(self) -> None:
        """Forget every memoised match."""
        self._memo = {}

    def _remember(self, entry: CatalogEntry, *keys: str) -> CatalogEntry:
        for key in keys:
            self._memo[key] = entry
        return entry

    def _sync_generation(self) -> None:
        self.store.all()
        if self._generation != self.store.generation:
            self._memo = {}
            self._generation = self.store.generation


__all__ = ["FontResolver", "looks_like_url", "slug_from_url"]
