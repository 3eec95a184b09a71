from __future__ import annotations

from collections.abc import Callable
import copy
from typing import Any

import pytest

from fontpicker.cache import MemoryCache
from fontpicker.catalog import CatalogStore
from fontpicker.config import FontpickerConfig
from fontpicker.remote import CatalogSource, FetchResult


CATALOG: dict[str, dict[str, Any]] = {
    "roboto": {"familyName": "Roboto", "weights": [400, 700], "styles": ["normal", "italic"]},
    "open-sans": {
        "familyName": "Open Sans",
        "weights": [700, 300, 400, 400],
        "styles": ["Normal", "Italic"],
    },
    "inter": {"familyName": "Inter", "weights": [400, 700, 900], "styles": ["normal"]},
    "italiana": {"familyName": "Italiana", "weights": [400], "styles": ["italic"]},
    "plain": {"familyName": "", "weights": ["300", 0, -5, "bold", 500]},
    "hollow": {"familyName": "Hollow", "weights": [], "styles": ["normal"]},
    "quoted": {"familyName": 'Say "Hi" \\ Co', "weights": [400], "styles": ["normal"]},
}


class FakeFetcher:
    """Fetcher returning a canned result and counting calls."""

    def __init__(self, result: FetchResult) -> None:
        self.result = result
        self.calls = 0

    def fetch(self) -> FetchResult:
        self.calls += 1
        return self.result


class RecordingCache(MemoryCache):
    """Memory cache remembering every read and write."""

    def __init__(self) -> None:
        super().__init__()
        self.reads: list[str] = []
        self.writes: list[tuple[str, int]] = []

    def get(self, key: str) -> Any | None:
        self.reads.append(key)
        return super().get(key)

    def set(self, key: str, value: Any, ttl_minutes: int) -> None:
        self.writes.append((key, ttl_minutes))
        super().set(key, value, ttl_minutes)


@pytest.fixture
def catalog_payload() -> dict[str, dict[str, Any]]:
    return copy.deepcopy(CATALOG)


@pytest.fixture
def make_store(catalog_payload) -> Callable[..., CatalogStore]:
    """Build a store fed by a fake remote fetcher and an in-memory cache."""

    def factory(
        payload: dict[str, Any] | None = None,
        *,
        fetcher: Any = None,
        cache: Any = None,
        **config: Any,
    ) -> CatalogStore:
        if fetcher is None:
            fetcher = FakeFetcher(
                FetchResult.success(CatalogSource.REMOTE, payload or catalog_payload)
            )
        return CatalogStore(
            config=FontpickerConfig(**config),
            fetcher=fetcher,
            cache=cache if cache is not None else RecordingCache(),
        )

    return factory


@pytest.fixture
def store(make_store) -> CatalogStore:
    return make_store()
