from __future__ import annotations

import json
from pathlib import Path
import threading
import time

import pytest

from conftest import FakeFetcher, RecordingCache

from fontpicker.catalog import (
    CatalogEntry,
    CatalogStore,
    load_bundled_catalog,
    parse_catalog,
    select_catalog,
)
from fontpicker.config import FontpickerConfig
from fontpicker.constants import CACHE_DEFAULT_TTL, CACHE_KEY
from fontpicker.remote import CatalogSource, FetchResult


def _failing_fetcher(reason: str = "HTTP 500") -> FakeFetcher:
    return FakeFetcher(FetchResult.failure(CatalogSource.REMOTE, reason))


def test_remote_catalog_is_loaded_and_cached(make_store, catalog_payload) -> None:
    cache = RecordingCache()
    store = make_store(cache=cache)

    assert set(store.all()) == set(catalog_payload)
    assert store.source is CatalogSource.REMOTE
    assert store.fetcher.calls == 1
    assert cache.writes == [(CACHE_KEY, CACHE_DEFAULT_TTL)]
    assert cache.get(CACHE_KEY) == catalog_payload


def test_cached_catalog_skips_network(make_store, catalog_payload) -> None:
    cache = RecordingCache()
    cache.set(CACHE_KEY, {"roboto": catalog_payload["roboto"]}, 60)
    cache.writes.clear()
    store = make_store(cache=cache)

    assert list(store.all()) == ["roboto"]
    assert store.source is CatalogSource.CACHE
    assert store.fetcher.calls == 0
    assert cache.writes == []


def test_empty_cached_catalog_is_a_miss(make_store) -> None:
    cache = RecordingCache()
    cache.set(CACHE_KEY, {}, 60)
    store = make_store(cache=cache)

    store.all()
    assert store.source is CatalogSource.REMOTE
    assert store.fetcher.calls == 1


def test_remote_failure_falls_back_without_cache_write(make_store) -> None:
    cache = RecordingCache()
    store = make_store(fetcher=_failing_fetcher(), cache=cache)

    bundled = load_bundled_catalog()
    assert bundled.ok
    assert set(store.all()) == set(parse_catalog(bundled.payload or {}))
    assert store.source is CatalogSource.BUNDLED
    assert cache.writes == []


def test_raising_fetcher_is_absorbed(make_store) -> None:
    class ExplodingFetcher:
        def fetch(self) -> FetchResult:
            raise ConnectionError("boom")

    store = make_store(fetcher=ExplodingFetcher())
    assert store.find("roboto") is not None
    assert store.source is CatalogSource.BUNDLED


def test_disabled_remote_skips_cache_and_network(make_store, catalog_payload) -> None:
    cache = RecordingCache()
    cache.set(CACHE_KEY, catalog_payload, 60)
    store = make_store(cache=cache, disable_remote_catalog=True)

    store.all()
    assert store.source is CatalogSource.BUNDLED
    assert store.fetcher.calls == 0
    assert cache.reads == []


def test_zero_ttl_bypasses_cache(make_store) -> None:
    cache = RecordingCache()
    store = make_store(cache=cache, cache_ttl=0)

    store.all()
    assert store.source is CatalogSource.REMOTE
    assert cache.reads == []
    assert cache.writes == []


def test_corrupt_fallback_yields_empty_catalog(tmp_path: Path) -> None:
    fallback = tmp_path / "catalog.json"
    fallback.write_text("{not json", encoding="utf-8")
    store = CatalogStore(
        config=FontpickerConfig(),
        fetcher=_failing_fetcher(),
        cache=RecordingCache(),
        fallback_path=fallback,
    )

    assert dict(store.all()) == {}
    assert store.source is CatalogSource.EMPTY
    assert store.find("roboto") is None


def test_missing_fallback_yields_empty_catalog(tmp_path: Path) -> None:
    store = CatalogStore(
        config=FontpickerConfig(disable_remote_catalog=True),
        fetcher=_failing_fetcher(),
        cache=RecordingCache(),
        fallback_path=tmp_path / "missing.json",
    )
    assert len(store) == 0


def test_custom_fallback_file(tmp_path: Path) -> None:
    fallback = tmp_path / "catalog.json"
    fallback.write_text(
        json.dumps({"Custom-Font": {"familyName": "Custom Font", "weights": [400]}}),
        encoding="utf-8",
    )
    store = CatalogStore(
        config=FontpickerConfig(disable_remote_catalog=True),
        fetcher=_failing_fetcher(),
        cache=RecordingCache(),
        fallback_path=fallback,
    )
    assert store.find("custom-font") == CatalogEntry(
        slug="custom-font", family_name="Custom Font", weights=(400,), styles=()
    )


def test_configured_fallback_file_replaces_bundled_copy(make_store, tmp_path: Path) -> None:
    snapshot = tmp_path / "list.json"
    snapshot.write_text(json.dumps({"zen-dots": {"familyName": "Zen Dots"}}), encoding="utf-8")
    store = make_store(fetcher=_failing_fetcher(), fallback_path=snapshot)

    assert store.fallback_path == snapshot
    assert set(store.all()) == {"zen-dots"}
    assert store.source is CatalogSource.BUNDLED


def test_bundled_catalog_covers_common_families() -> None:
    entries = parse_catalog(load_bundled_catalog().payload or {})
    assert len(entries) > 100
    for slug in ("roboto", "open-sans", "montserrat", "source-code-pro", "noto-sans-jp"):
        assert entries[slug].family_name
        assert entries[slug].weights
    assert entries["molle"].styles == ("italic",)


def test_find_is_case_insensitive_and_sets_slug(store) -> None:
    entry = store.find("RoBoTo")
    assert entry is not None
    assert entry.slug == "roboto"
    assert entry.family_name == "Roboto"
    assert store.find("roboto") is entry
    assert store.find("unknown") is None
    assert store.find("   ") is None


def test_entries_are_normalised(store) -> None:
    open_sans = store.find("open-sans")
    assert open_sans.weights == (300, 400, 700)
    assert open_sans.styles == ("normal", "italic")

    plain = store.find("plain")
    assert plain.weights == (300, 500)
    assert plain.family_name is None
    assert plain.styles == ()


def test_catalog_is_read_only(store) -> None:
    with pytest.raises(TypeError):
        store.all()["new"] = CatalogEntry(slug="new")  # type: ignore[index]


def test_reload_starts_new_generation(make_store) -> None:
    store = make_store()
    store.all()
    assert store.generation == 1

    store.reload()
    assert store.source is None
    store.all()
    assert store.generation == 2
    # second load is served by the cache written during the first one
    assert store.source is CatalogSource.CACHE
    assert store.fetcher.calls == 1


def test_forced_reload_refetches(make_store) -> None:
    cache = RecordingCache()
    store = make_store(cache=cache)
    store.all()

    store.reload(force_remote=True)
    assert cache.get(CACHE_KEY) is None
    store.all()
    assert store.source is CatalogSource.REMOTE
    assert store.fetcher.calls == 2


def test_search_matches_slug_and_family(store) -> None:
    assert [entry.slug for entry in store.search("OPEN")] == ["open-sans"]
    assert [entry.slug for entry in store.search("ital")] == ["italiana"]
    assert len(store.search()) == len(store)
    assert len(store.search("", limit=2)) == 2


def test_concurrent_loads_fetch_once(make_store, catalog_payload) -> None:
    class SlowFetcher(FakeFetcher):
        def fetch(self) -> FetchResult:
            time.sleep(0.05)
            return super().fetch()

    fetcher = SlowFetcher(FetchResult.success(CatalogSource.REMOTE, catalog_payload))
    store = make_store(fetcher=fetcher)

    threads = [threading.Thread(target=store.all) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert fetcher.calls == 1
    assert store.generation == 1


def test_select_catalog_prefers_first_usable_result() -> None:
    cached = FetchResult.failure(CatalogSource.CACHE, "cache miss")
    remote = FetchResult.success(CatalogSource.REMOTE, {"a": {}})
    bundled = FetchResult.success(CatalogSource.BUNDLED, {"b": {}})

    assert select_catalog(cached, remote, bundled) is remote

    empty = select_catalog(
        cached,
        FetchResult.failure(CatalogSource.REMOTE, "HTTP 503"),
        FetchResult.failure(CatalogSource.BUNDLED, "missing"),
    )
    assert empty.source is CatalogSource.EMPTY
    assert empty.payload == {}
    assert empty.reason == "cache miss; HTTP 503; missing"


def test_parse_catalog_skips_malformed_values() -> None:
    entries = parse_catalog({"Good": {"weights": [400]}, "bad": ["400"], "": {}, "  ": {}})
    assert list(entries) == ["good"]
