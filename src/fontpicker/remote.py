"""Fetch results and the HTTP client for the provider's font list."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from threading import Lock
from typing import Any, Protocol

import requests

from fontpicker.constants import DEFAULT_TIMEOUT, REMOTE_URL
from fontpicker.exceptions import CatalogAcquisitionError


class CatalogSource(str, Enum):
    """Tier that produced a catalog payload."""

    CACHE = "cache"
    REMOTE = "remote"
    BUNDLED = "bundled"
    EMPTY = "empty"


@dataclass(frozen=True, slots=True)
class FetchResult:
    """Outcome of reading one catalog source: a payload or a failure reason."""

    source: CatalogSource
    payload: dict[str, Any] | None = None
    reason: str | None = None

    @property
    def ok(self) -> bool:
        return bool(self.payload)

    @classmethod
    def success(cls, source: CatalogSource, payload: dict[str, Any]) -> FetchResult:
        return cls(source=source, payload=payload)

    @classmethod
    def failure(cls, source: CatalogSource, reason: str) -> FetchResult:
        return cls(source=source, reason=reason)


def ensure_catalog_payload(data: Any, *, origin: str) -> dict[str, Any]:
    """Return ``data`` as a catalog mapping or raise when it is unusable."""
    if not isinstance(data, Mapping):
        raise CatalogAcquisitionError(
            f"{origin} returned {type(data).__name__} instead of a JSON object."
        )
    if not data:
        raise CatalogAcquisitionError(f"{origin} returned an empty catalog.")
    return dict(data)


class CatalogFetcher(Protocol):
    """Anything able to retrieve the remote catalog."""

    def fetch(self) -> FetchResult: ...


class RequestsCatalogFetcher:
    """Retrieve the provider catalog over HTTP with a single short request."""

    _DEFAULT_USER_AGENT = "fontpicker-catalog-fetcher"

    def __init__(
        self,
        url: str = REMOTE_URL,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
        user_agent: str | None = None,
    ) -> None:
        self.url = url
        self._timeout = timeout
        self._session_lock = Lock()
        self._session: requests.Session | None = session
        self._user_agent = user_agent or self._DEFAULT_USER_AGENT

    def fetch(self) -> FetchResult:
        """Return the catalog payload, converting every failure into a result."""
        try:
            payload = self._request()
        except CatalogAcquisitionError as exc:
            return FetchResult.failure(CatalogSource.REMOTE, str(exc))
        return FetchResult.success(CatalogSource.REMOTE, payload)

    def _request(self) -> dict[str, Any]:
        client = self._ensure_session()
        headers = {"User-Agent": self._user_agent, "Accept": "application/json"}
        try:
            response = client.get(self.url, headers=headers, timeout=self._timeout)
        except requests.RequestException as exc:
            raise CatalogAcquisitionError(f"{self.url}: {exc}") from exc
        if response.status_code != 200:
            raise CatalogAcquisitionError(f"{self.url}: HTTP {response.status_code}")
        try:
            data = response.json()
        except ValueError as exc:
            raise CatalogAcquisitionError(f"{self.url}: malformed JSON body") from exc
        return ensure_catalog_payload(data, origin=self.url)

    def _ensure_session(self) -> requests.Session:
        if self._session is not None:
            return self._session
        with self._session_lock:
            if self._session is None:
                self._session = requests.Session()
            return self._session


__all__ = [
    "CatalogFetcher",
    "CatalogSource",
    "FetchResult",
    "RequestsCatalogFetcher",
    "ensure_catalog_payload",
]
