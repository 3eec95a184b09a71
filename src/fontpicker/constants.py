"""Provider endpoints and catalog defaults."""

from __future__ import annotations


PROVIDER_HOST = "fonts.bunny.net"
PROVIDER_ORIGIN = f"https://{PROVIDER_HOST}"
REMOTE_URL = f"{PROVIDER_ORIGIN}/list"
STYLESHEET_URL = f"{PROVIDER_ORIGIN}/css"

CACHE_KEY = "catalog"
CACHE_DEFAULT_TTL = 10080  # minutes, one week
DEFAULT_TIMEOUT = 5.0

FALLBACK_RESOURCE = "catalog.json"


__all__ = [
    "CACHE_DEFAULT_TTL",
    "CACHE_KEY",
    "DEFAULT_TIMEOUT",
    "FALLBACK_RESOURCE",
    "PROVIDER_HOST",
    "PROVIDER_ORIGIN",
    "REMOTE_URL",
    "STYLESHEET_URL",
]
