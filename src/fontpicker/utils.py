"""Shared coercion helpers for weights, fallbacks, and slugs."""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable, Iterator, Mapping
import math
import re
from typing import Any, TypeVar

from slugify import slugify


T = TypeVar("T", bound=Hashable)

CSS_CUSTOM_PROPERTY_PREFIX = "--"

_LEADING_INTEGER = re.compile(r"^\s*\+?(\d+)")


def _is_sequence(value: Any) -> bool:
    if isinstance(value, (str, bytes, bytearray, Mapping)):
        return False
    return isinstance(value, Iterable)


def flatten(items: Iterable[Any], *, is_leaf: Callable[[Any], bool] | None = None) -> Iterator[Any]:
    """Yield the leaves of arbitrarily nested iterables in order.

    Strings, bytes and mappings are leaves. ``is_leaf`` can mark additional
    values that must be yielded as-is even though they are iterable.
    """
    for item in items:
        if (is_leaf is not None and is_leaf(item)) or not _is_sequence(item):
            yield item
            continue
        yield from flatten(item, is_leaf=is_leaf)


def unique(values: Iterable[T]) -> list[T]:
    """Deduplicate values while preserving the first-seen order."""
    return list(dict.fromkeys(values))


def coerce_weight(value: Any) -> int | None:
    """Convert a loose weight value into a positive integer, or ``None``."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        number = value
    elif isinstance(value, float):
        if not math.isfinite(value):
            return None
        number = int(value)
    elif isinstance(value, str):
        match = _LEADING_INTEGER.match(value)
        if match is None:
            return None
        number = int(match.group(1))
    else:
        return None
    return number if number > 0 else None


def normalize_weights(weights: Any) -> list[int]:
    """Return positive, deduplicated weights sorted ascending.

    Accepts a scalar or nested iterables; anything that is not a usable
    weight is dropped silently.
    """
    if weights is None:
        return []
    if not _is_sequence(weights):
        weights = [weights]
    coerced = (coerce_weight(item) for item in flatten(weights))
    return sorted({weight for weight in coerced if weight is not None})


def normalize_css_fallback(token: Any) -> str | None:
    """Convert a fallback token into a CSS value.

    Custom properties (``--name``) become ``var(--name)`` references, other
    tokens are kept verbatim after trimming, and blank tokens are dropped.
    """
    if token is None or isinstance(token, (bool, Mapping)):
        return None
    text = str(token).strip()
    if not text:
        return None
    if text.startswith(CSS_CUSTOM_PROPERTY_PREFIX):
        return f"var({text})"
    return text


def slugify_value(value: str) -> str:
    """Return the catalog slug form of a free-form name."""
    return slugify(value, separator="-")


__all__ = [
    "CSS_CUSTOM_PROPERTY_PREFIX",
    "coerce_weight",
    "flatten",
    "normalize_css_fallback",
    "normalize_weights",
    "slugify_value",
    "unique",
]
