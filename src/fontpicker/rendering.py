"""Text artifacts understood by the font provider and browsers."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from urllib.parse import quote

from fontpicker.constants import PROVIDER_ORIGIN, STYLESHEET_URL


INDENT = "    "


def family_descriptor(slug: str, tokens: Sequence[str]) -> str:
    """Return the ``slug:400,700i`` group for one family."""
    return quote(slug, safe="") + ":" + ",".join(tokens)


def stylesheet_url(families: Iterable[tuple[str, Sequence[str]]]) -> str | None:
    """Build one stylesheet URL requesting every family with tokens."""
    descriptors = [family_descriptor(slug, tokens) for slug, tokens in families if tokens]
    if not descriptors:
        return None
    return f"{STYLESHEET_URL}?family=" + "|".join(descriptors)


def render_stylesheet_link(url: str | None, *, preconnect: bool = True) -> str | None:
    if url is None:
        return None
    parts: list[str] = []
    if preconnect:
        parts.append(f'<link rel="preconnect" href="{PROVIDER_ORIGIN}">')
    parts.append(f'<link rel="stylesheet" href="{url}">')
    return "\n".join(parts)


def render_css_variables(definitions: Mapping[str, Sequence[str]]) -> str | None:
    """Render a ``:root`` style block declaring each custom property."""
    lines = [
        f"{INDENT}{variable}: {', '.join(values)};"
        for variable, values in definitions.items()
        if values
    ]
    if not lines:
        return None
    return "<style>\n:root {\n" + "\n".join(lines) + "\n}\n</style>"


def join_markup(*parts: str | None) -> str | None:
    """Join the non-empty markup fragments with newlines."""
    present = [part for part in parts if part]
    if not present:
        return None
    return "\n".join(present)


def quote_family_name(name: str) -> str:
    """Double-quote a family name for CSS, escaping quotes and backslashes."""
    escaped = name.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


__all__ = [
    "family_descriptor",
    "join_markup",
    "quote_family_name",
    "render_css_variables",
    "render_stylesheet_link",
    "stylesheet_url",
]
