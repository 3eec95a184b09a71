"""Resolution of the directory holding the persisted catalog cache."""

from __future__ import annotations

import os
from pathlib import Path


CACHE_DIR_ENV = "FONTPICKER_CACHE_DIR"


def _resolve_cache_root(cache_root: str | Path | None) -> Path:
    if cache_root is not None:
        return Path(cache_root).expanduser()
    env_cache = os.environ.get(CACHE_DIR_ENV)
    if env_cache:
        return Path(env_cache).expanduser()
    xdg_cache = os.environ.get("XDG_CACHE_HOME")
    if xdg_cache:
        return Path(xdg_cache).expanduser() / "fontpicker"
    return Path.home() / ".cache" / "fontpicker"


def get_cache_dir(
    *parts: str | Path, cache_root: str | Path | None = None, create: bool = False
) -> Path:
    """Return a directory under the cache root, creating it when requested.

    The root is taken from ``cache_root`` when given, then from the
    ``FONTPICKER_CACHE_DIR`` and ``XDG_CACHE_HOME`` environment variables, and
    finally defaults to ``~/.cache/fontpicker``.
    """
    target = _resolve_cache_root(cache_root).joinpath(*parts)
    if create:
        target.mkdir(parents=True, exist_ok=True)
    return target


__all__ = ["CACHE_DIR_ENV", "get_cache_dir"]
