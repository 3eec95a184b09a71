"""Resolve web-font references and render provider stylesheet markup.

Architecture
: `CatalogStore` loads the provider's font list once per generation, from the
  cache, the remote endpoint, or the bundled copy, and never raises while
  doing so.
: `FontResolver` turns slugs, family page URLs, and display names into
  `CatalogEntry` records.
: `FontSelection` binds an entry to per-use overrides (weights, italics, CSS
  variable) and renders stylesheet URLs, ``<link>`` tags, and variable blocks.
: `FontCollection` merges selections into one deduplicated request and one
  ``:root`` style block.
: `FontPicker` wires the pieces together from a `FontpickerConfig`.
"""

from fontpicker.cache import FileCache, MemoryCache, NullCache
from fontpicker.catalog import CatalogEntry, CatalogSource, CatalogStore
from fontpicker.collection import FontCollection
from fontpicker.config import FontpickerConfig, load_config
from fontpicker.exceptions import CatalogAcquisitionError, ConfigError, FontpickerError
from fontpicker.remote import FetchResult, RequestsCatalogFetcher
from fontpicker.resolver import FontResolver
from fontpicker.selection import FontSelection, build_stylesheet_tokens
from fontpicker.service import FontPicker


__version__ = "0.1.0"

__all__ = [
    "CatalogAcquisitionError",
    "CatalogEntry",
    "CatalogSource",
    "CatalogStore",
    "ConfigError",
    "FetchResult",
    "FileCache",
    "FontCollection",
    "FontPicker",
    "FontResolver",
    "FontSelection",
    "FontpickerConfig",
    "FontpickerError",
    "MemoryCache",
    "NullCache",
    "RequestsCatalogFetcher",
    "__version__",
    "build_stylesheet_tokens",
    "load_config",
]
