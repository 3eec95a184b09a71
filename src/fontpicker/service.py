"""High-level facade tying configuration, catalog, and resolver together.

`FontPicker` is what host integrations talk to. It owns one `CatalogStore`
and one `FontResolver` and hands out selections pre-configured with the
default weight allowlist and italic preference. The ``to_font_*`` and
``is_valid_font`` helpers mirror the field methods exposed to templates.
"""

from __future__ import annotations

from typing import Any

from fontpicker.catalog import CatalogEntry, CatalogStore
from fontpicker.collection import FontCollection
from fontpicker.config import FontpickerConfig
from fontpicker.exceptions import ConfigError
from fontpicker.rendering import stylesheet_url
from fontpicker.resolver import FontResolver
from fontpicker.selection import FontSelection, build_stylesheet_tokens
from fontpicker.utils import flatten


class FontPicker:
    """Resolve user values and build selections with configured defaults."""

    def __init__(
        self,
        config: FontpickerConfig | None = None,
        *,
        store: CatalogStore | None = None,
        resolver: FontResolver | None = None,
    ) -> None:
        if store is not None:
            if config is not None and config != store.config:
                raise ConfigError(
                    "FontPicker config differs from the config of the supplied store; "
                    "pass one or the other."
                )
            config = store.config
        elif config is None:
            config = FontpickerConfig()
        self.config = config
        self.store = store if store is not None else CatalogStore(config=config)
        self.resolver = resolver if resolver is not None else FontResolver(self.store)

    def resolve(self, value: Any) -> CatalogEntry | None:
        if not isinstance(value, str):
            return None
        return self.resolver.parse(value)

    def select(self, value: Any) -> FontSelection:
        """Return a selection for ``value``; unresolved values yield an invalid selection."""
        text = value.strip() if isinstance(value, str) else ""
        return FontSelection(
            text,
            self.resolve(text),
            default_weights=self.config.weights,
            include_italics=self.config.include_italic,
        )

    def collection(self, *values: Any) -> FontCollection:
        """Build a collection from values and/or selections, nested freely."""
        selections: list[FontSelection] = []
        for item in flatten(values, is_leaf=lambda value: isinstance(value, FontSelection)):
            if isinstance(item, FontSelection):
                selections.append(item)
            elif isinstance(item, str):
                selections.append(self.select(item))
        return FontCollection(*selections)

    def render(self, *values: Any, preconnect: bool | None = None) -> str | None:
        if preconnect is None:
            preconnect = self.config.preconnect
        return self.collection(*values).render(preconnect)

    # ------------------------------------------------------------------ field methods

    def to_font_stylesheet_url(self, value: Any) -> str | None:
        """Stylesheet URL for a single field value using the configured defaults."""
        entry = self.resolve(value)
        if entry is None or not entry.slug:
            return None
        tokens = build_stylesheet_tokens(
            entry,
            weight_filter=self.config.weights,
            include_italics=self.config.include_italic,
        )
        return stylesheet_url([(entry.slug, tokens)])

    def to_font_family_name(self, value: Any) -> str | None:
        entry = self.resolve(value)
        if entry is None:
            return None
        return entry.family_name

    def is_valid_font(self, value: Any) -> bool:
        return self.resolve(value) is not None


__all__ = ["FontPicker"]
