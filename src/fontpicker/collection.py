"""Aggregate several selections into a single provider request."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Any

from fontpicker.rendering import (
    join_markup,
    render_css_variables,
    render_stylesheet_link,
    stylesheet_url,
)
from fontpicker.selection import FontSelection
from fontpicker.utils import flatten


def _selections_in(items: Iterable[Any]) -> Iterator[FontSelection]:
    for item in flatten(items, is_leaf=lambda value: isinstance(value, FontSelection)):
        if isinstance(item, FontSelection):
            yield item


class FontCollection:
    """Ordered group of selections rendered as one stylesheet and one style block.

    Families requested by several selections are merged into one descriptor.
    When several selections declare the same CSS variable, the last one wins.
    """

    def __init__(self, *selections: FontSelection) -> None:
        self._selections: list[FontSelection] = []
        self.add(*selections)

    @classmethod
    def make(cls, *items: Any) -> FontCollection:
        """Create a collection from selections or arbitrarily nested iterables."""
        return cls.from_iterable(items)

    @classmethod
    def from_iterable(cls, items: Iterable[Any]) -> FontCollection:
        collection = cls()
        collection.merge(items)
        return collection

    def add(self, *selections: FontSelection) -> FontCollection:
        for selection in selections:
            if isinstance(selection, FontSelection):
                self._selections.append(selection)
        return self

    def merge(self, items: Iterable[Any]) -> FontCollection:
        """Append every selection found in ``items``; other values are skipped."""
        self._selections.extend(_selections_in(items))
        return self

    @property
    def selections(self) -> list[FontSelection]:
        return list(self._selections)

    def __iter__(self) -> Iterator[FontSelection]:
        return iter(list(self._selections))

    def __len__(self) -> int:
        return len(self._selections)

    def is_empty(self) -> bool:
        """Whether there is neither a font nor a CSS variable to render."""
        return not self.collect_descriptors() and not self.collect_css_variables()

    def collect_descriptors(self) -> dict[str, list[str]]:
        """Return merged tokens keyed by slug, in first-seen order."""
        families: dict[str, list[str]] = {}
        for selection in self._selections:
            descriptor = selection.to_stylesheet_descriptor()
            if descriptor is None:
                continue
            tokens = families.setdefault(descriptor.slug, [])
            for token in descriptor.tokens:
                if token not in tokens:
                    tokens.append(token)
        return families

    def collect_css_variables(self) -> dict[str, tuple[str, ...]]:
        definitions: dict[str, tuple[str, ...]] = {}
        for selection in self._selections:
            definition = selection.css_variable_definition()
            if definition is not None:
                definitions[definition.variable] = definition.values
        return definitions

    def to_stylesheet_url(self) -> str | None:
        return stylesheet_url(self.collect_descriptors().items())

    def render_stylesheet_link(self, preconnect: bool = True) -> str | None:
        return render_stylesheet_link(self.to_stylesheet_url(), preconnect=preconnect)

    def render_css_variables(self) -> str | None:
        return render_css_variables(self.collect_css_variables())

    def render(self, preconnect: bool = True) -> str | None:
        return join_markup(self.render_stylesheet_link(preconnect), self.render_css_variables())

    def __str__(self) -> str:
        return self.render() or ""


__all__ = ["FontCollection"]
