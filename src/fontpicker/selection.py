"""Per-use font selections and weight/style negotiation.

A `FontSelection` binds one user input to the catalog entry it resolved to
and carries the overrides of that particular use: a weight filter, the italic
preference, and an optional CSS custom property with fallbacks. Selections
that did not resolve stay usable: they request no stylesheet, and a CSS
variable registered on them is declared with its fallbacks only.

Negotiation rules
: Catalog weights are coerced to positive integers, deduplicated and sorted.
: A weight filter restricts them to the intersection, unless the intersection
  is empty, in which case the filter is ignored.
: Italic tokens (``700i``) are requested when the family has an italic style
  and either italics are wanted or the family has no normal style.
: Bare tokens (``700``) are requested unless the family is italic-only.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from fontpicker.catalog import CatalogEntry
from fontpicker.rendering import (
    join_markup,
    quote_family_name,
    render_css_variables,
    render_stylesheet_link,
    stylesheet_url,
)
from fontpicker.utils import flatten, normalize_css_fallback, normalize_weights, unique


@dataclass(frozen=True, slots=True)
class StylesheetDescriptor:
    """Family slug plus the weight/style tokens requested for it."""

    slug: str
    tokens: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class CssVariableDefinition:
    """Custom property name and its comma-separated value list."""

    variable: str
    values: tuple[str, ...]


def resolve_weights(entry: CatalogEntry, weight_filter: Iterable[int] | None = None) -> list[int]:
    """Return the entry weights narrowed by ``weight_filter`` when it overlaps."""
    weights = normalize_weights(entry.weights)
    if not weights or not weight_filter:
        return weights
    allowed = set(weight_filter)
    filtered = [weight for weight in weights if weight in allowed]
    return filtered or weights


def build_stylesheet_tokens(
    entry: CatalogEntry,
    *,
    weight_filter: Iterable[int] | None = None,
    include_italics: bool = True,
) -> list[str]:
    """Build the provider tokens (``400``, ``400i``, ...) for an entry."""
    weights = resolve_weights(entry, weight_filter)
    if not weights:
        return []

    has_normal = entry.has_style("normal")
    has_italic = entry.has_style("italic")
    use_italics = has_italic and (include_italics or not has_normal)
    emit_bare = has_normal or not has_italic

    tokens: list[str] = []
    for weight in weights:
        if emit_bare:
            tokens.append(str(weight))
        if use_italics:
            tokens.append(f"{weight}i")
    return unique(tokens)


class FontSelection:
    """Resolved font plus the overrides applied to one use of it."""

    def __init__(
        self,
        value: str,
        entry: CatalogEntry | None,
        *,
        default_weights: Iterable[Any] | None = None,
        include_italics: bool = True,
    ) -> None:
        self._value = value
        self._entry = entry
        self._include_italics = include_italics
        self._weight_filter: list[int] | None = normalize_weights(default_weights) or None
        self._css_variable: str | None = None
        self._css_fallbacks: list[str] = []

    def __repr__(self) -> str:
        return f"FontSelection(value={self._value!r}, slug={self.slug!r})"

    # ------------------------------------------------------------------ state

    @property
    def value(self) -> str:
        """Original user-provided value."""
        return self._value

    @property
    def entry(self) -> CatalogEntry | None:
        return self._entry

    @property
    def weight_filter(self) -> tuple[int, ...] | None:
        return tuple(self._weight_filter) if self._weight_filter else None

    @property
    def include_italics(self) -> bool:
        return self._include_italics

    @property
    def css_variable(self) -> str | None:
        return self._css_variable

    @property
    def css_fallbacks(self) -> tuple[str, ...]:
        return tuple(self._css_fallbacks)

    def is_valid(self) -> bool:
        """Whether the selection resolved to a known catalog entry."""
        return self._entry is not None and bool(self._entry.slug)

    @property
    def slug(self) -> str | None:
        if not self.is_valid():
            return None
        return self._entry.slug  # type: ignore[union-attr]

    @property
    def family_name(self) -> str | None:
        if not self.is_valid():
            return None
        return self._entry.family_name or None  # type: ignore[union-attr]

    # ------------------------------------------------------------------ overrides

    def with_weights(self, *weights: Any) -> FontSelection:
        """Limit the requested weights; scalars and nested lists are accepted.

        Values that are not positive integers are ignored. Passing nothing
        usable clears the filter.
        """
        self._weight_filter = normalize_weights(weights) or None
        return self

    def with_italics(self, include: bool) -> FontSelection:
        self._include_italics = bool(include)
        return self

    def with_css_variable(self, variable: str) -> FontSelection:
        """Register the CSS custom property that should reference this family."""
        if not isinstance(variable, str):
            return self
        variable = variable.strip()
        if variable:
            self._css_variable = variable
        return self

    def with_css_fallbacks(self, *fallbacks: Any) -> FontSelection:
        """Append fallback values for the CSS variable.

        ``--name`` tokens become ``var(--name)``. Ignored until a variable has
        been registered.
        """
        if self._css_variable is None:
            return self
        tokens = list(self._css_fallbacks)
        for fallback in flatten(fallbacks):
            normalized = normalize_css_fallback(fallback)
            if normalized is not None:
                tokens.append(normalized)
        self._css_fallbacks = unique(tokens)
        return self

    # ------------------------------------------------------------------ output

    def stylesheet_tokens(self) -> list[str]:
        if not self.is_valid():
            return []
        return build_stylesheet_tokens(
            self._entry,  # type: ignore[arg-type]
            weight_filter=self._weight_filter,
            include_italics=self._include_italics,
        )

    def to_stylesheet_descriptor(self) -> StylesheetDescriptor | None:
        slug = self.slug
        if slug is None:
            return None
        tokens = self.stylesheet_tokens()
        if not tokens:
            return None
        return StylesheetDescriptor(slug=slug, tokens=tuple(tokens))

    def to_stylesheet_url(self) -> str | None:
        descriptor = self.to_stylesheet_descriptor()
        if descriptor is None:
            return None
        return stylesheet_url([(descriptor.slug, descriptor.tokens)])

    def css_variable_definition(self) -> CssVariableDefinition | None:
        """Return the variable definition, or ``None`` when there is nothing to declare."""
        if self._css_variable is None:
            return None
        values: list[str] = []
        family = self.family_name
        if family is not None:
            values.append(quote_family_name(family))
        values.extend(self._css_fallbacks)
        if not values:
            return None
        return CssVariableDefinition(variable=self._css_variable, values=tuple(values))

    def render_css_variables(self) -> str | None:
        definition = self.css_variable_definition()
        if definition is None:
            return None
        return render_css_variables({definition.variable: definition.values})

    def render_stylesheet_link(self, preconnect: bool = True) -> str | None:
        return render_stylesheet_link(self.to_stylesheet_url(), preconnect=preconnect)

    def render(self, preconnect: bool = True) -> str | None:
        """Render the stylesheet link followed by the CSS variable block."""
        return join_markup(self.render_stylesheet_link(preconnect), self.render_css_variables())

    def __str__(self) -> str:
        return self.render() or ""


__all__ = [
    "CssVariableDefinition",
    "FontSelection",
    "StylesheetDescriptor",
    "build_stylesheet_tokens",
    "resolve_weights",
]
