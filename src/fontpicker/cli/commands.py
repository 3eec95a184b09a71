"""Commands exposed by the ``fontpicker`` CLI."""

from __future__ import annotations

from collections.abc import Iterable
import json
from pathlib import Path
from typing import Annotated

import typer

from fontpicker.catalog import CatalogEntry
from fontpicker.collection import FontCollection
from fontpicker.selection import FontSelection

from .state import emit_error, emit_warning, get_cli_state


def _format_list(values: Iterable[object]) -> str:
    sequence = [str(value) for value in values]
    return ", ".join(sequence) if sequence else "-"


def _split_binding(item: str) -> tuple[str, str | None]:
    """Split ``value=--variable`` into its value and CSS variable parts."""
    if "=" in item:
        head, _, tail = item.rpartition("=")
        if head.strip() and tail.strip().startswith("--"):
            return head.strip(), tail.strip()
    return item.strip(), None


def _warn_unresolved(selections: Iterable[FontSelection]) -> None:
    for selection in selections:
        if not selection.is_valid():
            emit_warning(f"No font matches '{selection.value}'.")


def _entry_row(value: str, entry: CatalogEntry | None) -> tuple[str, ...]:
    if entry is None:
        return (value, "-", "not found", "-", "-")
    return (
        value,
        entry.slug,
        entry.family_name or "-",
        _format_list(entry.weights),
        _format_list(entry.styles),
    )


def resolve(
    values: Annotated[list[str], typer.Argument(help="Slugs, family page URLs, or names.")],
) -> None:
    """Show the catalog entry each value resolves to."""
    from rich import box
    from rich.table import Table

    state = get_cli_state()
    table = Table(box=box.SIMPLE, header_style="bold cyan")
    for column in ("Input", "Slug", "Family", "Weights", "Styles"):
        table.add_column(column, overflow="fold")

    missing = 0
    for value in values:
        entry = state.picker.resolve(value)
        if entry is None:
            missing += 1
        table.add_row(*_entry_row(value, entry))

    state.console.print(table)
    if missing:
        raise typer.Exit(code=1)


def url(
    values: Annotated[list[str], typer.Argument(help="Fonts to request.")],
    weights: Annotated[
        list[int] | None,
        typer.Option("--weight", "-w", min=1, help="Restrict requested weights (repeatable)."),
    ] = None,
    italics: Annotated[
        bool | None,
        typer.Option("--italics/--no-italics", help="Override the italic preference."),
    ] = None,
) -> None:
    """Print one stylesheet URL requesting every given font."""
    state = get_cli_state()
    selections = [state.picker.select(value) for value in values]
    for selection in selections:
        if weights:
            selection.with_weights(weights)
        if italics is not None:
            selection.with_italics(italics)
    _warn_unresolved(selections)

    stylesheet = FontCollection(*selections).to_stylesheet_url()
    if stylesheet is None:
        emit_error("Nothing to request: no value resolved to a font with weights.")
        raise typer.Exit(code=1)
    typer.echo(stylesheet)


def render(
    values: Annotated[
        list[str],
        typer.Argument(help="Fonts to render, optionally bound to a variable: VALUE=--css-var."),
    ],
    fallbacks: Annotated[
        list[str] | None,
        typer.Option("--fallback", "-f", help="Fallback appended to every CSS variable."),
    ] = None,
    preconnect: Annotated[
        bool | None,
        typer.Option("--preconnect/--no-preconnect", help="Emit the preconnect hint."),
    ] = None,
) -> None:
    """Print the <link> and <style> markup for the given fonts."""
    state = get_cli_state()
    selections: list[FontSelection] = []
    for item in values:
        value, variable = _split_binding(item)
        selection = state.picker.select(value)
        if variable is not None:
            selection.with_css_variable(variable).with_css_fallbacks(fallbacks or [])
        selections.append(selection)
    _warn_unresolved(selections)

    if preconnect is None:
        preconnect = state.config.preconnect
    markup = FontCollection(*selections).render(preconnect)
    if markup is None:
        emit_error("Nothing to render.")
        raise typer.Exit(code=1)
    typer.echo(markup)


def catalog(
    query: Annotated[str, typer.Argument(help="Filter by slug or family name.")] = "",
    limit: Annotated[int | None, typer.Option("--limit", "-n", min=1)] = None,
) -> None:
    """List catalog entries and report where the catalog came from."""
    from rich import box
    from rich.table import Table

    state = get_cli_state()
    store = state.picker.store
    entries = store.search(query, limit=limit)

    table = Table(box=box.SIMPLE, header_style="bold cyan")
    for column in ("Slug", "Family", "Weights", "Styles"):
        table.add_column(column, overflow="fold")
    for entry in entries:
        table.add_row(*_entry_row("", entry)[1:])
    if not entries:
        table.add_row("-", "No fonts found", "-", "-")

    state.console.print(table)
    source = store.source.value if store.source is not None else "unknown"
    typer.echo(f"Catalog source: {source} ({len(store)} families)")


def snapshot(
    output: Annotated[
        Path,
        typer.Argument(dir_okay=False, help="File receiving the provider font list as JSON."),
    ],
) -> None:
    """Download the provider font list for use as an offline fallback."""
    state = get_cli_state()
    result = state.picker.store.fetcher.fetch()
    if not result.ok:
        emit_error(f"Unable to download the font list: {result.reason}")
        raise typer.Exit(code=1)

    payload = result.payload or {}
    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(json.dumps(payload, ensure_ascii=False, indent=1), encoding="utf-8")
    except OSError as exc:
        emit_error(f"Unable to write '{output}'.", exception=exc)
        raise typer.Exit(code=1) from exc
    typer.echo(f"Wrote {len(payload)} families to {output}")


def cache_clear() -> None:
    """Remove the cached catalog so the next run fetches it again."""
    state = get_cli_state()
    state.picker.store.reload(force_remote=True)
    typer.echo("Catalog cache cleared.")


__all__ = ["cache_clear", "catalog", "render", "resolve", "snapshot", "url"]
