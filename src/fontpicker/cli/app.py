"""Typer application wiring for the fontpicker CLI."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from fontpicker.config import load_config
from fontpicker.exceptions import ConfigError

from .commands import cache_clear, catalog, render, resolve, snapshot, url
from .state import CLIState, configure_logging, emit_error, get_cli_state


app = typer.Typer(
    help="Resolve web fonts and render Bunny Fonts stylesheet markup.",
    context_settings={"help_option_names": ["--help", "-h"]},
    no_args_is_help=True,
)


@app.callback()
def configure(
    ctx: typer.Context,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            exists=True,
            dir_okay=False,
            help="YAML file holding fontpicker options.",
        ),
    ] = None,
    offline: Annotated[
        bool,
        typer.Option("--offline", help="Never contact the provider; use the bundled catalog."),
    ] = False,
    cache_ttl: Annotated[
        int | None,
        typer.Option("--cache-ttl", min=0, help="Catalog cache lifetime in minutes (0 disables)."),
    ] = None,
    verbose: Annotated[
        int,
        typer.Option("--verbose", "-v", count=True, help="Increase log verbosity."),
    ] = 0,
) -> None:
    """Load configuration shared by every command."""
    try:
        config = load_config(
            config_path,
            disable_remote_catalog=True if offline else None,
            cache_ttl=cache_ttl,
        )
    except ConfigError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc
    ctx.obj = CLIState(config=config, verbosity=verbose)
    configure_logging(verbose)


app.command()(resolve)
app.command()(url)
app.command()(render)
app.command()(catalog)
app.command()(snapshot)
app.command("cache-clear")(cache_clear)


def main() -> None:
    """Entry point compatible with console scripts."""
    try:
        app()
    except typer.Exit:
        raise
    except KeyboardInterrupt as exc:
        emit_error("Operation cancelled by user.", exception=exc)
        raise typer.Exit(code=1) from exc
    except SystemExit:
        raise
    except Exception as exc:  # pragma: no cover - defensive catch-all
        state = get_cli_state()
        if state.verbosity >= 2:
            from rich.traceback import Traceback

            state.err_console.print(
                Traceback.from_exception(type(exc), exc, exc.__traceback__)
            )
        else:
            emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc


__all__ = ["app", "main"]
