"""Shared CLI state: configuration, the font picker, and consoles."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import sys
from typing import TYPE_CHECKING

import click
import typer

from fontpicker.config import FontpickerConfig
from fontpicker.service import FontPicker


if TYPE_CHECKING:
    from rich.console import Console

__all__ = [
    "CLIState",
    "configure_logging",
    "emit_error",
    "emit_warning",
    "get_cli_state",
]


@dataclass(slots=True)
class CLIState:
    """Per-invocation state built by the root callback."""

    config: FontpickerConfig = field(default_factory=FontpickerConfig)
    verbosity: int = 0
    _picker: FontPicker | None = field(default=None, init=False, repr=False)
    _console: Console | None = field(default=None, init=False, repr=False)
    _err_console: Console | None = field(default=None, init=False, repr=False)

    @property
    def picker(self) -> FontPicker:
        """Return the font picker, creating it on first use."""
        if self._picker is None:
            self._picker = FontPicker(self.config)
        return self._picker

    @property
    def console(self) -> Console:
        """Return a lazily instantiated stdout console."""
        from rich.console import Console

        current = getattr(self._console, "file", None)
        if self._console is None or current is not sys.stdout:
            self._console = Console(file=sys.stdout, highlight=False, soft_wrap=True)
        return self._console

    @property
    def err_console(self) -> Console:
        """Return a lazily instantiated stderr console."""
        from rich.console import Console

        current = getattr(self._err_console, "file", None)
        if self._err_console is None or current is not sys.stderr:
            self._err_console = Console(file=sys.stderr, highlight=False)
        return self._err_console


def get_cli_state(ctx: typer.Context | click.Context | None = None) -> CLIState:
    """Return the state stored on the closest context, creating one if needed."""
    if ctx is None:
        ctx = click.get_current_context(silent=True)
    current = ctx
    while current is not None:
        if isinstance(current.obj, CLIState):
            return current.obj
        current = current.parent
    state = CLIState()
    if ctx is not None:
        ctx.find_root().obj = state
    return state


def configure_logging(verbosity: int) -> None:
    """Route ``fontpicker`` log records to stderr through Rich."""
    if verbosity <= 0:
        return
    from rich.logging import RichHandler

    package_logger = logging.getLogger("fontpicker")
    package_logger.handlers = [
        RichHandler(console=get_cli_state().err_console, show_path=False, markup=False)
    ]
    package_logger.setLevel(logging.DEBUG if verbosity >= 2 else logging.INFO)
    package_logger.propagate = False


def _emit(level: str, style: str, message: str) -> None:
    from rich.text import Text

    text = Text.assemble((f"{level}: ", f"bold {style}"), (message, style))
    get_cli_state().err_console.print(text)


def emit_warning(message: str) -> None:
    _emit("warning", "yellow", message)


def emit_error(message: str, *, exception: BaseException | None = None) -> None:
    state = get_cli_state()
    if exception is not None and state.verbosity >= 1:
        detail = f"{type(exception).__name__}: {exception}"
        if detail not in message:
            message = f"{message}\n{detail}"
    _emit("error", "red", message)
