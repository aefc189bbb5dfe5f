"""User-facing console feedback for CLI operations.

Usage::

    from inkdex.core.progress import spinner, status

    status("Indexed 42 notes", style="success")  # ✓ Indexed 42 notes

    with spinner("Indexing notes"):
        engine.rebuild()  # structlog console output suppressed during this block
"""

from __future__ import annotations

import logging
import sys
import threading
from collections.abc import Iterator
from contextlib import contextmanager

from rich.console import Console

_console = Console(stderr=True)

_STYLES = {
    "success": "[green]✓[/green] ",
    "error": "[red]✗[/red] ",
    "warning": "[yellow]![/yellow] ",
    "info": "  ",
    "none": "",
}

_suppress_console_logs = threading.local()


def is_console_suppressed() -> bool:
    """Check if console logging is currently suppressed."""
    return getattr(_suppress_console_logs, "active", False)


@contextmanager
def suppress_console_logs() -> Iterator[None]:
    """Suppress structlog console output; file handlers keep receiving logs."""
    _suppress_console_logs.active = True
    try:
        yield
    finally:
        _suppress_console_logs.active = False


class ConsoleSuppressingFilter(logging.Filter):
    """Blocks console handlers while a live display is active."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: ARG002
        return not is_console_suppressed()


def _is_tty() -> bool:
    return hasattr(sys.stderr, "isatty") and sys.stderr.isatty()


def get_console() -> Console:
    """Get the shared Rich console instance."""
    return _console


def status(message: str, *, style: str = "info", indent: int = 0) -> None:
    """Print a styled status message to stderr."""
    prefix = _STYLES.get(style, "")
    padding = " " * indent
    _console.print(f"{padding}{prefix}{message}", highlight=False)


def pluralize(count: int, singular: str, plural: str | None = None) -> str:
    """Return ``"1 note"`` / ``"3 notes"``."""
    word = singular if count == 1 else (plural or f"{singular}s")
    return f"{count} {word}"


@contextmanager
def spinner(message: str, *, indent: int = 0) -> Iterator[None]:
    """Show a spinner on TTYs; plain status line otherwise."""
    padding = " " * indent
    if not _is_tty():
        status(message, indent=indent)
        yield
        return

    with suppress_console_logs(), _console.status(f"{padding}{message}", spinner="dots"):
        yield
