"""Rich Console factory and theme for catalogctl output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract.  In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

CATALOG_THEME = Theme(
    {
        "cat.ok": "bold green",
        "cat.error": "bold red",
        "cat.warning": "bold yellow",
        "cat.op": "bold cyan",
        "cat.key": "dim",
        "cat.id": "bold blue",
        "cat.etag": "magenta",
        "cat.location": "dim",
        "cat.name": "bold",
    }
)

# Error codes a caller can fix by re-reading vs. ones it cannot.
_ERROR_STYLES: dict[str, str] = {
    "NOT_FOUND": "cat.warning",
    "VERSION_CONFLICT": "cat.warning",
    "BUSY": "cat.warning",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=CATALOG_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_error(code: str) -> str:
    """Return the Rich style name for an error code."""
    return _ERROR_STYLES.get(code, "cat.error")
