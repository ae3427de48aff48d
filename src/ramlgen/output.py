"""Terminal output for the ramlgen commands.

``ramlgen generate`` prints artifact names and ``ramlgen inspect`` prints
method and response-factory listings. Those listings are the only thing
written to **stdout**, so they can be piped into other tools. Progress,
warnings, errors and hints go to **stderr**.

Listings render in one of three formats: a Rich table on an interactive
terminal, tab-separated rows when piped (or with ``--plain``), and an array
of JSON objects with ``--json``. Colour is dropped for ``--no-color``,
``NO_COLOR`` and ``TERM=dumb``.

:func:`~ramlgen.app.main_callback` builds one :class:`OutputManager` from
the global flags and installs it with :func:`set_output`; the module-level
helpers below forward to it.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, Optional

from rich.console import Console
from rich.table import Table


class OutputFormat(str, Enum):
    """Listing formats. ``AUTO`` picks ``RICH`` on a colour TTY, else ``PLAIN``."""

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


# Rich markup and plain-text prefix per diagnostic level.
_LEVEL_STYLES = {
    "info": ("{}", ""),
    "success": ("[green]{}[/green]", ""),
    "warning": ("[yellow]Warning:[/yellow] {}", "Warning: "),
    "error": ("[bold red]Error:[/bold red] {}", "Error: "),
    "suggest": ("[dim]→ {}[/dim]", "→ "),
    "debug": ("[dim]\\[debug] {}[/dim]", "[debug] "),
}


class OutputManager:
    """Writes listings to stdout and diagnostics to stderr.

    Args:
        format: Listing format; ``AUTO`` is resolved from TTY detection.
        no_color: Disable colour and Rich markup.
        quiet: Drop info, success and suggestion messages.
        verbose: Show debug messages.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose

        if format == OutputFormat.AUTO:
            rich = _is_tty() and not self._no_color
            format = OutputFormat.RICH if rich else OutputFormat.PLAIN
        self._format = format

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=(self._format == OutputFormat.RICH),
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    @property
    def is_quiet(self) -> bool:
        return self._quiet

    @property
    def is_verbose(self) -> bool:
        return self._verbose

    # ------------------------------------------------------------------ #
    # Listings (stdout)
    # ------------------------------------------------------------------ #

    def print_data(self, text: str) -> None:
        """Write one line to stdout, such as an artifact name."""
        print(text, file=sys.stdout, flush=True)

    def print_json(self, data: Any) -> None:
        """Write *data* as indented JSON; paths and other objects become strings."""
        self.print_data(json.dumps(data, indent=2, ensure_ascii=False, default=str))

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Write a listing such as the methods of every generated interface.

        In JSON mode each row becomes an object keyed by *headers*; in plain
        mode the header line and rows are tab-separated. *title* is only
        shown by the Rich table.
        """
        if self._format == OutputFormat.JSON:
            self.print_json([dict(zip(headers, row)) for row in rows])
        elif self._format == OutputFormat.PLAIN:
            for line in [headers, *rows]:
                self.print_data("\t".join(line))
        else:
            table = Table(title=title, show_header=True, header_style="bold cyan")
            for header in headers:
                table.add_column(header)
            for row in rows:
                table.add_row(*row)
            self._stdout.print(table)

    # ------------------------------------------------------------------ #
    # Diagnostics (stderr)
    # ------------------------------------------------------------------ #

    def _emit(self, level: str, message: str) -> None:
        markup, prefix = _LEVEL_STYLES[level]
        if self._no_color:
            print(prefix + message, file=sys.stderr, flush=True)
        else:
            self._stderr.print(markup.format(message), highlight=False)

    def info(self, message: str) -> None:
        if not self._quiet:
            self._emit("info", message)

    def success(self, message: str) -> None:
        if not self._quiet:
            self._emit("success", message)

    def warning(self, message: str) -> None:
        """Shown even with ``--quiet``."""
        self._emit("warning", message)

    def error(self, message: str) -> None:
        """Always shown."""
        self._emit("error", message)

    def suggest(self, message: str) -> None:
        """Hint at the next step, e.g. the flag that fixes a config error."""
        if not self._quiet:
            self._emit("suggest", message)

    def debug(self, message: str) -> None:
        if self._verbose:
            self._emit("debug", message)


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """``NO_COLOR`` set to any value, or ``TERM=dumb``."""
    return os.environ.get("NO_COLOR") is not None or os.environ.get("TERM") == "dumb"


# ------------------------------------------------------------------ #
# Global instance, installed by the root CLI callback
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed :class:`OutputManager`, creating a default one lazily."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    global _output
    _output = None


def print_data(text: str) -> None:
    get_output().print_data(text)


def print_json(data: Any) -> None:
    get_output().print_json(data)


def print_table(
    headers: list[str],
    rows: list[list[str]],
    title: Optional[str] = None,
) -> None:
    get_output().print_table(headers, rows, title)


def info(message: str) -> None:
    get_output().info(message)


def error(message: str) -> None:
    get_output().error(message)


def success(message: str) -> None:
    get_output().success(message)


def warning(message: str) -> None:
    get_output().warning(message)


def suggest(message: str) -> None:
    get_output().suggest(message)


def debug(message: str) -> None:
    get_output().debug(message)
