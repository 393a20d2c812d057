"""Terminal output for asacli: data on stdout, diagnostics on stderr.

Anything a script might consume (tables, JSON payloads) is written to
stdout.  Progress notes, warnings, errors, debug lines and HTTP traces go
to stderr, so ``asa-cli campaigns list --json | jq`` never sees them.

Three data formats are supported:

``rich``
    Styled tables and syntax-highlighted JSON; chosen automatically when
    stdout is a terminal and colour is allowed.
``plain``
    Tab-separated rows, one record per line; chosen automatically when
    stdout is piped.
``json``
    The payload exactly as the API spells it (camelCase keys), selected
    with ``--json``.

Colour is disabled by ``--no-color``, by any ``NO_COLOR`` value, and by
``TERM=dumb``.

The root callback in :mod:`asacli.app` builds one :class:`OutputManager`
and installs it with :func:`set_output`; the rest of the package calls the
module-level helpers (:func:`info`, :func:`debug`, :func:`trace`, ...).
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, NamedTuple, Optional

from pydantic import BaseModel
from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table


class OutputFormat(str, Enum):
    """Data format for stdout; ``AUTO`` picks ``RICH`` or ``PLAIN`` from the TTY."""

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class _Level(NamedTuple):
    prefix: str
    markup: str
    quietable: bool
    verbose_only: bool = False


_LEVELS = {
    "info": _Level("", "{}", quietable=True),
    "success": _Level("", "[green]{}[/green]", quietable=True),
    "suggest": _Level("→ ", "[dim]{}[/dim]", quietable=True),
    "warning": _Level("Warning: ", "[yellow]Warning:[/yellow] {}", quietable=False),
    "error": _Level("Error: ", "[bold red]Error:[/bold red] {}", quietable=False),
    "debug": _Level("[debug] ", "[dim]\\[debug] {}[/dim]", quietable=False, verbose_only=True),
    "trace": _Level("", "[cyan]{}[/cyan]", quietable=False),
}


class OutputManager:
    """Holds the output preferences of one CLI invocation.

    Args:
        format: Requested data format; ``AUTO`` is resolved immediately.
        no_color: Turn off colour and Rich markup on both streams.
        quiet: Drop informational stderr messages (``info``, ``success``,
            ``suggest``).  Warnings, errors and traces are always shown.
        verbose: Show ``debug`` messages.
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
            interactive = _is_tty() and not self._no_color
            format = OutputFormat.RICH if interactive else OutputFormat.PLAIN
        self._format = format

        rich_stdout = self._format == OutputFormat.RICH
        self._stdout = Console(file=sys.stdout, no_color=self._no_color, force_terminal=rich_stdout)
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

    # --- stdout ---

    def format_response(self, data: Any) -> None:
        """Write an API payload (models, dicts, lists or scalars) to stdout.

        Models are dumped with their API aliases so JSON output matches the
        wire format.
        """
        data = to_jsonable(data)
        if self._format == OutputFormat.PLAIN:
            for line in _plain_lines(data):
                self.print_data(line)
            return

        text = json.dumps(data, indent=2, ensure_ascii=False, default=str)
        if self._format == OutputFormat.JSON:
            self.print_data(text)
        else:
            self._stdout.print(Syntax(text, "json", theme="monokai", word_wrap=True))

    def print_data(self, text: str) -> None:
        """Write *text* and a newline to stdout, bypassing Rich."""
        sys.stdout.write(text + "\n")
        sys.stdout.flush()

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Write rows under *headers*.

        JSON output is a list of objects keyed by header; plain output is a
        header line followed by tab-separated rows.
        """
        if self._format == OutputFormat.JSON:
            self.print_data(
                json.dumps([dict(zip(headers, row)) for row in rows], indent=2, ensure_ascii=False)
            )
            return
        if self._format == OutputFormat.PLAIN:
            for line in [headers, *rows]:
                self.print_data("\t".join(line))
            return

        table = Table(title=title, header_style="bold cyan")
        for header in headers:
            table.add_column(header)
        for row in rows:
            table.add_row(*map(escape, row))
        self._stdout.print(table)

    # --- stderr ---

    def info(self, message: str) -> None:
        self._diagnostic("info", message)

    def success(self, message: str) -> None:
        self._diagnostic("success", message)

    def suggest(self, message: str) -> None:
        """A next step for the user, e.g. ``Verify with: asa-cli whoami``."""
        self._diagnostic("suggest", message)

    def warning(self, message: str) -> None:
        self._diagnostic("warning", message)

    def error(self, message: str) -> None:
        """Write ``Error: <message>``; shown even with ``--quiet``."""
        self._diagnostic("error", message)

    def debug(self, message: str) -> None:
        """Write ``[debug] <message>`` when ``--verbose`` is set."""
        self._diagnostic("debug", message)

    def trace(self, message: str) -> None:
        """Write one HTTP trace line.  The transport decides whether to trace."""
        self._diagnostic("trace", message)

    def _diagnostic(self, level_name: str, message: str) -> None:
        level = _LEVELS[level_name]
        if level.quietable and self._quiet:
            return
        if level.verbose_only and not self._verbose:
            return
        if self._no_color:
            sys.stderr.write(f"{level.prefix}{message}\n")
            sys.stderr.flush()
        else:
            self._stderr.print(level.markup.format(escape(message)))


def _plain_lines(data: Any) -> list[str]:
    if isinstance(data, dict):
        return [f"{key}\t{value}" for key, value in data.items()]
    if isinstance(data, list):
        return [
            "\t".join(str(v) for v in item.values()) if isinstance(item, dict) else str(item)
            for item in data
        ]
    return [str(data)]


def to_jsonable(data: Any) -> Any:
    """Dump models (and lists of models) by alias, dropping unset fields."""
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(data, list):
        return [to_jsonable(item) for item in data]
    return data


def _is_tty() -> bool:
    isatty = getattr(sys.stdout, "isatty", None)
    return bool(isatty and isatty())


def _should_disable_color() -> bool:
    """True when ``NO_COLOR`` is set to anything, or ``TERM`` is ``dumb``."""
    return "NO_COLOR" in os.environ or os.environ.get("TERM") == "dumb"


# --- process-wide instance ---

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed manager, creating a default one on first use."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager; tests call this between cases."""
    global _output
    _output = None


def format_response(data: Any) -> None:
    get_output().format_response(data)


def print_data(text: str) -> None:
    get_output().print_data(text)


def print_table(headers: list[str], rows: list[list[str]], title: Optional[str] = None) -> None:
    get_output().print_table(headers, rows, title)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def suggest(message: str) -> None:
    get_output().suggest(message)


def warning(message: str) -> None:
    get_output().warning(message)


def error(message: str) -> None:
    get_output().error(message)


def debug(message: str) -> None:
    get_output().debug(message)


def trace(message: str) -> None:
    get_output().trace(message)
