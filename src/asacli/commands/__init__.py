"""Built-in CLI sub-commands for asacli.

This package groups the Typer sub-command modules that form the CLI's
top-level command tree:

* :mod:`~asacli.commands.configure` -- save credentials for a profile.
* :mod:`~asacli.commands.whoami` -- list the organizations the API user
  can access.
* :mod:`~asacli.commands.auth` -- inspect or clear the cached token.
* :mod:`~asacli.commands.campaigns`, :mod:`~asacli.commands.adgroups`,
  :mod:`~asacli.commands.keywords` -- campaign management resources.
* :mod:`~asacli.commands.reports` -- reporting endpoints.

Single commands export a plain callback registered on the root app;
command groups export a :class:`typer.Typer` sub-application.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Optional, Sequence

from asacli.models import Money
from asacli.output import OutputFormat, format_response, get_output, info, print_table


def money(value: Optional[Money]) -> str:
    return str(value) if value is not None else ""


def render(
    items: Sequence[Any],
    headers: list[str],
    row: Callable[[Any], list[str]],
    empty: str = "No results.",
) -> None:
    """Print *items* as a table, or as the API's own JSON under ``--json``."""
    if get_output().format == OutputFormat.JSON:
        format_response(list(items))
        return
    if not items:
        info(empty)
        return
    print_table(headers, [row(item) for item in items])


def joined(values: Optional[Iterable[Any]]) -> str:
    return ", ".join(str(v) for v in values or ())
