"""The ``asa-cli`` Typer application and console-script entry point.

Command tree::

    asa-cli configure | whoami
    asa-cli auth       status | logout
    asa-cli campaigns  list | get | find | update | delete
    asa-cli adgroups   list | get | find | delete
    asa-cli keywords   list | find
    asa-cli reports    campaigns | adgroups | keywords | search-terms

Global options are parsed once by :func:`main_callback` and shared with the
sub-commands through ``ctx.obj``.  :func:`main` turns an
:class:`~asacli.exceptions.AsaError` into one ``Error:`` line and the
error's exit code; any other exception leaves a traceback under
``<data dir>/logs`` and exits with status 1.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

import typer

from asacli import __version__
from asacli.commands.adgroups import adgroups_app
from asacli.commands.auth import auth_app
from asacli.commands.campaigns import campaigns_app
from asacli.commands.configure import configure_command
from asacli.commands.keywords import keywords_app
from asacli.commands.reports import reports_app
from asacli.commands.whoami import whoami_command
from asacli.exceptions import AsaError
from asacli.exit_codes import EXIT_GENERIC_FAILURE
from asacli.output import OutputFormat, OutputManager, error, set_output

EXIT_INTERRUPTED = 130

app = typer.Typer(
    name="asa-cli",
    help="Manage Apple Search Ads campaigns from the command line.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.command("configure")(configure_command)
app.command("whoami")(whoami_command)
app.add_typer(auth_app, name="auth", help="Inspect or clear the cached access token.")
app.add_typer(campaigns_app, name="campaigns", help="Manage campaigns.")
app.add_typer(adgroups_app, name="adgroups", help="Manage ad groups.")
app.add_typer(keywords_app, name="keywords", help="Manage targeting keywords.")
app.add_typer(reports_app, name="reports", help="Pull performance reports.")


def _show_version(value: bool) -> None:
    if value:
        typer.echo(f"asa-cli {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False, "--version", callback=_show_version, is_eager=True, help="Show version and exit."
    ),
    profile: Optional[str] = typer.Option(
        None, "--profile", "-p", help="Config profile (default: $ASA_PROFILE or 'default')."
    ),
    org_id: Optional[str] = typer.Option(
        None, "--org-id", help="Organization ID; overrides org_id from the config."
    ),
    json_output: bool = typer.Option(False, "--json", help="Print API data as JSON."),
    plain_output: bool = typer.Option(False, "--plain", help="Print tab-separated text."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colour."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only print data, warnings and errors."),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Print debug messages and trace HTTP requests."
    ),
) -> None:
    """Install the output manager and record the global options in ``ctx.obj``."""
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN
    else:
        fmt = OutputFormat.AUTO
    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))

    ctx.ensure_object(dict)
    ctx.obj.update(profile=profile, org_id=org_id, verbose=verbose)


def _setup_signal_handlers() -> None:
    def _on_sigint(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)

    signal.signal(signal.SIGINT, _on_sigint)


def _write_crash_log() -> Path:
    """Save the traceback being handled and return the log path."""
    from asacli.config import get_data_dir

    log_dir = get_data_dir() / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / f"crash-{datetime.now():%Y%m%d-%H%M%S}.log"
    log_path.write_text(traceback.format_exc(), encoding="utf-8")
    return log_path


def main() -> None:
    """Console-script entry point declared in ``pyproject.toml``."""
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)
    except AsaError as exc:
        error(str(exc))
        sys.exit(exc.exit_code)
    except Exception:
        log_path = _write_crash_log()
        error(f"Unexpected error. Traceback saved to {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
