"""Auth commands -- inspect and clear the cached access token.

Tokens are exchanged on demand by every API command; these commands only
look at, or discard, what is cached for the active profile::

    asa-cli auth status
    asa-cli auth logout
"""

from __future__ import annotations

from datetime import datetime, timezone

import typer

from asacli.auth import TokenCache, TokenProvider
from asacli.config import load_credentials, resolve_profile_name
from asacli.output import format_response, info, success, suggest, warning


auth_app = typer.Typer(no_args_is_help=True)


def _provider(ctx: typer.Context) -> tuple[str, TokenProvider]:
    # No exchange happens here, so incomplete credentials are fine.
    profile = resolve_profile_name((ctx.obj or {}).get("profile"))
    return profile, TokenProvider(load_credentials(profile), TokenCache.for_profile(profile))


@auth_app.command("status")
def auth_status(ctx: typer.Context) -> None:
    """Show whether a usable token is cached for the active profile.

    The token itself is never printed.
    """
    profile, provider = _provider(ctx)
    record = provider.current_record()

    if record is None:
        info(f"No cached token for profile '{profile}'.")
        suggest("A token is requested automatically on the next API call.")
        return

    usable = record.is_usable(datetime.now(timezone.utc))
    format_response(
        {
            "profile": profile,
            "token_type": record.token_type,
            "expires_at": record.expires_at.isoformat(),
            "usable": usable,
            "cache_file": str(provider.cache.path),
        }
    )
    if not usable:
        warning("Cached token is expired or about to expire; it will be renewed on the next call.")


@auth_app.command("logout")
def auth_logout(ctx: typer.Context) -> None:
    """Delete the cached token for the active profile."""
    profile, provider = _provider(ctx)
    if provider.invalidate():
        success(f"Cleared cached token for profile '{profile}'.")
    else:
        info(f"No cached token for profile '{profile}'.")
