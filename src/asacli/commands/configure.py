"""Configure command -- save API credentials for a profile.

Credentials come from an API user created at https://ads.apple.com
(Settings > API): the client id, team id and key id shown there, plus the
private key whose public half was uploaded.  ``org_id`` is optional; an
account with a single organization has it detected automatically.

Typical workflow::

    asa-cli configure --client-id SEARCHADS.abc --team-id SEARCHADS.abc \\
        --key-id 0a1b2c --private-key-path ~/keys/asa.pem
    asa-cli whoami
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from asacli.config import expand_path, resolve_profile_name, save_credentials
from asacli.exceptions import ConfigError, InvalidUsageError
from asacli.models import Credentials
from asacli.output import info, success, suggest


def configure_command(
    ctx: typer.Context,
    client_id: Optional[str] = typer.Option(None, "--client-id", help="Search Ads client ID."),
    team_id: Optional[str] = typer.Option(None, "--team-id", help="Team ID."),
    key_id: Optional[str] = typer.Option(None, "--key-id", help="API key ID."),
    org_id: Optional[str] = typer.Option(
        None,
        "--org-id",
        help="Organization ID (optional, auto-detected for single-org accounts).",
    ),
    private_key_path: Optional[str] = typer.Option(
        None, "--private-key-path", help="Path to the private key (.pem or .p8)."
    ),
) -> None:
    """Configure credentials for API access.

    With no flags, prompts for every value.  Otherwise ``--client-id``,
    ``--team-id``, ``--key-id`` and ``--private-key-path`` are required.

    Raises:
        InvalidUsageError: If some but not all required flags are given.
        ConfigError: If the private key file does not exist.
    """
    obj = ctx.obj or {}
    profile = resolve_profile_name(obj.get("profile"))

    if not any((client_id, team_id, key_id, org_id, private_key_path)):
        credentials = _prompt_credentials()
    else:
        if not (client_id and team_id and key_id and private_key_path):
            raise InvalidUsageError(
                "required flags: --client-id, --team-id, --key-id, --private-key-path\n"
                "Optional: --org-id (auto-detected for single-org accounts)"
            )
        credentials = Credentials(
            client_id=client_id,
            team_id=team_id,
            key_id=key_id,
            org_id=org_id or None,
            private_key_path=expand_path(private_key_path),
        )

    if not Path(credentials.private_key_path).is_file():
        raise ConfigError(f"private key file not found: {credentials.private_key_path}")

    path = save_credentials(credentials, profile)
    success(f"Configuration saved for profile '{profile}'.")
    info(f"Config file: {path}")
    suggest("Verify with: asa-cli whoami")


def _prompt_credentials() -> Credentials:
    info("Apple Search Ads CLI Configuration")
    info("You'll need your API credentials from https://ads.apple.com (Settings > API tab).")

    client_id = typer.prompt("Client ID")
    team_id = typer.prompt("Team ID")
    key_id = typer.prompt("Key ID")
    org_id = typer.prompt(
        "Org ID (press Enter to skip, auto-detected for single-org accounts)",
        default="",
        show_default=False,
    )
    private_key_path = typer.prompt("Private Key Path (.pem or .p8 file)")

    return Credentials(
        client_id=client_id.strip(),
        team_id=team_id.strip(),
        key_id=key_id.strip(),
        org_id=org_id.strip() or None,
        private_key_path=expand_path(private_key_path.strip()),
    )
