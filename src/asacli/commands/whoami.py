"""Whoami command -- verify authentication by listing accessible organizations."""

from __future__ import annotations

import typer

from asacli.commands import joined, render
from asacli.output import OutputFormat, get_output, info
from asacli.services import ACLService
from asacli.session import Session


def whoami_command(ctx: typer.Context) -> None:
    """Display the organizations the API user can access (``GET /acls``).

    No organization context is sent, so this works before ``org_id`` is
    configured.
    """
    session = Session.from_context(ctx.obj)
    with session.client(with_org=False) as client:
        acls = ACLService(client).get_acls()

    if not acls:
        info("No organizations found.")
        return

    render(
        acls,
        ["ORG NAME", "ORG ID", "CURRENCY", "ROLES"],
        lambda acl: [acl.org_name, str(acl.org_id), acl.currency, joined(acl.role_names)],
    )
    if get_output().format != OutputFormat.JSON:
        info(f"Authenticated. {len(acls)} organization(s) accessible.")
