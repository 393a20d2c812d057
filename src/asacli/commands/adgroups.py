"""Ad group commands, scoped to one campaign with ``--campaign-id``."""

from __future__ import annotations

from typing import Optional

import typer

from asacli.commands import money, render
from asacli.models import AdGroup
from asacli.output import format_response, info, success
from asacli.query import build_selector
from asacli.services import AdGroupService
from asacli.session import Session


adgroups_app = typer.Typer(no_args_is_help=True)

_HEADERS = ["ID", "NAME", "STATUS", "SERVING STATUS", "DEFAULT BID"]

_CAMPAIGN_OPTION = typer.Option(..., "--campaign-id", help="Campaign ID.")


def _row(adgroup: AdGroup) -> list[str]:
    return [
        str(adgroup.id or ""),
        adgroup.name,
        adgroup.status or "",
        adgroup.serving_status or "",
        money(adgroup.default_bid_amount),
    ]


@adgroups_app.command("list")
def adgroups_list(
    ctx: typer.Context,
    campaign_id: int = _CAMPAIGN_OPTION,
    limit: int = typer.Option(20, "--limit", help="Maximum number of ad groups."),
    offset: int = typer.Option(0, "--offset", help="Number of ad groups to skip."),
) -> None:
    """List the ad groups of a campaign."""
    session = Session.from_context(ctx.obj)
    with session.client() as client:
        adgroups, page = AdGroupService(client).list(campaign_id, limit=limit, offset=offset)
    render(adgroups, _HEADERS, _row, empty="No ad groups found.")
    if page is not None:
        info(f"Showing {len(adgroups)} of {page.total_results} ad group(s).")


@adgroups_app.command("get")
def adgroups_get(
    ctx: typer.Context,
    adgroup_id: int = typer.Argument(help="Ad group ID."),
    campaign_id: int = _CAMPAIGN_OPTION,
) -> None:
    """Show one ad group."""
    session = Session.from_context(ctx.obj)
    with session.client() as client:
        adgroup = AdGroupService(client).get(campaign_id, adgroup_id)
    format_response(adgroup)


@adgroups_app.command("find")
def adgroups_find(
    ctx: typer.Context,
    campaign_id: int = _CAMPAIGN_OPTION,
    filters: Optional[list[str]] = typer.Option(
        None, "--filter", "-f", help="Filter as field<op>value."
    ),
    sorts: Optional[list[str]] = typer.Option(None, "--sort", "-s", help="Sort as field[:asc|desc]."),
    limit: int = typer.Option(1000, "--limit", help="Page size."),
    fetch_all: bool = typer.Option(False, "--all", help="Fetch every page."),
) -> None:
    """Search the ad groups of a campaign."""
    selector = build_selector(filters or [], sorts or [], limit=limit)
    session = Session.from_context(ctx.obj)
    with session.client() as client:
        service = AdGroupService(client)
        if fetch_all:
            adgroups = service.find_all(campaign_id, selector)
        else:
            adgroups, _ = service.find(campaign_id, selector)
    render(adgroups, _HEADERS, _row, empty="No ad groups found.")


@adgroups_app.command("delete")
def adgroups_delete(
    ctx: typer.Context,
    adgroup_id: int = typer.Argument(help="Ad group ID."),
    campaign_id: int = _CAMPAIGN_OPTION,
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt."),
) -> None:
    """Delete an ad group."""
    if not yes:
        typer.confirm(f"Delete ad group {adgroup_id} of campaign {campaign_id}?", abort=True)
    session = Session.from_context(ctx.obj)
    with session.client() as client:
        AdGroupService(client).delete(campaign_id, adgroup_id)
    success(f"Deleted ad group {adgroup_id}.")
