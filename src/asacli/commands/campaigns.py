"""Campaign commands -- list, inspect, search, update and delete campaigns.

``find`` accepts repeated ``--filter`` and ``--sort`` tokens::

    asa-cli campaigns find --filter status=ENABLED --filter "name~Brand" \\
        --sort name:asc --all
"""

from __future__ import annotations

from typing import Optional

import typer

from asacli.commands import joined, money, render
from asacli.exceptions import InvalidUsageError
from asacli.models import Campaign, CampaignUpdate, Money
from asacli.output import format_response, info, success
from asacli.query import build_selector
from asacli.services import CampaignService
from asacli.session import Session


campaigns_app = typer.Typer(no_args_is_help=True)

_HEADERS = ["ID", "NAME", "STATUS", "SERVING STATUS", "DAILY BUDGET", "COUNTRIES"]


def _row(campaign: Campaign) -> list[str]:
    return [
        str(campaign.id or ""),
        campaign.name,
        campaign.status or "",
        campaign.serving_status or "",
        money(campaign.daily_budget_amount),
        joined(campaign.countries_or_regions),
    ]


@campaigns_app.command("list")
def campaigns_list(
    ctx: typer.Context,
    limit: int = typer.Option(20, "--limit", help="Maximum number of campaigns."),
    offset: int = typer.Option(0, "--offset", help="Number of campaigns to skip."),
) -> None:
    """List campaigns in the organization."""
    session = Session.from_context(ctx.obj)
    with session.client() as client:
        campaigns, page = CampaignService(client).list(limit=limit, offset=offset)
    render(campaigns, _HEADERS, _row, empty="No campaigns found.")
    if page is not None:
        info(f"Showing {len(campaigns)} of {page.total_results} campaign(s).")


@campaigns_app.command("get")
def campaigns_get(
    ctx: typer.Context,
    campaign_id: int = typer.Argument(help="Campaign ID."),
) -> None:
    """Show one campaign."""
    session = Session.from_context(ctx.obj)
    with session.client() as client:
        campaign = CampaignService(client).get(campaign_id)
    format_response(campaign)


@campaigns_app.command("find")
def campaigns_find(
    ctx: typer.Context,
    filters: Optional[list[str]] = typer.Option(
        None, "--filter", "-f", help="Filter as field<op>value (ops: = ~ !~ @ > < >= <=)."
    ),
    sorts: Optional[list[str]] = typer.Option(
        None, "--sort", "-s", help="Sort as field[:asc|desc]."
    ),
    limit: int = typer.Option(1000, "--limit", help="Page size."),
    fetch_all: bool = typer.Option(False, "--all", help="Fetch every page."),
) -> None:
    """Search campaigns with filters and sorting."""
    selector = build_selector(filters or [], sorts or [], limit=limit)
    session = Session.from_context(ctx.obj)
    with session.client() as client:
        service = CampaignService(client)
        if fetch_all:
            campaigns = service.find_all(selector)
        else:
            campaigns, _ = service.find(selector)
    render(campaigns, _HEADERS, _row, empty="No campaigns found.")


@campaigns_app.command("update")
def campaigns_update(
    ctx: typer.Context,
    campaign_id: int = typer.Argument(help="Campaign ID."),
    name: Optional[str] = typer.Option(None, "--name", help="New campaign name."),
    status: Optional[str] = typer.Option(None, "--status", help="ENABLED or PAUSED."),
    daily_budget: Optional[str] = typer.Option(
        None, "--daily-budget", help="Daily budget amount, e.g. 50.00."
    ),
    currency: Optional[str] = typer.Option(
        None, "--currency", help="Currency of --daily-budget, e.g. USD."
    ),
) -> None:
    """Update a campaign's name, status or daily budget.

    Raises:
        InvalidUsageError: If nothing would change, or ``--daily-budget`` is
            given without ``--currency``.
    """
    if daily_budget is not None and not currency:
        raise InvalidUsageError("--daily-budget requires --currency")
    update = CampaignUpdate(
        name=name,
        status=status.upper() if status else None,
        daily_budget_amount=(
            Money(amount=daily_budget, currency=currency.upper())
            if daily_budget is not None and currency
            else None
        ),
    )
    if not update.model_dump(exclude_none=True):
        raise InvalidUsageError("nothing to update: pass --name, --status or --daily-budget")

    session = Session.from_context(ctx.obj)
    with session.client() as client:
        campaign = CampaignService(client).update(campaign_id, update)
    success(f"Updated campaign {campaign_id}.")
    format_response(campaign)


@campaigns_app.command("delete")
def campaigns_delete(
    ctx: typer.Context,
    campaign_id: int = typer.Argument(help="Campaign ID."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt."),
) -> None:
    """Delete a campaign."""
    if not yes:
        typer.confirm(f"Delete campaign {campaign_id}?", abort=True)
    session = Session.from_context(ctx.obj)
    with session.client() as client:
        CampaignService(client).delete(campaign_id)
    success(f"Deleted campaign {campaign_id}.")
