"""Targeting keyword commands."""

from __future__ import annotations

from typing import Optional

import typer

from asacli.commands import money, render
from asacli.models import Keyword
from asacli.output import info
from asacli.query import build_selector
from asacli.services import KeywordService
from asacli.session import Session


keywords_app = typer.Typer(no_args_is_help=True)

_HEADERS = ["ID", "AD GROUP", "TEXT", "MATCH TYPE", "STATUS", "BID"]


def _row(keyword: Keyword) -> list[str]:
    return [
        str(keyword.id or ""),
        str(keyword.ad_group_id or ""),
        keyword.text,
        keyword.match_type or "",
        keyword.status or "",
        money(keyword.bid_amount),
    ]


@keywords_app.command("list")
def keywords_list(
    ctx: typer.Context,
    campaign_id: int = typer.Option(..., "--campaign-id", help="Campaign ID."),
    adgroup_id: int = typer.Option(..., "--adgroup-id", help="Ad group ID."),
    limit: int = typer.Option(20, "--limit", help="Maximum number of keywords."),
    offset: int = typer.Option(0, "--offset", help="Number of keywords to skip."),
) -> None:
    """List the targeting keywords of an ad group."""
    session = Session.from_context(ctx.obj)
    with session.client() as client:
        keywords, page = KeywordService(client).list(
            campaign_id, adgroup_id, limit=limit, offset=offset
        )
    render(keywords, _HEADERS, _row, empty="No keywords found.")
    if page is not None:
        info(f"Showing {len(keywords)} of {page.total_results} keyword(s).")


@keywords_app.command("find")
def keywords_find(
    ctx: typer.Context,
    campaign_id: int = typer.Option(..., "--campaign-id", help="Campaign ID."),
    filters: Optional[list[str]] = typer.Option(
        None, "--filter", "-f", help="Filter as field<op>value, e.g. matchType=EXACT."
    ),
    sorts: Optional[list[str]] = typer.Option(None, "--sort", "-s", help="Sort as field[:asc|desc]."),
    limit: int = typer.Option(1000, "--limit", help="Page size."),
    fetch_all: bool = typer.Option(False, "--all", help="Fetch every page."),
) -> None:
    """Search targeting keywords across every ad group of a campaign."""
    selector = build_selector(filters or [], sorts or [], limit=limit)
    session = Session.from_context(ctx.obj)
    with session.client() as client:
        service = KeywordService(client)
        if fetch_all:
            keywords = service.find_all(campaign_id, selector)
        else:
            keywords, _ = service.find(campaign_id, selector)
    render(keywords, _HEADERS, _row, empty="No keywords found.")
