"""Report commands -- pull campaign, ad group, keyword and search term reports.

Every report shares the same options; sub-entity reports also need
``--campaign-id``.  Rows are ordered by ``localSpend`` descending::

    asa-cli reports campaigns --start-date 2024-01-01 --end-date 2024-01-31
    asa-cli reports keywords --campaign-id 42 --start-date 2024-01-01 \\
        --end-date 2024-01-07 --granularity daily --json
"""

from __future__ import annotations

from typing import Optional

import typer

from asacli.commands import money
from asacli.models import (
    OrderByItem,
    ReportingDataResponse,
    ReportRequest,
    ReportRow,
    Selector,
    SelectorPagination,
    SortOrder,
    SpendRow,
)
from asacli.output import OutputFormat, format_response, get_output, info, print_table
from asacli.services import ReportingService
from asacli.session import Session


reports_app = typer.Typer(no_args_is_help=True)

_METRIC_HEADERS = ["IMPRESSIONS", "TAPS", "INSTALLS", "TTR", "AVG CPT", "AVG CPI", "SPEND"]

_START_OPTION = typer.Option(..., "--start-date", help="Start date (YYYY-MM-DD).")
_END_OPTION = typer.Option(..., "--end-date", help="End date (YYYY-MM-DD).")
_GRANULARITY_OPTION = typer.Option(
    None, "--granularity", help="HOURLY, DAILY, WEEKLY or MONTHLY."
)
_GROUP_BY_OPTION = typer.Option(
    None, "--group-by", help="Comma-separated group-by fields, e.g. countryOrRegion,deviceClass."
)
_LIMIT_OPTION = typer.Option(1000, "--limit", help="Maximum number of rows.")
_TOTALS_OPTION = typer.Option(False, "--grand-totals", help="Include grand totals.")
_CAMPAIGN_OPTION = typer.Option(..., "--campaign-id", help="Campaign ID.")


def build_report_request(
    start_date: str,
    end_date: str,
    granularity: Optional[str] = None,
    group_by: Optional[str] = None,
    limit: int = 1000,
    grand_totals: bool = False,
) -> ReportRequest:
    """Build a report request ordered by spend, highest first."""
    return ReportRequest(
        start_time=start_date,
        end_time=end_date,
        granularity=granularity.upper() if granularity else None,
        group_by=[field.strip() for field in group_by.split(",") if field.strip()]
        if group_by
        else None,
        selector=Selector(
            order_by=[OrderByItem(field="localSpend", sort_order=SortOrder.DESCENDING)],
            pagination=SelectorPagination(offset=0, limit=limit),
        ),
        return_grand_totals=grand_totals,
        return_row_totals=True,
    )


def _metrics(spend: Optional[SpendRow]) -> list[str]:
    if spend is None:
        return [""] * len(_METRIC_HEADERS)
    return [
        str(spend.impressions),
        str(spend.taps),
        str(spend.total_installs),
        f"{spend.ttr:.4f}",
        money(spend.avg_cpt),
        money(spend.total_avg_cpi),
        money(spend.local_spend),
    ]


def print_report(report: ReportingDataResponse) -> None:
    """Render a report as one table row per row total or per time bucket."""
    if get_output().format == OutputFormat.JSON:
        format_response(report)
        return
    if not report.row:
        info("No report data.")
        return

    keys: list[str] = []
    for row in report.row:
        for key in row.flat_metadata():
            if key not in keys:
                keys.append(key)
    bucketed = any(row.granularity for row in report.row)

    headers = [key.upper() for key in keys]
    if bucketed:
        headers.append("DATE")
    headers.extend(_METRIC_HEADERS)

    rows: list[list[str]] = []
    for row in report.row:
        meta = _metadata_cells(row, keys)
        if bucketed and row.granularity:
            for bucket in row.granularity:
                rows.append(meta + [bucket.date] + _metrics(bucket.metrics))
        else:
            rows.append(meta + ([""] if bucketed else []) + _metrics(row.total))

    if report.grand_totals is not None and report.grand_totals.total is not None:
        prefix = [""] * (len(keys) + (1 if bucketed else 0))
        if prefix:
            prefix[0] = "TOTAL"
        rows.append(prefix + _metrics(report.grand_totals.total))

    print_table(headers, rows)


def _metadata_cells(row: ReportRow, keys: list[str]) -> list[str]:
    flat = row.flat_metadata()
    return ["" if flat.get(key) is None else str(flat[key]) for key in keys]


def _run(ctx: typer.Context, campaign_id: Optional[int], kind: str, request: ReportRequest) -> None:
    session = Session.from_context(ctx.obj)
    with session.client() as client:
        service = ReportingService(client)
        if kind == "campaigns":
            report = service.campaigns(request)
        elif kind == "adgroups":
            report = service.adgroups(campaign_id, request)
        elif kind == "keywords":
            report = service.keywords(campaign_id, request)
        else:
            report = service.search_terms(campaign_id, request)
    print_report(report)


@reports_app.command("campaigns")
def reports_campaigns(
    ctx: typer.Context,
    start_date: str = _START_OPTION,
    end_date: str = _END_OPTION,
    granularity: Optional[str] = _GRANULARITY_OPTION,
    group_by: Optional[str] = _GROUP_BY_OPTION,
    limit: int = _LIMIT_OPTION,
    grand_totals: bool = _TOTALS_OPTION,
) -> None:
    """Campaign-level report."""
    request = build_report_request(start_date, end_date, granularity, group_by, limit, grand_totals)
    _run(ctx, None, "campaigns", request)


@reports_app.command("adgroups")
def reports_adgroups(
    ctx: typer.Context,
    campaign_id: int = _CAMPAIGN_OPTION,
    start_date: str = _START_OPTION,
    end_date: str = _END_OPTION,
    granularity: Optional[str] = _GRANULARITY_OPTION,
    group_by: Optional[str] = _GROUP_BY_OPTION,
    limit: int = _LIMIT_OPTION,
    grand_totals: bool = _TOTALS_OPTION,
) -> None:
    """Ad group-level report for one campaign."""
    request = build_report_request(start_date, end_date, granularity, group_by, limit, grand_totals)
    _run(ctx, campaign_id, "adgroups", request)


@reports_app.command("keywords")
def reports_keywords(
    ctx: typer.Context,
    campaign_id: int = _CAMPAIGN_OPTION,
    start_date: str = _START_OPTION,
    end_date: str = _END_OPTION,
    granularity: Optional[str] = _GRANULARITY_OPTION,
    group_by: Optional[str] = _GROUP_BY_OPTION,
    limit: int = _LIMIT_OPTION,
    grand_totals: bool = _TOTALS_OPTION,
) -> None:
    """Keyword-level report for one campaign."""
    request = build_report_request(start_date, end_date, granularity, group_by, limit, grand_totals)
    _run(ctx, campaign_id, "keywords", request)


@reports_app.command("search-terms")
def reports_search_terms(
    ctx: typer.Context,
    campaign_id: int = _CAMPAIGN_OPTION,
    start_date: str = _START_OPTION,
    end_date: str = _END_OPTION,
    granularity: Optional[str] = _GRANULARITY_OPTION,
    group_by: Optional[str] = _GROUP_BY_OPTION,
    limit: int = _LIMIT_OPTION,
    grand_totals: bool = _TOTALS_OPTION,
) -> None:
    """Search term report for one campaign."""
    request = build_report_request(start_date, end_date, granularity, group_by, limit, grand_totals)
    _run(ctx, campaign_id, "search_terms", request)
