"""Canonical Pydantic models shared across all asacli modules.

This is the single source of truth for data shapes in the project.  The
models fall into three groups:

**Local state** -- never sent to the API:
    :class:`Credentials` and :class:`TokenRecord`.

**Query and envelope models** -- the selector posted to ``find`` endpoints
and the metadata returned around every payload:
    :class:`ConditionOperator`, :class:`Condition`, :class:`SortOrder`,
    :class:`OrderByItem`, :class:`SelectorPagination`, :class:`Selector`,
    :class:`PageDetail`, and :class:`ErrorEntry`.

**Resource models** -- payloads of the Campaign Management API:
    :class:`UserACL`, :class:`Campaign`, :class:`AdGroup`,
    :class:`Keyword`, and the reporting models.

API-facing models extend :class:`APIModel`, which maps snake_case attribute
names to the API's camelCase keys and keeps unknown keys in ``model_extra``
so that fields added by the API survive a round-trip.
"""

from __future__ import annotations

import enum
from datetime import datetime, timedelta, timezone
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


TOKEN_SAFETY_MARGIN = timedelta(minutes=5)
"""A token is only reused while it stays valid for at least this long."""


# --- Local state ---


class Credentials(BaseModel):
    """API user credentials for one configuration profile.

    Loaded once per invocation by :func:`~asacli.config.load_credentials`
    and never modified afterwards.  ``org_id`` is optional; when absent it is
    resolved through the ACL endpoint.
    """

    model_config = ConfigDict(frozen=True)

    client_id: str = ""
    team_id: str = ""
    key_id: str = ""
    private_key_path: str = ""
    org_id: Optional[str] = None

    def missing_fields(self) -> list[str]:
        """Return the names of required fields that are empty."""
        required = ("client_id", "team_id", "key_id", "private_key_path")
        return [name for name in required if not getattr(self, name)]


class TokenRecord(BaseModel):
    """An access token together with its absolute expiry time.

    Serialised as ``{access_token, token_type, expires_at}`` in the
    per-profile token cache file.
    """

    access_token: str
    token_type: str = "Bearer"
    expires_at: datetime

    def is_usable(self, now: Optional[datetime] = None) -> bool:
        """Return ``True`` while the token outlives the safety margin.

        Args:
            now: Reference time; defaults to the current UTC time.
        """
        now = now or datetime.now(timezone.utc)
        expires = self.expires_at
        if expires.tzinfo is None:
            expires = expires.replace(tzinfo=timezone.utc)
        return now + TOKEN_SAFETY_MARGIN < expires


# --- Query and envelope models ---


class APIModel(BaseModel):
    """Base for every model exchanged with the API (camelCase on the wire)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )


class ConditionOperator(str, enum.Enum):
    """Operators accepted in a selector condition."""

    EQUALS = "EQUALS"
    CONTAINS = "CONTAINS"
    NOT_CONTAINS = "NOT_CONTAINS"
    IN = "IN"
    GREATER_THAN = "GREATER_THAN"
    LESS_THAN = "LESS_THAN"
    GREATER_THAN_OR_EQUAL = "GREATER_THAN_OR_EQUAL"
    LESS_THAN_OR_EQUAL = "LESS_THAN_OR_EQUAL"


class SortOrder(str, enum.Enum):
    ASCENDING = "ASCENDING"
    DESCENDING = "DESCENDING"


class Condition(APIModel):
    """A single filter condition; only ``IN`` may carry several values."""

    model_config = ConfigDict(frozen=True)

    field: str
    operator: ConditionOperator
    values: list[str] = Field(default_factory=list)


class OrderByItem(APIModel):
    model_config = ConfigDict(frozen=True)

    field: str
    sort_order: SortOrder = SortOrder.ASCENDING


class SelectorPagination(APIModel):
    model_config = ConfigDict(frozen=True)

    offset: int = 0
    limit: int = 1000


class Selector(APIModel):
    """Structured query posted to a ``<resource>/find`` endpoint.

    Selectors are frozen; the paginator derives the next page's selector
    with ``model_copy(update=...)``.
    """

    model_config = ConfigDict(frozen=True)

    conditions: list[Condition] = Field(default_factory=list)
    order_by: list[OrderByItem] = Field(default_factory=list)
    pagination: SelectorPagination = Field(default_factory=SelectorPagination)


class PageDetail(APIModel):
    """Pagination metadata returned next to list payloads."""

    total_results: int = 0
    start_index: int = 0
    items_per_page: int = 0


class ErrorEntry(APIModel):
    """One entry of the API's ``{"errors": [...]}`` envelope."""

    message_code: str = ""
    message: str = ""
    field: Optional[str] = None

    def describe(self) -> str:
        text = f"{self.message_code}: {self.message}" if self.message_code else self.message
        if self.field:
            text += f" (field: {self.field})"
        return text


# --- Resource models ---


class Money(APIModel):
    amount: str
    currency: str

    def __str__(self) -> str:
        return f"{self.amount} {self.currency}"


class UserACL(APIModel):
    """An organization the API user has access to (``GET /acls``)."""

    org_name: str = ""
    org_id: int
    currency: str = ""
    payment_model: Optional[str] = None
    role_names: list[str] = Field(default_factory=list)
    time_zone: Optional[str] = None
    parent_org_id: Optional[int] = None


class Campaign(APIModel):
    id: Optional[int] = None
    org_id: Optional[int] = None
    name: str = ""
    budget_amount: Optional[Money] = None
    daily_budget_amount: Optional[Money] = None
    adam_id: Optional[int] = None
    payment_model: Optional[str] = None
    status: Optional[str] = None
    serving_status: Optional[str] = None
    serving_state_reasons: Optional[list[str]] = None
    display_status: Optional[str] = None
    supply_sources: Optional[list[str]] = None
    ad_channel_type: Optional[str] = None
    billing_event: Optional[str] = None
    countries_or_regions: Optional[list[str]] = None
    modification_time: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None


class CampaignUpdate(APIModel):
    name: Optional[str] = None
    budget_amount: Optional[Money] = None
    daily_budget_amount: Optional[Money] = None
    status: Optional[str] = None
    countries_or_regions: Optional[list[str]] = None


class UpdateCampaignRequest(APIModel):
    campaign: CampaignUpdate
    clear_geo_targeting_on_country_or_region_change: Optional[bool] = None


class AdGroup(APIModel):
    id: Optional[int] = None
    campaign_id: Optional[int] = None
    org_id: Optional[int] = None
    name: str = ""
    status: Optional[str] = None
    serving_status: Optional[str] = None
    display_status: Optional[str] = None
    pricing_model: Optional[str] = None
    default_bid_amount: Optional[Money] = None
    cpa_goal: Optional[Money] = None
    automated_keywords_opt_in: Optional[bool] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    modification_time: Optional[str] = None


class Keyword(APIModel):
    id: Optional[int] = None
    campaign_id: Optional[int] = None
    ad_group_id: Optional[int] = None
    text: str = ""
    match_type: Optional[str] = None
    status: Optional[str] = None
    bid_amount: Optional[Money] = None
    modification_time: Optional[str] = None


# --- Reporting ---


MetadataValue = Optional[Union[bool, int, float, str]]
"""Scalar value of a report row's metadata; the keys depend on ``groupBy``."""


class ReportRequest(APIModel):
    start_time: str
    end_time: str
    granularity: Optional[str] = None
    group_by: Optional[list[str]] = None
    selector: Optional[Selector] = None
    return_grand_totals: Optional[bool] = None
    return_records_with_no_metrics: Optional[bool] = None
    return_row_totals: Optional[bool] = None
    time_zone: Optional[str] = None


class SpendRow(APIModel):
    impressions: int = 0
    taps: int = 0
    total_installs: int = 0
    tap_installs: int = 0
    view_installs: int = 0
    total_new_downloads: int = 0
    tap_new_downloads: int = 0
    view_new_downloads: int = 0
    total_redownloads: int = 0
    tap_redownloads: int = 0
    view_redownloads: int = 0
    ttr: float = 0.0
    total_install_rate: float = 0.0
    tap_install_rate: float = 0.0
    avg_cpt: Optional[Money] = Field(default=None, alias="avgCPT")
    avg_cpm: Optional[Money] = Field(default=None, alias="avgCPM")
    tap_install_cpi: Optional[Money] = Field(default=None, alias="tapInstallCPI")
    total_avg_cpi: Optional[Money] = Field(default=None, alias="totalAvgCPI")
    local_spend: Optional[Money] = None


class GranularityRow(APIModel):
    date: str = ""
    metrics: Optional[SpendRow] = None


class ReportRow(APIModel):
    other: Optional[bool] = None
    total: Optional[SpendRow] = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    granularity: list[GranularityRow] = Field(default_factory=list)

    def flat_metadata(self) -> dict[str, MetadataValue]:
        """Return the scalar metadata entries in their original order.

        Nested values (e.g. the ``app`` object in keyword reports) are
        skipped; callers that need them can read :attr:`metadata` directly.
        """
        return {
            key: value
            for key, value in self.metadata.items()
            if value is None or isinstance(value, (bool, int, float, str))
        }


class ReportingDataResponse(APIModel):
    row: list[ReportRow] = Field(default_factory=list)
    grand_totals: Optional[ReportRow] = None


class ReportResponse(APIModel):
    reporting_data_response: ReportingDataResponse = Field(
        default_factory=ReportingDataResponse
    )
