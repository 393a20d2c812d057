"""Ad group endpoints, always scoped to a campaign."""

from __future__ import annotations

from typing import Optional

from asacli.client import APIClient, fetch_all
from asacli.models import AdGroup, PageDetail, Selector


class AdGroupService:
    def __init__(self, client: APIClient) -> None:
        self._client = client

    def list(
        self, campaign_id: int, limit: int = 20, offset: int = 0
    ) -> tuple[list[AdGroup], Optional[PageDetail]]:
        adgroups, page = self._client.get(
            f"/campaigns/{campaign_id}/adgroups",
            list[AdGroup],
            params={"limit": limit, "offset": offset},
        )
        return adgroups or [], page

    def get(self, campaign_id: int, adgroup_id: int) -> AdGroup:
        adgroup, _ = self._client.get(f"/campaigns/{campaign_id}/adgroups/{adgroup_id}", AdGroup)
        return adgroup

    def find(self, campaign_id: int, selector: Selector) -> tuple[list[AdGroup], Optional[PageDetail]]:
        adgroups, page = self._client.post(
            f"/campaigns/{campaign_id}/adgroups/find", selector, list[AdGroup]
        )
        return adgroups or [], page

    def find_all(self, campaign_id: int, selector: Selector) -> list[AdGroup]:
        return fetch_all(self._client, f"/campaigns/{campaign_id}/adgroups/find", selector, AdGroup)

    def delete(self, campaign_id: int, adgroup_id: int) -> None:
        self._client.delete(f"/campaigns/{campaign_id}/adgroups/{adgroup_id}")
