"""Campaign endpoints."""

from __future__ import annotations

from typing import Optional

from asacli.client import APIClient, fetch_all
from asacli.models import (
    Campaign,
    CampaignUpdate,
    PageDetail,
    Selector,
    UpdateCampaignRequest,
)


class CampaignService:
    def __init__(self, client: APIClient) -> None:
        self._client = client

    def list(self, limit: int = 20, offset: int = 0) -> tuple[list[Campaign], Optional[PageDetail]]:
        campaigns, page = self._client.get(
            "/campaigns", list[Campaign], params={"limit": limit, "offset": offset}
        )
        return campaigns or [], page

    def get(self, campaign_id: int) -> Campaign:
        campaign, _ = self._client.get(f"/campaigns/{campaign_id}", Campaign)
        return campaign

    def find(self, selector: Selector) -> tuple[list[Campaign], Optional[PageDetail]]:
        campaigns, page = self._client.post("/campaigns/find", selector, list[Campaign])
        return campaigns or [], page

    def find_all(self, selector: Selector) -> list[Campaign]:
        return fetch_all(self._client, "/campaigns/find", selector, Campaign)

    def update(self, campaign_id: int, update: CampaignUpdate) -> Campaign:
        body = UpdateCampaignRequest(campaign=update)
        updated, _ = self._client.put(f"/campaigns/{campaign_id}", body, Campaign)
        return updated

    def delete(self, campaign_id: int) -> None:
        self._client.delete(f"/campaigns/{campaign_id}")
