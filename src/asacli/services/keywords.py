"""Targeting keyword endpoints."""

from __future__ import annotations

from typing import Optional

from asacli.client import APIClient, fetch_all
from asacli.models import Keyword, PageDetail, Selector


class KeywordService:
    def __init__(self, client: APIClient) -> None:
        self._client = client

    def list(
        self, campaign_id: int, adgroup_id: int, limit: int = 20, offset: int = 0
    ) -> tuple[list[Keyword], Optional[PageDetail]]:
        keywords, page = self._client.get(
            f"/campaigns/{campaign_id}/adgroups/{adgroup_id}/targetingkeywords",
            list[Keyword],
            params={"limit": limit, "offset": offset},
        )
        return keywords or [], page

    def find(self, campaign_id: int, selector: Selector) -> tuple[list[Keyword], Optional[PageDetail]]:
        keywords, page = self._client.post(
            f"/campaigns/{campaign_id}/adgroups/targetingkeywords/find", selector, list[Keyword]
        )
        return keywords or [], page

    def find_all(self, campaign_id: int, selector: Selector) -> list[Keyword]:
        return fetch_all(
            self._client,
            f"/campaigns/{campaign_id}/adgroups/targetingkeywords/find",
            selector,
            Keyword,
        )
