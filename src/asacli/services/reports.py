"""Reporting endpoints.

Every report is a POST of a :class:`~asacli.models.ReportRequest`; the
payload comes back wrapped in ``{"reportingDataResponse": {...}}``.
"""

from __future__ import annotations

from asacli.client import APIClient
from asacli.models import ReportingDataResponse, ReportRequest, ReportResponse


class ReportingService:
    def __init__(self, client: APIClient) -> None:
        self._client = client

    def _report(self, path: str, request: ReportRequest) -> ReportingDataResponse:
        response, _ = self._client.post(path, request, ReportResponse)
        if response is None:
            return ReportingDataResponse()
        return response.reporting_data_response

    def campaigns(self, request: ReportRequest) -> ReportingDataResponse:
        return self._report("/reports/campaigns", request)

    def adgroups(self, campaign_id: int, request: ReportRequest) -> ReportingDataResponse:
        return self._report(f"/reports/campaigns/{campaign_id}/adgroups", request)

    def keywords(self, campaign_id: int, request: ReportRequest) -> ReportingDataResponse:
        return self._report(f"/reports/campaigns/{campaign_id}/keywords", request)

    def search_terms(self, campaign_id: int, request: ReportRequest) -> ReportingDataResponse:
        return self._report(f"/reports/campaigns/{campaign_id}/searchterms", request)
