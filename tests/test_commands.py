"""End-to-end tests for the CLI commands against a fake API."""

from __future__ import annotations

import json
from pathlib import Path

import httpx
import pytest
import yaml

from asacli.app import app
from asacli.auth import TokenCache
from asacli.config import config_file_path
from asacli.exceptions import AmbiguousOrgError, APIError, ConfigError, InvalidUsageError
from asacli.models import Credentials


CAMPAIGN = {
    "id": 11,
    "orgId": 1,
    "name": "Brand - US",
    "status": "ENABLED",
    "servingStatus": "RUNNING",
    "dailyBudgetAmount": {"amount": "50", "currency": "USD"},
    "countriesOrRegions": ["US"],
}


class FakeAPI:
    """Routes requests by method and path; unknown routes answer 404."""

    def __init__(self, routes: dict[tuple[str, str], httpx.Response | dict]):
        self.routes = routes
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/api/v5")
        route = self.routes.get((request.method, path))
        if route is None:
            return httpx.Response(
                404,
                json={"error": {"errors": [{"messageCode": "NOT_FOUND", "message": "no route"}]}},
            )
        if isinstance(route, httpx.Response):
            return route
        return httpx.Response(200, json=route)

    def bodies(self, method: str, path: str) -> list[dict]:
        return [
            json.loads(r.content)
            for r in self.requests
            if r.method == method and r.url.path == f"/api/v5{path}"
        ]


def _invoke(cli_runner, api: FakeAPI, *args: str, input: str | None = None):
    return cli_runner.invoke(
        app,
        ["--no-color", "--org-id", "1", *args],
        obj={"transport": httpx.MockTransport(api)},
        input=input,
    )


class TestConfigure:
    def test_flags(self, cli_runner, isolated_config: Path, key_file: Path) -> None:
        result = cli_runner.invoke(
            app,
            [
                "--no-color",
                "configure",
                "--client-id", "SEARCHADS.c",
                "--team-id", "SEARCHADS.t",
                "--key-id", "k1",
                "--private-key-path", str(key_file),
            ],
        )
        assert result.exit_code == 0, result.output
        assert "Configuration saved for profile 'default'." in result.output

        document = yaml.safe_load(config_file_path().read_text())
        assert document["client_id"] == "SEARCHADS.c"
        assert document["private_key_path"] == str(key_file)

    def test_named_profile(self, cli_runner, isolated_config: Path, key_file: Path) -> None:
        result = cli_runner.invoke(
            app,
            [
                "--no-color", "--profile", "prod", "configure",
                "--client-id", "c", "--team-id", "t", "--key-id", "k",
                "--org-id", "42", "--private-key-path", str(key_file),
            ],
        )
        assert result.exit_code == 0, result.output
        document = yaml.safe_load(config_file_path().read_text())
        assert document["profiles"]["prod"]["org_id"] == "42"

    def test_partial_flags_rejected(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["--no-color", "configure", "--client-id", "c"])
        assert isinstance(result.exception, InvalidUsageError)
        assert not config_file_path().exists()

    def test_missing_key_file(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(
            app,
            [
                "--no-color", "configure",
                "--client-id", "c", "--team-id", "t", "--key-id", "k",
                "--private-key-path", str(isolated_config / "absent.pem"),
            ],
        )
        assert isinstance(result.exception, ConfigError)
        assert "private key file not found" in str(result.exception)

    def test_interactive(self, cli_runner, isolated_config: Path, key_file: Path) -> None:
        answers = "\n".join(["c", "t", "k", "", str(key_file)]) + "\n"
        result = cli_runner.invoke(app, ["--no-color", "configure"], input=answers)
        assert result.exit_code == 0, result.output
        document = yaml.safe_load(config_file_path().read_text())
        assert document["key_id"] == "k"
        assert document["org_id"] == ""


class TestWhoami:
    def test_lists_orgs_without_org_header(self, cli_runner, configured_profile: Credentials) -> None:
        api = FakeAPI(
            {
                ("GET", "/acls"): {
                    "data": [
                        {
                            "orgName": "Acme",
                            "orgId": 1,
                            "currency": "USD",
                            "roleNames": ["Admin", "API Campaign Manager"],
                        }
                    ]
                }
            }
        )
        result = _invoke(cli_runner, api, "whoami")

        assert result.exit_code == 0, result.output
        assert "Acme\t1\tUSD\tAdmin, API Campaign Manager" in result.output
        assert "1 organization(s) accessible" in result.output
        assert "X-AP-Context" not in api.requests[0].headers
        assert api.requests[0].headers["Authorization"] == "Bearer cached-token"

    def test_missing_config(self, cli_runner, isolated_config: Path) -> None:
        result = _invoke(cli_runner, FakeAPI({}), "whoami")
        assert isinstance(result.exception, ConfigError)


class TestAuth:
    def test_status_and_logout(self, cli_runner, configured_profile: Credentials) -> None:
        result = cli_runner.invoke(app, ["--no-color", "--json", "auth", "status"])
        assert result.exit_code == 0, result.output
        assert '"usable": true' in result.output
        assert "cached-token" not in result.output

        result = cli_runner.invoke(app, ["--no-color", "auth", "logout"])
        assert result.exit_code == 0, result.output
        assert "Cleared cached token" in result.output
        assert TokenCache.for_profile("default").load() is None

    def test_status_without_cache(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["--no-color", "auth", "status"])
        assert result.exit_code == 0
        assert "No cached token" in result.output

    def test_logout_unknown_profile(self, cli_runner, configured_profile: Credentials) -> None:
        result = cli_runner.invoke(app, ["--no-color", "--profile", "staging", "auth", "logout"])
        assert isinstance(result.exception, ConfigError)
        assert "(available: default)" in str(result.exception)
        assert TokenCache.for_profile("default").load() is not None


class TestCampaigns:
    def test_list(self, cli_runner, configured_profile: Credentials) -> None:
        api = FakeAPI(
            {
                ("GET", "/campaigns"): {
                    "data": [CAMPAIGN],
                    "pagination": {"totalResults": 1, "startIndex": 0, "itemsPerPage": 1},
                }
            }
        )
        result = _invoke(cli_runner, api, "campaigns", "list", "--limit", "5")

        assert result.exit_code == 0, result.output
        assert "11\tBrand - US\tENABLED\tRUNNING\t50 USD\tUS" in result.output
        assert api.requests[0].url.params["limit"] == "5"
        assert api.requests[0].headers["X-AP-Context"] == "orgId=1"

    def test_list_json(self, cli_runner, configured_profile: Credentials) -> None:
        api = FakeAPI({("GET", "/campaigns"): {"data": [CAMPAIGN]}})
        result = _invoke(cli_runner, api, "--json", "--quiet", "campaigns", "list")
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == [CAMPAIGN]

    def test_find_posts_selector(self, cli_runner, configured_profile: Credentials) -> None:
        api = FakeAPI({("POST", "/campaigns/find"): {"data": [CAMPAIGN]}})
        result = _invoke(
            cli_runner,
            api,
            "campaigns", "find",
            "--filter", "status=ENABLED",
            "--filter", "countriesOrRegions@US,GB",
            "--sort", "name:desc",
            "--limit", "25",
        )

        assert result.exit_code == 0, result.output
        assert api.bodies("POST", "/campaigns/find") == [
            {
                "conditions": [
                    {"field": "status", "operator": "EQUALS", "values": ["ENABLED"]},
                    {"field": "countriesOrRegions", "operator": "IN", "values": ["US", "GB"]},
                ],
                "orderBy": [{"field": "name", "sortOrder": "DESCENDING"}],
                "pagination": {"offset": 0, "limit": 25},
            }
        ]

    def test_find_all_pages(self, cli_runner, configured_profile: Credentials) -> None:
        pages = iter(
            [
                {"data": [dict(CAMPAIGN, id=1), dict(CAMPAIGN, id=2)],
                 "pagination": {"totalResults": 3, "startIndex": 0, "itemsPerPage": 2}},
                {"data": [dict(CAMPAIGN, id=3)],
                 "pagination": {"totalResults": 3, "startIndex": 2, "itemsPerPage": 1}},
            ]
        )

        class Paged(FakeAPI):
            def __call__(self, request: httpx.Request) -> httpx.Response:
                self.requests.append(request)
                return httpx.Response(200, json=next(pages))

        api = Paged({})
        result = _invoke(cli_runner, api, "campaigns", "find", "--all", "--limit", "2")

        assert result.exit_code == 0, result.output
        offsets = [json.loads(r.content)["pagination"]["offset"] for r in api.requests]
        assert offsets == [0, 2]

    def test_get_not_found(self, cli_runner, configured_profile: Credentials) -> None:
        result = _invoke(cli_runner, FakeAPI({}), "campaigns", "get", "999")
        assert isinstance(result.exception, APIError)
        assert str(result.exception) == "GET /campaigns/999: HTTP 404: NOT_FOUND: no route"

    def test_update(self, cli_runner, configured_profile: Credentials) -> None:
        api = FakeAPI({("PUT", "/campaigns/11"): {"data": dict(CAMPAIGN, status="PAUSED")}})
        result = _invoke(
            cli_runner, api, "campaigns", "update", "11",
            "--status", "paused", "--daily-budget", "75", "--currency", "usd",
        )
        assert result.exit_code == 0, result.output
        assert api.bodies("PUT", "/campaigns/11") == [
            {
                "campaign": {
                    "status": "PAUSED",
                    "dailyBudgetAmount": {"amount": "75", "currency": "USD"},
                }
            }
        ]

    def test_update_requires_changes(self, cli_runner, configured_profile: Credentials) -> None:
        result = _invoke(cli_runner, FakeAPI({}), "campaigns", "update", "11")
        assert isinstance(result.exception, InvalidUsageError)

    def test_budget_requires_currency(self, cli_runner, configured_profile: Credentials) -> None:
        result = _invoke(cli_runner, FakeAPI({}), "campaigns", "update", "11", "--daily-budget", "5")
        assert isinstance(result.exception, InvalidUsageError)

    def test_delete(self, cli_runner, configured_profile: Credentials) -> None:
        api = FakeAPI({("DELETE", "/campaigns/11"): httpx.Response(200)})
        result = _invoke(cli_runner, api, "campaigns", "delete", "11", "--yes")
        assert result.exit_code == 0, result.output
        assert "Deleted campaign 11." in result.output

    def test_delete_declined(self, cli_runner, configured_profile: Credentials) -> None:
        api = FakeAPI({})
        result = _invoke(cli_runner, api, "campaigns", "delete", "11", input="n\n")
        assert result.exit_code == 1
        assert api.requests == []

    def test_ambiguous_org(self, cli_runner, configured_profile: Credentials) -> None:
        api = FakeAPI(
            {
                ("GET", "/acls"): {
                    "data": [{"orgName": "A", "orgId": 1}, {"orgName": "B", "orgId": 2}]
                }
            }
        )
        result = cli_runner.invoke(
            app,
            ["--no-color", "campaigns", "list"],
            obj={"transport": httpx.MockTransport(api)},
        )
        assert isinstance(result.exception, AmbiguousOrgError)
        assert [r.url.path for r in api.requests] == ["/api/v5/acls"]


class TestAdGroupsAndKeywords:
    def test_adgroups_find(self, cli_runner, configured_profile: Credentials) -> None:
        api = FakeAPI(
            {
                ("POST", "/campaigns/11/adgroups/find"): {
                    "data": [{"id": 5, "campaignId": 11, "name": "Exact", "status": "ENABLED"}]
                }
            }
        )
        result = _invoke(
            cli_runner, api, "adgroups", "find", "--campaign-id", "11", "--filter", "name~Exact"
        )
        assert result.exit_code == 0, result.output
        assert "5\tExact\tENABLED" in result.output

    def test_adgroups_delete(self, cli_runner, configured_profile: Credentials) -> None:
        api = FakeAPI({("DELETE", "/campaigns/11/adgroups/5"): httpx.Response(200)})
        result = _invoke(cli_runner, api, "adgroups", "delete", "5", "--campaign-id", "11", "-y")
        assert result.exit_code == 0, result.output

    def test_keywords_list(self, cli_runner, configured_profile: Credentials) -> None:
        api = FakeAPI(
            {
                ("GET", "/campaigns/11/adgroups/5/targetingkeywords"): {
                    "data": [
                        {
                            "id": 9,
                            "adGroupId": 5,
                            "text": "photo editor",
                            "matchType": "EXACT",
                            "status": "ACTIVE",
                            "bidAmount": {"amount": "1.20", "currency": "USD"},
                        }
                    ]
                }
            }
        )
        result = _invoke(
            cli_runner, api, "keywords", "list", "--campaign-id", "11", "--adgroup-id", "5"
        )
        assert result.exit_code == 0, result.output
        assert "9\t5\tphoto editor\tEXACT\tACTIVE\t1.20 USD" in result.output


class TestReports:
    REPORT = {
        "data": {
            "reportingDataResponse": {
                "row": [
                    {
                        "metadata": {"campaignId": 11, "campaignName": "Brand - US"},
                        "total": {
                            "impressions": 1000,
                            "taps": 50,
                            "totalInstalls": 10,
                            "ttr": 0.05,
                            "avgCPT": {"amount": "0.40", "currency": "USD"},
                            "totalAvgCPI": {"amount": "2.00", "currency": "USD"},
                            "localSpend": {"amount": "20.00", "currency": "USD"},
                        },
                    }
                ],
                "grandTotals": {
                    "total": {
                        "impressions": 1000,
                        "taps": 50,
                        "totalInstalls": 10,
                        "ttr": 0.05,
                        "localSpend": {"amount": "20.00", "currency": "USD"},
                    }
                },
            }
        }
    }

    def test_campaign_report(self, cli_runner, configured_profile: Credentials) -> None:
        api = FakeAPI({("POST", "/reports/campaigns"): self.REPORT})
        result = _invoke(
            cli_runner, api, "reports", "campaigns",
            "--start-date", "2024-01-01", "--end-date", "2024-01-31",
            "--granularity", "daily", "--grand-totals",
        )

        assert result.exit_code == 0, result.output
        body = api.bodies("POST", "/reports/campaigns")[0]
        assert body["startTime"] == "2024-01-01"
        assert body["granularity"] == "DAILY"
        assert body["returnRowTotals"] is True
        assert body["returnGrandTotals"] is True
        assert body["selector"]["orderBy"] == [{"field": "localSpend", "sortOrder": "DESCENDING"}]
        assert body["selector"]["pagination"] == {"offset": 0, "limit": 1000}

        assert "CAMPAIGNID\tCAMPAIGNNAME\tIMPRESSIONS" in result.output
        assert "11\tBrand - US\t1000\t50\t10\t0.0500\t0.40 USD\t2.00 USD\t20.00 USD" in result.output
        assert "TOTAL\t\t1000" in result.output

    def test_search_terms_needs_campaign(self, cli_runner, configured_profile: Credentials) -> None:
        result = _invoke(
            cli_runner, FakeAPI({}), "reports", "search-terms",
            "--start-date", "2024-01-01", "--end-date", "2024-01-31",
        )
        assert result.exit_code == 2

    def test_keyword_report_group_by(self, cli_runner, configured_profile: Credentials) -> None:
        api = FakeAPI({("POST", "/reports/campaigns/11/keywords"): {"data": {"reportingDataResponse": {"row": []}}}})
        result = _invoke(
            cli_runner, api, "reports", "keywords", "--campaign-id", "11",
            "--start-date", "2024-01-01", "--end-date", "2024-01-02",
            "--group-by", "countryOrRegion, deviceClass",
        )
        assert result.exit_code == 0, result.output
        assert api.bodies("POST", "/reports/campaigns/11/keywords")[0]["groupBy"] == [
            "countryOrRegion",
            "deviceClass",
        ]
        assert "No report data." in result.output


class TestEntryPoint:
    def test_asa_error_exit_code(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture
    ) -> None:
        from asacli.app import main

        monkeypatch.setattr("asacli.app._setup_signal_handlers", lambda: None)
        monkeypatch.setattr("sys.argv", ["asa-cli", "--no-color", "campaigns", "list"])
        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 3
        assert "Error: missing required config" in capsys.readouterr().err

    def test_version(self, cli_runner) -> None:
        from asacli import __version__

        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"asa-cli {__version__}" in result.output
