"""Tests for shared models and the exception hierarchy."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from asacli import exit_codes
from asacli.exceptions import (
    AmbiguousOrgError,
    APIError,
    AsaError,
    ConfigError,
    ErrorKind,
    InvalidUsageError,
    TokenExchangeError,
    TransportError,
)
from asacli.models import (
    Credentials,
    ErrorEntry,
    ReportResponse,
    SpendRow,
    UserACL,
)


class TestCredentials:
    def test_missing_fields(self) -> None:
        creds = Credentials(client_id="c", key_id="k")
        assert creds.missing_fields() == ["team_id", "private_key_path"]

    def test_org_id_optional(self) -> None:
        creds = Credentials(client_id="c", team_id="t", key_id="k", private_key_path="/k")
        assert creds.missing_fields() == []

    def test_frozen(self) -> None:
        creds = Credentials(client_id="c")
        with pytest.raises(ValidationError):
            creds.client_id = "other"


class TestErrorEntry:
    def test_describe_with_field(self) -> None:
        entry = ErrorEntry.model_validate(
            {"messageCode": "INVALID", "message": "bad", "field": "name"}
        )
        assert entry.describe() == "INVALID: bad (field: name)"

    def test_describe_without_code(self) -> None:
        assert ErrorEntry(message="bad").describe() == "bad"


class TestReporting:
    def test_explicit_metric_aliases(self) -> None:
        row = SpendRow.model_validate(
            {
                "avgCPT": {"amount": "0.5", "currency": "EUR"},
                "tapInstallCPI": {"amount": "1", "currency": "EUR"},
            }
        )
        assert str(row.avg_cpt) == "0.5 EUR"
        assert row.tap_install_cpi is not None
        assert row.model_dump(by_alias=True, exclude_none=True)["avgCPT"] == {
            "amount": "0.5",
            "currency": "EUR",
        }

    def test_flat_metadata_keeps_scalars_in_order(self) -> None:
        response = ReportResponse.model_validate(
            {
                "reportingDataResponse": {
                    "row": [
                        {
                            "metadata": {
                                "keywordId": 7,
                                "keyword": "photo",
                                "app": {"appName": "Snap"},
                                "deleted": False,
                                "bidAmount": None,
                            }
                        }
                    ]
                }
            }
        )
        flat = response.reporting_data_response.row[0].flat_metadata()
        assert list(flat) == ["keywordId", "keyword", "deleted", "bidAmount"]
        assert flat["deleted"] is False

    def test_missing_payload_defaults(self) -> None:
        assert ReportResponse.model_validate({}).reporting_data_response.row == []


class TestUserACL:
    def test_from_api(self) -> None:
        acl = UserACL.model_validate(
            {"orgName": "Acme", "orgId": 40669820, "currency": "USD", "roleNames": ["Admin"]}
        )
        assert acl.org_id == 40669820
        assert acl.role_names == ["Admin"]


class TestExceptions:
    @pytest.mark.parametrize(
        "exc, kind, code",
        [
            (AsaError("x"), ErrorKind.GENERIC, exit_codes.EXIT_GENERIC_FAILURE),
            (InvalidUsageError("x"), ErrorKind.USAGE, exit_codes.EXIT_INVALID_USAGE),
            (ConfigError("x"), ErrorKind.CONFIGURATION, exit_codes.EXIT_CONFIG_ERROR),
            (TokenExchangeError("x"), ErrorKind.TOKEN_EXCHANGE, exit_codes.EXIT_TOKEN_EXCHANGE),
            (TransportError("x"), ErrorKind.TRANSPORT, exit_codes.EXIT_TRANSPORT_ERROR),
            (APIError("x", status_code=500), ErrorKind.API_ERROR, exit_codes.EXIT_API_ERROR),
            (AmbiguousOrgError("x"), ErrorKind.AMBIGUOUS_ORG, exit_codes.EXIT_AMBIGUOUS_ORG),
        ],
    )
    def test_kind_and_exit_code(self, exc: AsaError, kind: ErrorKind, code: int) -> None:
        assert isinstance(exc, AsaError)
        assert exc.kind is kind
        assert exc.exit_code == code
        assert str(exc) == "x"

    def test_exit_code_override(self) -> None:
        assert AsaError("x", exit_code=9).exit_code == 9

    def test_api_error_entries_default_empty(self) -> None:
        assert APIError("HTTP 500", status_code=500).entries == []
