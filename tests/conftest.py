"""Shared test fixtures for asacli.

Provides isolated config/data directories, a freshly generated P-256 key
in both PEM container formats, sample credentials, output reset between
tests, a static token provider and a CLI runner.  These fixtures are
discovered automatically by pytest.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

from asacli.auth import TokenCache, TokenProvider
from asacli.models import Credentials, TokenRecord
from asacli.output import OutputFormat, OutputManager, reset_output, set_output


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time; CliRunner swaps those streams, so a stale manager would
    write to closed files in the next test.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration and token caches to a temporary directory.

    Sets XDG_CONFIG_HOME and XDG_DATA_HOME to subdirectories of tmp_path,
    clears all ASA_* environment variables and changes the working
    directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))

    for var in [
        "ASA_PROFILE",
        "ASA_CLIENT_ID",
        "ASA_TEAM_ID",
        "ASA_KEY_ID",
        "ASA_ORG_ID",
        "ASA_PRIVATE_KEY_PATH",
        "NO_COLOR",
    ]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Keys and credentials
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def ec_key() -> ec.EllipticCurvePrivateKey:
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture
def key_file(tmp_path: Path, ec_key: ec.EllipticCurvePrivateKey) -> Path:
    """The test key as a PKCS#8 ``PRIVATE KEY`` PEM file."""
    path = tmp_path / "keys" / "asa.p8"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(
        ec_key.private_bytes(
            serialization.Encoding.PEM,
            serialization.PrivateFormat.PKCS8,
            serialization.NoEncryption(),
        )
    )
    return path


@pytest.fixture
def sec1_key_file(tmp_path: Path, ec_key: ec.EllipticCurvePrivateKey) -> Path:
    """The test key as a SEC1 ``EC PRIVATE KEY`` PEM file."""
    path = tmp_path / "keys" / "asa-sec1.pem"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(
        ec_key.private_bytes(
            serialization.Encoding.PEM,
            serialization.PrivateFormat.TraditionalOpenSSL,
            serialization.NoEncryption(),
        )
    )
    return path


@pytest.fixture
def credentials(key_file: Path) -> Credentials:
    return Credentials(
        client_id="SEARCHADS.client-1",
        team_id="SEARCHADS.team-1",
        key_id="key-1",
        private_key_path=str(key_file),
    )


@pytest.fixture
def configured_profile(isolated_config: Path, credentials: Credentials) -> Credentials:
    """Write *credentials* as the default profile and seed a valid cached token."""
    from asacli.config import save_credentials

    save_credentials(credentials, "default")
    TokenCache.for_profile("default").save(
        TokenRecord(
            access_token="cached-token",
            expires_at=datetime.now(timezone.utc) + timedelta(hours=1),
        )
    )
    return credentials


# ---------------------------------------------------------------------------
# Token provider and HTTP fakes
# ---------------------------------------------------------------------------


class StaticProvider(TokenProvider):
    """Token provider that always hands out the same token without exchanging."""

    def __init__(self, token: str = "test-token") -> None:
        self.token = token
        self.calls = 0

    def get_token(self) -> str:
        self.calls += 1
        return self.token


@pytest.fixture
def static_provider() -> StaticProvider:
    return StaticProvider()


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager for the test."""
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
