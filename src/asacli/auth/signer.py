"""ES256 client assertions for the OAuth2 client-credentials exchange.

The identity provider does not accept a static client secret.  Instead the
``client_secret`` form field carries a short JWT signed with the API user's
P-256 private key.  This module loads that key and builds the assertion:

* header ``alg=ES256`` and ``kid=<key id>``
* ``iss`` = team id, ``sub`` = client id, ``aud`` = the identity provider
* ``iat`` = now, ``exp`` = ``iat`` + 180 days (the provider's maximum)

A fresh assertion is signed for every token exchange; none is cached.

See Also:
    :class:`~asacli.auth.provider.TokenProvider` -- the only caller.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Optional

import jwt
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

from asacli.exceptions import ConfigError
from asacli.models import Credentials

ASSERTION_AUDIENCE = "https://appleid.apple.com"
ASSERTION_ALGORITHM = "ES256"
ASSERTION_LIFETIME = timedelta(days=180)


def load_private_key(path: str | Path) -> ec.EllipticCurvePrivateKey:
    """Load a P-256 private key from a PEM file.

    Both PKCS#8 ``PRIVATE KEY`` files (keys downloaded as ``.p8``) and SEC1
    ``EC PRIVATE KEY`` files (keys produced by ``openssl ecparam -genkey``,
    with or without a leading ``EC PARAMETERS`` block) are accepted.

    Args:
        path: Path to the ``.pem``/``.p8`` file.

    Returns:
        The loaded elliptic-curve private key.

    Raises:
        ConfigError: If the file cannot be read or parsed, or does not hold
            a P-256 EC key.
    """
    key_path = Path(path)
    try:
        data = key_path.read_bytes()
    except OSError as exc:
        raise ConfigError(f"reading private key file {key_path}: {exc}") from exc

    try:
        key = serialization.load_pem_private_key(data, password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise ConfigError(
            f"unparseable private key {key_path} (expected a PKCS#8 or SEC1 PEM file): {exc}"
        ) from exc

    if not isinstance(key, ec.EllipticCurvePrivateKey):
        raise ConfigError(f"unparseable private key {key_path}: not an elliptic-curve key")
    if not isinstance(key.curve, ec.SECP256R1):
        raise ConfigError(
            f"unparseable private key {key_path}: expected curve P-256, got {key.curve.name}"
        )
    return key


def assertion_claims(
    credentials: Credentials,
    now: Optional[datetime] = None,
) -> dict[str, Any]:
    """Return the registered claims for a client assertion issued at *now*."""
    issued = now or datetime.now(timezone.utc)
    return {
        "iss": credentials.team_id,
        "sub": credentials.client_id,
        "aud": ASSERTION_AUDIENCE,
        "iat": int(issued.timestamp()),
        "exp": int((issued + ASSERTION_LIFETIME).timestamp()),
    }


def build_client_assertion(
    credentials: Credentials,
    now: Optional[datetime] = None,
    key: Optional[ec.EllipticCurvePrivateKey] = None,
) -> str:
    """Sign a compact ES256 client assertion for *credentials*.

    Args:
        credentials: Supplies ``team_id``, ``client_id``, ``key_id`` and the
            private key path.
        now: Issue time; defaults to the current UTC time.
        key: Pre-loaded private key; read from
            ``credentials.private_key_path`` when omitted.

    Returns:
        The encoded JWT, used verbatim as the ``client_secret`` form field.

    Raises:
        ConfigError: If the private key cannot be loaded.
    """
    signing_key = key if key is not None else load_private_key(credentials.private_key_path)
    return jwt.encode(
        assertion_claims(credentials, now),
        signing_key,
        algorithm=ASSERTION_ALGORITHM,
        headers={"kid": credentials.key_id},
    )
