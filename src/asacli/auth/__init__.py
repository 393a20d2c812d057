"""Authentication pipeline for asacli.

The Apple Search Ads API uses the OAuth2 client-credentials grant with a
signed JWT in place of a client secret.  This package provides every piece
of that flow:

- :func:`build_client_assertion` / :func:`load_private_key` -- sign the
  ES256 client assertion from the API user's P-256 key.
- :class:`TokenProvider` -- exchange the assertion for an access token and
  reuse it until five minutes before expiry.
- :class:`TokenCache` -- persistent, per-profile token storage on disk.
- :class:`AuthTransport` -- httpx transport injecting the bearer token and
  organization context into every request.

Typical usage::

    from asacli.auth import AuthTransport, TokenCache, TokenProvider

    provider = TokenProvider(credentials, TokenCache.for_profile(profile))
    transport = AuthTransport(provider, org_id="123456")
"""

from asacli.auth.provider import TokenProvider
from asacli.auth.signer import build_client_assertion, load_private_key
from asacli.auth.token_cache import TokenCache
from asacli.auth.transport import AuthTransport

__all__ = [
    "AuthTransport",
    "TokenCache",
    "TokenProvider",
    "build_client_assertion",
    "load_private_key",
]
