"""Access-token provider for the OAuth2 client-credentials flow.

:class:`TokenProvider` owns the token for one profile.  It serves the
cached token while it remains valid for more than
:data:`~asacli.models.TOKEN_SAFETY_MARGIN` and otherwise performs a full
exchange: sign a fresh client assertion, POST it to the identity provider,
and persist the resulting :class:`~asacli.models.TokenRecord`.

There is no refresh grant; every expiry triggers a new exchange.  Nothing is
retried -- a failed exchange raises :class:`~asacli.exceptions.TokenExchangeError`
and the command decides what to do.

One provider is constructed per invocation and handed to every component
that needs it.  A lock serialises the read/exchange/write sequence so
concurrent callers share a single exchange.
"""

from __future__ import annotations

import threading
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional

import httpx
from pydantic import ValidationError

from asacli.auth.signer import build_client_assertion
from asacli.auth.token_cache import TokenCache
from asacli.exceptions import TokenExchangeError
from asacli.models import Credentials, TokenRecord
from asacli.output import debug, warning

TOKEN_URL = "https://appleid.apple.com/auth/oauth2/token"
TOKEN_SCOPE = "searchadsorg"
TOKEN_TIMEOUT = 30.0


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenProvider:
    """Exchange credentials for access tokens and cache them per profile.

    Args:
        credentials: Validated API user credentials.
        cache: On-disk cache for this profile.
        token_url: Identity provider token endpoint.
        http_client: Optional client used for the exchange; when ``None`` a
            one-off :func:`httpx.post` call is made.
        clock: Returns the current aware UTC time; injectable for tests.

    Example::

        provider = TokenProvider(creds, TokenCache.for_profile("default"))
        token = provider.get_token()
    """

    def __init__(
        self,
        credentials: Credentials,
        cache: TokenCache,
        token_url: str = TOKEN_URL,
        http_client: Optional[httpx.Client] = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._credentials = credentials
        self._cache = cache
        self._token_url = token_url
        self._http_client = http_client
        self._clock = clock
        self._lock = threading.Lock()
        self._record: Optional[TokenRecord] = None
        self._cache_loaded = False

    @property
    def cache(self) -> TokenCache:
        return self._cache

    def get_token(self) -> str:
        """Return a usable access token, exchanging credentials if needed.

        Returns:
            The bearer token string.

        Raises:
            ConfigError: If the private key cannot be loaded.
            TokenExchangeError: If the exchange fails for any reason.
        """
        with self._lock:
            if self._record is None and not self._cache_loaded:
                self._cache_loaded = True
                self._record = self._cache.load()
                if self._record is not None:
                    debug(f"Loaded cached token from {self._cache.path}")

            if self._record is not None and self._record.is_usable(self._clock()):
                return self._record.access_token

            record = self._exchange()
            self._record = record
            self._persist(record)
            return record.access_token

    def current_record(self) -> Optional[TokenRecord]:
        """Return the in-memory record, loading the cache without exchanging."""
        with self._lock:
            if self._record is None and not self._cache_loaded:
                self._cache_loaded = True
                self._record = self._cache.load()
            return self._record

    def invalidate(self) -> bool:
        """Forget the token in memory and on disk so the next call exchanges again.

        Returns:
            ``True`` if a cache file was removed.
        """
        with self._lock:
            self._record = None
            self._cache_loaded = True
            return self._cache.clear()

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _exchange(self) -> TokenRecord:
        assertion = build_client_assertion(self._credentials, now=self._clock())
        form = {
            "grant_type": "client_credentials",
            "client_id": self._credentials.client_id,
            "client_secret": assertion,
            "scope": TOKEN_SCOPE,
        }
        headers = {"Accept": "application/json"}

        debug(f"Exchanging client assertion at {self._token_url}")
        try:
            if self._http_client is not None:
                response = self._http_client.post(self._token_url, data=form, headers=headers)
            else:
                response = httpx.post(
                    self._token_url, data=form, headers=headers, timeout=TOKEN_TIMEOUT
                )
        except httpx.HTTPError as exc:
            raise TokenExchangeError(f"token exchange failed: {exc}") from exc

        if not response.is_success:
            raise TokenExchangeError(_describe_failure(response))

        try:
            payload = response.json()
            access_token = payload["access_token"]
            expires_in = int(payload["expires_in"])
            token_type = payload.get("token_type") or "Bearer"
            if not isinstance(access_token, str) or not access_token:
                raise ValueError("empty access_token")
            record = TokenRecord(
                access_token=access_token,
                token_type=token_type,
                expires_at=self._clock() + timedelta(seconds=expires_in),
            )
        except (ValueError, KeyError, TypeError, AttributeError, ValidationError) as exc:
            raise TokenExchangeError(
                f"token exchange failed: unparsable response ({type(exc).__name__})"
            ) from exc
        return record

    def _persist(self, record: TokenRecord) -> None:
        try:
            self._cache.save(record)
        except OSError as exc:
            warning(f"Could not write token cache {self._cache.path}: {exc}")


def _describe_failure(response: httpx.Response) -> str:
    """Build a compact error message that never echoes the response body."""
    message = f"token exchange failed (HTTP {response.status_code})"
    try:
        payload: Any = response.json()
    except ValueError:
        return message
    if isinstance(payload, dict) and isinstance(payload.get("error"), str) and payload["error"]:
        message += f": {payload['error']}"
    return message
