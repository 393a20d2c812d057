"""httpx transport that authenticates every outbound request.

:class:`AuthTransport` sits between :class:`httpx.Client` and the real
network transport.  For each request it asks the
:class:`~asacli.auth.provider.TokenProvider` for a token (which may trigger
an exchange), copies the request with ``Authorization: Bearer <token>`` and,
when an organization is known, ``X-AP-Context: orgId=<id>``, and forwards
it.  If no token can be obtained the request is never sent; the failure is
re-raised with an ``auth:`` prefix and keeps its type.

With tracing enabled the request line and headers are written to stderr
before sending and the status line after receiving.  The token and the org
id are always replaced by fixed placeholders in the trace.
"""

from __future__ import annotations

from typing import Optional

import httpx

from asacli.auth.provider import TokenProvider
from asacli.exceptions import ConfigError, TokenExchangeError
from asacli.output import trace

AUTHORIZATION_HEADER = "Authorization"
ORG_CONTEXT_HEADER = "X-AP-Context"

_REDACTED = {
    AUTHORIZATION_HEADER.lower(): "Bearer ***",
    ORG_CONTEXT_HEADER.lower(): "orgId=***",
}


class AuthTransport(httpx.BaseTransport):
    """Inject bearer and organization-context headers into every request.

    Args:
        provider: Source of access tokens.
        org_id: Organization id for the ``X-AP-Context`` header; omitted
            when ``None`` (e.g. for ``GET /acls``).
        tracing: Print redacted request/response lines to stderr.
        transport: Transport that actually sends the request.  Defaults to
            :class:`httpx.HTTPTransport`.
    """

    def __init__(
        self,
        provider: TokenProvider,
        org_id: Optional[str] = None,
        tracing: bool = False,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._provider = provider
        self._org_id = org_id
        self._tracing = tracing
        self._transport = transport or httpx.HTTPTransport()

    @property
    def org_id(self) -> Optional[str]:
        return self._org_id

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        try:
            token = self._provider.get_token()
        except ConfigError as exc:
            raise ConfigError(f"auth: {exc}") from exc
        except TokenExchangeError as exc:
            raise TokenExchangeError(f"auth: {exc}") from exc

        headers = request.headers.copy()
        headers[AUTHORIZATION_HEADER] = f"Bearer {token}"
        if self._org_id:
            headers[ORG_CONTEXT_HEADER] = f"orgId={self._org_id}"

        authed = httpx.Request(
            request.method,
            request.url,
            headers=headers,
            stream=request.stream,
            extensions=request.extensions,
        )

        if self._tracing:
            self._trace_request(authed)

        response = self._transport.handle_request(authed)

        if self._tracing:
            trace(f"< {response.status_code} {response.reason_phrase} {response.http_version}")
        return response

    def close(self) -> None:
        self._transport.close()

    def _trace_request(self, request: httpx.Request) -> None:
        trace(f"> {request.method} {request.url}")
        encoding = request.headers.encoding
        for raw_name, raw_value in request.headers.raw:
            name = raw_name.decode(encoding)
            shown = _REDACTED.get(name.lower(), raw_value.decode(encoding))
            trace(f"> {name}: {shown}")
