"""Synchronous client for the Campaign Management API.

This module provides :class:`APIClient`, the blocking HTTP client used by
every resource service.  It wraps :class:`httpx.Client` and layers on:

- **Authentication** -- requests go through an
  :class:`~asacli.auth.transport.AuthTransport`, so the client itself never
  sees tokens.
- **Envelope unwrapping** -- successful responses have the shape
  ``{"data": ..., "pagination": {...}}``; the payload is validated into the
  caller's type and the pagination block is returned as a
  :class:`~asacli.models.PageDetail`.
- **Error mapping** -- non-2xx responses raise
  :class:`~asacli.exceptions.APIError` built from the API's error envelope,
  network failures raise :class:`~asacli.exceptions.TransportError`.

There is deliberately no retry: a failed call is reported once.
"""

from __future__ import annotations

import time
from typing import Any, Optional

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from asacli.exceptions import APIError, AsaError, TransportError
from asacli.models import ErrorEntry, PageDetail
from asacli.output import debug

BASE_URL = "https://api.searchads.apple.com/api/v5"
REQUEST_TIMEOUT = 30.0


class APIClient:
    """Blocking client issuing GET/POST/PUT/DELETE against the API.

    Args:
        transport: Transport used for every request, normally an
            :class:`~asacli.auth.transport.AuthTransport`.
        base_url: API root; paths passed to the request methods are
            appended to it.
        timeout: Seconds allowed for one request, from connect to the end of
            the body.

    Example::

        with APIClient(AuthTransport(provider, org_id="42")) as client:
            campaigns, page = client.get("/campaigns", list[Campaign])
    """

    def __init__(
        self,
        transport: httpx.BaseTransport,
        base_url: str = BASE_URL,
        timeout: float = REQUEST_TIMEOUT,
    ) -> None:
        self._timeout = timeout
        self._client = httpx.Client(
            base_url=base_url,
            transport=transport,
            timeout=timeout,
            headers={"Accept": "application/json"},
        )

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> APIClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    # ------------------------------------------------------------------ #
    # Public request methods
    # ------------------------------------------------------------------ #

    def get(
        self,
        path: str,
        out_type: Any = None,
        params: Optional[dict[str, Any]] = None,
    ) -> tuple[Any, Optional[PageDetail]]:
        """Fetch *path* and unwrap its envelope.

        Args:
            path: URL path relative to the base URL.
            out_type: Type the ``data`` payload is validated into (e.g.
                ``list[Campaign]``); raw JSON is returned when ``None``.
            params: Query parameters.

        Returns:
            ``(payload, page_detail)``; ``page_detail`` is ``None`` when the
            response carries no pagination block.
        """
        response = self.request("GET", path, params=params)
        return _unwrap(response, out_type)

    def post(
        self, path: str, body: Any, out_type: Any = None
    ) -> tuple[Any, Optional[PageDetail]]:
        """POST *body* (a model, list of models, or plain JSON) to *path*."""
        response = self.request("POST", path, body=body)
        return _unwrap(response, out_type)

    def put(
        self, path: str, body: Any, out_type: Any = None
    ) -> tuple[Any, Optional[PageDetail]]:
        """PUT *body* to *path*."""
        response = self.request("PUT", path, body=body)
        return _unwrap(response, out_type)

    def delete(self, path: str) -> None:
        """DELETE *path*; any 2xx status counts as success whatever the body."""
        self.request("DELETE", path)

    def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        params: Optional[dict[str, Any]] = None,
    ) -> httpx.Response:
        """Send one request and map failures to typed exceptions.

        Raises:
            TransportError: On network, TLS, or timeout errors.
            APIError: On any non-2xx status.
            ConfigError: Propagated from the transport when the private key
                cannot be loaded.
            TokenExchangeError: Propagated from the transport when no token
                could be obtained; the request was not sent.
        """
        kwargs: dict[str, Any] = {}
        if body is not None:
            kwargs["json"] = _to_json(body)
        if params:
            kwargs["params"] = params

        try:
            response = self._send(method, path, kwargs)
        except httpx.TransportError as exc:
            raise TransportError(f"{method} {path} failed: {exc}") from exc

        debug(f"{method} {path} -> HTTP {response.status_code}")
        if not response.is_success:
            raise _api_error(method, path, response)
        return response

    def _send(self, method: str, path: str, kwargs: dict[str, Any]) -> httpx.Response:
        """Stream the response body, enforcing one deadline for the whole exchange.

        httpx applies its timeout to each connect, write and read separately,
        so a body trickling in slowly is cut off here between chunks.
        """
        deadline = time.monotonic() + self._timeout
        with self._client.stream(method, path, **kwargs) as streamed:
            raw = bytearray()
            for chunk in streamed.iter_raw():
                raw.extend(chunk)
                if time.monotonic() > deadline:
                    raise TransportError(
                        f"{method} {path} failed: no complete response within "
                        f"{self._timeout:g}s"
                    )
            return httpx.Response(
                streamed.status_code,
                headers=streamed.headers,
                content=bytes(raw),
                request=streamed.request,
            )


# ---------------------------------------------------------------------- #
# Module helpers
# ---------------------------------------------------------------------- #


def _to_json(body: Any) -> Any:
    if isinstance(body, BaseModel):
        return body.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(body, list):
        return [_to_json(item) for item in body]
    return body


def _unwrap(response: httpx.Response, out_type: Any) -> tuple[Any, Optional[PageDetail]]:
    """Split a success envelope into a typed payload and its page detail."""
    if not response.content:
        return None, None
    try:
        envelope = response.json()
    except ValueError as exc:
        raise AsaError(
            f"unexpected response from {response.request.url.path}: body is not JSON"
        ) from exc
    if not isinstance(envelope, dict):
        raise AsaError(
            f"unexpected response from {response.request.url.path}: missing data envelope"
        )

    data = envelope.get("data")
    page: Optional[PageDetail] = None
    try:
        if isinstance(envelope.get("pagination"), dict):
            page = PageDetail.model_validate(envelope["pagination"])
        if out_type is not None and data is not None:
            data = TypeAdapter(out_type).validate_python(data)
    except ValidationError as exc:
        raise AsaError(
            f"unexpected response from {response.request.url.path}: {exc}"
        ) from exc
    return data, page


def _error_entries(response: httpx.Response) -> list[ErrorEntry]:
    """Parse ``{"errors": [...]}`` (or ``{"error": {"errors": [...]}}``)."""
    try:
        body = response.json()
    except ValueError:
        return []
    if not isinstance(body, dict):
        return []
    raw = body.get("errors")
    if raw is None and isinstance(body.get("error"), dict):
        raw = body["error"].get("errors")
    if not isinstance(raw, list):
        return []
    entries: list[ErrorEntry] = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        try:
            entries.append(ErrorEntry.model_validate(item))
        except ValidationError:
            continue
    return entries


def _api_error(method: str, path: str, response: httpx.Response) -> APIError:
    """Build ``<METHOD> <path>: HTTP <status>[: <entries>]`` from an error response."""
    status = response.status_code
    message = f"{method} {path}: HTTP {status}"
    entries = _error_entries(response)
    if entries:
        detail = "; ".join(entry.describe() for entry in entries)
        return APIError(f"{message}: {detail}", status_code=status, entries=entries)
    return APIError(message, status_code=status)
