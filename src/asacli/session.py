"""Per-invocation wiring of credentials, token provider, and API clients.

A :class:`Session` is built once per command from the global CLI options.
It loads and validates the profile's credentials (failing before any
network call when they are incomplete), owns the single
:class:`~asacli.auth.TokenProvider` for the invocation, and hands out
:class:`~asacli.client.APIClient` instances whose transports share that
provider.

The organization context is resolved lazily, in order: the ``--org-id``
flag, the profile's ``org_id`` (or ``ASA_ORG_ID``), and finally the ACL
endpoint, which must report exactly one organization.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx

from asacli.auth import AuthTransport, TokenCache, TokenProvider
from asacli.client import BASE_URL, APIClient
from asacli.config import load_credentials, resolve_profile_name, validate_credentials
from asacli.exceptions import AmbiguousOrgError
from asacli.models import Credentials
from asacli.output import debug
from asacli.services import ACLService


class Session:
    """Authenticated access to the API for one profile.

    Args:
        profile: Profile name from ``--profile``; ``ASA_PROFILE`` or
            ``default`` when ``None``.
        org_id: Organization id from ``--org-id``.
        tracing: Trace requests and responses to stderr.
        transport: Network transport under the auth layer; a fresh
            :class:`httpx.HTTPTransport` per client when ``None``.
        base_url: API root.
        provider: Pre-built token provider (tests); built from the profile's
            credentials and token cache when ``None``.

    Raises:
        ConfigError: If the profile is missing or its credentials are
            incomplete.
    """

    def __init__(
        self,
        profile: Optional[str] = None,
        org_id: Optional[str] = None,
        tracing: bool = False,
        transport: Optional[httpx.BaseTransport] = None,
        base_url: str = BASE_URL,
        provider: Optional[TokenProvider] = None,
    ) -> None:
        self.profile = resolve_profile_name(profile)
        self.credentials: Credentials = load_credentials(self.profile)
        validate_credentials(self.credentials)
        self.provider = provider or TokenProvider(
            self.credentials, TokenCache.for_profile(self.profile)
        )
        self._org_flag = org_id
        self._org_id: Optional[str] = None
        self._tracing = tracing
        self._transport = transport
        self._base_url = base_url

    @classmethod
    def from_context(cls, obj: Optional[dict[str, Any]]) -> Session:
        """Build a session from the Typer context object set by the root callback.

        An ``httpx`` transport stored under ``"transport"`` replaces the
        network layer, which is how the command tests run offline.
        """
        obj = obj or {}
        return cls(
            profile=obj.get("profile"),
            org_id=obj.get("org_id"),
            tracing=bool(obj.get("verbose")),
            transport=obj.get("transport"),
        )

    def client(self, with_org: bool = True) -> APIClient:
        """Return a new client; ``with_org=False`` omits ``X-AP-Context``."""
        org_id = self.org_id() if with_org else None
        return self._make_client(org_id)

    def org_id(self) -> str:
        """Return the organization id, resolving it on first use."""
        if self._org_id is None:
            explicit = self._org_flag or self.credentials.org_id
            if explicit:
                self._org_id = explicit
            else:
                with self._make_client(None) as client:
                    self._org_id = resolve_org_id(client)
        return self._org_id

    def _make_client(self, org_id: Optional[str]) -> APIClient:
        transport = AuthTransport(
            self.provider,
            org_id=org_id,
            tracing=self._tracing,
            transport=self._transport,
        )
        return APIClient(transport, base_url=self._base_url)


def resolve_org_id(client: APIClient) -> str:
    """Pick the only organization visible to the API user.

    Raises:
        AmbiguousOrgError: If the account has no organization or several.
    """
    acls = ACLService(client).get_acls()
    if not acls:
        raise AmbiguousOrgError(
            "no organizations found for this account. "
            "Use --org-id flag or set org_id in config"
        )
    if len(acls) == 1:
        org_id = str(acls[0].org_id)
        debug(f"Auto-selected org: {acls[0].org_name} (ID: {org_id})")
        return org_id

    lines = "\n".join(f"  {acl.org_name} (ID: {acl.org_id})" for acl in acls)
    raise AmbiguousOrgError(
        "multiple organizations found. Use --org-id flag or set org_id in config:\n"
        f"{lines}"
    )
