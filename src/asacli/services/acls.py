"""Access-control lists: the organizations visible to the API user."""

from __future__ import annotations

from asacli.client import APIClient
from asacli.models import UserACL


class ACLService:
    def __init__(self, client: APIClient) -> None:
        self._client = client

    def get_acls(self) -> list[UserACL]:
        """``GET /acls`` -- works without an organization context."""
        acls, _ = self._client.get("/acls", list[UserACL])
        return acls or []
