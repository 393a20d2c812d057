"""HTTP client module for asacli.

Provides the blocking :class:`APIClient` that unwraps the API's response
envelope and maps failures to typed exceptions, and :func:`fetch_all`, which
walks every page of a ``find`` endpoint.

Example::

    from asacli.client import APIClient, fetch_all

    with APIClient(transport) as client:
        campaigns = fetch_all(client, "/campaigns/find", selector, Campaign)
"""

from asacli.client.api_client import BASE_URL, APIClient
from asacli.client.paginator import fetch_all

__all__ = ["APIClient", "BASE_URL", "fetch_all"]
