"""Auto-pagination over ``<resource>/find`` endpoints.

:func:`fetch_all` posts the same selector repeatedly, advancing only the
offset, until every matching record has been retrieved.  The loop stops as
soon as one of these holds:

* the page is empty,
* the page holds fewer records than the requested limit,
* the records seen so far reach the ``totalResults`` reported by the API.

An empty page always ends the loop, whatever totals the API reports, so a
misbehaving server cannot make the client spin forever.
"""

from __future__ import annotations

from typing import Any, Optional

from asacli.client.api_client import APIClient
from asacli.exceptions import InvalidUsageError
from asacli.models import Selector, SelectorPagination
from asacli.output import debug


def fetch_all(
    client: APIClient,
    path: str,
    selector: Selector,
    item_type: Optional[type] = None,
) -> list[Any]:
    """Return every record matching *selector*, in API order.

    Args:
        client: Authenticated API client.
        path: A ``find`` endpoint, e.g. ``/campaigns/find``.
        selector: Conditions, ordering, and the page size
            (``pagination.limit``) to use for every request.
        item_type: Model each record is validated into; raw dicts when
            ``None``.

    Returns:
        The concatenated records of all pages.

    Raises:
        InvalidUsageError: If the selector's limit is not positive.
    """
    limit = selector.pagination.limit
    if limit <= 0:
        raise InvalidUsageError(f"page size must be positive, got {limit}")

    out_type = list[item_type] if item_type is not None else None
    offset = selector.pagination.offset
    records: list[Any] = []

    while True:
        page_selector = selector.model_copy(
            update={"pagination": SelectorPagination(offset=offset, limit=limit)}
        )
        items, page = client.post(path, page_selector, out_type)
        items = items or []
        records.extend(items)
        debug(f"{path}: offset {offset} returned {len(items)} record(s)")

        if len(items) < limit:
            break
        if page is not None and offset + len(items) >= page.total_results:
            break
        offset += limit

    return records
