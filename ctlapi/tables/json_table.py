"""
Paged JSON tables.

The console serves UI tables as ``{"totalRecords": n, "records": [...]}``.
A probe with ``startIndex=-1, results=-1`` reports the total, then pages of
``results`` rows are requested from ``startIndex = rows so far``.
"""

import json
from typing import Any, Dict, List, Optional

from ctlapi.core.config import DEFAULT_CONFIG
from ctlapi.core.exceptions import PaginationException, ResponseParseException
from ctlapi.core.logger import get_logger

logger = get_logger("tables.json")

TableRow = Dict[str, Any]


def _post_json(connection, address: str, parameters: Dict[str, Any]) -> Dict[str, Any]:
    text = connection.form_post(address, dict(parameters))
    try:
        data = json.loads(text)
    except ValueError as e:
        raise ResponseParseException(
            f"Invalid JSON from {address}: {e}", body=text, cause=e
        ) from e
    if not isinstance(data, dict):
        raise ResponseParseException(f"Unexpected JSON table shape from {address}", body=text)
    return data


def fetch_json_table(
    connection,
    address: str,
    parameters: Dict[str, Any],
    page_size: Optional[int] = None,
    records: Optional[int] = None,
    max_pages: Optional[int] = None,
) -> List[TableRow]:
    """
    Retrieve every row of a paged JSON table.

    Args:
        connection: Connection context exposing ``form_post``
        address: Controller address relative to the console root
        parameters: Controller parameters, typically 'sort' and 'table-id'.
            The caller's dict is not modified.
        page_size: Rows per page request (defaults to the table config)
        records: Known total; skips reading it from the probe response
        max_pages: Upper bound on page requests

    Returns:
        Rows in the order the server delivered them

    Raises:
        PaginationException: the server returned an empty page before the
            total was reached, reported a growing total, or the page limit
            was hit

    Example:
        fetch_json_table(connection, '/data/asset/site',
                         {'sort': 'assetName', 'table-id': 'site-assets',
                          'siteID': site_id})
    """
    table_config = getattr(connection, "config", DEFAULT_CONFIG).table
    page_size = page_size or table_config.page_size
    if max_pages is None:
        max_pages = table_config.max_pages

    params = dict(parameters)
    params["dir"] = "DESC"
    params["startIndex"] = -1
    params["results"] = -1

    data = _post_json(connection, address, params)
    if records is not None:
        total = records
    elif "totalRecords" in data:
        total = int(data["totalRecords"])
    else:
        raise ResponseParseException(f"No totalRecords in response from {address}")

    if total == 0:
        return []

    rows: List[TableRow] = []
    pages = 0
    params["results"] = page_size

    while len(rows) < total:
        if max_pages is not None and pages >= max_pages:
            raise PaginationException(
                f"Page limit of {max_pages} reached before all rows were read",
                address=address, total=total, received=len(rows),
            )

        params["startIndex"] = len(rows)
        data = _post_json(connection, address, params)
        pages += 1

        if records is None and int(data.get("totalRecords", total)) > total:
            raise PaginationException(
                f"Server total grew from {total} to {data['totalRecords']} while paging",
                address=address, total=total, received=len(rows),
            )

        page = data.get("records") or []
        if not page:
            raise PaginationException(
                "Server returned an empty page before the reported total was reached",
                address=address, total=total, received=len(rows),
            )

        rows.extend(page)
        logger.debug(f"{address}: page {pages}, {len(rows)}/{total} rows")

    return rows
