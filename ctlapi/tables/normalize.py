"""
Clean up the 'type-safe' IDs returned by many table requests.

For data like ``{"assetID": {"ID": 2818}, "assetIP": "10.4.16.1"}``,
``normalize_identifiers(rows, "assetID")`` yields
``{"assetID": 2818, "assetIP": "10.4.16.1"}``.
"""

from collections.abc import Mapping
from typing import Any, Dict, List, MutableMapping


def unwrap_id(value: Any) -> Any:
    """Return the ``ID`` of a wrapper mapping; other values pass through."""
    if isinstance(value, Mapping):
        return value.get("ID")
    return value


def normalize_identifiers(rows: List[Dict[str, Any]], key: str) -> List[Dict[str, Any]]:
    """Return new rows with the wrapper at ``key`` replaced by its bare ID."""
    normalized = []
    for row in rows:
        row = dict(row)
        if key in row:
            row[key] = unwrap_id(row[key])
        normalized.append(row)
    return normalized


def normalize_identifiers_in_place(
    rows: List[MutableMapping[str, Any]],
    key: str,
) -> List[MutableMapping[str, Any]]:
    """Destructive variant: rewrites the rows and returns the same list."""
    for row in rows:
        if key in row:
            row[key] = unwrap_id(row[key])
    return rows
