"""Table retrieval helpers for the console's UI data endpoints."""

from .json_table import fetch_json_table
from .dyn_table import fetch_dyn_table, parse_dyn_table
from .normalize import normalize_identifiers, normalize_identifiers_in_place

__all__ = [
    "fetch_json_table",
    "fetch_dyn_table",
    "parse_dyn_table",
    "normalize_identifiers",
    "normalize_identifiers_in_place",
]
