"""Value coercion helpers for loosely-typed metadata documents."""

import json
from typing import Any


def coerce_text(value: Any) -> str:
    """
    Convert a JSON value to text.

    Booleans follow JSON spelling ("true"/"false"), containers are
    rendered as compact JSON and everything else goes through str().
    """
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"), sort_keys=True)
    return str(value)


def extract_string(value: Any) -> str | None:
    """
    Extract a trimmed string from a metadata field.

    Returns None for missing, null or blank values. Non-string scalars
    are coerced rather than rejected.
    """
    if value is None:
        return None
    text = coerce_text(value).strip()
    return text or None


def coerce_attribute_value(value: Any) -> str | int | float:
    """Keep strings and numbers as-is, stringify anything else."""
    if isinstance(value, bool):
        return coerce_text(value)
    if isinstance(value, (str, int, float)):
        return value
    return coerce_text(value)


def normalize_address(address: str) -> str:
    """Lowercase and strip a contract address."""
    return address.strip().lower()
