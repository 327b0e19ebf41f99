"""Helper utilities."""

import json
from datetime import datetime, timezone
from typing import Any, List, Optional


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, matching the stored columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Convert an offset-aware datetime to naive UTC. Naive values are taken as UTC already."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def parse_json_list(value: Any) -> Optional[List[Any]]:
    """
    Parse a stored JSON array.

    Returns None when the value is empty, is not valid JSON or does not
    decode to a list.
    """
    if value is None:
        return None
    if isinstance(value, list):
        return value
    if not isinstance(value, (str, bytes)):
        return None
    try:
        parsed = json.loads(value)
    except ValueError:
        return None
    return parsed if isinstance(parsed, list) else None


def dump_json_list(values: Optional[List[Any]]) -> Optional[str]:
    """Serialize a list for a JSON text column."""
    if values is None:
        return None
    return json.dumps(list(values))
