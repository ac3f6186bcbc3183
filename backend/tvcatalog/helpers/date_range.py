"""
created_at range filter shared by list and detail endpoints.

Timestamps must be ISO-8601 with seconds and an explicit UTC offset,
e.g. 2024-01-31T12:00:00+00:00. They are converted to the
'YYYY-MM-DD HH:MM:SS' UTC text SQLite's CURRENT_TIMESTAMP produces.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone

from ..config.constants import EARLIEST_TIMESTAMP, LATEST_TIMESTAMP
from ..middleware.error_handler import InvalidFilterError

_TIMESTAMP_RE = re.compile(
    r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(?:\.\d+)?(?:Z|[+-]\d{2}:?\d{2})"
)


@dataclass(frozen=True)
class DateRange:
    start: str
    end: str


def _to_sql_timestamp(value: str, name: str) -> str:
    if not _TIMESTAMP_RE.fullmatch(value):
        raise InvalidFilterError(f"invalid {name} date", {"parameter": name})
    normalized = value.replace("Z", "+00:00")
    if normalized[-5] in "+-" and ":" not in normalized[-5:]:
        normalized = f"{normalized[:-2]}:{normalized[-2:]}"
    try:
        parsed = datetime.fromisoformat(normalized).astimezone(timezone.utc)
    except (ValueError, OverflowError):
        raise InvalidFilterError(f"invalid {name} date", {"parameter": name}) from None
    return parsed.strftime("%Y-%m-%d %H:%M:%S")


def parse_date_range(start: str | None = None, end: str | None = None) -> DateRange:
    """Validate start/end into SQL-comparable bounds, defaulting to limitless."""
    return DateRange(
        start=_to_sql_timestamp(start if start is not None else EARLIEST_TIMESTAMP, "start"),
        end=_to_sql_timestamp(end if end is not None else LATEST_TIMESTAMP, "end"),
    )
