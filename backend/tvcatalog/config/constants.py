"""
Centralized constants for the TV catalog backend.

Import from here instead of redefining.
"""

# page_info payload version. Bump only together with a decoder for the old one.
CURSOR_VERSION = 1

# Largest page a client may request
MAX_PAGE_LIMIT = 500

# Sort sentinels substituted for NULL so that ordering stays total (NULLs last)
NULL_YEAR_SENTINEL = 2147483647
NULL_DATE_SENTINEL = "9999-12-31"

# created_at filter bounds when start/end are omitted
EARLIEST_TIMESTAMP = "1000-01-01T00:00:00+00:00"
LATEST_TIMESTAMP = "9999-12-31T23:59:59+00:00"

# Query parameters owned by the pagination engine
PAGINATION_PARAMS = ("limit", "offset", "page_info")

# SQLite INTEGER range; larger values cannot be bound or used as OFFSET
SQLITE_MIN_INTEGER = -(2**63)
SQLITE_MAX_INTEGER = 2**63 - 1

# ?include= relations per resource, mapped to the resource they expand into
INCLUDE_RELATIONS = {
    "shows": {"episodes": "episodes"},
    "episodes": {"characters": "characters"},
    "characters": {"actor": None},
}
