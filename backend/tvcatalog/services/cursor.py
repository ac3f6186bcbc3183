"""
Opaque page_info tokens.

Wire format: base64url (padding stripped) of the compact JSON document
    {"v": 1, "dir": "next" | "prev", "values": {<key name>: <value>, ...}, "limit": n}
where "limit" is optional. Clients must treat the string as opaque.
"""
from __future__ import annotations

import base64
import json
import re
from enum import Enum
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..config.constants import (
    CURSOR_VERSION,
    MAX_PAGE_LIMIT,
    SQLITE_MAX_INTEGER,
    SQLITE_MIN_INTEGER,
)

_BASE64URL_RE = re.compile(r"[A-Za-z0-9_-]+")

SortValue = str | int | float | bool | None


class CursorDirection(str, Enum):
    """Traversal direction relative to the anchor row."""

    NEXT = "next"
    PREV = "prev"


class CursorToken(BaseModel):
    """Validated page_info payload."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    version: int = Field(alias="v")
    direction: CursorDirection = Field(alias="dir")
    sort_values: dict[str, SortValue] = Field(alias="values")
    limit: int | None = Field(None, gt=0, le=MAX_PAGE_LIMIT)

    @field_validator("version")
    @classmethod
    def check_version(cls, value: int) -> int:
        if value != CURSOR_VERSION:
            raise ValueError(f"unsupported page_info version {value}")
        return value

    @field_validator("sort_values", mode="before")
    @classmethod
    def check_integer_range(cls, value: Any) -> Any:
        # Checked before union coercion, which would turn a huge int into a float
        if isinstance(value, dict):
            for name, item in value.items():
                if type(item) is int and not SQLITE_MIN_INTEGER <= item <= SQLITE_MAX_INTEGER:
                    raise ValueError(f"sort value '{name}' is outside the INTEGER range")
        return value


def encode_cursor(
    direction: CursorDirection | str,
    limit: int | None,
    values: Mapping[str, Any],
) -> str:
    """Serialize a cursor payload into an opaque, URL-safe token."""
    payload: dict[str, Any] = {
        "v": CURSOR_VERSION,
        "dir": CursorDirection(direction).value,
        "values": dict(values),
    }
    if limit is not None:
        payload["limit"] = limit
    raw = json.dumps(payload, separators=(",", ":"))
    return base64.urlsafe_b64encode(raw.encode("utf-8")).decode("ascii").rstrip("=")


def decode_cursor(token: str) -> dict[str, Any] | None:
    """
    Reverse encode_cursor.

    Returns the raw payload dict, or None when the token is not base64url,
    not UTF-8 JSON, or not a JSON object. Never raises.
    """
    if not token or not _BASE64URL_RE.fullmatch(token):
        return None
    padded = token + "=" * (-len(token) % 4)
    try:
        raw = base64.urlsafe_b64decode(padded.encode("ascii"))
        payload = json.loads(raw.decode("utf-8"))
    except ValueError:
        # binascii.Error, UnicodeDecodeError and JSONDecodeError are all ValueErrors
        return None
    if not isinstance(payload, dict):
        return None
    return payload
