"""
Sort-key definitions for keyset pagination.

An OrderSpec is the ordered list of keys a list endpoint sorts by. Key names are
written into page_info tokens, so they must stay stable once published.
The last key of every OrderSpec must be unique per row (the tiebreaker).
"""
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Literal, Mapping

from ..config.constants import NULL_DATE_SENTINEL, NULL_YEAR_SENTINEL

Direction = Literal["asc", "desc"]


@dataclass(frozen=True)
class OrderKey:
    """One sort key: a comparable SQL expression and how to read it off a row."""

    name: str
    expression: str
    direction: Direction = "asc"
    get_value: Callable[[Any], Any] | None = None
    to_sql_value: Callable[[Any], Any] | None = None

    def __post_init__(self) -> None:
        if self.direction not in ("asc", "desc"):
            raise ValueError(f"Invalid direction '{self.direction}' for order key '{self.name}'")

    def value_of(self, row: Any) -> Any:
        """Sort value recorded in a cursor for this row."""
        if self.get_value is not None:
            return self.get_value(row)
        return row[self.name]

    def sql_value(self, value: Any) -> Any:
        """Value bound against `expression` for a recorded cursor value."""
        if self.to_sql_value is not None:
            return self.to_sql_value(value)
        return value

    def sql_direction(self, reverse: bool = False) -> str:
        ascending = self.direction == "asc"
        if reverse:
            ascending = not ascending
        return "ASC" if ascending else "DESC"

    def comparison(self, forward: bool) -> str:
        """Strict operator selecting rows after the anchor in traversal order."""
        ascending = self.direction == "asc"
        return ">" if ascending == forward else "<"


@dataclass(frozen=True)
class OrderSpec:
    """Ordered, non-empty sequence of OrderKeys with unique names."""

    keys: tuple[OrderKey, ...]

    def __post_init__(self) -> None:
        if not self.keys:
            raise ValueError("OrderSpec requires at least one key")
        names = [key.name for key in self.keys]
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate order key names: {names}")

    @classmethod
    def of(cls, *keys: OrderKey) -> OrderSpec:
        return cls(tuple(keys))

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(key.name for key in self.keys)

    def order_by(self, reverse: bool = False) -> str:
        """ORDER BY clause, every direction flipped when `reverse`."""
        return ", ".join(f"{key.expression} {key.sql_direction(reverse)}" for key in self.keys)

    def values_of(self, row: Any) -> dict[str, Any]:
        """Cursor values for a row, keyed by order key name."""
        return {key.name: key.value_of(row) for key in self.keys}


def null_sentinel(sentinel: Any) -> Callable[[Any], Any]:
    """Build a to_sql_value transform that substitutes `sentinel` for NULL."""

    def transform(value: Any) -> Any:
        return sentinel if value is None else value

    return transform


# Per-resource orderings. Column aliases match the SELECT lists in catalog_service.
ORDER_SPECS: Mapping[str, OrderSpec] = MappingProxyType({
    "actors": OrderSpec.of(
        OrderKey("name", "a.name"),
        OrderKey("id", "a.id"),
    ),
    "shows": OrderSpec.of(
        OrderKey(
            "year",
            f"COALESCE(s.year, {NULL_YEAR_SENTINEL})",
            to_sql_value=null_sentinel(NULL_YEAR_SENTINEL),
        ),
        OrderKey("title", "s.title"),
        OrderKey("id", "s.id"),
    ),
    "seasons": OrderSpec.of(
        OrderKey("season_number", "se.season_number"),
        OrderKey("id", "se.id"),
    ),
    "episodes": OrderSpec.of(
        OrderKey(
            "air_date",
            f"COALESCE(e.air_date, '{NULL_DATE_SENTINEL}')",
            to_sql_value=null_sentinel(NULL_DATE_SENTINEL),
        ),
        OrderKey("id", "e.id"),
    ),
    "characters": OrderSpec.of(
        OrderKey("name", "c.name"),
        OrderKey("id", "c.id"),
    ),
})


def get_order_spec(resource: str) -> OrderSpec:
    """Look up the OrderSpec of a list resource."""
    try:
        return ORDER_SPECS[resource]
    except KeyError:
        raise KeyError(f"No ordering registered for resource '{resource}'") from None
