# =============================================================================
# lib/backend.py - Backend Contract
# =============================================================================
# The minimum surface the editing workflow needs from the hosted backend:
# - RowStore: per-table select / insert / update / delete
# - ObjectStore: upload / public URL / remove for stored files
#
# The Supabase implementations live in lib/supabase_client.py. Tests plug in
# in-memory stores that satisfy the same protocols.
# =============================================================================

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Protocol, Sequence


@dataclass(frozen=True)
class Filter:
    """
    A single row filter.

    `eq` matches one value; `in` matches any value of a sequence.
    """
    column: str
    value: Any
    op: Literal["eq", "in"] = "eq"

    @classmethod
    def eq(cls, column: str, value: Any) -> "Filter":
        return cls(column, value, "eq")

    @classmethod
    def in_(cls, column: str, values: Sequence[Any]) -> "Filter":
        return cls(column, tuple(values), "in")

    def matches(self, row: dict[str, Any]) -> bool:
        """Evaluate this filter against a row dict (used by in-memory stores)."""
        if self.op == "in":
            return row.get(self.column) in self.value
        return row.get(self.column) == self.value


@dataclass(frozen=True)
class Order:
    """Sort key for a select."""
    column: str
    descending: bool = False


class RowStore(Protocol):
    """Row API of the backend's Postgres tables."""

    async def select(
        self,
        table: str,
        columns: str = "*",
        filters: Sequence[Filter] = (),
        order: Order | None = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        ...

    async def insert(self, table: str, rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
        ...

    async def update(
        self,
        table: str,
        patch: dict[str, Any],
        filters: Sequence[Filter],
    ) -> list[dict[str, Any]]:
        ...

    async def delete(self, table: str, filters: Sequence[Filter]) -> list[dict[str, Any]]:
        ...


class ObjectStore(Protocol):
    """File API of the backend's storage bucket."""

    async def upload(self, path: str, content: bytes, content_type: str | None = None) -> str:
        ...

    def public_url(self, path: str) -> str:
        ...

    async def remove(self, paths: list[str]) -> None:
        ...

    async def check(self) -> None:
        """Raise if the bucket cannot be reached."""
        ...
