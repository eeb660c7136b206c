r"""
Core types for access-path benchmarks.

    from access_bench.types import ClientPath, TimedResult

    result = await timed("asyncpg.posts", lambda: client.select_rows(POSTS, limit=100))
    print(f"{result.label}: {result.rounded_ms} ms, {result.value} rows")
"""

import secrets
import time
import uuid
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Generic, NamedTuple, TypeVar

__all__ = [
    "ClientPath",
    "CreatedGraphIds",
    "GraphSeed",
    "IdRow",
    "TableScan",
    "TimedResult",
    "ids_from_rows",
]

T = TypeVar("T")


class ClientPath(StrEnum):
    """Capability tag selecting one way of reaching the store."""

    REST = "rest"
    ORM = "orm"
    ORM_RAW = "orm_raw"
    SQL = "sql"


@dataclass(frozen=True, slots=True)
class TimedResult(Generic[T]):
    """One timed scenario execution.

    Attributes:
        label: Report label, unique within a run.
        duration_ns: Wall-clock duration in nanoseconds.
        value: Scenario value (row count, or created instructor id).
        scenario: Scenario name.
        path: Client path that executed the scenario.
        repeat: Zero-based repeat index.
    """

    label: str
    duration_ns: int
    value: T
    scenario: str = ""
    path: ClientPath | None = None
    repeat: int = 0

    @property
    def duration_ms(self) -> float:
        """Duration in milliseconds, unrounded."""
        return self.duration_ns / 1_000_000

    @property
    def rounded_ms(self) -> int:
        """Duration rounded to the nearest millisecond, for display."""
        return round(self.duration_ms)


@dataclass(slots=True)
class CreatedGraphIds:
    """Identifiers inserted by one write, in creation order.

    Filled as each insert returns, so a write that fails halfway still
    reports what it left behind.
    """

    instructor_id: int | None = None
    keyword_ids: list[int] = field(default_factory=list)
    book_ids: list[int] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return self.instructor_id is None and not self.keyword_ids and not self.book_ids


class IdRow(NamedTuple):
    """Projection of a ``RETURNING id`` row."""

    id: int


def ids_from_rows(rows: Iterable[IdRow]) -> list[int]:
    """Extract identifiers from typed id rows, preserving order."""
    return [row.id for row in rows]


@dataclass(frozen=True, slots=True)
class TableScan:
    """Flat scan of one table, newest rows first.

    Attributes:
        table: Table name.
        columns: Selected columns, in output order.
        order_by: Timestamp column sorted descending.
    """

    table: str
    columns: tuple[str, ...]
    order_by: str = "created_at"


@dataclass(frozen=True, slots=True)
class GraphSeed:
    """Uniqueness seed for one write.

    Every value a write inserts is derived from here, so all client paths
    insert identical rows and successive runs never collide on unique
    columns.
    """

    suffix: str
    external_id: str

    @classmethod
    def generate(cls) -> "GraphSeed":
        suffix = f"{time.time_ns():x}-{secrets.token_hex(3)}"
        return cls(suffix=suffix, external_id=f"bench_{uuid.uuid4()}")

    @property
    def keyword_names(self) -> list[str]:
        return [f"bench_kw1_{self.suffix}", f"bench_kw2_{self.suffix}"]

    @property
    def books(self) -> list[dict[str, str]]:
        return [
            {"title": f"Bench Book A {self.suffix}", "url": f"https://example.com/a-{self.suffix}"},
            {"title": f"Bench Book B {self.suffix}", "url": f"https://example.com/b-{self.suffix}"},
        ]

    @property
    def slug(self) -> str:
        return f"bench-{self.suffix}"

    @property
    def instructor(self) -> dict[str, Any]:
        """Column values of the instructor row."""
        return {
            "first_name": "Bench",
            "last_name": f"Run {self.suffix}",
            "slug": self.slug,
            "title": "Bench Title",
            "bio": "bio",
            "short_bio": "short",
            "trailer_url": "https://example.com/trailer",
            "is_published": True,
            "firestore_id": self.external_id,
        }
