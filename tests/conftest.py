r"""
Shared pytest fixtures for access-bench tests.
"""

import asyncio
import itertools
from collections.abc import Sequence
from typing import Any

import pytest

from access_bench.adapters.base import BaseClient
from access_bench.schema import BOOKS, INSTRUCTOR_BOOKS, INSTRUCTOR_KEYWORDS, INSTRUCTORS, KEYWORDS
from access_bench.types import ClientPath, CreatedGraphIds, GraphSeed, TableScan

WRITE_TABLES = (INSTRUCTORS, KEYWORDS, BOOKS, INSTRUCTOR_BOOKS, INSTRUCTOR_KEYWORDS)


class InMemoryClient(BaseClient):
    """Dict-backed client for harness tests.

    Args:
        name: Label prefix.
        path: Client path tag reported in results.
        rows: Initial row count of every read table.
        supports_transactions: Roll back partial writes when True.
        fail_write_at: Table whose insert raises during a write.
        fail_delete_on: Tables whose deletes raise.
        delay: Seconds each operation sleeps.
    """

    def __init__(
        self,
        name: str = "memory",
        path: ClientPath = ClientPath.SQL,
        *,
        rows: int = 25,
        supports_transactions: bool = True,
        fail_write_at: str | None = None,
        fail_delete_on: Sequence[str] = (),
        delay: float = 0.0,
    ) -> None:
        self._name = name
        self.path = path
        self.supports_transactions = supports_transactions
        self.fail_write_at = fail_write_at
        self.fail_delete_on = set(fail_delete_on)
        self.delay = delay
        self.calls: list[str] = []
        self._ids = itertools.count(1)
        self.tables: dict[str, dict[int, dict[str, Any]]] = {
            "posts": {i: {"id": i} for i in range(rows)},
            "post_comments": {i: {"id": i} for i in range(rows)},
            INSTRUCTORS: {},
            KEYWORDS: {},
            BOOKS: {},
            INSTRUCTOR_BOOKS: {},
            INSTRUCTOR_KEYWORDS: {},
        }
        self._read_instructors = rows

    @property
    def name(self) -> str:
        return self._name

    async def connect(self, *, uri: str | None = None, **kwargs: Any) -> None:
        self.calls.append("connect")
        self._connected = True

    async def disconnect(self) -> None:
        self.calls.append("disconnect")
        self._connected = False

    async def _pause(self) -> None:
        if self.delay:
            await asyncio.sleep(self.delay)

    async def select_rows(self, scan: TableScan, *, limit: int) -> int:
        self.calls.append(f"select:{scan.table}")
        await self._pause()
        return min(limit, len(self.tables[scan.table]))

    async def select_instructors(self, *, limit: int) -> int:
        self.calls.append("select:instructors")
        await self._pause()
        return min(limit, self._read_instructors)

    def _insert(self, table: str, row: dict[str, Any]) -> int:
        if table == self.fail_write_at:
            msg = f"insert into {table} failed"
            raise RuntimeError(msg)
        row_id = next(self._ids)
        self.tables[table][row_id] = {"id": row_id, **row}
        return row_id

    async def create_instructor_graph(self, seed: GraphSeed, ids: CreatedGraphIds) -> int:
        self.calls.append("write")
        await self._pause()
        inserted: list[tuple[str, int]] = []
        local = CreatedGraphIds()
        target = local if self.supports_transactions else ids
        try:
            for name in seed.keyword_names:
                row_id = self._insert(KEYWORDS, {"name": name})
                inserted.append((KEYWORDS, row_id))
                target.keyword_ids.append(row_id)
            for book in seed.books:
                row_id = self._insert(BOOKS, book)
                inserted.append((BOOKS, row_id))
                target.book_ids.append(row_id)
            instructor_id = self._insert(INSTRUCTORS, seed.instructor)
            inserted.append((INSTRUCTORS, instructor_id))
            target.instructor_id = instructor_id
            for i, keyword_id in enumerate(target.keyword_ids):
                row_id = self._insert(
                    INSTRUCTOR_KEYWORDS, {"instructor_id": instructor_id, "keyword_id": keyword_id, "order": i}
                )
                inserted.append((INSTRUCTOR_KEYWORDS, row_id))
            for book_id in target.book_ids:
                row_id = self._insert(INSTRUCTOR_BOOKS, {"instructor_id": instructor_id, "book_id": book_id})
                inserted.append((INSTRUCTOR_BOOKS, row_id))
        except Exception:
            if self.supports_transactions:
                for table, row_id in inserted:
                    self.tables[table].pop(row_id, None)
            raise

        if self.supports_transactions:
            ids.keyword_ids.extend(local.keyword_ids)
            ids.book_ids.extend(local.book_ids)
            ids.instructor_id = local.instructor_id
        return instructor_id

    async def get_instructor(self, instructor_id: int) -> dict[str, Any] | None:
        self.calls.append("get_instructor")
        return self.tables[INSTRUCTORS].get(instructor_id)

    async def delete_rows(self, table: str, column: str, values: Sequence[int]) -> int:
        self.calls.append(f"delete:{table}")
        if table in self.fail_delete_on:
            msg = f"delete from {table} failed"
            raise RuntimeError(msg)
        doomed = [row_id for row_id, row in self.tables[table].items() if row.get(column) in values]
        for row_id in doomed:
            del self.tables[table][row_id]
        return len(doomed)

    def counts(self) -> dict[str, int]:
        """Row counts of the tables a write touches."""
        return {table: len(self.tables[table]) for table in WRITE_TABLES}


@pytest.fixture
def memory_client() -> InMemoryClient:
    """Single in-memory client."""
    return InMemoryClient()


@pytest.fixture
def memory_clients() -> list[InMemoryClient]:
    """Two in-memory clients on different paths."""
    return [
        InMemoryClient("alpha", ClientPath.REST, supports_transactions=False),
        InMemoryClient("beta", ClientPath.SQL),
    ]


@pytest.fixture
def seed() -> GraphSeed:
    """Fresh uniqueness seed."""
    return GraphSeed.generate()


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Environment without any benchmark or connection variables."""
    for key in (
        "SUPABASE_URL",
        "SUPABASE_KEY",
        "DATABASE_URL",
        "SUPABASE_DB_DIRECT_URL",
        "SUPABASE_DB_CONNECTION_STRING",
        "BENCH_LIMIT",
        "BENCH_READ_REPEATS",
        "BENCH_WRITE_REPEATS",
        "BENCH_CACHE_TTL",
        "BENCH_DB_SSL",
        "BENCH_PATHS",
        "BENCH_LOG_LEVEL",
        "BENCH_ENV",
    ):
        monkeypatch.delenv(key, raising=False)
    return monkeypatch
