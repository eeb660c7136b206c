r"""
asyncpg raw-SQL client path.

The lightest path: a single-connection asyncpg pool and hand-written SQL,
with writes wrapped in one transaction.

Requires: pip install asyncpg

Environment variables:
    SUPABASE_DB_DIRECT_URL: Direct connection string (preferred)
    SUPABASE_DB_CONNECTION_STRING: Pooled fallback, pgbouncer param removed
    BENCH_DB_SSL: SSL mode (default: require; empty to disable)

    from access_bench.adapters.sql import SqlClient

    client = SqlClient()
    await client.connect(uri="postgresql://localhost/app")
"""

from collections.abc import Sequence
from typing import Any

import asyncpg

from access_bench.adapters.base import AdapterRegistry, BaseClient
from access_bench.config import direct_database_url, get_env
from access_bench.logging_config import get_logger
from access_bench.schema import INSTRUCTOR_COLUMNS, instructor_tree_sql, scan_sql
from access_bench.types import ClientPath, CreatedGraphIds, GraphSeed, IdRow, TableScan, ids_from_rows

__all__ = ["SqlClient"]

logger = get_logger(__name__)

INSERT_KEYWORD = "insert into keywords (name) values ($1) returning id"
INSERT_BOOK = "insert into books (title, url) values ($1, $2) returning id"
INSERT_INSTRUCTOR = """
    insert into instructors
        (first_name, last_name, slug, title, bio, short_bio, trailer_url, is_published, firestore_id)
    values ($1, $2, $3, $4, $5, $6, $7, $8, $9)
    returning id
"""
INSERT_INSTRUCTOR_BOOKS = "insert into instructor_books (instructor_id, book_id) values ($1, $2), ($1, $3)"
INSERT_INSTRUCTOR_KEYWORDS = (
    'insert into instructor_keywords (instructor_id, keyword_id, "order") values ($1, $2, 0), ($1, $3, 1)'
)
SELECT_INSTRUCTOR = f"select {', '.join(INSTRUCTOR_COLUMNS)} from instructors where id = $1"

INSTRUCTOR_FIELDS = (
    "first_name",
    "last_name",
    "slug",
    "title",
    "bio",
    "short_bio",
    "trailer_url",
    "is_published",
    "firestore_id",
)


def _affected(status: str) -> int:
    """Row count from a command status such as ``DELETE 2``."""
    try:
        return int(status.rsplit(" ", 1)[-1])
    except ValueError:
        return 0


@AdapterRegistry.register(ClientPath.SQL)
class SqlClient(BaseClient):
    """asyncpg pool issuing raw SQL."""

    def __init__(self) -> None:
        self._pool: asyncpg.Pool | None = None
        self._connected = False

    @property
    def name(self) -> str:
        return "asyncpg"

    @property
    def pool(self) -> asyncpg.Pool:
        if self._pool is None:
            msg = "SqlClient is not connected"
            raise RuntimeError(msg)
        return self._pool

    async def connect(self, *, uri: str | None = None, **kwargs: Any) -> None:
        dsn = uri or direct_database_url()
        if not dsn:
            msg = "Direct database URL required (set SUPABASE_DB_DIRECT_URL or SUPABASE_DB_CONNECTION_STRING)"
            raise ValueError(msg)

        ssl = kwargs.pop("ssl") if "ssl" in kwargs else get_env("DB_SSL", default="require")
        options: dict[str, Any] = {
            "min_size": 1,
            "max_size": 1,
            "max_inactive_connection_lifetime": 5,
            "statement_cache_size": 0,
        }
        if ssl:
            options["ssl"] = ssl
        options.update(kwargs)

        self._pool = await asyncpg.create_pool(dsn, **options)
        self._connected = True
        logger.debug("Opened asyncpg pool (size %s)", options["max_size"])

    async def disconnect(self) -> None:
        if self._pool:
            await self._pool.close()
            self._pool = None
        self._connected = False

    async def select_rows(self, scan: TableScan, *, limit: int) -> int:
        rows = await self.pool.fetch(scan_sql(scan, "$1"), limit)
        return len(rows)

    async def select_instructors(self, *, limit: int) -> int:
        rows = await self.pool.fetch(instructor_tree_sql("$1"), limit)
        return len(rows)

    async def create_instructor_graph(self, seed: GraphSeed, ids: CreatedGraphIds) -> int:
        values = seed.instructor
        async with self.pool.acquire() as conn, conn.transaction():
            keywords = [IdRow(id=await conn.fetchval(INSERT_KEYWORD, name)) for name in seed.keyword_names]
            books = [IdRow(id=await conn.fetchval(INSERT_BOOK, b["title"], b["url"])) for b in seed.books]
            instructor = IdRow(id=await conn.fetchval(INSERT_INSTRUCTOR, *(values[f] for f in INSTRUCTOR_FIELDS)))

            await conn.execute(INSERT_INSTRUCTOR_BOOKS, instructor.id, books[0].id, books[1].id)
            await conn.execute(INSERT_INSTRUCTOR_KEYWORDS, instructor.id, keywords[0].id, keywords[1].id)

        ids.keyword_ids.extend(ids_from_rows(keywords))
        ids.book_ids.extend(ids_from_rows(books))
        ids.instructor_id = instructor.id
        return instructor.id

    async def get_instructor(self, instructor_id: int) -> dict[str, Any] | None:
        row = await self.pool.fetchrow(SELECT_INSTRUCTOR, instructor_id)
        return dict(row) if row else None

    async def delete_rows(self, table: str, column: str, values: Sequence[int]) -> int:
        if not values:
            return 0
        status = await self.pool.execute(f'delete from "{table}" where "{column}" = any($1::bigint[])', list(values))
        return _affected(status)
