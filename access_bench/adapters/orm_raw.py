r"""
SQLAlchemy raw-SQL client path.

Shares the ORM engine setup but issues hand-written statements through
``text()``, isolating the query builder's overhead from the session's.

    from access_bench.adapters.orm_raw import OrmRawClient

    client = OrmRawClient()
    await client.connect(uri="postgresql+asyncpg://localhost/app")
"""

from collections.abc import Sequence
from typing import Any

from sqlalchemy import bindparam, text

from access_bench.adapters.base import AdapterRegistry
from access_bench.adapters.orm import OrmClient
from access_bench.schema import INSTRUCTOR_COLUMNS, instructor_tree_sql, scan_sql
from access_bench.types import ClientPath, CreatedGraphIds, GraphSeed, IdRow, TableScan, ids_from_rows

__all__ = ["OrmRawClient"]

INSERT_KEYWORD = text("insert into keywords (name) values (:name) returning id")
INSERT_BOOK = text("insert into books (title, url) values (:title, :url) returning id")
INSERT_INSTRUCTOR = text(
    "insert into instructors"
    " (first_name, last_name, slug, title, bio, short_bio, trailer_url, is_published, firestore_id)"
    " values (:first_name, :last_name, :slug, :title, :bio, :short_bio, :trailer_url, :is_published, :firestore_id)"
    " returning id"
)
INSERT_INSTRUCTOR_BOOKS = text(
    "insert into instructor_books (instructor_id, book_id)"
    " values (:instructor_id, :book_a), (:instructor_id, :book_b)"
)
INSERT_INSTRUCTOR_KEYWORDS = text(
    'insert into instructor_keywords (instructor_id, keyword_id, "order")'
    " values (:instructor_id, :keyword_a, 0), (:instructor_id, :keyword_b, 1)"
)
SELECT_INSTRUCTOR = text(
    f"select {', '.join(INSTRUCTOR_COLUMNS)} from instructors where id = :id"
)


@AdapterRegistry.register(ClientPath.ORM_RAW)
class OrmRawClient(OrmClient):
    """SQLAlchemy session executing raw SQL."""

    @property
    def name(self) -> str:
        return "sqlalchemy-raw"

    @property
    def write_label(self) -> str:
        return "create instructor (RAW tx)"

    async def select_rows(self, scan: TableScan, *, limit: int) -> int:
        async with self.session() as session:
            rows = (await session.execute(text(scan_sql(scan, ":limit")), {"limit": limit})).all()
        return len(rows)

    async def select_instructors(self, *, limit: int) -> int:
        async with self.session() as session:
            rows = (await session.execute(text(instructor_tree_sql(":limit")), {"limit": limit})).all()
        return len(rows)

    async def create_instructor_graph(self, seed: GraphSeed, ids: CreatedGraphIds) -> int:
        async with self.session() as session, session.begin():
            keywords = [
                IdRow(*(await session.execute(INSERT_KEYWORD, {"name": name})).one())
                for name in seed.keyword_names
            ]
            books = [IdRow(*(await session.execute(INSERT_BOOK, spec)).one()) for spec in seed.books]
            instructor = IdRow(*(await session.execute(INSERT_INSTRUCTOR, seed.instructor)).one())

            await session.execute(
                INSERT_INSTRUCTOR_BOOKS,
                {"instructor_id": instructor.id, "book_a": books[0].id, "book_b": books[1].id},
            )
            await session.execute(
                INSERT_INSTRUCTOR_KEYWORDS,
                {"instructor_id": instructor.id, "keyword_a": keywords[0].id, "keyword_b": keywords[1].id},
            )

        ids.keyword_ids.extend(ids_from_rows(keywords))
        ids.book_ids.extend(ids_from_rows(books))
        ids.instructor_id = instructor.id
        return instructor.id

    async def get_instructor(self, instructor_id: int) -> dict[str, Any] | None:
        async with self.session() as session:
            row = (await session.execute(SELECT_INSTRUCTOR, {"id": instructor_id})).mappings().first()
        return dict(row) if row else None

    async def delete_rows(self, table: str, column: str, values: Sequence[int]) -> int:
        if not values:
            return 0
        stmt = text(f'delete from "{table}" where "{column}" in :values').bindparams(
            bindparam("values", expanding=True)
        )
        async with self.session() as session, session.begin():
            result = await session.execute(stmt, {"values": list(values)})
        return result.rowcount or 0
