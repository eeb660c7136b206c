r"""
SQLAlchemy asyncio ORM client path.

Reads and writes go through the mapped classes in access_bench.models and
the ORM query builder. Writes run in one session transaction.

Requires: pip install "sqlalchemy[asyncio]" asyncpg

Environment variables:
    DATABASE_URL: Connection string (postgres://, postgresql:// or a full
        SQLAlchemy URL such as postgresql+asyncpg://)

    from access_bench.adapters.orm import OrmClient

    client = OrmClient()
    await client.connect(uri="postgresql+asyncpg://localhost/app")
"""

import os
from collections.abc import Sequence
from typing import Any

from sqlalchemy import delete, select, text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import joinedload, load_only, selectinload

from access_bench.adapters.base import AdapterRegistry, BaseClient
from access_bench.config import get_env
from access_bench.logging_config import get_logger
from access_bench.models import (
    Book,
    FeaturedInstructor,
    Instructor,
    InstructorBook,
    InstructorKeyword,
    InstructorSocialLink,
    Keyword,
    model_for,
)
from access_bench.schema import INSTRUCTOR_COLUMNS, SOCIAL_LINK_COLUMNS
from access_bench.types import ClientPath, CreatedGraphIds, GraphSeed, TableScan

__all__ = ["OrmClient", "async_database_url"]

logger = get_logger(__name__)


PRISMA_ONLY_PARAMS = ("pgbouncer", "connection_limit", "pool_timeout", "schema")


def async_database_url(url: str) -> str:
    """Point a plain Postgres URL at the asyncpg driver.

    Prisma-style query parameters are dropped; asyncpg.connect() rejects them.
    """
    if url.startswith("postgres://"):
        url = "postgresql://" + url.removeprefix("postgres://")
    parsed = make_url(url)
    if parsed.drivername == "postgresql":
        parsed = parsed.set(drivername="postgresql+asyncpg")
    return parsed.difference_update_query(PRISMA_ONLY_PARAMS).render_as_string(hide_password=False)


@AdapterRegistry.register(ClientPath.ORM)
class OrmClient(BaseClient):
    """SQLAlchemy ORM client using the query builder."""

    def __init__(self) -> None:
        self._engine: AsyncEngine | None = None
        self._sessions: async_sessionmaker[AsyncSession] | None = None
        self._connected = False

    @property
    def name(self) -> str:
        return "sqlalchemy"

    @property
    def write_label(self) -> str:
        return "create instructor (ORM tx)"

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            msg = f"{type(self).__name__} is not connected"
            raise RuntimeError(msg)
        return self._engine

    async def connect(self, *, uri: str | None = None, **kwargs: Any) -> None:
        url = uri or os.environ.get("DATABASE_URL")
        if not url:
            msg = "ORM database URL required (set DATABASE_URL)"
            raise ValueError(msg)

        url = async_database_url(url)
        if url.startswith("postgresql+asyncpg"):
            # Pooled endpoints (pgbouncer transaction mode) reject prepared statements
            connect_args = kwargs.setdefault("connect_args", {})
            connect_args.setdefault("statement_cache_size", 0)
            connect_args.setdefault("prepared_statement_cache_size", 0)
            ssl = get_env("DB_SSL", default="require")
            if ssl:
                connect_args.setdefault("ssl", ssl)

        engine = create_async_engine(url, **kwargs)
        try:
            async with engine.connect() as conn:
                await conn.execute(text("select 1"))
        except Exception:
            await engine.dispose()
            raise

        self._engine = engine
        self._sessions = async_sessionmaker(engine, expire_on_commit=False)
        self._connected = True
        logger.debug("Connected %s engine to %s", self.name, make_url(url).render_as_string())

    async def disconnect(self) -> None:
        if self._engine:
            await self._engine.dispose()
            self._engine = None
            self._sessions = None
        self._connected = False

    def session(self) -> AsyncSession:
        if self._sessions is None:
            msg = f"{type(self).__name__} is not connected"
            raise RuntimeError(msg)
        return self._sessions()

    async def select_rows(self, scan: TableScan, *, limit: int) -> int:
        model = model_for(scan.table)
        stmt = (
            select(*[getattr(model, c) for c in scan.columns])
            .order_by(getattr(model, scan.order_by).desc())
            .limit(limit)
        )
        async with self.session() as session:
            rows = (await session.execute(stmt)).all()
        return len(rows)

    async def select_instructors(self, *, limit: int) -> int:
        stmt = (
            select(Instructor)
            .options(
                load_only(*[getattr(Instructor, c) for c in INSTRUCTOR_COLUMNS]),
                selectinload(Instructor.social_links).load_only(
                    *[getattr(InstructorSocialLink, c) for c in SOCIAL_LINK_COLUMNS]
                ),
                selectinload(Instructor.books).joinedload(InstructorBook.book).load_only(Book.id, Book.title, Book.url),
                selectinload(Instructor.keywords).options(
                    load_only(InstructorKeyword.order),
                    joinedload(InstructorKeyword.keyword).load_only(Keyword.id, Keyword.name),
                ),
                selectinload(Instructor.featured).load_only(FeaturedInstructor.order),
            )
            .order_by(Instructor.created_at.desc())
            .limit(limit)
        )
        async with self.session() as session:
            rows = (await session.scalars(stmt)).all()
        return len(rows)

    async def create_instructor_graph(self, seed: GraphSeed, ids: CreatedGraphIds) -> int:
        async with self.session() as session, session.begin():
            keywords = [Keyword(name=name) for name in seed.keyword_names]
            books = [Book(**spec) for spec in seed.books]
            session.add_all(keywords + books)
            await session.flush()

            instructor = Instructor(**seed.instructor)
            session.add(instructor)
            await session.flush()

            session.add_all(InstructorBook(instructor_id=instructor.id, book_id=book.id) for book in books)
            session.add_all(
                InstructorKeyword(instructor_id=instructor.id, keyword_id=keyword.id, order=index)
                for index, keyword in enumerate(keywords)
            )
            await session.flush()

        # Only report ids once the transaction has committed
        ids.keyword_ids.extend(k.id for k in keywords)
        ids.book_ids.extend(b.id for b in books)
        ids.instructor_id = instructor.id
        return instructor.id

    async def get_instructor(self, instructor_id: int) -> dict[str, Any] | None:
        async with self.session() as session:
            instructor = await session.get(Instructor, instructor_id)
            if instructor is None:
                return None
            return {c: getattr(instructor, c) for c in INSTRUCTOR_COLUMNS}

    async def delete_rows(self, table: str, column: str, values: Sequence[int]) -> int:
        if not values:
            return 0
        model = model_for(table)
        stmt = delete(model).where(getattr(model, column).in_(list(values)))
        async with self.session() as session, session.begin():
            result = await session.execute(stmt)
        return result.rowcount or 0
