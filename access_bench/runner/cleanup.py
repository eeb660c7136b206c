r"""
Removal of rows created by write scenarios.

Deletes run in foreign-key order, each group behind its own error boundary,
so one failing delete never stops the others and cleanup never fails a run.

    from access_bench.runner.cleanup import CleanupScope

    async with CleanupScope() as scope:
        scope.submit(client, ids)
"""

import asyncio

from access_bench.adapters.base import BaseClient
from access_bench.logging_config import get_logger
from access_bench.schema import BOOKS, INSTRUCTOR_BOOKS, INSTRUCTOR_KEYWORDS, INSTRUCTORS, KEYWORDS
from access_bench.types import CreatedGraphIds

__all__ = ["CleanupScope", "cleanup"]

logger = get_logger(__name__)


async def cleanup(client: BaseClient, ids: CreatedGraphIds) -> None:
    """Delete everything recorded in ``ids``. Never raises.

    Safe to call repeatedly; deletes of rows already gone are no-ops.
    """
    groups: list[tuple[str, str, list[int]]] = []
    if ids.instructor_id is not None:
        groups += [
            (INSTRUCTOR_KEYWORDS, "instructor_id", [ids.instructor_id]),
            (INSTRUCTOR_BOOKS, "instructor_id", [ids.instructor_id]),
            (INSTRUCTORS, "id", [ids.instructor_id]),
        ]
    groups += [
        (KEYWORDS, "id", list(ids.keyword_ids)),
        (BOOKS, "id", list(ids.book_ids)),
    ]

    for table, column, values in groups:
        if not values:
            continue
        try:
            deleted = await client.delete_rows(table, column, values)
            logger.debug("%s: deleted %d row(s) from %s", client.name, deleted, table)
        except Exception as e:
            logger.warning("%s: cleanup of %s failed: %s", client.name, table, e)


class CleanupScope:
    """Tracks pending cleanups and awaits them before the scope closes.

    Exiting the scope, normally or through an exception, waits for every
    submitted cleanup, so no created rows outlive the run.
    """

    def __init__(self) -> None:
        self._pending: set[asyncio.Task[None]] = set()

    @property
    def pending(self) -> int:
        """Number of cleanups not yet finished."""
        return sum(1 for task in self._pending if not task.done())

    def submit(self, client: BaseClient, ids: CreatedGraphIds) -> asyncio.Task[None]:
        """Schedule cleanup of ``ids`` through ``client``."""
        task = asyncio.create_task(cleanup(client, ids), name=f"cleanup-{client.name}")
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def flush(self) -> None:
        """Wait for every pending cleanup."""
        while self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)

    async def __aenter__(self) -> "CleanupScope":
        return self

    async def __aexit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        await self.flush()
