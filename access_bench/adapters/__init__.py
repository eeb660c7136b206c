r"""
Client path adapters for access-bench.

Each adapter implements BaseClient for one way of reaching the store.

    from access_bench.adapters import open_clients

    async with open_clients(settings.paths, settings) as clients:
        ...
"""

from collections.abc import AsyncIterator, Sequence
from contextlib import AsyncExitStack, asynccontextmanager
from typing import Any

from access_bench.adapters.base import AdapterRegistry, BaseClient
from access_bench.adapters.orm import OrmClient
from access_bench.adapters.orm_raw import OrmRawClient
from access_bench.adapters.rest import RestClient
from access_bench.adapters.sql import SqlClient
from access_bench.config import Settings
from access_bench.logging_config import get_logger
from access_bench.types import ClientPath

__all__ = [
    "AdapterRegistry",
    "BaseClient",
    "OrmClient",
    "OrmRawClient",
    "RestClient",
    "SqlClient",
    "connect_kwargs",
    "open_clients",
]

logger = get_logger(__name__)


def connect_kwargs(path: ClientPath, settings: Settings) -> dict[str, Any]:
    """Connection arguments for one path, taken from settings."""
    if path is ClientPath.REST:
        return {"uri": settings.supabase_url, "key": settings.supabase_key, "cache_ttl": settings.cache_ttl}
    if path in (ClientPath.ORM, ClientPath.ORM_RAW):
        return {"uri": settings.database_url}
    return {"uri": settings.direct_url, "ssl": settings.db_ssl}


@asynccontextmanager
async def open_clients(paths: Sequence[ClientPath], settings: Settings) -> AsyncIterator[list[BaseClient]]:
    """Connect one client per path and disconnect them all on exit.

    A connection failure aborts before any scenario runs; clients opened
    so far are still released.
    """
    async with AsyncExitStack() as stack:
        clients: list[BaseClient] = []
        for path in paths:
            client = AdapterRegistry.create(path)
            await client.connect(**connect_kwargs(path, settings))
            stack.push_async_callback(client.disconnect)
            clients.append(client)
            logger.info("Connected %s", client.name)
        yield clients
