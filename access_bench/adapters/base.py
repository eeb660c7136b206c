r"""
Base client implementation shared by every access path.

Each path (PostgREST, SQLAlchemy ORM, SQLAlchemy raw SQL, asyncpg) subclasses
BaseClient and registers under its ClientPath tag, so scenarios are written
once and run against any of them.

    from access_bench.adapters.base import AdapterRegistry, BaseClient

    @AdapterRegistry.register(ClientPath.SQL)
    class MyClient(BaseClient):
        ...
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

from access_bench.types import ClientPath, CreatedGraphIds, GraphSeed, TableScan

__all__ = ["AdapterRegistry", "BaseClient"]


class AdapterRegistry:
    """Registry for client path adapters."""

    _adapters: dict[ClientPath, type["BaseClient"]] = {}

    @classmethod
    def register(cls, path: ClientPath) -> Any:
        """Decorator to register a client class for a path."""

        def decorator(client_cls: type["BaseClient"]) -> type["BaseClient"]:
            client_cls.path = path
            cls._adapters[path] = client_cls
            return client_cls

        return decorator

    @classmethod
    def get(cls, path: ClientPath | str) -> type["BaseClient"] | None:
        """Get client class by path tag."""
        try:
            return cls._adapters.get(ClientPath(path))
        except ValueError:
            return None

    @classmethod
    def list(cls) -> list[ClientPath]:
        """List registered path tags."""
        return list(cls._adapters.keys())

    @classmethod
    def create(cls, path: ClientPath | str, **kwargs: Any) -> "BaseClient":
        """Create client instance by path tag."""
        client_cls = cls.get(path)
        if client_cls is None:
            valid = ", ".join(p.value for p in cls.list()) or "none"
            msg = f"Unknown client path '{path}'. Registered: {valid}"
            raise ValueError(msg)
        return client_cls(**kwargs)


class BaseClient(ABC):
    """Base class for access path clients.

    Read methods return row counts so timings cover transfer and
    materialization, not downstream processing.
    """

    path: ClientPath
    supports_transactions: bool = True
    _connected: bool = False

    @property
    @abstractmethod
    def name(self) -> str:
        """Short name used as the label prefix."""
        ...

    @property
    def connected(self) -> bool:
        """Whether the client currently holds a connection."""
        return self._connected

    @property
    def write_label(self) -> str:
        """Label of the write scenario for this path."""
        return "create instructor (tx)" if self.supports_transactions else "create instructor (multi-step)"

    @abstractmethod
    async def connect(self, *, uri: str | None = None, **kwargs: Any) -> None:
        """Open the long-lived handle to the store."""
        ...

    @abstractmethod
    async def disconnect(self) -> None:
        """Release the handle."""
        ...

    @abstractmethod
    async def select_rows(self, scan: TableScan, *, limit: int) -> int:
        """Run a flat scan and return the number of rows fetched."""
        ...

    @abstractmethod
    async def select_instructors(self, *, limit: int) -> int:
        """Fetch instructors with their four related collections."""
        ...

    @abstractmethod
    async def create_instructor_graph(self, seed: GraphSeed, ids: CreatedGraphIds) -> int:
        """Insert keywords, books, an instructor and both join batches.

        Generated identifiers are recorded into ``ids`` as soon as each
        insert returns them.

        Returns:
            The new instructor id.
        """
        ...

    @abstractmethod
    async def get_instructor(self, instructor_id: int) -> dict[str, Any] | None:
        """Retrieve an instructor row by id."""
        ...

    @abstractmethod
    async def delete_rows(self, table: str, column: str, values: Sequence[int]) -> int:
        """Delete rows whose ``column`` is in ``values``; return count deleted."""
        ...

    async def __aenter__(self) -> "BaseClient":
        if not self._connected:
            await self.connect()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.disconnect()
