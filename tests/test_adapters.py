r"""
Tests for access_bench.adapters module.
"""

import pytest
from sqlalchemy.exc import OperationalError

from access_bench.adapters import (
    AdapterRegistry,
    BaseClient,
    OrmRawClient,
    RestClient,
    SqlClient,
    connect_kwargs,
    open_clients,
)
from access_bench.config import Settings
from access_bench.types import ClientPath
from tests.conftest import InMemoryClient


class TestAdapterRegistry:
    def test_registry_has_paths(self):
        assert set(AdapterRegistry.list()) == set(ClientPath)

    def test_get_by_tag(self):
        assert AdapterRegistry.get("rest") is RestClient
        assert AdapterRegistry.get(ClientPath.SQL) is SqlClient
        assert issubclass(AdapterRegistry.get("orm"), BaseClient)

    def test_get_unknown(self):
        assert AdapterRegistry.get("prisma") is None

    def test_create(self):
        client = AdapterRegistry.create("orm_raw")
        assert isinstance(client, OrmRawClient)
        assert client.connected is False

    def test_create_unknown(self):
        with pytest.raises(ValueError, match="Unknown client path 'prisma'"):
            AdapterRegistry.create("prisma")


class TestBaseClient:
    def test_is_abstract(self):
        with pytest.raises(TypeError):
            BaseClient()  # type: ignore[abstract]

    async def test_context_manager(self, memory_client):
        async with memory_client as client:
            assert client.connected
        assert memory_client.calls == ["connect", "disconnect"]
        assert not memory_client.connected


class TestConnectKwargs:
    settings = Settings(
        supabase_url="https://p.supabase.co",
        supabase_key="anon",
        database_url="postgresql://pooler/app",
        direct_url="postgresql://direct/app",
        cache_ttl=15,
        db_ssl=None,
    )

    def test_rest(self):
        assert connect_kwargs(ClientPath.REST, self.settings) == {
            "uri": "https://p.supabase.co",
            "key": "anon",
            "cache_ttl": 15,
        }

    @pytest.mark.parametrize("path", [ClientPath.ORM, ClientPath.ORM_RAW])
    def test_orm(self, path):
        assert connect_kwargs(path, self.settings) == {"uri": "postgresql://pooler/app"}

    def test_sql(self):
        assert connect_kwargs(ClientPath.SQL, self.settings) == {"uri": "postgresql://direct/app", "ssl": None}


class _Working(InMemoryClient):
    def __init__(self) -> None:
        super().__init__("working", ClientPath.REST)
        _Working.instances.append(self)

    instances: list["_Working"] = []


class _Broken(InMemoryClient):
    def __init__(self) -> None:
        super().__init__("broken", ClientPath.SQL)

    async def connect(self, *, uri=None, **kwargs):
        msg = "connection refused"
        raise ConnectionError(msg)


class TestOpenClients:
    @pytest.fixture(autouse=True)
    def fake_registry(self, monkeypatch):
        _Working.instances.clear()
        monkeypatch.setitem(AdapterRegistry._adapters, ClientPath.REST, _Working)
        monkeypatch.setitem(AdapterRegistry._adapters, ClientPath.SQL, _Broken)

    async def test_connects_and_releases(self):
        async with open_clients([ClientPath.REST], Settings()) as clients:
            assert [c.name for c in clients] == ["working"]
            assert clients[0].connected

        assert _Working.instances[0].calls == ["connect", "disconnect"]

    async def test_released_on_error(self):
        with pytest.raises(RuntimeError, match="scenario failed"):
            async with open_clients([ClientPath.REST], Settings()):
                raise RuntimeError("scenario failed")

        assert not _Working.instances[0].connected

    async def test_connection_failure_releases_opened(self):
        with pytest.raises(ConnectionError):
            async with open_clients([ClientPath.REST, ClientPath.SQL], Settings()):
                pytest.fail("body must not run")

        assert _Working.instances[0].calls == ["connect", "disconnect"]

    async def test_unreachable_orm_aborts_before_use(self, tmp_path):
        settings = Settings(database_url=f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'bench.db'}")

        with pytest.raises(OperationalError):
            async with open_clients([ClientPath.REST, ClientPath.ORM], settings):
                pytest.fail("body must not run")

        assert _Working.instances[0].calls == ["connect", "disconnect"]
