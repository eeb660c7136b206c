r"""
access-bench: latency comparison of data-access paths to one Postgres store.

Times the same reads and the same multi-table write through PostgREST,
the SQLAlchemy ORM, SQLAlchemy raw SQL, and asyncpg.

    from access_bench import BenchmarkOrchestrator, load_settings
    from access_bench.adapters import open_clients

    settings = load_settings()
    async with open_clients(settings.paths, settings) as clients:
        result = await BenchmarkOrchestrator().run(clients)
"""

from access_bench.config import DEFAULT_LIMIT, Settings, load_settings
from access_bench.runner import BenchmarkOrchestrator, OrchestratorConfig
from access_bench.types import ClientPath, CreatedGraphIds, GraphSeed, TimedResult

__all__ = [
    "BenchmarkOrchestrator",
    "ClientPath",
    "CreatedGraphIds",
    "DEFAULT_LIMIT",
    "GraphSeed",
    "OrchestratorConfig",
    "Settings",
    "TimedResult",
    "load_settings",
]

__version__ = "0.1.0"
