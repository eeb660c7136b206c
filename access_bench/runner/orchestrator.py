r"""
Benchmark orchestrator for sequencing scenarios across client paths.

Everything runs one operation at a time: reads first (every scenario on
every path, per repeat), then writes (every path, per repeat), each write
followed by its cleanup before the next starts.

    from access_bench.runner import BenchmarkOrchestrator

    orchestrator = BenchmarkOrchestrator()
    result = await orchestrator.run(clients)
"""

import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from access_bench.adapters.base import BaseClient
from access_bench.benchmarks.base import BaseScenario, ScenarioContext, ScenarioRegistry
from access_bench.config import DEFAULT_LIMIT
from access_bench.logging_config import get_logger
from access_bench.runner.cleanup import CleanupScope
from access_bench.types import TimedResult

__all__ = ["BenchmarkOrchestrator", "OrchestratorConfig", "OrchestratorResult", "ProgressCallback"]

ProgressCallback = Callable[[str, str, str], None]

logger = get_logger(__name__)


@dataclass
class OrchestratorConfig:
    """Configuration for a benchmark run.

    Attributes:
        limit: Row limit for every read scenario.
        read_repeats: Passes over the read scenarios.
        write_repeats: Passes over the write scenario.
        scenarios: Scenario names to run (None = all).
        verify_writes: Read each created instructor back before cleanup.
    """

    limit: int = DEFAULT_LIMIT
    read_repeats: int = 1
    write_repeats: int = 1
    scenarios: list[str] | None = None
    verify_writes: bool = False


@dataclass
class OrchestratorResult:
    """Results from an orchestrator run.

    Attributes:
        results: Timed results in execution order.
        started_at: Timestamp when run started.
        completed_at: Timestamp when run completed.
        clients: Names of the client paths exercised.
    """

    results: list[TimedResult[Any]] = field(default_factory=list)
    started_at: float = 0.0
    completed_at: float = 0.0
    clients: list[str] = field(default_factory=list)

    @property
    def duration_seconds(self) -> float:
        """Total duration in seconds."""
        return self.completed_at - self.started_at


class BenchmarkOrchestrator:
    """Runs scenarios sequentially across client paths."""

    def __init__(self, *, config: OrchestratorConfig | None = None) -> None:
        self._config = config or OrchestratorConfig()
        self._progress_callback: ProgressCallback | None = None

    def set_progress_callback(self, callback: ProgressCallback) -> None:
        """Set callback for progress updates."""
        self._progress_callback = callback

    def _resolve_scenarios(self, scenarios: Sequence[BaseScenario] | None) -> list[BaseScenario]:
        """Resolve list of scenarios to run."""
        if scenarios is not None:
            return list(scenarios)

        names = self._config.scenarios
        if names is None:
            names = ScenarioRegistry.list()

        result = []
        for name in names:
            scenario_cls = ScenarioRegistry.get(name)
            if scenario_cls is None:
                valid = ", ".join(ScenarioRegistry.list())
                msg = f"Unknown scenario '{name}'. Valid scenarios: {valid}"
                raise ValueError(msg)
            result.append(scenario_cls())
        return result

    async def run(
        self,
        clients: Sequence[BaseClient],
        *,
        scenarios: Sequence[BaseScenario] | None = None,
    ) -> OrchestratorResult:
        """Run every selected scenario on every client.

        Any scenario failure propagates and ends the run; pending cleanups
        still complete before it does.

        Args:
            clients: Connected clients, in report order.
            scenarios: Scenarios to run (None = use config/all).

        Returns:
            OrchestratorResult with all results in execution order.
        """
        result = OrchestratorResult(clients=[c.name for c in clients])
        result.started_at = time.time()

        selected = self._resolve_scenarios(scenarios)
        reads = [s for s in selected if s.category == "read"]
        writes = [s for s in selected if s.category == "write"]
        config = self._config

        async with CleanupScope() as scope:
            for repeat in range(config.read_repeats):
                ctx = ScenarioContext(limit=config.limit, repeat=repeat, repeats=config.read_repeats)
                for scenario in reads:
                    for client in clients:
                        result.results.append(await self._run_one(scenario, client, ctx))

            for repeat in range(config.write_repeats):
                ctx = ScenarioContext(
                    limit=config.limit,
                    repeat=repeat,
                    repeats=config.write_repeats,
                    cleanup=scope,
                    verify_writes=config.verify_writes,
                )
                for scenario in writes:
                    for client in clients:
                        result.results.append(await self._run_one(scenario, client, ctx))
                        # next write starts only once this one's rows are gone
                        await scope.flush()

        result.completed_at = time.time()
        return result

    async def _run_one(self, scenario: BaseScenario, client: BaseClient, ctx: ScenarioContext) -> TimedResult[Any]:
        label = scenario.label(client, ctx)
        if self._progress_callback:
            self._progress_callback(client.name, label, "running")

        try:
            timed_result = await scenario.run(client, ctx)
        except Exception:
            if self._progress_callback:
                self._progress_callback(client.name, label, "failed")
            logger.error("%s failed", label)
            raise

        logger.info("%s: %.2f ms (%s)", label, timed_result.duration_ms, timed_result.value)
        if self._progress_callback:
            self._progress_callback(client.name, label, "success")
        return timed_result
