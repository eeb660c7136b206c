r"""
Tests for access_bench.runner module.
"""

import asyncio

import pytest

from access_bench.benchmarks import CreateInstructorScenario, PostsScenario
from access_bench.runner import (
    BenchmarkOrchestrator,
    CleanupScope,
    OrchestratorConfig,
    OrchestratorResult,
    Timer,
    cleanup,
    timed,
)
from access_bench.schema import BOOKS, INSTRUCTOR_BOOKS, INSTRUCTOR_KEYWORDS, INSTRUCTORS, KEYWORDS
from access_bench.types import ClientPath, CreatedGraphIds, TimedResult
from tests.conftest import InMemoryClient


class TestTimer:
    def test_timer_context_manager(self):
        with Timer() as t:
            sum(range(1000))

        assert t.elapsed_ns > 0
        assert t.elapsed_ms == t.elapsed_ns / 1_000_000


class TestTimed:
    async def test_returns_value_and_label(self):
        async def op():
            return 42

        result = await timed("memory.answer", op, scenario="answer", path=ClientPath.SQL, repeat=2)

        assert isinstance(result, TimedResult)
        assert result.label == "memory.answer"
        assert result.value == 42
        assert result.scenario == "answer"
        assert result.path is ClientPath.SQL
        assert result.repeat == 2
        assert result.duration_ns >= 0

    async def test_duration_covers_sleep(self):
        async def op():
            await asyncio.sleep(0.02)
            return None

        result = await timed("sleep", op)

        # 1ms of scheduler tolerance
        assert result.duration_ms >= 19

    async def test_failure_propagates(self):
        async def op():
            raise LookupError("boom")

        with pytest.raises(LookupError, match="boom"):
            await timed("fails", op)

    def test_rounding_only_at_display(self):
        result = TimedResult(label="x", duration_ns=1_600_000, value=1)

        assert result.duration_ms == 1.6
        assert result.rounded_ms == 2


class TestCleanup:
    async def _write(self, client, seed):
        ids = CreatedGraphIds()
        await client.create_instructor_graph(seed, ids)
        return ids

    async def test_restores_counts(self, memory_client, seed):
        before = memory_client.counts()
        ids = await self._write(memory_client, seed)
        assert memory_client.counts() != before

        await cleanup(memory_client, ids)

        assert memory_client.counts() == before

    async def test_delete_order(self, memory_client, seed):
        ids = await self._write(memory_client, seed)
        memory_client.calls.clear()

        await cleanup(memory_client, ids)

        assert memory_client.calls == [
            f"delete:{INSTRUCTOR_KEYWORDS}",
            f"delete:{INSTRUCTOR_BOOKS}",
            f"delete:{INSTRUCTORS}",
            f"delete:{KEYWORDS}",
            f"delete:{BOOKS}",
        ]

    async def test_idempotent(self, memory_client, seed):
        before = memory_client.counts()
        ids = await self._write(memory_client, seed)

        await cleanup(memory_client, ids)
        await cleanup(memory_client, ids)

        assert memory_client.counts() == before

    async def test_skips_empty_groups(self, memory_client):
        ids = CreatedGraphIds(keyword_ids=[1, 2])

        await cleanup(memory_client, ids)

        assert memory_client.calls == [f"delete:{KEYWORDS}"]

    async def test_nothing_to_delete(self, memory_client):
        await cleanup(memory_client, CreatedGraphIds())

        assert memory_client.calls == []

    async def test_failing_group_does_not_stop_others(self, seed):
        client = InMemoryClient(fail_delete_on=[INSTRUCTORS])
        ids = await self._write(client, seed)

        await cleanup(client, ids)

        counts = client.counts()
        assert counts[INSTRUCTORS] == 1
        assert counts[KEYWORDS] == 0
        assert counts[BOOKS] == 0
        assert counts[INSTRUCTOR_KEYWORDS] == 0
        assert counts[INSTRUCTOR_BOOKS] == 0


class TestCleanupScope:
    async def test_exit_awaits_pending(self, memory_client, seed):
        before = memory_client.counts()
        ids = CreatedGraphIds()
        await memory_client.create_instructor_graph(seed, ids)

        async with CleanupScope() as scope:
            scope.submit(memory_client, ids)

        assert scope.pending == 0
        assert memory_client.counts() == before

    async def test_exit_awaits_pending_on_error(self, memory_client, seed):
        before = memory_client.counts()
        ids = CreatedGraphIds()
        await memory_client.create_instructor_graph(seed, ids)

        with pytest.raises(RuntimeError):
            async with CleanupScope() as scope:
                scope.submit(memory_client, ids)
                raise RuntimeError("scenario failed")

        assert memory_client.counts() == before

    async def test_flush(self, seed):
        client = InMemoryClient(delay=0.01)
        ids = CreatedGraphIds()
        await client.create_instructor_graph(seed, ids)

        async with CleanupScope() as scope:
            scope.submit(client, ids)
            await scope.flush()
            assert scope.pending == 0
            assert client.counts()[INSTRUCTORS] == 0


class TestOrchestratorConfig:
    def test_default_config(self):
        config = OrchestratorConfig()
        assert config.limit == 100
        assert config.read_repeats == 1
        assert config.write_repeats == 1
        assert config.scenarios is None
        assert config.verify_writes is False

    def test_custom_config(self):
        config = OrchestratorConfig(limit=10, read_repeats=3, scenarios=["posts"], verify_writes=True)
        assert config.limit == 10
        assert config.read_repeats == 3
        assert config.scenarios == ["posts"]
        assert config.verify_writes is True


class TestOrchestratorResult:
    def test_duration(self):
        result = OrchestratorResult(started_at=10.0, completed_at=12.5)
        assert result.duration_seconds == 2.5


class TestBenchmarkOrchestrator:
    async def test_default_run_order(self, memory_clients):
        orchestrator = BenchmarkOrchestrator(config=OrchestratorConfig(limit=10))

        result = await orchestrator.run(memory_clients)

        assert [r.label for r in result.results] == [
            "alpha.select posts",
            "beta.select posts",
            "alpha.post_comments",
            "beta.post_comments",
            "alpha.instructors (app-select)",
            "beta.instructors (app-select)",
            "alpha.create instructor (multi-step)",
            "beta.create instructor (tx)",
        ]
        assert result.clients == ["alpha", "beta"]
        assert result.completed_at >= result.started_at

    async def test_read_values_equal_limit(self, memory_clients):
        orchestrator = BenchmarkOrchestrator(config=OrchestratorConfig(limit=10, write_repeats=0))

        result = await orchestrator.run(memory_clients)

        assert len(result.results) == 6
        assert all(r.value == 10 for r in result.results)

    async def test_limit_above_available_rows(self):
        client = InMemoryClient(rows=3)
        orchestrator = BenchmarkOrchestrator(config=OrchestratorConfig(limit=10, scenarios=["posts"]))

        result = await orchestrator.run([client])

        assert result.results[0].value == 3

    async def test_repeats_are_labelled(self, memory_client):
        config = OrchestratorConfig(limit=5, read_repeats=2, write_repeats=2)
        orchestrator = BenchmarkOrchestrator(config=config)

        result = await orchestrator.run([memory_client], scenarios=[PostsScenario(), CreateInstructorScenario()])

        assert [r.label for r in result.results] == [
            "memory.select posts #1",
            "memory.select posts #2",
            "memory.create instructor (tx) #1",
            "memory.create instructor (tx) #2",
        ]
        assert [r.repeat for r in result.results] == [0, 1, 0, 1]
        assert len({r.label for r in result.results}) == len(result.results)

    async def test_zero_repeats(self, memory_client):
        config = OrchestratorConfig(read_repeats=0, write_repeats=0)

        result = await BenchmarkOrchestrator(config=config).run([memory_client])

        assert result.results == []
        assert memory_client.calls == []

    async def test_writes_cleaned_up(self, memory_clients):
        before = [c.counts() for c in memory_clients]
        config = OrchestratorConfig(write_repeats=3, scenarios=["create_instructor"])

        result = await BenchmarkOrchestrator(config=config).run(memory_clients)

        assert len(result.results) == 6
        assert [c.counts() for c in memory_clients] == before

    async def test_cleanup_runs_before_next_write(self, memory_clients):
        config = OrchestratorConfig(scenarios=["create_instructor"])

        await BenchmarkOrchestrator(config=config).run(memory_clients)

        alpha, beta = memory_clients
        assert alpha.calls[-1] == f"delete:{BOOKS}"
        assert beta.calls[0] == "write"

    async def test_write_returns_instructor_id(self, memory_client):
        config = OrchestratorConfig(scenarios=["create_instructor"], verify_writes=True)

        result = await BenchmarkOrchestrator(config=config).run([memory_client])

        assert isinstance(result.results[0].value, int)
        assert "get_instructor" in memory_client.calls

    async def test_failure_propagates_after_cleanup(self):
        good = InMemoryClient("good", ClientPath.REST, supports_transactions=False)
        bad = InMemoryClient("bad", ClientPath.SQL, fail_write_at=INSTRUCTORS)
        before = good.counts()
        config = OrchestratorConfig(scenarios=["create_instructor"])

        with pytest.raises(RuntimeError, match="insert into instructors failed"):
            await BenchmarkOrchestrator(config=config).run([good, bad])

        assert good.counts() == before
        assert bad.counts() == before

    async def test_partial_write_cleaned_up(self):
        client = InMemoryClient(supports_transactions=False, fail_write_at=INSTRUCTORS)
        before = client.counts()
        config = OrchestratorConfig(scenarios=["create_instructor"])

        with pytest.raises(RuntimeError):
            await BenchmarkOrchestrator(config=config).run([client])

        assert client.counts() == before
        assert f"delete:{KEYWORDS}" in client.calls

    async def test_unknown_scenario(self, memory_client):
        config = OrchestratorConfig(scenarios=["missing"])

        with pytest.raises(ValueError, match="Unknown scenario 'missing'"):
            await BenchmarkOrchestrator(config=config).run([memory_client])

    async def test_progress_callback(self, memory_client):
        events: list[tuple[str, str, str]] = []
        orchestrator = BenchmarkOrchestrator(config=OrchestratorConfig(scenarios=["posts"]))
        orchestrator.set_progress_callback(lambda c, label, s: events.append((c, label, s)))

        await orchestrator.run([memory_client])

        assert events == [
            ("memory", "memory.select posts", "running"),
            ("memory", "memory.select posts", "success"),
        ]
