r"""
Benchmark runner and orchestration.

Coordinates scenario execution, timing, and cleanup of written rows
across client paths.

    from access_bench.runner import BenchmarkOrchestrator

    orchestrator = BenchmarkOrchestrator()
    result = await orchestrator.run(clients)
"""

from access_bench.runner.cleanup import CleanupScope, cleanup
from access_bench.runner.orchestrator import BenchmarkOrchestrator, OrchestratorConfig, OrchestratorResult
from access_bench.runner.timing import Timer, timed

__all__ = [
    "BenchmarkOrchestrator",
    "CleanupScope",
    "OrchestratorConfig",
    "OrchestratorResult",
    "Timer",
    "cleanup",
    "timed",
]
