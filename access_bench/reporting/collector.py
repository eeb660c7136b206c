r"""
Result collection and aggregation.

    from access_bench.reporting.collector import ResultCollector

    collector = ResultCollector()
    collector.add_results(orchestrator_result.results)
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from statistics import mean
from typing import Any

from access_bench.types import TimedResult

__all__ = ["ReportRow", "ResultCollector", "SessionInfo"]


@dataclass
class SessionInfo:
    """Information about a benchmark session.

    Attributes:
        session_id: Unique session identifier.
        started_at: Session start timestamp.
        completed_at: Session end timestamp (empty if ongoing).
        limit: Row limit used by reads.
        clients: Client names tested.
    """

    session_id: str = ""
    started_at: str = ""
    completed_at: str = ""
    limit: int = 0
    clients: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class ReportRow:
    """One displayed line: label, rounded milliseconds, value."""

    label: str
    ms: int
    rows: Any


class ResultCollector:
    """Collects timed results in execution order."""

    def __init__(self) -> None:
        self._results: list[TimedResult[Any]] = []
        self._session = SessionInfo()

    def start_session(self, *, limit: int, clients: list[str]) -> None:
        """Start a new benchmark session."""
        started_at = datetime.now(UTC)
        self._session = SessionInfo(
            session_id=f"bench_{started_at.strftime('%Y%m%d_%H%M%S')}",
            started_at=started_at.isoformat(),
            limit=limit,
            clients=clients,
        )

    def end_session(self) -> None:
        """End the current benchmark session."""
        self._session.completed_at = datetime.now(UTC).isoformat()

    def add_result(self, result: TimedResult[Any]) -> None:
        """Add a timed result."""
        self._results.append(result)

    def add_results(self, results: list[TimedResult[Any]]) -> None:
        """Add multiple timed results."""
        self._results.extend(results)

    @property
    def results(self) -> list[TimedResult[Any]]:
        """Get all collected results."""
        return self._results

    @property
    def session(self) -> SessionInfo:
        """Get session information."""
        return self._session

    def rows(self) -> list[ReportRow]:
        """Report rows, rounded for display, in execution order."""
        return [ReportRow(label=r.label, ms=r.rounded_ms, rows=r.value) for r in self._results]

    def get_results_by_client(self, client: str) -> list[TimedResult[Any]]:
        """Get results whose label starts with a client name."""
        return [r for r in self._results if r.label.startswith(f"{client}.")]

    def get_results_by_scenario(self, scenario: str) -> list[TimedResult[Any]]:
        """Get results for a specific scenario."""
        return [r for r in self._results if r.scenario == scenario]

    def compute_comparisons(self) -> dict[str, dict[str, float]]:
        """Compute speedup of each path relative to the fastest, per scenario.

        Repeats are averaged first. 1.0 marks the fastest path; 0.5 means
        twice as slow.

        Returns:
            Dict mapping scenario name to dict of path->speedup ratios.
        """
        comparisons: dict[str, dict[str, float]] = {}

        scenarios = list(dict.fromkeys(r.scenario for r in self._results if r.scenario))

        for scenario in scenarios:
            durations: dict[str, list[int]] = {}
            for r in self.get_results_by_scenario(scenario):
                key = r.path.value if r.path is not None else r.label
                durations.setdefault(key, []).append(r.duration_ns)

            times = {path: mean(values) for path, values in durations.items()}
            fastest = min(times.values())
            comparisons[scenario] = {
                path: round(fastest / t if t > 0 else 1.0, 2) for path, t in times.items()
            }

        return comparisons
