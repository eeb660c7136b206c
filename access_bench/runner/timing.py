r"""
Timing utilities for benchmarks.

    from access_bench.runner.timing import timed

    result = await timed("asyncpg.posts", lambda: client.select_rows(POSTS_SCAN, limit=100))
"""

import time
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from access_bench.types import ClientPath, TimedResult

__all__ = ["Timer", "timed"]

T = TypeVar("T")


class Timer:
    """Context manager for timing code blocks, including awaits inside them.

        with Timer() as t:
            await do_something()
        print(f"Elapsed: {t.elapsed_ms}ms")
    """

    def __init__(self) -> None:
        self._start: int = 0
        self._end: int = 0

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter_ns()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self._end = time.perf_counter_ns()

    @property
    def elapsed_ns(self) -> int:
        """Elapsed time in nanoseconds."""
        return self._end - self._start

    @property
    def elapsed_ms(self) -> float:
        """Elapsed time in milliseconds."""
        return self.elapsed_ns / 1_000_000


async def timed(
    label: str,
    operation: Callable[[], Awaitable[T]],
    *,
    scenario: str = "",
    path: ClientPath | None = None,
    repeat: int = 0,
) -> TimedResult[T]:
    """Await an operation and measure its wall-clock duration.

    Args:
        label: Report label for the result.
        operation: Zero-argument coroutine function.
        scenario: Scenario name, for grouping.
        path: Client path, for grouping.
        repeat: Zero-based repeat index.

    Returns:
        TimedResult with the elapsed time and the operation's value.

    Raises:
        Whatever the operation raises; no partial result is recorded.
    """
    with Timer() as t:
        value = await operation()
    return TimedResult(
        label=label,
        duration_ns=t.elapsed_ns,
        value=value,
        scenario=scenario,
        path=path,
        repeat=repeat,
    )
