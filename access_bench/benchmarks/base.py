r"""
Base scenario implementation.

A scenario is written once and runs against any BaseClient; timing and
labelling live here so every path is measured the same way.

    from access_bench.benchmarks.base import BaseScenario, ScenarioRegistry

    @ScenarioRegistry.register("my_scan", category="read")
    class MyScenario(BaseScenario):
        ...
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from access_bench.adapters.base import BaseClient
from access_bench.config import DEFAULT_LIMIT
from access_bench.runner.cleanup import CleanupScope
from access_bench.runner.timing import timed
from access_bench.types import TimedResult

__all__ = ["BaseScenario", "ScenarioContext", "ScenarioRegistry"]


class ScenarioRegistry:
    """Registry for scenario implementations."""

    _scenarios: dict[str, type[BaseScenario]] = {}

    @classmethod
    def register(cls, name: str, *, category: str = "read") -> Any:
        """Decorator to register a scenario class."""

        def decorator(scenario_cls: type[BaseScenario]) -> type[BaseScenario]:
            scenario_cls.category = category
            cls._scenarios[name] = scenario_cls
            return scenario_cls

        return decorator

    @classmethod
    def get(cls, name: str) -> type[BaseScenario] | None:
        """Get scenario class by name."""
        return cls._scenarios.get(name)

    @classmethod
    def list(cls) -> list[str]:
        """List registered scenario names."""
        return list(cls._scenarios.keys())

    @classmethod
    def by_category(cls, category: str) -> list[str]:
        """List scenarios in a category."""
        return [name for name, scenario in cls._scenarios.items() if scenario.category == category]


@dataclass(frozen=True, slots=True)
class ScenarioContext:
    """Per-execution inputs handed to a scenario.

    Attributes:
        limit: Row limit for reads.
        repeat: Zero-based repeat index.
        repeats: Total repeats of this category, for labelling.
        cleanup: Scope receiving the ids created by writes.
        verify_writes: Look created rows up before cleanup.
    """

    limit: int = DEFAULT_LIMIT
    repeat: int = 0
    repeats: int = 1
    cleanup: CleanupScope | None = None
    verify_writes: bool = False


class BaseScenario(ABC):
    """Base class for scenarios."""

    category: str = "read"

    @property
    @abstractmethod
    def name(self) -> str:
        """Scenario name."""
        ...

    @property
    def description(self) -> str:
        """Human-readable description."""
        return self.__class__.__doc__ or self.name

    def label_for(self, client: BaseClient) -> str:
        """Label suffix shown after the client name."""
        return self.name

    def label(self, client: BaseClient, ctx: ScenarioContext) -> str:
        """Full report label, with a repeat index when repeated."""
        label = f"{client.name}.{self.label_for(client)}"
        if ctx.repeats > 1:
            label += f" #{ctx.repeat + 1}"
        return label

    @abstractmethod
    async def execute(self, client: BaseClient, ctx: ScenarioContext) -> int:
        """The timed operation; returns the scenario value."""
        ...

    async def run(self, client: BaseClient, ctx: ScenarioContext) -> TimedResult[int]:
        """Time one execution against ``client``."""
        return await timed(
            self.label(client, ctx),
            lambda: self.execute(client, ctx),
            scenario=self.name,
            path=client.path,
            repeat=ctx.repeat,
        )
