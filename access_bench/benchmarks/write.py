r"""
Write scenario: create an instructor with its keyword and book graph.

Inserts two keywords, two books, one instructor and both join batches
through a single client path. Only the inserts are timed; the created rows
are handed to the cleanup scope afterwards, also when the write fails.

    from access_bench.benchmarks.write import CreateInstructorScenario

    async with CleanupScope() as scope:
        ctx = ScenarioContext(cleanup=scope)
        result = await CreateInstructorScenario().run(client, ctx)
"""

from access_bench.adapters.base import BaseClient
from access_bench.benchmarks.base import BaseScenario, ScenarioContext, ScenarioRegistry
from access_bench.logging_config import get_logger
from access_bench.runner.cleanup import cleanup
from access_bench.runner.timing import timed
from access_bench.types import CreatedGraphIds, GraphSeed, TimedResult

__all__ = ["CreateInstructorScenario"]

logger = get_logger(__name__)


@ScenarioRegistry.register("create_instructor", category="write")
class CreateInstructorScenario(BaseScenario):
    """Multi-table insert of an instructor graph, transactional where supported."""

    @property
    def name(self) -> str:
        return "create_instructor"

    def label_for(self, client: BaseClient) -> str:
        return client.write_label

    async def execute(self, client: BaseClient, ctx: ScenarioContext) -> int:
        """One write outside any scope; its rows are removed before returning."""
        ids = CreatedGraphIds()
        try:
            return await client.create_instructor_graph(GraphSeed.generate(), ids)
        finally:
            await cleanup(client, ids)

    async def run(self, client: BaseClient, ctx: ScenarioContext) -> TimedResult[int]:
        if ctx.cleanup is None:
            msg = "create_instructor needs a cleanup scope"
            raise ValueError(msg)

        seed = GraphSeed.generate()
        ids = CreatedGraphIds()
        try:
            result = await timed(
                self.label(client, ctx),
                lambda: client.create_instructor_graph(seed, ids),
                scenario=self.name,
                path=client.path,
                repeat=ctx.repeat,
            )
            if ctx.verify_writes:
                await self._verify(client, seed, result.value)
        finally:
            if not ids.is_empty:
                ctx.cleanup.submit(client, ids)
        return result

    async def _verify(self, client: BaseClient, seed: GraphSeed, instructor_id: int) -> None:
        """Read the created instructor back through the same path."""
        row = await client.get_instructor(instructor_id)
        if row is None:
            msg = f"{client.name}: instructor {instructor_id} not found after write"
            raise RuntimeError(msg)
        if row.get("slug") != seed.slug:
            msg = f"{client.name}: instructor {instructor_id} has slug {row.get('slug')!r}, expected {seed.slug!r}"
            raise RuntimeError(msg)
        logger.debug("%s: verified instructor %d", client.name, instructor_id)
