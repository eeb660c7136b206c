r"""
Read scenarios.

Each returns the number of rows fetched, newest first, bounded by the
shared row limit.

    from access_bench.benchmarks.reads import PostsScenario

    result = await PostsScenario().run(client, ScenarioContext(limit=10))
"""

from access_bench.adapters.base import BaseClient
from access_bench.benchmarks.base import BaseScenario, ScenarioContext, ScenarioRegistry
from access_bench.schema import POST_COMMENTS_SCAN, POSTS_SCAN

__all__ = ["InstructorsScenario", "PostCommentsScenario", "PostsScenario"]


@ScenarioRegistry.register("posts", category="read")
class PostsScenario(BaseScenario):
    """Flat scan of posts."""

    @property
    def name(self) -> str:
        return "posts"

    def label_for(self, client: BaseClient) -> str:
        return "select posts"

    async def execute(self, client: BaseClient, ctx: ScenarioContext) -> int:
        return await client.select_rows(POSTS_SCAN, limit=ctx.limit)


@ScenarioRegistry.register("post_comments", category="read")
class PostCommentsScenario(BaseScenario):
    """Flat scan of post comments."""

    @property
    def name(self) -> str:
        return "post_comments"

    async def execute(self, client: BaseClient, ctx: ScenarioContext) -> int:
        return await client.select_rows(POST_COMMENTS_SCAN, limit=ctx.limit)


@ScenarioRegistry.register("instructors", category="read")
class InstructorsScenario(BaseScenario):
    """Instructors with social links, books, keywords and featured entries.

    Stresses relation expansion: one logical call, four nested collections.
    """

    @property
    def name(self) -> str:
        return "instructors"

    def label_for(self, client: BaseClient) -> str:
        return "instructors (app-select)"

    async def execute(self, client: BaseClient, ctx: ScenarioContext) -> int:
        return await client.select_instructors(limit=ctx.limit)
