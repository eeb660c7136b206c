r"""
Scenario implementations for access-bench.

Scenarios are organized by category:
- read: posts, post_comments, instructors (nested relations)
- write: create_instructor (multi-table insert graph)

    from access_bench.benchmarks import PostsScenario, CreateInstructorScenario
"""

from access_bench.benchmarks.base import BaseScenario, ScenarioContext, ScenarioRegistry
from access_bench.benchmarks.reads import InstructorsScenario, PostCommentsScenario, PostsScenario
from access_bench.benchmarks.write import CreateInstructorScenario

__all__ = [
    # Base
    "BaseScenario",
    "ScenarioContext",
    "ScenarioRegistry",
    # Read
    "InstructorsScenario",
    "PostCommentsScenario",
    "PostsScenario",
    # Write
    "CreateInstructorScenario",
]
