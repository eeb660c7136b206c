r"""
Command-line interface for access-bench.

    access-bench --limit 50 --paths rest,sql
    access-bench --reads 3 --format markdown
"""

from access_bench.cli.main import app, main

__all__ = [
    "app",
    "main",
]
