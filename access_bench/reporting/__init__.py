r"""
Result collection and reporting.

Aggregates timed results and renders them as a text table or Markdown.

    from access_bench.reporting import ResultCollector, TableFormatter

    collector = ResultCollector()
    collector.add_results(result.results)
    print(TableFormatter().to_string(collector))
"""

from access_bench.reporting.collector import ReportRow, ResultCollector, SessionInfo
from access_bench.reporting.formats import BaseFormatter, MarkdownFormatter, TableFormatter, get_formatter

__all__ = [
    "BaseFormatter",
    "MarkdownFormatter",
    "ReportRow",
    "ResultCollector",
    "SessionInfo",
    "TableFormatter",
    "get_formatter",
]
