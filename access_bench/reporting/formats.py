r"""
Output formats for benchmark results.

Reports are rendered to strings and written to stdout by the CLI.

    from access_bench.reporting.formats import TableFormatter

    print(TableFormatter().to_string(collector))
"""

from abc import ABC, abstractmethod

from access_bench.reporting.collector import ReportRow, ResultCollector

__all__ = ["BaseFormatter", "MarkdownFormatter", "TableFormatter", "get_formatter"]

HEADERS = ("(index)", "label", "ms", "rows")


class BaseFormatter(ABC):
    """Base class for report formatters."""

    @abstractmethod
    def to_string(self, collector: ResultCollector) -> str:
        """Render results to a string."""
        ...


class TableFormatter(BaseFormatter):
    """Boxed text table, one line per result."""

    def to_string(self, collector: ResultCollector) -> str:
        cells = [HEADERS] + [self._cells(i, row) for i, row in enumerate(collector.rows())]
        widths = [max(len(line[col]) for line in cells) for col in range(len(HEADERS))]

        border = "+" + "+".join("-" * (w + 2) for w in widths) + "+"
        lines = [border, self._line(cells[0], widths), border]
        lines.extend(self._line(line, widths, numeric=True) for line in cells[1:])
        lines.append(border)
        return "\n".join(lines)

    def _cells(self, index: int, row: ReportRow) -> tuple[str, str, str, str]:
        return (str(index), row.label, str(row.ms), str(row.rows))

    def _line(self, cells: tuple[str, ...], widths: list[int], *, numeric: bool = False) -> str:
        parts = []
        for col, (cell, width) in enumerate(zip(cells, widths)):
            # label left-aligned, numbers right-aligned
            parts.append(cell.rjust(width) if numeric and col != 1 else cell.ljust(width))
        return "| " + " | ".join(parts) + " |"


class MarkdownFormatter(BaseFormatter):
    """Markdown report with the result table and per-scenario comparisons."""

    def to_string(self, collector: ResultCollector) -> str:
        lines: list[str] = []
        session = collector.session

        lines.append("# Access Path Benchmark Report")
        lines.append("")
        if session.session_id:
            lines.append(f"**Session:** {session.session_id}")
            lines.append(f"**Row limit:** {session.limit}")
            lines.append(f"**Clients:** {', '.join(session.clients)}")
            lines.append("")

        lines.append("## Results")
        lines.append("")
        lines.append("| # | Label | ms | rows |")
        lines.append("|---|-------|----|------|")
        for i, row in enumerate(collector.rows()):
            lines.append(f"| {i} | {row.label} | {row.ms} | {row.rows} |")
        lines.append("")

        comparisons = collector.compute_comparisons()
        if comparisons:
            lines.append("## Comparisons")
            lines.append("")
            self._add_comparison_table(comparisons, lines)

        return "\n".join(lines)

    def _add_comparison_table(self, comparisons: dict[str, dict[str, float]], lines: list[str]) -> None:
        """Add comparison table showing speedups."""
        paths = list(dict.fromkeys(p for speedups in comparisons.values() for p in speedups))

        lines.append("| Scenario | " + " | ".join(paths) + " |")
        lines.append("|----------|" + "|".join("-" * 10 for _ in paths) + "|")

        for scenario, speedups in comparisons.items():
            row = f"| {scenario} |"
            for path in paths:
                speed = speedups.get(path)
                if speed is None:
                    row += " N/A |"
                elif speed == 1.0:
                    row += " **1.00x** |"
                else:
                    row += f" {speed:.2f}x |"
            lines.append(row)

        lines.append("")
        lines.append("*Speed relative to fastest path (1.00x = fastest)*")
        lines.append("")


_FORMATTERS: dict[str, type[BaseFormatter]] = {
    "table": TableFormatter,
    "markdown": MarkdownFormatter,
}


def get_formatter(name: str) -> BaseFormatter:
    """Get a formatter by name.

    Raises:
        ValueError: If the format is not recognized.
    """
    formatter_cls = _FORMATTERS.get(name)
    if formatter_cls is None:
        valid = ", ".join(_FORMATTERS)
        msg = f"Unknown format '{name}'. Valid formats: {valid}"
        raise ValueError(msg)
    return formatter_cls()
