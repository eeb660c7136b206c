r"""
Command-line interface for access-bench.

    access-bench --limit 50 --paths rest,sql
    access-bench --reads 3 --format markdown
"""

import asyncio
import dataclasses
from typing import TYPE_CHECKING, Annotated

import typer

from access_bench.config import Settings, load_settings, parse_paths
from access_bench.logging_config import get_logger, setup_logging

if TYPE_CHECKING:
    from access_bench.reporting import ResultCollector

__all__ = ["app", "main"]

logger = get_logger(__name__)

app = typer.Typer(
    name="access-bench",
    help="Latency comparison of data-access paths to one Postgres store.",
    add_completion=False,
)


def _apply_overrides(
    settings: Settings,
    *,
    limit: int | None,
    reads: int | None,
    writes: int | None,
    paths: str | None,
) -> Settings:
    overrides: dict[str, object] = {}
    if limit is not None:
        overrides["limit"] = limit
    if reads is not None:
        overrides["read_repeats"] = reads
    if writes is not None:
        overrides["write_repeats"] = writes
    if paths is not None:
        overrides["paths"] = parse_paths(paths)
    return dataclasses.replace(settings, **overrides)


async def _run(settings: Settings, scenarios: list[str] | None, *, verify: bool, verbose: bool) -> "ResultCollector":
    from access_bench.adapters import open_clients
    from access_bench.reporting import ResultCollector
    from access_bench.runner import BenchmarkOrchestrator, OrchestratorConfig

    config = OrchestratorConfig(
        limit=settings.limit,
        read_repeats=settings.read_repeats,
        write_repeats=settings.write_repeats,
        scenarios=scenarios,
        verify_writes=verify,
    )
    orchestrator = BenchmarkOrchestrator(config=config)

    def progress(client: str, label: str, status: str) -> None:
        typer.echo(f"  [{client}] {label}: {status}", err=True)

    if verbose:
        orchestrator.set_progress_callback(progress)

    collector = ResultCollector()
    async with open_clients(settings.paths, settings) as clients:
        collector.start_session(limit=settings.limit, clients=[c.name for c in clients])
        result = await orchestrator.run(clients)
    collector.add_results(result.results)
    collector.end_session()

    if verbose:
        typer.echo(f"Completed in {result.duration_seconds:.2f}s", err=True)
    return collector


@app.command()
def run(
    limit: Annotated[int | None, typer.Option("-l", "--limit", min=1, help="Row limit for every read")] = None,
    reads: Annotated[int | None, typer.Option("--reads", min=0, help="Repeats of each read per path")] = None,
    writes: Annotated[int | None, typer.Option("--writes", min=0, help="Repeats of the write per path")] = None,
    paths: Annotated[
        str | None, typer.Option("-p", "--paths", help="Client paths (comma-separated): rest, orm, orm_raw, sql")
    ] = None,
    scenarios: Annotated[
        str | None, typer.Option("-s", "--scenarios", help="Scenarios to run (comma-separated)")
    ] = None,
    format_: Annotated[str, typer.Option("-f", "--format", help="Output format: table, markdown")] = "table",
    verify: Annotated[bool, typer.Option("--verify", help="Read each write back before cleanup")] = False,
    verbose: Annotated[bool, typer.Option("-v", "--verbose", help="Verbose output")] = False,
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Show what would run")] = False,
) -> None:
    """Time reads and writes through every configured client path."""
    from access_bench.benchmarks import ScenarioRegistry
    from access_bench.reporting import get_formatter

    setup_logging("INFO" if verbose else None)

    try:
        settings = _apply_overrides(load_settings(), limit=limit, reads=reads, writes=writes, paths=paths)
        formatter = get_formatter(format_)
        scenario_list = [s.strip() for s in scenarios.split(",") if s.strip()] if scenarios else None
        for name in scenario_list or []:
            if ScenarioRegistry.get(name) is None:
                valid = ", ".join(ScenarioRegistry.list())
                msg = f"Unknown scenario '{name}'. Valid scenarios: {valid}"
                raise ValueError(msg)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None

    if verbose or dry_run:
        typer.echo(f"Paths: {', '.join(p.value for p in settings.paths)}", err=True)
        typer.echo(f"Limit: {settings.limit}", err=True)
        typer.echo(f"Repeats: {settings.read_repeats} read, {settings.write_repeats} write", err=True)

    if dry_run:
        typer.echo("\n[DRY RUN] Would run:")
        for name in scenario_list or ScenarioRegistry.list():
            repeats = settings.write_repeats if name in ScenarioRegistry.by_category("write") else settings.read_repeats
            typer.echo(f"  {name} x{repeats}: {', '.join(p.value for p in settings.paths)}")
        return

    try:
        collector = asyncio.run(_run(settings, scenario_list, verify=verify, verbose=verbose))
    except Exception as e:
        logger.debug("Run failed", exc_info=True)
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None

    typer.echo(formatter.to_string(collector))


def main() -> None:
    """Entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
