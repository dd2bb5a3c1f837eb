"""Command-line interface for critpath."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer

from . import config as config_module
from .config import CritpathConfig, discover_config
from .engine import TaskGraphEngine
from .exceptions import CritpathError
from .logger import (
    VERBOSITY_CHANGES,
    VERBOSITY_CHECKS,
    VERBOSITY_DEBUG,
    VERBOSITY_SILENT,
    setup_logger,
)
from .models import BuildResult, GraphFormat
from .parser import load_plan
from .render import write

app = typer.Typer(
    name="critpath",
    help="Task dependency graphs and critical path analysis",
    add_completion=False,
)

PlanArgument = Annotated[Path, typer.Argument(help="Path to the plan YAML or JSON file")]


@app.callback()
def main_callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            help=(
                f"Verbosity level: {VERBOSITY_SILENT}=silent (default), "
                f"{VERBOSITY_CHANGES}=show changes, {VERBOSITY_CHECKS}=show all checks, "
                f"{VERBOSITY_DEBUG}=debug"
            ),
            min=VERBOSITY_SILENT,
            max=VERBOSITY_DEBUG,
        ),
    ] = VERBOSITY_SILENT,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to config file (default: critpath_config.yaml)",
        ),
    ] = None,
) -> None:
    """Global options for critpath commands."""
    setup_logger(verbose)
    config_module.set_config_path(config)


def _run_build(plan: Path, formats: list[GraphFormat] | None) -> BuildResult:
    """Load config and plan, then build; CritpathError exits with status 1."""
    try:
        config: CritpathConfig = discover_config(plan)
        tasks = load_plan(plan)
        return TaskGraphEngine(config).build(tasks, formats)
    except (CritpathError, FileNotFoundError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e


def _emit(result: BuildResult, output: Path | None) -> None:
    """Print renderings, or write them to a file or directory."""
    renderings = list(result.renderings.values())
    if output is None:
        for rendering in renderings:
            typer.echo(rendering.content)
        return

    # Several formats share one output path: treat it as a directory
    if len(renderings) > 1:
        destinations = [output / f"plan.{r.format.extension}" for r in renderings]
    else:
        destinations = [output]

    for rendering, destination in zip(renderings, destinations):
        try:
            written = write(rendering, destination)
        except OSError as e:
            typer.echo(f"Error: cannot write {destination}: {e}", err=True)
            raise typer.Exit(1) from e
        typer.echo(f"{rendering.format.value} written to {written}")


@app.command()
def build(
    plan: PlanArgument = Path("plan.yaml"),
    *,
    format: Annotated[  # noqa: A002 - 'format' is appropriate name for CLI option
        list[GraphFormat] | None,
        typer.Option("--format", "-f", help="Output format(s); repeat for several"),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output file, or directory for several formats"),
    ] = None,
) -> None:
    """Build the task graph and render it in the configured or requested formats."""
    result = _run_build(plan, format or None)
    _emit(result, output)


@app.command()
def render(
    plan: PlanArgument = Path("plan.yaml"),
    *,
    format: Annotated[  # noqa: A002 - 'format' is appropriate name for CLI option
        GraphFormat,
        typer.Option("--format", "-f", help="Output format"),
    ] = GraphFormat.GANTT,
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Output file path")] = None,
) -> None:
    """Render the task graph in a single format."""
    result = _run_build(plan, [format])
    _emit(result, output)


@app.command()
def path(
    plan: PlanArgument = Path("plan.yaml"),
    *,
    as_json: Annotated[bool, typer.Option("--json", help="Print the path as JSON")] = False,
) -> None:
    """Print the critical path and its total duration."""
    result = _run_build(plan, [])
    critical_path = result.critical_path
    steps = [result.graph.get_task(task_id) for task_id in critical_path.task_ids]

    if as_json:
        payload = {
            "critical_path": [
                {"id": task.id, "name": task.name, "duration": task.duration}
                for task in steps
                if task is not None
            ],
            "total_duration": critical_path.total_duration,
            "cycle": list(critical_path.cycle) if critical_path.cycle else None,
        }
        typer.echo(json.dumps(payload, indent=2))
        return

    if not steps:
        typer.echo("No critical path (no root tasks)")
    for task in steps:
        if task is not None:
            typer.echo(f"{task.id}\t{task.duration}d\t{task.name}")
    typer.echo(f"Total duration: {critical_path.total_duration}d")
    if critical_path.cycle:
        typer.echo(f"Warning: dependency cycle {' -> '.join(critical_path.cycle)}", err=True)


@app.command()
def check(plan: PlanArgument = Path("plan.yaml")) -> None:
    """Report unresolved dependency names and cycles; exit 1 if any are found."""
    result = _run_build(plan, [])
    graph = result.graph
    problems = 0

    for task_id, dep_name in graph.unresolved_dependencies():
        task = graph.get_task(task_id)
        name = task.name if task else task_id
        typer.echo(f"Unresolved dependency: {task_id} ({name}) -> '{dep_name}'")
        problems += 1

    if result.critical_path.cycle:
        typer.echo(f"Dependency cycle: {' -> '.join(result.critical_path.cycle)}")
        problems += 1

    if problems:
        raise typer.Exit(1)
    typer.echo(f"OK: {len(graph.tasks)} tasks, {len(graph.edges)} dependencies")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
