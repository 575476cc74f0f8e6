"""CLI entry point for the term planner."""

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .exceptions import PlannerError
from .exporters import get_exporter, load_curriculum, load_json, write_json
from .scheduler import (
    SolveResult,
    generate_random_curriculum,
    load_settings,
    normalize_classes,
    solve_schedule_with_constraints,
    solve_with_critical_path_greedy,
    solve_with_hybrid_exact_first,
    solve_with_mip_min_periods,
    solve_with_oracle_exact,
    validate_plan,
)
from .scheduler.config import SolverSettings
from .scheduler.solver import configure_engine

app = typer.Typer(
    name="term-planner",
    help="Plan curricula into the fewest periods",
    add_completion=False,
)
console = Console()


class SolverChoice(str, Enum):
    """Available solvers."""

    constrained = "constrained"
    mip = "mip"
    hybrid = "hybrid"
    greedy = "greedy"
    oracle = "oracle"


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _run_solver(
    solver: SolverChoice,
    classes: list,
    constraints: dict,
    settings: SolverSettings,
    timeout: Optional[float],
    max_classes: Optional[int],
) -> SolveResult:
    if solver == SolverChoice.constrained:
        return solve_schedule_with_constraints(
            classes,
            constraints,
            {
                "timeoutMs": timeout if timeout is not None else settings.mip_timeout_ms,
                "greedyPeriodSearchTimeLimitMs": settings.greedy_period_search_time_limit_ms,
            },
        )
    if solver == SolverChoice.mip:
        return solve_with_mip_min_periods(
            classes,
            timeout_ms=timeout if timeout is not None else settings.mip_timeout_ms,
            max_classes_per_period=max_classes,
            greedy_period_search_time_limit_ms=settings.greedy_period_search_time_limit_ms,
        )
    if solver == SolverChoice.hybrid:
        return solve_with_hybrid_exact_first(
            classes,
            timeout_ms=timeout if timeout is not None else settings.hybrid_timeout_ms,
            max_classes_per_period=max_classes,
            greedy_period_search_time_limit_ms=settings.greedy_period_search_time_limit_ms,
            min_horizon_slice_ms=settings.min_horizon_slice_ms,
            max_horizon_slice_ms=settings.max_horizon_slice_ms,
            retry_timed_out_horizons=settings.retry_timed_out_horizons,
        )
    if solver == SolverChoice.oracle:
        return solve_with_oracle_exact(
            classes,
            timeout_ms=timeout if timeout is not None else settings.oracle_timeout_ms,
            max_classes_for_exact=settings.max_classes_for_exact,
            max_classes_per_period=max_classes,
        )
    return solve_with_critical_path_greedy(
        classes,
        max_classes_per_period=max_classes,
        period_search_time_limit_ms=settings.period_search_time_limit_ms,
    )


@app.command()
def solve(
    curriculum: Annotated[
        Path,
        typer.Argument(help="Curriculum JSON file", exists=True, readable=True),
    ],
    constraints_file: Annotated[
        Optional[Path],
        typer.Option("--constraints", "-c", help="Constraints JSON file"),
    ] = None,
    solver: Annotated[
        SolverChoice,
        typer.Option("--solver", "-s", help="Solver to run"),
    ] = SolverChoice.constrained,
    timeout: Annotated[
        Optional[float],
        typer.Option("--timeout", "-t", help="Time budget in milliseconds"),
    ] = None,
    max_classes: Annotated[
        Optional[int],
        typer.Option("--max-classes", help="Cap on classes per period (non-constrained solvers)"),
    ] = None,
    config: Annotated[
        Optional[Path],
        typer.Option("--config", help="Solver settings JSON file"),
    ] = None,
    output: Annotated[
        Optional[Path],
        typer.Option("-o", "--output", help="Output file (.json or .csv)"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("-v", "--verbose", help="Show solver progress"),
    ] = False,
) -> None:
    """Plan a curriculum into periods."""
    _configure_logging(verbose)

    try:
        settings = load_settings(config)
        configure_engine(settings.num_workers, settings.log_search_progress)
        classes = load_curriculum(curriculum)
        constraints = load_json(constraints_file) if constraints_file else {}
        with console.status(f"[bold green]Solving with {solver.value}..."):
            result = _run_solver(solver, classes, constraints, settings, timeout, max_classes)
    except (PlannerError, json.JSONDecodeError, OSError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    if not result.success:
        console.print(f"[bold red]✗ {result.error}[/bold red]")
        for entry in result.meta.get("unschedulableClasses", []):
            console.print(f"  [red]• {entry['classId']}: {entry['className']}[/red]")
        if verbose:
            console.print_json(json.dumps(result.meta, default=str))
        raise typer.Exit(1)

    _show_plan(result)

    if output:
        format = "csv" if output.suffix == ".csv" else "json"
        get_exporter(format).export(result, output)
        console.print(f"\n[bold green]✓[/bold green] Exported to: {output}")


def _show_plan(result: SolveResult) -> None:
    """Show a plan as one table row per period."""
    table = Table(title=f"Plan ({result.total_periods} periods)")
    table.add_column("Period", style="cyan")
    table.add_column("Classes", style="green")

    for period, entries in result.schedule_by_period.items():
        table.add_row(
            str(period),
            ", ".join(f"{e['classId']} (opt {e['optionIndex']})" for e in entries),
        )
    console.print(table)

    summary = Table(show_header=False)
    summary.add_column("Metric", style="cyan")
    summary.add_column("Value", style="green")
    for key in ("solver", "delegatedSolver", "optimality", "lowerBound", "upperBound", "runtimeMs"):
        if key in result.meta:
            value = result.meta[key]
            summary.add_row(key, f"{value:.1f}" if isinstance(value, float) else str(value))
    console.print(summary)


@app.command()
def validate(
    curriculum: Annotated[
        Path,
        typer.Argument(help="Curriculum JSON file", exists=True, readable=True),
    ],
    plan: Annotated[
        Path,
        typer.Argument(help="Plan JSON file", exists=True, readable=True),
    ],
) -> None:
    """Check a plan against a curriculum."""
    try:
        classes = normalize_classes(load_curriculum(curriculum), strict_prerequisites=False)
        validation = validate_plan(classes, load_json(plan))
    except (PlannerError, json.JSONDecodeError, OSError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    if validation.valid:
        console.print("[bold green]✓ Plan is valid[/bold green]")
        return

    console.print(f"[bold red]✗ Plan has {len(validation.violations)} violations[/bold red]")
    for violation in validation.violations:
        details = ", ".join(f"{k}={v}" for k, v in violation.details.items())
        subject = f" class {violation.class_id}" if violation.class_id is not None else ""
        console.print(f"  [red]• {violation.type.value}{subject}[/red] {details}")
    raise typer.Exit(1)


@app.command()
def generate(
    classes: Annotated[
        int,
        typer.Option("--classes", "-n", help="Number of classes", min=0),
    ] = 20,
    seed: Annotated[
        int,
        typer.Option("--seed", help="Random seed"),
    ] = 1,
    prereq_probability: Annotated[
        float,
        typer.Option("--prereq-probability", help="Chance of each earlier class being a prerequisite"),
    ] = 0.2,
    output: Annotated[
        Optional[Path],
        typer.Option("-o", "--output", help="Output JSON file"),
    ] = None,
) -> None:
    """Generate a synthetic curriculum."""
    curriculum = generate_random_curriculum(
        classes, seed=seed, prereq_probability=prereq_probability
    )

    if output:
        write_json(curriculum, output)
        console.print(f"[bold green]✓[/bold green] Wrote {len(curriculum)} classes to: {output}")
    else:
        console.print_json(json.dumps(curriculum, ensure_ascii=False))


if __name__ == "__main__":
    app()
