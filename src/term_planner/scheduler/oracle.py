"""Exhaustive reference solver for small instances."""

import logging
from typing import Any

from .conflicts import build_conflict_matrix
from .constants import (
    DEFAULT_MAX_CLASSES_FOR_EXACT,
    DEFAULT_ORACLE_TIMEOUT_MS,
    ORACLE_GREEDY_BOOTSTRAP_TIME_LIMIT_MS,
    SOLVER_ORACLE,
)
from .graph import build_graph
from .greedy import solve_with_critical_path_greedy
from .models import HorizonStatus, Optimality, SolveResult
from .normalizer import normalize_classes
from .search import solve_horizon_feasibility
from .utils import (
    assignments_from_arrays,
    cap_or_none,
    elapsed_ms,
    now,
    total_periods,
)

logger = logging.getLogger(__name__)


def solve_with_oracle_exact(
    raw_classes: Any,
    timeout_ms: float = DEFAULT_ORACLE_TIMEOUT_MS,
    max_classes_for_exact: int = DEFAULT_MAX_CLASSES_FOR_EXACT,
    max_classes_per_period: float | None = None,
) -> SolveResult:
    """Find a provably minimal plan by trying every horizon from the lower bound.

    Refuses inputs above ``max_classes_for_exact`` classes. A timeout is a
    failure here, never a partial answer.
    """
    started_at = now()
    classes = normalize_classes(raw_classes)

    if not classes:
        return SolveResult(
            success=True,
            meta={
                "solver": SOLVER_ORACLE,
                "runtimeMs": elapsed_ms(started_at),
                "exploredNodes": 0,
                "optimal": True,
                "optimality": Optimality.OPTIMAL_PROVEN.value,
            },
        )

    if len(classes) > max_classes_for_exact:
        logger.warning(
            f"Oracle refused {len(classes)} classes (cap {max_classes_for_exact})"
        )
        return SolveResult.failure(
            f"Oracle exact solver capped at {max_classes_for_exact} classes",
            solver=SOLVER_ORACLE,
            runtimeMs=elapsed_ms(started_at),
            capped=True,
        )

    cap = cap_or_none(max_classes_per_period)
    graph = build_graph(classes)
    conflict_matrix = build_conflict_matrix(classes)
    lower_bound = graph.lower_bound

    greedy = solve_with_critical_path_greedy(
        classes,
        max_classes_per_period=max_classes_per_period,
        period_search_time_limit_ms=ORACLE_GREEDY_BOOTSTRAP_TIME_LIMIT_MS,
    )
    upper_bound = greedy.total_periods if greedy.success else len(classes)

    explored_nodes = 0

    def timed_out() -> SolveResult:
        logger.warning(f"Oracle timed out after {explored_nodes} nodes")
        return SolveResult.failure(
            "Oracle exact solver timed out",
            solver=SOLVER_ORACLE,
            runtimeMs=elapsed_ms(started_at),
            timeout=True,
            exploredNodes=explored_nodes,
        )

    for horizon in range(lower_bound, upper_bound + 1):
        remaining_ms = timeout_ms - elapsed_ms(started_at)
        if remaining_ms <= 0:
            return timed_out()

        outcome = solve_horizon_feasibility(
            classes,
            graph,
            conflict_matrix,
            horizon,
            now() + remaining_ms / 1000,
            max_classes_per_period=cap,
            prefer_critical=False,
        )
        explored_nodes += outcome.explored_nodes

        if outcome.status == HorizonStatus.TIMEOUT:
            return timed_out()

        if outcome.found:
            assignments = assignments_from_arrays(
                classes, outcome.period_by_class, outcome.option_by_class
            )
            return SolveResult(
                success=True,
                assignments=assignments,
                total_periods=total_periods(assignments),
                meta={
                    "solver": SOLVER_ORACLE,
                    "runtimeMs": elapsed_ms(started_at),
                    "exploredNodes": explored_nodes,
                    "optimal": True,
                    "optimality": Optimality.OPTIMAL_PROVEN.value,
                },
            )

    logger.error("Oracle exhausted every horizon up to the greedy bound")
    return SolveResult.failure(
        "Oracle exact solver could not find a solution",
        solver=SOLVER_ORACLE,
        runtimeMs=elapsed_ms(started_at),
        exploredNodes=explored_nodes,
    )
