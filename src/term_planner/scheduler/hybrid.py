"""Hybrid exact-first solver.

Seeds an incumbent from the greedy solver, then walks horizons upward from
the critical-path lower bound with time-sliced exact searches.
"""

import logging
from typing import Any

from .conflicts import build_conflict_matrix
from .constants import (
    DEFAULT_GREEDY_BOOTSTRAP_TIME_LIMIT_MS,
    DEFAULT_HYBRID_TIMEOUT_MS,
    DEFAULT_MAX_HORIZON_SLICE_MS,
    DEFAULT_MIN_HORIZON_SLICE_MS,
    SOLVER_HYBRID,
)
from .graph import build_graph
from .greedy import solve_with_critical_path_greedy
from .models import HorizonStatus, Optimality, SolveResult
from .normalizer import normalize_classes
from .search import solve_horizon_feasibility
from .utils import (
    assignments_from_arrays,
    cap_or_none,
    deadline_after,
    elapsed_ms,
    now,
    total_periods,
)

logger = logging.getLogger(__name__)


def _slice_ms(remaining_ms: float, horizons_left: int, min_slice: float, max_slice: float) -> float:
    """Share of the remaining budget for the next horizon search."""
    share = remaining_ms / max(1, horizons_left)
    return min(remaining_ms, max(min_slice, min(max_slice, share)))


def solve_with_hybrid_exact_first(
    raw_classes: Any,
    timeout_ms: float = DEFAULT_HYBRID_TIMEOUT_MS,
    max_classes_per_period: float | None = None,
    greedy_period_search_time_limit_ms: float = DEFAULT_GREEDY_BOOTSTRAP_TIME_LIMIT_MS,
    min_horizon_slice_ms: float = DEFAULT_MIN_HORIZON_SLICE_MS,
    max_horizon_slice_ms: float = DEFAULT_MAX_HORIZON_SLICE_MS,
    retry_timed_out_horizons: bool = False,
) -> SolveResult:
    """Improve a greedy plan by proving shorter horizons feasible or not.

    The plan is ``optimal_proven`` only if every horizon between the lower
    bound and the returned period count was shown infeasible.
    """
    started_at = now()
    classes = normalize_classes(raw_classes)

    if not classes:
        return SolveResult(
            success=True,
            meta={
                "solver": SOLVER_HYBRID,
                "runtimeMs": elapsed_ms(started_at),
                "optimality": Optimality.OPTIMAL_PROVEN.value,
                "exploredNodes": 0,
                "lowerBound": 0,
                "greedyUpperBound": 0,
                "upperBound": 0,
                "unresolvedHorizons": [],
                "infeasibleHorizons": [],
            },
        )

    cap = cap_or_none(max_classes_per_period)
    graph = build_graph(classes)
    conflict_matrix = build_conflict_matrix(classes)
    lower_bound = graph.lower_bound

    greedy = solve_with_critical_path_greedy(
        classes,
        max_classes_per_period=max_classes_per_period,
        period_search_time_limit_ms=greedy_period_search_time_limit_ms,
    )
    if not greedy.success:
        return SolveResult.failure(
            f"Greedy bootstrap failed: {greedy.error or 'unknown error'}",
            solver=SOLVER_HYBRID,
            runtimeMs=elapsed_ms(started_at),
        )

    incumbent = greedy.assignments
    incumbent_periods = greedy.total_periods
    logger.info(f"Hybrid bounds: lower={lower_bound}, greedy upper={incumbent_periods}")

    infeasible: set[int] = set()
    unresolved: set[int] = set()
    explored_nodes = 0

    def search_horizon(horizon: int, slice_ms: float):
        nonlocal explored_nodes
        outcome = solve_horizon_feasibility(
            classes,
            graph,
            conflict_matrix,
            horizon,
            deadline_after(slice_ms),
            max_classes_per_period=cap,
        )
        explored_nodes += outcome.explored_nodes
        logger.debug(f"Horizon {horizon}: {outcome.status.value} ({outcome.explored_nodes} nodes)")
        return outcome

    horizon = lower_bound
    while horizon < incumbent_periods:
        remaining_ms = timeout_ms - elapsed_ms(started_at)
        if remaining_ms <= 0:
            unresolved.add(horizon)
            break

        outcome = search_horizon(
            horizon,
            _slice_ms(
                remaining_ms,
                incumbent_periods - horizon,
                min_horizon_slice_ms,
                max_horizon_slice_ms,
            ),
        )

        if outcome.status == HorizonStatus.TIMEOUT:
            unresolved.add(horizon)
        elif outcome.found:
            incumbent = assignments_from_arrays(
                classes, outcome.period_by_class, outcome.option_by_class
            )
            incumbent_periods = total_periods(incumbent)
            break
        else:
            infeasible.add(horizon)
        horizon += 1

    if retry_timed_out_horizons:
        pending = sorted(h for h in unresolved if h < incumbent_periods)
        for position, horizon in enumerate(pending):
            if horizon >= incumbent_periods:
                break
            remaining_ms = timeout_ms - elapsed_ms(started_at)
            if remaining_ms <= 0:
                break

            outcome = search_horizon(
                horizon,
                _slice_ms(
                    remaining_ms,
                    len(pending) - position,
                    min_horizon_slice_ms,
                    max_horizon_slice_ms,
                ),
            )
            if outcome.status == HorizonStatus.TIMEOUT:
                continue

            unresolved.discard(horizon)
            if outcome.found:
                incumbent = assignments_from_arrays(
                    classes, outcome.period_by_class, outcome.option_by_class
                )
                incumbent_periods = total_periods(incumbent)
            else:
                infeasible.add(horizon)

    proven = all(h in infeasible for h in range(lower_bound, incumbent_periods))
    open_horizons = sorted(h for h in unresolved if h < incumbent_periods)
    if open_horizons:
        logger.warning(f"Hybrid left horizons unresolved: {open_horizons}")

    return SolveResult(
        success=True,
        assignments=incumbent,
        total_periods=incumbent_periods,
        meta={
            "solver": SOLVER_HYBRID,
            "runtimeMs": elapsed_ms(started_at),
            "lowerBound": lower_bound,
            "greedyUpperBound": greedy.total_periods,
            "upperBound": incumbent_periods,
            "exploredNodes": explored_nodes,
            "optimality": (
                Optimality.OPTIMAL_PROVEN.value if proven else Optimality.FEASIBLE_NOT_PROVEN.value
            ),
            "unresolvedHorizons": open_horizons,
            "infeasibleHorizons": sorted(h for h in infeasible if h < incumbent_periods),
        },
    )
