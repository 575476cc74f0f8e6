"""Minimum-period solver backed by CP-SAT.

Each candidate horizon is solved as a 0/1 placement model; the first horizon
that admits a plan is the answer. Soft-constraint penalties and per-period
caps are handled inside the model.
"""

import logging
import math
from typing import Any

from .conflicts import build_conflict_matrix
from .constants import (
    DEFAULT_GREEDY_BOOTSTRAP_TIME_LIMIT_MS,
    DEFAULT_MIP_TIMEOUT_MS,
    SOLVER_MIP,
)
from .graph import DependencyGraph, build_graph
from .greedy import solve_with_critical_path_greedy
from .models import CourseClass, HorizonStatus, Optimality, SolveResult
from .normalizer import normalize_classes
from .solver import HorizonCheck, ModelBuilder, SolutionExtractor, get_engine
from .utils import assignments_from_arrays, cap_or_none, elapsed_ms, now

logger = logging.getLogger(__name__)


def _has_penalty(option_penalty_by_class: list[list[float]] | None) -> bool:
    if not option_penalty_by_class:
        return False
    return any(value != 0 for penalties in option_penalty_by_class for value in penalties)


def solve_horizon_with_cp_sat(
    classes: list[CourseClass],
    graph: DependencyGraph,
    conflict_pairs: list[tuple[int, int, int, int]],
    horizon: int,
    time_limit_ms: float,
    max_classes_per_period: float = math.inf,
    max_weekly_minutes_per_period: float = math.inf,
    option_penalty_by_class: list[list[float]] | None = None,
    option_weekly_minutes_by_class: list[list[float]] | None = None,
) -> HorizonCheck:
    """Build and solve the placement model for one horizon."""
    builder = ModelBuilder(
        classes,
        graph,
        conflict_pairs,
        horizon,
        max_classes_per_period=max_classes_per_period,
        max_weekly_minutes_per_period=max_weekly_minutes_per_period,
        option_penalty_by_class=option_penalty_by_class,
        option_weekly_minutes_by_class=option_weekly_minutes_by_class,
    )
    model = builder.build()

    if builder.trivially_infeasible:
        return HorizonCheck(horizon=horizon, status=HorizonStatus.INFEASIBLE)

    solver = get_engine().new_solver(time_limit_ms / 1000)
    status = solver.Solve(model)

    extractor = SolutionExtractor(solver, builder.get_variables(), classes)
    check = HorizonCheck(
        horizon=horizon,
        status=extractor.classify(status),
        runtime_ms=solver.WallTime() * 1000,
        constraints_count=builder.constraints_count,
        variables_count=builder.variables_count,
    )

    if check.status == HorizonStatus.UNKNOWN:
        check.raw_status = solver.StatusName(status).lower()
        return check

    if check.status == HorizonStatus.FOUND:
        arrays = extractor.extract()
        if arrays is None:
            check.status = HorizonStatus.UNKNOWN
            check.raw_status = "missing_assignment"
            return check
        check.period_by_class, check.option_by_class = arrays
        check.objective_value = extractor.objective_value()

    return check


def solve_with_mip_min_periods(
    raw_classes: Any,
    timeout_ms: float = DEFAULT_MIP_TIMEOUT_MS,
    max_classes_per_period: float | None = None,
    max_weekly_minutes_per_period: float | None = None,
    option_penalty_by_class: list[list[float]] | None = None,
    option_weekly_minutes_by_class: list[list[float]] | None = None,
    greedy_period_search_time_limit_ms: float = DEFAULT_GREEDY_BOOTSTRAP_TIME_LIMIT_MS,
) -> SolveResult:
    """Find the fewest periods by solving successive horizons.

    Args:
        raw_classes: Curriculum records
        timeout_ms: Overall budget; each horizon gets whatever remains
        max_classes_per_period: Optional per-period class cap
        max_weekly_minutes_per_period: Optional per-period weekly-minutes cap
        option_penalty_by_class: Per class, per option penalty (minimized)
        option_weekly_minutes_by_class: Per class, per option weekly minutes;
            computed from the blocks when omitted
        greedy_period_search_time_limit_ms: Budget for the greedy bootstrap

    Returns:
        SolveResult with ``horizonChecks`` diagnostics in meta
    """
    started_at = now()
    classes = normalize_classes(raw_classes)

    if not classes:
        return SolveResult(
            success=True,
            meta={
                "solver": SOLVER_MIP,
                "runtimeMs": elapsed_ms(started_at),
                "optimality": Optimality.OPTIMAL_PROVEN.value,
                "lowerBound": 0,
                "upperBound": 0,
                "horizonChecks": [],
            },
        )

    class_cap = cap_or_none(max_classes_per_period)
    minutes_cap = cap_or_none(max_weekly_minutes_per_period)

    graph = build_graph(classes)
    lower_bound = graph.lower_bound

    greedy = solve_with_critical_path_greedy(
        classes,
        max_classes_per_period=max_classes_per_period,
        period_search_time_limit_ms=greedy_period_search_time_limit_ms,
    )
    if not greedy.success:
        return SolveResult.failure(
            f"Greedy bootstrap failed: {greedy.error or 'unknown error'}",
            solver=SOLVER_MIP,
            runtimeMs=elapsed_ms(started_at),
        )

    has_weekly_cap = math.isfinite(minutes_cap)
    has_penalty = _has_penalty(option_penalty_by_class)
    greedy_upper_bound = greedy.total_periods
    upper_bound = len(classes) if has_weekly_cap else greedy_upper_bound

    # Without a weekly cap or penalties the greedy plan is already a valid
    # answer at the upper bound, so that horizon is not re-solved.
    fallback = greedy if not has_weekly_cap and not has_penalty else None
    last_horizon = upper_bound if has_weekly_cap or has_penalty else upper_bound - 1

    conflict_pairs = list(build_conflict_matrix(classes).conflicting_pairs())
    logger.info(
        f"MIP search over horizons {lower_bound}..{last_horizon} "
        f"(greedy upper bound {greedy_upper_bound})"
    )

    horizon_checks: list[dict] = []

    def bounds_meta() -> dict:
        return {
            "solver": SOLVER_MIP,
            "runtimeMs": elapsed_ms(started_at),
            "lowerBound": lower_bound,
            "upperBound": upper_bound,
            "greedyUpperBound": greedy_upper_bound,
            "horizonChecks": horizon_checks,
        }

    def unresolved(horizon: int, error: str) -> SolveResult:
        if fallback is None:
            return SolveResult.failure(error, **bounds_meta(), unresolvedHorizons=[horizon])
        return SolveResult(
            success=True,
            assignments=fallback.assignments,
            total_periods=fallback.total_periods,
            meta={
                **bounds_meta(),
                "optimality": Optimality.FEASIBLE_NOT_PROVEN.value,
                "unresolvedHorizons": [horizon],
            },
        )

    for horizon in range(lower_bound, last_horizon + 1):
        remaining_ms = timeout_ms - elapsed_ms(started_at)
        if remaining_ms <= 0:
            logger.warning(f"MIP budget exhausted before horizon {horizon}")
            return unresolved(horizon, "MIP solver timed out before finding a feasible schedule")

        check = solve_horizon_with_cp_sat(
            classes,
            graph,
            conflict_pairs,
            horizon,
            remaining_ms,
            max_classes_per_period=class_cap,
            max_weekly_minutes_per_period=minutes_cap,
            option_penalty_by_class=option_penalty_by_class,
            option_weekly_minutes_by_class=option_weekly_minutes_by_class,
        )
        horizon_checks.append(check.to_dict())
        logger.info(f"Horizon {horizon}: {check.status.value}")

        if check.status == HorizonStatus.FOUND:
            meta = {**bounds_meta(), "optimality": Optimality.OPTIMAL_PROVEN.value}
            if has_penalty:
                meta["objectiveValue"] = check.objective_value
            return SolveResult(
                success=True,
                assignments=assignments_from_arrays(
                    classes, check.period_by_class, check.option_by_class
                ),
                total_periods=horizon,
                meta=meta,
            )

        if check.status == HorizonStatus.UNKNOWN:
            logger.warning(f"CP-SAT returned {check.raw_status} at horizon {horizon}")
            return unresolved(horizon, f"MIP solver returned unknown status at horizon {horizon}")

    if fallback is None:
        logger.warning("No horizon admits a plan under the given caps")
        return SolveResult.failure("No feasible schedule satisfies the constraints", **bounds_meta())

    return SolveResult(
        success=True,
        assignments=fallback.assignments,
        total_periods=fallback.total_periods,
        meta={**bounds_meta(), "optimality": Optimality.OPTIMAL_PROVEN.value},
    )
