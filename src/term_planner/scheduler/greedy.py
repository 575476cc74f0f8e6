"""Critical-path greedy solver.

Fills periods one at a time. For each period, a bounded depth-first search
picks the largest conflict-free subset of eligible classes, preferring
classes with the longest remaining prerequisite chain.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from .conflicts import ConflictMatrix, build_conflict_matrix
from .constants import DEFAULT_PERIOD_SEARCH_TIME_LIMIT_MS, SOLVER_GREEDY
from .graph import DependencyGraph, build_graph
from .models import CourseClass, Optimality, SolveResult
from .normalizer import normalize_classes
from .utils import (
    assignments_from_arrays,
    cap_or_none,
    deadline_after,
    elapsed_ms,
    now,
    total_periods,
)

logger = logging.getLogger(__name__)


@dataclass
class PeriodPick:
    """Subset chosen for one period: (class_index, option_index) pairs."""

    selected: list[tuple[int, int]] = field(default_factory=list)
    timed_out: bool = False


def can_place(
    class_index: int,
    option_index: int,
    selected: list[tuple[int, int]],
    conflict_matrix: ConflictMatrix,
) -> bool:
    """Check a (class, option) pair against everything already selected."""
    for other_class, other_option in selected:
        if conflict_matrix.conflicts(class_index, option_index, other_class, other_option):
            return False
    return True


def _first_fit(
    order: list[int],
    classes: list[CourseClass],
    conflict_matrix: ConflictMatrix,
    max_classes: float,
) -> list[tuple[int, int]]:
    selected: list[tuple[int, int]] = []
    for class_index in order:
        if len(selected) >= max_classes:
            break
        for option_index in range(classes[class_index].option_count):
            if can_place(class_index, option_index, selected, conflict_matrix):
                selected.append((class_index, option_index))
                break
    return selected


def priority_order(
    eligible: list[int], classes: list[CourseClass], graph: DependencyGraph
) -> list[int]:
    """Longest tail first, then fewest options."""
    return sorted(
        eligible,
        key=lambda i: (-graph.tail_depth[i], classes[i].option_count),
    )


def pick_best_period_subset(
    eligible: list[int],
    classes: list[CourseClass],
    conflict_matrix: ConflictMatrix,
    graph: DependencyGraph,
    max_classes_per_period: float,
    time_limit_ms: float,
) -> PeriodPick:
    """Search for the best conflict-free subset of eligible classes.

    Subsets are ranked by size, then by summed tail depth. A branch is
    abandoned once even taking every remaining class could not beat the best
    size found. When the time limit runs out, first-fit insertion in priority
    order is used instead.
    """
    order = priority_order(eligible, classes, graph)
    deadline = deadline_after(time_limit_ms)

    best_count = -1
    best_score = -1
    best_selected: list[tuple[int, int]] = []
    selected: list[tuple[int, int]] = []
    timed_out = False

    def record_best() -> None:
        nonlocal best_count, best_score, best_selected
        score = sum(graph.tail_depth[class_index] for class_index, _ in selected)
        if len(selected) > best_count or (len(selected) == best_count and score > best_score):
            best_count = len(selected)
            best_score = score
            best_selected = list(selected)

    def dfs(position: int) -> None:
        nonlocal timed_out
        if now() > deadline:
            timed_out = True
            return

        if len(selected) >= max_classes_per_period or position >= len(order):
            record_best()
            return

        if len(selected) + (len(order) - position) < best_count:
            return

        class_index = order[position]
        for option_index in range(classes[class_index].option_count):
            if not can_place(class_index, option_index, selected, conflict_matrix):
                continue
            selected.append((class_index, option_index))
            dfs(position + 1)
            selected.pop()
            if timed_out:
                return

        dfs(position + 1)

    dfs(0)

    if timed_out:
        return PeriodPick(
            selected=_first_fit(order, classes, conflict_matrix, max_classes_per_period),
            timed_out=True,
        )
    return PeriodPick(selected=best_selected)


def solve_with_critical_path_greedy(
    raw_classes: Any,
    max_classes_per_period: float | None = None,
    period_search_time_limit_ms: float = DEFAULT_PERIOD_SEARCH_TIME_LIMIT_MS,
) -> SolveResult:
    """Build a plan period by period.

    Args:
        raw_classes: Curriculum records
        max_classes_per_period: Optional cap on classes per period
        period_search_time_limit_ms: Subset search budget for each period

    Returns:
        SolveResult; always feasible for acyclic input
    """
    started_at = now()
    cap = cap_or_none(max_classes_per_period)

    classes = normalize_classes(raw_classes)
    graph = build_graph(classes)
    conflict_matrix = build_conflict_matrix(classes)

    period_by_class = [0] * len(classes)
    option_by_class = [-1] * len(classes)
    remaining = list(range(len(classes)))
    completed: set[int] = set()

    period = 1
    timed_out_periods = 0

    while remaining:
        eligible = [
            class_index
            for class_index in remaining
            if all(p in completed for p in graph.prereq_indices[class_index])
        ]

        if not eligible:
            logger.error("No eligible class found while building greedy schedule")
            return SolveResult.failure(
                "No eligible class found. The prerequisite graph may be invalid.",
                solver=SOLVER_GREEDY,
            )

        pick = pick_best_period_subset(
            eligible, classes, conflict_matrix, graph, cap, period_search_time_limit_ms
        )
        if pick.timed_out:
            timed_out_periods += 1
            logger.debug(f"Period {period} subset search timed out, using first-fit")

        selected = pick.selected or [(eligible[0], 0)]
        for class_index, option_index in selected:
            period_by_class[class_index] = period
            option_by_class[class_index] = option_index
            completed.add(class_index)

        chosen = {class_index for class_index, _ in selected}
        remaining = [i for i in remaining if i not in chosen]

        period += 1
        if period > len(classes) + 1:
            logger.error("Greedy schedule grew beyond one period per class")
            return SolveResult.failure(
                "Unexpected period growth while building schedule",
                solver=SOLVER_GREEDY,
            )

    assignments = assignments_from_arrays(classes, period_by_class, option_by_class)
    total = total_periods(assignments)
    lower_bound = graph.lower_bound

    return SolveResult(
        success=True,
        assignments=assignments,
        total_periods=total,
        meta={
            "solver": SOLVER_GREEDY,
            "runtimeMs": elapsed_ms(started_at),
            "timedOutPeriods": timed_out_periods,
            "lowerBound": lower_bound,
            "optimality": (
                Optimality.OPTIMAL_PROVEN.value
                if total == lower_bound
                else Optimality.FEASIBLE_NOT_PROVEN.value
            ),
        },
    )
