"""Constraint-aware scheduling entrypoint.

Applies a student's constraints to the curriculum, delegates to the MIP
solver, maps option indices back to the caller's original numbering, and
re-validates the final plan independently before returning it.
"""

import dataclasses
import logging
from collections.abc import Iterable, Mapping
from typing import Any

from ..exceptions import StructuralInputError
from .constants import (
    DEFAULT_GREEDY_BOOTSTRAP_TIME_LIMIT_MS,
    DEFAULT_MIP_TIMEOUT_MS,
    SOLVER_ENTRYPOINT,
    SOLVER_MIP,
)
from .constraints import HardConstraints, SoftConstraints
from .mip import solve_with_mip_min_periods
from .models import (
    CourseClass,
    Optimality,
    Placement,
    SolveResult,
    UserConstraints,
    finite_number,
)
from .normalizer import normalize_classes
from .validation import validate_plan

logger = logging.getLogger(__name__)


@dataclasses.dataclass
class ConstrainedDataset:
    """Curriculum after hard filtering, with per-option solver inputs."""

    classes: list[CourseClass]
    option_penalty_by_class: list[list[float]]
    option_weekly_minutes_by_class: list[list[int]]
    unschedulable: list[dict[str, Any]]
    blocked_days: list[str]


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _record_id(raw: Any) -> int | None:
    if isinstance(raw, CourseClass):
        return raw.id
    if isinstance(raw, Mapping) and _is_int(raw.get("id")):
        return raw["id"]
    return None


def _strip_passed(raw: Any, passed: set[int]) -> Any:
    """Drop passed prerequisites and tag options with their original index."""
    if isinstance(raw, CourseClass):
        return dataclasses.replace(
            raw, prerequisites=tuple(p for p in raw.prerequisites if p not in passed)
        )
    if not isinstance(raw, Mapping):
        return raw

    record = dict(raw)
    prerequisites = raw.get("prerequisites")
    record["prerequisites"] = (
        [p for p in prerequisites if not _is_int(p) or p not in passed]
        if isinstance(prerequisites, (list, tuple))
        else []
    )

    options = raw.get("scheduleOptions")
    if isinstance(options, (list, tuple)):
        tagged = []
        for option_index, option in enumerate(options):
            if isinstance(option, Mapping):
                option = dict(option)
                if option.get("sourceOptionIndex") is None:
                    option["sourceOptionIndex"] = option_index
            tagged.append(option)
        record["scheduleOptions"] = tagged
    return record


def preprocess_curriculum(
    raw_classes: Any, constraints: UserConstraints
) -> tuple[list[Any], list[int]]:
    """Remove passed classes and their prerequisite edges.

    Returns:
        Tuple of (active records, passed class ids)
    """
    if isinstance(raw_classes, (str, bytes, Mapping)) or not isinstance(raw_classes, Iterable):
        raise StructuralInputError("Expected a list of classes")

    passed_ids = list(dict.fromkeys(constraints.passed_class_ids))
    passed = set(passed_ids)

    active = [
        _strip_passed(raw, passed)
        for raw in raw_classes
        if _record_id(raw) not in passed
    ]
    return active, passed_ids


def build_constrained_dataset(
    classes: list[CourseClass], constraints: UserConstraints
) -> ConstrainedDataset:
    """Apply hard filters and compute soft penalties per surviving option."""
    hard = HardConstraints(constraints)
    soft = SoftConstraints(constraints)

    kept_classes: list[CourseClass] = []
    penalties_by_class: list[list[float]] = []
    minutes_by_class: list[list[int]] = []
    unschedulable: list[dict[str, Any]] = []

    for cls in classes:
        allowed = [option for option in cls.options if hard.allows(option)]
        if not allowed:
            unschedulable.append({"classId": cls.id, "className": cls.name})
            continue

        kept_classes.append(dataclasses.replace(cls, options=tuple(allowed)))
        penalties_by_class.append([soft.penalty(option) for option in allowed])
        minutes_by_class.append([option.weekly_minutes for option in allowed])

    return ConstrainedDataset(
        classes=kept_classes,
        option_penalty_by_class=penalties_by_class,
        option_weekly_minutes_by_class=minutes_by_class,
        unschedulable=unschedulable,
        blocked_days=hard.blocked_days,
    )


def _remap_assignments(
    classes: list[CourseClass], assignments: dict[int, Placement]
) -> dict[int, Placement]:
    """Translate filtered option indices back to the caller's numbering."""
    remapped = {}
    for cls in classes:
        placement = assignments.get(cls.id)
        if placement is None:
            continue
        option = cls.options[placement.option_index]
        remapped[cls.id] = Placement(
            period=placement.period,
            option_index=option.source_index,
            filtered_option_index=placement.option_index,
        )
    return remapped


def solve_schedule_with_constraints(
    raw_classes: Any,
    constraints: Mapping[str, Any] | UserConstraints | None = None,
    solver_options: Mapping[str, Any] | None = None,
) -> SolveResult:
    """Plan the remaining curriculum under a student's constraints.

    Args:
        raw_classes: Curriculum records
        constraints: Constraint payload (camelCase keys) or UserConstraints
        solver_options: Optional ``timeoutMs`` and ``greedyPeriodSearchTimeLimitMs``

    Returns:
        SolveResult whose option indices refer to the original option lists

    Raises:
        StructuralInputError: If the active curriculum is malformed
    """
    if not isinstance(constraints, UserConstraints):
        constraints = UserConstraints.from_dict(dict(constraints or {}))
    solver_options = solver_options or {}

    active_records, passed_ids = preprocess_curriculum(raw_classes, constraints)
    active_classes = normalize_classes(active_records)
    applied = constraints.to_dict()

    if not active_classes:
        return SolveResult(
            success=True,
            meta={
                "solver": SOLVER_ENTRYPOINT,
                "optimality": Optimality.OPTIMAL_PROVEN.value,
                "passedClassIds": passed_ids,
                "appliedConstraints": applied,
            },
        )

    dataset = build_constrained_dataset(active_classes, constraints)

    if dataset.unschedulable:
        logger.warning(
            f"{len(dataset.unschedulable)} classes have no options left under hard constraints"
        )
        return SolveResult.failure(
            "Some classes have no valid schedule options under current hard constraints.",
            solver=SOLVER_ENTRYPOINT,
            unschedulableClasses=dataset.unschedulable,
            passedClassIds=passed_ids,
            appliedConstraints=applied,
        )

    timeout_ms = finite_number(solver_options.get("timeoutMs"))
    greedy_limit_ms = finite_number(solver_options.get("greedyPeriodSearchTimeLimitMs"))
    weekly_hours = constraints.max_weekly_hours_per_period

    result = solve_with_mip_min_periods(
        dataset.classes,
        timeout_ms=timeout_ms if timeout_ms is not None else DEFAULT_MIP_TIMEOUT_MS,
        max_classes_per_period=constraints.max_classes_per_period,
        max_weekly_minutes_per_period=(
            None if weekly_hours is None else max(0, round(weekly_hours * 60))
        ),
        option_penalty_by_class=dataset.option_penalty_by_class,
        option_weekly_minutes_by_class=dataset.option_weekly_minutes_by_class,
        greedy_period_search_time_limit_ms=(
            greedy_limit_ms if greedy_limit_ms is not None else DEFAULT_GREEDY_BOOTSTRAP_TIME_LIMIT_MS
        ),
    )
    if not result.success:
        return result

    assignments = _remap_assignments(dataset.classes, result.assignments)
    validation = validate_plan(
        active_classes,
        {
            "assignments": {class_id: p.to_dict() for class_id, p in assignments.items()},
            "totalPeriods": result.total_periods,
        },
    )
    if not validation.valid:
        logger.error(
            f"Plan failed re-validation with {len(validation.violations)} violations"
        )
        return SolveResult.failure(
            "Internal validation failed after applying constraints.",
            solver=SOLVER_ENTRYPOINT,
            validationViolations=validation.to_dict()["violations"],
        )

    return SolveResult(
        success=True,
        assignments=assignments,
        total_periods=result.total_periods,
        meta={
            **result.meta,
            "solver": SOLVER_ENTRYPOINT,
            "delegatedSolver": SOLVER_MIP,
            "passedClassIds": passed_ids,
            "appliedConstraints": applied,
            "forbiddenDaysCanonical": dataset.blocked_days,
        },
    )
