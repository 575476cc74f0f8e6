"""Independent plan validation.

The validator re-normalizes the curriculum and rebuilds the conflict matrix
on its own, so it never trusts any solver's internal state. Business-rule
problems are collected as violations; only structurally broken curriculum
input raises.
"""

from collections.abc import Mapping
from typing import Any

from .conflicts import build_conflict_matrix
from .models import Placement, SolveResult, ValidationResult, Violation, ViolationType
from .normalizer import normalize_classes


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _parse_class_id(key: Any) -> int | None:
    if _is_int(key):
        return key
    if isinstance(key, str):
        try:
            return int(key.strip())
        except ValueError:
            return None
    return None


def _plan_parts(plan: Any) -> tuple[Mapping, Any]:
    """Extract (assignments, total_periods) from a result or a mapping."""
    if isinstance(plan, SolveResult):
        return plan.assignments, plan.total_periods
    if isinstance(plan, Mapping):
        assignments = plan.get("assignments")
        return (
            assignments if isinstance(assignments, Mapping) else {},
            plan.get("totalPeriods"),
        )
    return {}, None


def _read_assignment(value: Any) -> tuple[Any, Any] | None:
    if isinstance(value, Placement):
        return value.period, value.option_index
    if isinstance(value, Mapping):
        return value.get("period"), value.get("optionIndex")
    return None


def validate_plan(
    raw_classes: Any,
    plan: Any,
    require_all_classes: bool = True,
) -> ValidationResult:
    """Check a candidate plan against the curriculum.

    Args:
        raw_classes: Curriculum records (raw dicts or CourseClass)
        plan: SolveResult or mapping with ``assignments`` and optional ``totalPeriods``
        require_all_classes: Report classes missing from the plan

    Returns:
        ValidationResult with every violation found
    """
    classes = normalize_classes(raw_classes, strict_prerequisites=False)
    conflict_matrix = build_conflict_matrix(classes)
    index_by_id = {cls.id: index for index, cls in enumerate(classes)}

    violations: list[Violation] = []
    period_by_class: list[int | None] = [None] * len(classes)
    option_by_class: list[int | None] = [None] * len(classes)

    assignments, declared_total = _plan_parts(plan)

    for key, value in assignments.items():
        class_id = _parse_class_id(key)
        if class_id is None or class_id not in index_by_id:
            violations.append(Violation(
                ViolationType.UNKNOWN_CLASS,
                class_id=class_id,
                details={} if class_id is not None else {"rawClassId": str(key)},
            ))
            continue

        parsed = _read_assignment(value)
        if parsed is None:
            violations.append(Violation(ViolationType.INVALID_ASSIGNMENT, class_id=class_id))
            continue

        index = index_by_id[class_id]
        period, option_index = parsed

        if not _is_int(period) or period < 1:
            violations.append(Violation(
                ViolationType.INVALID_PERIOD, class_id=class_id, details={"period": period}
            ))
            continue

        if not _is_int(option_index) or not 0 <= option_index < classes[index].option_count:
            violations.append(Violation(
                ViolationType.INVALID_OPTION,
                class_id=class_id,
                details={"optionIndex": option_index},
            ))
            continue

        if period_by_class[index] is not None:
            violations.append(Violation(ViolationType.DUPLICATE_ASSIGNMENT, class_id=class_id))
            continue

        period_by_class[index] = period
        option_by_class[index] = option_index

    if require_all_classes:
        for index, cls in enumerate(classes):
            if period_by_class[index] is None:
                violations.append(Violation(ViolationType.MISSING_CLASS, class_id=cls.id))

    for index, cls in enumerate(classes):
        period = period_by_class[index]
        if period is None:
            continue

        for prereq_id in cls.prerequisites:
            prereq_index = index_by_id.get(prereq_id)
            if prereq_index is None:
                violations.append(Violation(
                    ViolationType.UNKNOWN_PREREQUISITE,
                    class_id=cls.id,
                    details={"prerequisiteId": prereq_id},
                ))
                continue

            prereq_period = period_by_class[prereq_index]
            if prereq_period is None:
                violations.append(Violation(
                    ViolationType.MISSING_PREREQUISITE_ASSIGNMENT,
                    class_id=cls.id,
                    details={"prerequisiteId": prereq_id},
                ))
            elif prereq_period >= period:
                violations.append(Violation(
                    ViolationType.PREREQUISITE_ORDER,
                    class_id=cls.id,
                    details={
                        "prerequisiteId": prereq_id,
                        "classPeriod": period,
                        "prerequisitePeriod": prereq_period,
                    },
                ))

    by_period: dict[int, list[int]] = {}
    for index, period in enumerate(period_by_class):
        if period is not None:
            by_period.setdefault(period, []).append(index)

    for period, indices in sorted(by_period.items()):
        for i, class_a in enumerate(indices):
            option_a = option_by_class[class_a]
            for class_b in indices[i + 1:]:
                option_b = option_by_class[class_b]
                if conflict_matrix.conflicts(class_a, option_a, class_b, option_b):
                    violations.append(Violation(
                        ViolationType.TIME_CONFLICT,
                        details={
                            "period": period,
                            "classAId": classes[class_a].id,
                            "classBId": classes[class_b].id,
                            "optionA": option_a,
                            "optionB": option_b,
                        },
                    ))

    if _is_int(declared_total):
        max_period = max((p for p in period_by_class if p is not None), default=0)
        if declared_total != max_period:
            violations.append(Violation(
                ViolationType.PERIOD_COUNT_MISMATCH,
                details={"expected": max_period, "actual": declared_total},
            ))

    return ValidationResult(violations=violations)
