"""Utility functions shared by the solvers."""

import time

from .models import CourseClass, Placement


def now() -> float:
    """Monotonic clock in seconds, used for all deadlines."""
    return time.perf_counter()


def deadline_after(milliseconds: float) -> float:
    """Absolute deadline ``milliseconds`` from now."""
    return now() + milliseconds / 1000


def elapsed_ms(started_at: float) -> float:
    return (now() - started_at) * 1000


def assignments_from_arrays(
    classes: list[CourseClass],
    period_by_class: list[int],
    option_by_class: list[int],
) -> dict[int, Placement]:
    """Convert index-aligned period/option arrays into an id-keyed plan."""
    return {
        cls.id: Placement(period=period_by_class[i], option_index=option_by_class[i])
        for i, cls in enumerate(classes)
    }


def total_periods(assignments: dict[int, Placement]) -> int:
    """Highest period used, 0 for an empty plan."""
    return max((p.period for p in assignments.values()), default=0)


def cap_or_none(value: float | None) -> float:
    """Turn an optional cap into a comparable bound."""
    return float("inf") if value is None else value
