"""Data models for the period planning system."""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..normalization import (
    canonicalize_day,
    normalize_mode,
    normalize_string_list,
    normalize_time_preference,
)
from .constants import DEFAULT_PENALTY_WEIGHTS


class Optimality(str, Enum):
    """Certificate attached to a successful plan."""

    OPTIMAL_PROVEN = "optimal_proven"
    FEASIBLE_NOT_PROVEN = "feasible_not_proven"


class ViolationType(str, Enum):
    """Kinds of problems the plan validator reports."""

    UNKNOWN_CLASS = "UNKNOWN_CLASS"
    INVALID_ASSIGNMENT = "INVALID_ASSIGNMENT"
    INVALID_PERIOD = "INVALID_PERIOD"
    INVALID_OPTION = "INVALID_OPTION"
    DUPLICATE_ASSIGNMENT = "DUPLICATE_ASSIGNMENT"
    MISSING_CLASS = "MISSING_CLASS"
    UNKNOWN_PREREQUISITE = "UNKNOWN_PREREQUISITE"
    MISSING_PREREQUISITE_ASSIGNMENT = "MISSING_PREREQUISITE_ASSIGNMENT"
    PREREQUISITE_ORDER = "PREREQUISITE_ORDER"
    TIME_CONFLICT = "TIME_CONFLICT"
    PERIOD_COUNT_MISMATCH = "PERIOD_COUNT_MISMATCH"


class HorizonStatus(str, Enum):
    """Outcome of a single horizon feasibility check."""

    FOUND = "found"
    INFEASIBLE = "infeasible"
    TIMEOUT = "timeout"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class TimeBlock:
    """A weekly meeting: canonical day plus [start, end) in minutes."""

    day: str
    start: int
    end: int
    label: str = ""

    @property
    def minutes(self) -> int:
        return self.end - self.start

    def overlaps(self, other: "TimeBlock") -> bool:
        """Same canonical day and intersecting open intervals."""
        if self.day != other.day:
            return False
        return self.start < other.end and other.start < self.end


@dataclass(frozen=True)
class ScheduleOption:
    """One selectable weekly timetable for a class.

    ``source_index`` is the option's position in the caller's original list,
    kept stable across filtering so solver indices can be mapped back.
    """

    blocks: tuple[TimeBlock, ...]
    source_index: int

    @property
    def weekly_minutes(self) -> int:
        return sum(block.minutes for block in self.blocks)

    def touches_day(self, canonical_days: set[str] | frozenset[str]) -> bool:
        return any(block.day in canonical_days for block in self.blocks)


@dataclass(frozen=True)
class CourseClass:
    """A class prepared for scheduling."""

    id: int
    name: str
    prerequisites: tuple[int, ...]
    options: tuple[ScheduleOption, ...]

    @property
    def option_count(self) -> int:
        return len(self.options)


@dataclass(frozen=True)
class Placement:
    """Where a class lands: a period and the chosen option index."""

    period: int
    option_index: int
    filtered_option_index: int | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "period": self.period,
            "optionIndex": self.option_index,
        }
        if self.filtered_option_index is not None:
            data["filteredOptionIndex"] = self.filtered_option_index
        return data


@dataclass
class SolveResult:
    """Result of a solve call.

    Failures are returned, never raised: ``success`` is False and ``error``
    carries the reason, with diagnostics in ``meta``.
    """

    success: bool
    assignments: dict[int, Placement] = field(default_factory=dict)
    total_periods: int = 0
    error: str | None = None
    meta: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def failure(cls, error: str, **meta: Any) -> "SolveResult":
        return cls(success=False, error=error, meta=meta)

    @property
    def optimality(self) -> str | None:
        return self.meta.get("optimality")

    @property
    def schedule_by_period(self) -> dict[int, list[dict[str, Any]]]:
        """Group assignments by period, sorted by class id."""
        by_period: dict[int, list[dict[str, Any]]] = {}
        for class_id in sorted(self.assignments):
            placement = self.assignments[class_id]
            by_period.setdefault(placement.period, []).append(
                {"classId": class_id, **placement.to_dict()}
            )
        return dict(sorted(by_period.items()))

    def to_dict(self) -> dict[str, Any]:
        """Convert to the wire shape consumed by the response layer."""
        if not self.success:
            return {"success": False, "error": self.error, "meta": self.meta}

        return {
            "success": True,
            "assignments": {
                str(class_id): placement.to_dict()
                for class_id, placement in sorted(self.assignments.items())
            },
            "scheduleByPeriod": {
                str(period): entries for period, entries in self.schedule_by_period.items()
            },
            "totalPeriods": self.total_periods,
            "meta": self.meta,
        }


@dataclass
class Violation:
    """A single problem found by the plan validator."""

    type: ViolationType
    class_id: int | None = None
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": self.type.value}
        if self.class_id is not None:
            data["classId"] = self.class_id
        data.update(self.details)
        return data


@dataclass
class ValidationResult:
    """Outcome of validating a plan."""

    violations: list[Violation] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.violations

    def of_type(self, violation_type: ViolationType) -> list[Violation]:
        return [v for v in self.violations if v.type == violation_type]

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": self.valid,
            "violations": [v.to_dict() for v in self.violations],
        }


def finite_number(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return value


@dataclass
class PenaltyWeights:
    """Weights for soft constraint penalties."""

    time_preference: float = DEFAULT_PENALTY_WEIGHTS["timePreference"]
    saturday: float = DEFAULT_PENALTY_WEIGHTS["saturday"]

    @classmethod
    def from_dict(cls, data: Any) -> "PenaltyWeights":
        if not isinstance(data, dict):
            return cls()
        time_preference = finite_number(data.get("timePreference"))
        saturday = finite_number(data.get("saturday"))
        return cls(
            time_preference=(
                time_preference
                if time_preference is not None
                else DEFAULT_PENALTY_WEIGHTS["timePreference"]
            ),
            saturday=saturday if saturday is not None else DEFAULT_PENALTY_WEIGHTS["saturday"],
        )

    def to_dict(self) -> dict[str, float]:
        return {"timePreference": self.time_preference, "saturday": self.saturday}


@dataclass
class UserConstraints:
    """Per-call user constraints, normalized from the request payload."""

    passed_class_ids: list[int] = field(default_factory=list)
    forbidden_days: list[str] = field(default_factory=list)
    keep_free_days: list[str] = field(default_factory=list)
    avoid_saturdays: bool = False
    avoid_saturdays_mode: str = "soft"
    time_preference: str | None = None
    time_preference_mode: str = "soft"
    max_weekly_hours_per_period: float | None = None
    max_classes_per_period: float | None = None
    penalty_weights: PenaltyWeights = field(default_factory=PenaltyWeights)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "UserConstraints":
        """Create constraints from a request dictionary.

        Unknown or malformed values fall back to their neutral defaults.
        """
        data = data or {}
        passed = data.get("passedClassIds")
        return cls(
            passed_class_ids=(
                [i for i in passed if isinstance(i, int) and not isinstance(i, bool)]
                if isinstance(passed, (list, tuple))
                else []
            ),
            forbidden_days=normalize_string_list(data.get("forbiddenDays")),
            keep_free_days=normalize_string_list(data.get("keepFreeDays")),
            avoid_saturdays=bool(data.get("avoidSaturdays", False)),
            avoid_saturdays_mode=normalize_mode(data.get("avoidSaturdaysMode")),
            time_preference=normalize_time_preference(data.get("timePreference")),
            time_preference_mode=normalize_mode(data.get("timePreferenceMode")),
            max_weekly_hours_per_period=finite_number(data.get("maxWeeklyHoursPerPeriod")),
            max_classes_per_period=finite_number(data.get("maxClassesPerPeriod")),
            penalty_weights=PenaltyWeights.from_dict(data.get("penaltyWeights")),
        )

    @property
    def hard_saturday(self) -> bool:
        return self.avoid_saturdays and self.avoid_saturdays_mode == "hard"

    @property
    def soft_saturday(self) -> bool:
        return self.avoid_saturdays and self.avoid_saturdays_mode == "soft"

    def blocked_days(self) -> set[str]:
        """Canonical days no selected option may touch."""
        days = {canonicalize_day(d) for d in self.forbidden_days}
        days.update(canonicalize_day(d) for d in self.keep_free_days)
        return days

    def to_dict(self) -> dict[str, Any]:
        return {
            "passedClassIds": list(self.passed_class_ids),
            "forbiddenDays": list(self.forbidden_days),
            "keepFreeDays": list(self.keep_free_days),
            "avoidSaturdays": self.avoid_saturdays,
            "avoidSaturdaysMode": self.avoid_saturdays_mode,
            "timePreference": self.time_preference,
            "timePreferenceMode": self.time_preference_mode,
            "maxWeeklyHoursPerPeriod": self.max_weekly_hours_per_period,
            "maxClassesPerPeriod": self.max_classes_per_period,
            "penaltyWeights": self.penalty_weights.to_dict(),
        }
