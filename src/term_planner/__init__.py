"""Term Planner - minimum-period academic schedule planning.

This module assigns the classes of a curriculum to consecutive periods
(terms) so that every prerequisite is completed in an earlier period, classes
sharing a period use non-overlapping weekly time slots, and the number of
periods is as small as possible.

Example usage:
    from term_planner import solve_schedule_with_constraints, validate_plan

    result = solve_schedule_with_constraints(
        classes,
        {"passedClassIds": [1, 2], "avoidSaturdays": True},
    )
    print(f"Total periods: {result.total_periods}")

    for period, entries in result.schedule_by_period.items():
        print(period, [entry["classId"] for entry in entries])

    # Export to JSON
    from term_planner.exporters import JSONExporter
    JSONExporter().export(result, "plan.json")
"""

from .exceptions import (
    CycleError,
    DuplicateClassError,
    EmptyScheduleOptionError,
    InvalidTimeError,
    MissingPrerequisiteError,
    PlannerError,
    StructuralInputError,
)
from .exporters import CSVExporter, JSONExporter, get_exporter, load_curriculum
from .scheduler import (
    CourseClass,
    Optimality,
    Placement,
    ScheduleOption,
    SolveResult,
    TimeBlock,
    UserConstraints,
    ValidationResult,
    ViolationType,
    generate_random_curriculum,
    normalize_classes,
    solve_schedule_with_constraints,
    solve_with_critical_path_greedy,
    solve_with_hybrid_exact_first,
    solve_with_mip_min_periods,
    solve_with_oracle_exact,
    validate_plan,
)

__version__ = "0.1.0"

__all__ = [
    # Solvers
    "solve_schedule_with_constraints",
    "solve_with_critical_path_greedy",
    "solve_with_hybrid_exact_first",
    "solve_with_mip_min_periods",
    "solve_with_oracle_exact",
    "validate_plan",
    "normalize_classes",
    "generate_random_curriculum",
    # Models
    "TimeBlock",
    "ScheduleOption",
    "CourseClass",
    "Placement",
    "SolveResult",
    "ValidationResult",
    "ViolationType",
    "UserConstraints",
    "Optimality",
    # Exporters
    "JSONExporter",
    "CSVExporter",
    "get_exporter",
    "load_curriculum",
    # Exceptions
    "PlannerError",
    "StructuralInputError",
    "InvalidTimeError",
    "DuplicateClassError",
    "EmptyScheduleOptionError",
    "MissingPrerequisiteError",
    "CycleError",
]
