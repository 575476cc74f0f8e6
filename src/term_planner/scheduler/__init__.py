"""Period planning algorithms.

This package assigns classes to discrete periods under a prerequisite DAG
and mutually exclusive weekly time-slot options, minimizing the number of
periods used.

Main functions:
- solve_with_critical_path_greedy: Fast heuristic, always feasible
- solve_with_hybrid_exact_first: Greedy incumbent improved by exact search
- solve_with_mip_min_periods: CP-SAT horizon search with caps and penalties
- solve_with_oracle_exact: Exhaustive reference solver for small inputs
- solve_schedule_with_constraints: Applies user constraints, then plans
- validate_plan: Independent plan checker

Usage:
    from term_planner.scheduler import solve_schedule_with_constraints

    result = solve_schedule_with_constraints(classes, {"forbiddenDays": ["Viernes"]})
    print(result.total_periods)
"""

from .config import SolverSettings, load_settings
from .conflicts import ConflictMatrix, build_conflict_matrix
from .constants import (
    DEFAULT_HYBRID_TIMEOUT_MS,
    DEFAULT_MIP_TIMEOUT_MS,
    DEFAULT_ORACLE_TIMEOUT_MS,
    DEFAULT_PENALTY_WEIGHTS,
    SATURDAY_ALIASES,
)
from .entrypoint import solve_schedule_with_constraints
from .generator import generate_random_curriculum
from .graph import DependencyGraph, build_graph
from .greedy import solve_with_critical_path_greedy
from .hybrid import solve_with_hybrid_exact_first
from .mip import solve_with_mip_min_periods
from .models import (
    CourseClass,
    HorizonStatus,
    Optimality,
    PenaltyWeights,
    Placement,
    ScheduleOption,
    SolveResult,
    TimeBlock,
    UserConstraints,
    ValidationResult,
    Violation,
    ViolationType,
)
from .normalizer import normalize_classes
from .oracle import solve_with_oracle_exact
from .validation import validate_plan

__all__ = [
    # Solvers
    "solve_with_critical_path_greedy",
    "solve_with_hybrid_exact_first",
    "solve_with_mip_min_periods",
    "solve_with_oracle_exact",
    "solve_schedule_with_constraints",
    # Model preparation
    "normalize_classes",
    "build_graph",
    "DependencyGraph",
    "build_conflict_matrix",
    "ConflictMatrix",
    # Validation
    "validate_plan",
    # Generator
    "generate_random_curriculum",
    # Configuration
    "SolverSettings",
    "load_settings",
    "DEFAULT_HYBRID_TIMEOUT_MS",
    "DEFAULT_MIP_TIMEOUT_MS",
    "DEFAULT_ORACLE_TIMEOUT_MS",
    "DEFAULT_PENALTY_WEIGHTS",
    "SATURDAY_ALIASES",
    # Models
    "TimeBlock",
    "ScheduleOption",
    "CourseClass",
    "Placement",
    "SolveResult",
    "Violation",
    "ViolationType",
    "ValidationResult",
    "UserConstraints",
    "PenaltyWeights",
    "Optimality",
    "HorizonStatus",
]
