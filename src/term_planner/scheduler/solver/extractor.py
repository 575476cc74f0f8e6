"""Solution extraction from a solved CP-SAT model."""

from dataclasses import dataclass, field

from ortools.sat.python import cp_model

from ..constants import PENALTY_SCALE
from ..models import CourseClass, HorizonStatus


@dataclass
class HorizonCheck:
    """Diagnostics for one solved horizon, reported in result metadata."""

    horizon: int
    status: HorizonStatus
    runtime_ms: float = 0.0
    constraints_count: int = 0
    variables_count: int = 0
    raw_status: str | None = None
    objective_value: float | None = None
    period_by_class: list[int] = field(default_factory=list)
    option_by_class: list[int] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "horizon": self.horizon,
            "status": self.status.value,
            "runtimeMs": self.runtime_ms,
            "constraintsCount": self.constraints_count,
            "variablesCount": self.variables_count,
            "rawStatus": self.raw_status,
        }


class SolutionExtractor:
    """Reads placements back out of a solved model."""

    def __init__(
        self,
        solver: cp_model.CpSolver,
        variables: dict,
        classes: list[CourseClass],
    ):
        self.solver = solver
        self.variables = variables
        self.classes = classes

    def classify(self, status: int) -> HorizonStatus:
        """Map a CP-SAT status onto a horizon outcome."""
        if status in (cp_model.OPTIMAL, cp_model.FEASIBLE):
            return HorizonStatus.FOUND
        if status == cp_model.INFEASIBLE:
            return HorizonStatus.INFEASIBLE
        return HorizonStatus.UNKNOWN

    def extract(self) -> tuple[list[int], list[int]] | None:
        """
        Extract index-aligned period and option arrays.

        Returns None if some class has no selected variable.
        """
        period_by_class = [0] * len(self.classes)
        option_by_class = [-1] * len(self.classes)

        for (class_index, option_index, period), var in self.variables["x"].items():
            if self.solver.Value(var) == 1:
                period_by_class[class_index] = period
                option_by_class[class_index] = option_index

        if any(option < 0 for option in option_by_class):
            return None
        return period_by_class, option_by_class

    def objective_value(self) -> float:
        """Objective in unscaled penalty units."""
        return self.solver.ObjectiveValue() / PENALTY_SCALE
