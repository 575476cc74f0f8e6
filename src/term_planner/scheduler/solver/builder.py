"""CP-SAT model construction for one horizon."""

import math

from ortools.sat.python import cp_model

from ..constants import PENALTY_SCALE
from ..graph import DependencyGraph
from ..models import CourseClass
from .variables import VariableManager


class ModelBuilder:
    """Builds the 0/1 placement model deciding whether a horizon is feasible.

    Constraints:
    - each class takes exactly one (option, period)
    - a class sits at least one period after each prerequisite
    - conflicting (class, option) pairs never share a period
    - optional per-period caps on class count and weekly minutes

    When any option carries a penalty, the objective minimizes the scaled
    penalty sum; otherwise the model is a pure feasibility check.
    """

    def __init__(
        self,
        classes: list[CourseClass],
        graph: DependencyGraph,
        conflict_pairs: list[tuple[int, int, int, int]],
        horizon: int,
        max_classes_per_period: float = math.inf,
        max_weekly_minutes_per_period: float = math.inf,
        option_penalty_by_class: list[list[float]] | None = None,
        option_weekly_minutes_by_class: list[list[float]] | None = None,
    ):
        self.classes = classes
        self.graph = graph
        self.conflict_pairs = conflict_pairs
        self.horizon = horizon
        self.max_classes_per_period = max_classes_per_period
        self.max_weekly_minutes_per_period = max_weekly_minutes_per_period
        self.option_penalty_by_class = option_penalty_by_class
        self.option_weekly_minutes_by_class = option_weekly_minutes_by_class

        self.model = cp_model.CpModel()
        self.variables: dict = {}
        self.variable_manager: VariableManager | None = None
        self.constraints_count = 0
        self.trivially_infeasible = False

    @property
    def variables_count(self) -> int:
        return len(self.variables.get("x", {}))

    def build(self) -> cp_model.CpModel:
        """
        Build the complete CP-SAT model.

        Sets ``trivially_infeasible`` and returns an empty model when some
        class has no admissible period at this horizon.
        """
        self.variable_manager = VariableManager(
            self.model, self.classes, self.graph, self.horizon
        )
        if self.variable_manager.has_empty_domain():
            self.trivially_infeasible = True
            return self.model

        self.variables = self.variable_manager.create_variables()

        self._add_single_assignment_constraint()
        self._add_prerequisite_constraints()
        self._add_conflict_constraints()
        self._add_class_count_caps()
        self._add_weekly_minutes_caps()
        self._add_objective()

        return self.model

    def _add_single_assignment_constraint(self) -> None:
        """Each class is placed exactly once."""
        for placements in self.variables["by_class"]:
            self.model.AddExactlyOne(var for _, var in placements)
            self.constraints_count += 1

    def _add_prerequisite_constraints(self) -> None:
        """period(class) - period(prerequisite) >= 1."""
        by_class = self.variables["by_class"]
        for class_index, prereqs in enumerate(self.graph.prereq_indices):
            for prereq_index in prereqs:
                self.model.Add(
                    sum(period * var for period, var in by_class[class_index])
                    - sum(period * var for period, var in by_class[prereq_index])
                    >= 1
                )
                self.constraints_count += 1

    def _add_conflict_constraints(self) -> None:
        x = self.variables["x"]
        for period in range(1, self.horizon + 1):
            for class_a, option_a, class_b, option_b in self.conflict_pairs:
                var_a = x.get((class_a, option_a, period))
                var_b = x.get((class_b, option_b, period))
                if var_a is None or var_b is None:
                    continue
                self.model.AddAtMostOne([var_a, var_b])
                self.constraints_count += 1

    def _add_class_count_caps(self) -> None:
        if not math.isfinite(self.max_classes_per_period):
            return
        cap = math.floor(self.max_classes_per_period)
        for entries in self.variables["by_period"].values():
            self.model.Add(sum(var for _, _, var in entries) <= cap)
            self.constraints_count += 1

    def _add_weekly_minutes_caps(self) -> None:
        if not math.isfinite(self.max_weekly_minutes_per_period):
            return
        cap = math.floor(self.max_weekly_minutes_per_period)
        for entries in self.variables["by_period"].values():
            self.model.Add(
                sum(
                    self._weekly_minutes(class_index, option_index) * var
                    for class_index, option_index, var in entries
                )
                <= cap
            )
            self.constraints_count += 1

    def _weekly_minutes(self, class_index: int, option_index: int) -> int:
        if self.option_weekly_minutes_by_class is not None:
            try:
                return round(self.option_weekly_minutes_by_class[class_index][option_index])
            except IndexError:
                return 0
        return self.classes[class_index].options[option_index].weekly_minutes

    def _scaled_penalty(self, class_index: int, option_index: int) -> int:
        if self.option_penalty_by_class is None:
            return 0
        try:
            penalty = self.option_penalty_by_class[class_index][option_index]
        except IndexError:
            return 0
        return round(penalty * PENALTY_SCALE)

    def _add_objective(self) -> None:
        """Minimize total option penalty, if any option has one."""
        terms = []
        for (class_index, option_index, _), var in self.variables["x"].items():
            coefficient = self._scaled_penalty(class_index, option_index)
            if coefficient:
                terms.append(coefficient * var)
        if terms:
            self.model.Minimize(sum(terms))

    def get_variables(self) -> dict:
        """Get the variables dictionary."""
        return self.variables
