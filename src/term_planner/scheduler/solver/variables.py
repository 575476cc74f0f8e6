"""CP-SAT variable creation with period-domain reduction."""

from ortools.sat.python import cp_model

from ..graph import DependencyGraph
from ..models import CourseClass


class VariableManager:
    """Creates the x[class, option, period] placement variables.

    A class can only sit in periods between its root depth and the latest
    period that still leaves room for its dependents, so variables are only
    created inside that window.
    """

    def __init__(
        self,
        model: cp_model.CpModel,
        classes: list[CourseClass],
        graph: DependencyGraph,
        horizon: int,
    ):
        self.model = model
        self.classes = classes
        self.graph = graph
        self.horizon = horizon

        # x[(class_index, option_index, period)] = BoolVar
        self.x: dict[tuple[int, int, int], cp_model.IntVar] = {}
        self.by_class: list[list[tuple[int, cp_model.IntVar]]] = [[] for _ in classes]
        self.by_period: dict[int, list[tuple[int, int, cp_model.IntVar]]] = {
            period: [] for period in range(1, horizon + 1)
        }

    def period_window(self, class_index: int) -> range:
        earliest = self.graph.root_depth[class_index]
        latest = self.graph.latest_period(class_index, self.horizon)
        return range(earliest, latest + 1)

    def has_empty_domain(self) -> bool:
        """True when some class has no period window at this horizon."""
        return any(not self.period_window(i) for i in range(len(self.classes)))

    def create_variables(self) -> dict:
        """
        Create placement variables.

        Returns a dictionary containing:
        - 'x': (class, option, period) -> BoolVar
        - 'by_class': per class, (period, var) pairs
        - 'by_period': per period, (class, option, var) triples
        """
        for class_index, cls in enumerate(self.classes):
            window = self.period_window(class_index)
            for option_index in range(cls.option_count):
                for period in window:
                    var = self.model.NewBoolVar(f"x_{class_index}_{option_index}_{period}")
                    self.x[(class_index, option_index, period)] = var
                    self.by_class[class_index].append((period, var))
                    self.by_period[period].append((class_index, option_index, var))

        return {
            "x": self.x,
            "by_class": self.by_class,
            "by_period": self.by_period,
        }
