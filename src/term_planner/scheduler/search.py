"""Exact feasibility search for a fixed number of periods.

Depth-first search with most-constrained-variable ordering: at every node the
ready class with the fewest legal (period, option) placements is branched on
next. Shared by the hybrid and oracle solvers.
"""

from dataclasses import dataclass, field

from .conflicts import ConflictMatrix
from .graph import DependencyGraph
from .models import CourseClass, HorizonStatus
from .utils import now


@dataclass
class HorizonOutcome:
    """Result of probing one horizon."""

    status: HorizonStatus
    explored_nodes: int = 0
    period_by_class: list[int] = field(default_factory=list)
    option_by_class: list[int] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.status == HorizonStatus.FOUND


class HorizonSearch:
    """Backtracking search state for one horizon."""

    def __init__(
        self,
        classes: list[CourseClass],
        graph: DependencyGraph,
        conflict_matrix: ConflictMatrix,
        horizon: int,
        deadline: float,
        max_classes_per_period: float = float("inf"),
        prefer_critical: bool = True,
    ):
        self.classes = classes
        self.graph = graph
        self.conflict_matrix = conflict_matrix
        self.horizon = horizon
        self.deadline = deadline
        self.max_classes_per_period = max_classes_per_period
        self.prefer_critical = prefer_critical

        count = len(classes)
        self.latest = [graph.latest_period(i, horizon) for i in range(count)]
        self.period_by_class = [0] * count
        self.option_by_class = [-1] * count
        self.assigned = [False] * count
        self.unresolved_prereqs = [len(p) for p in graph.prereq_indices]
        self.by_period: list[list[tuple[int, int]]] = [[] for _ in range(horizon + 1)]
        self.explored_nodes = 0

    def placements_for(self, class_index: int) -> list[tuple[int, int]]:
        """Legal (period, option) pairs for a ready class, ordered by period."""
        earliest = 1
        for prereq_index in self.graph.prereq_indices[class_index]:
            earliest = max(earliest, self.period_by_class[prereq_index] + 1)

        placements = []
        for period in range(earliest, self.latest[class_index] + 1):
            occupants = self.by_period[period]
            if len(occupants) >= self.max_classes_per_period:
                continue
            for option_index in range(self.classes[class_index].option_count):
                if not any(
                    self.conflict_matrix.conflicts(class_index, option_index, other, other_option)
                    for other, other_option in occupants
                ):
                    placements.append((period, option_index))
        return placements

    def _prefer(self, candidate: int, incumbent: int) -> bool:
        """Tie-break between two classes with the same number of placements."""
        tail = self.graph.tail_depth
        if tail[candidate] != tail[incumbent]:
            return tail[candidate] > tail[incumbent]
        return self.classes[candidate].option_count < self.classes[incumbent].option_count

    def pick_next_class(self) -> tuple[int, list[tuple[int, int]]]:
        """Choose the ready class to branch on.

        Returns ``(-1, [])`` when nothing is ready. A class with no placements
        is returned immediately so the caller can backtrack.
        """
        best_class = -1
        best_placements: list[tuple[int, int]] = []

        for class_index in range(len(self.classes)):
            if self.assigned[class_index] or self.unresolved_prereqs[class_index]:
                continue

            placements = self.placements_for(class_index)
            if not placements:
                return class_index, placements

            if best_class == -1 or len(placements) < len(best_placements):
                best_class, best_placements = class_index, placements
                if not self.prefer_critical and len(best_placements) == 1:
                    break
            elif (
                self.prefer_critical
                and len(placements) == len(best_placements)
                and self._prefer(class_index, best_class)
            ):
                best_class, best_placements = class_index, placements

        return best_class, best_placements

    def _assign(self, class_index: int, period: int, option_index: int) -> None:
        self.assigned[class_index] = True
        self.period_by_class[class_index] = period
        self.option_by_class[class_index] = option_index
        self.by_period[period].append((class_index, option_index))
        for dependent in self.graph.dependent_indices[class_index]:
            self.unresolved_prereqs[dependent] -= 1

    def _unassign(self, class_index: int, period: int) -> None:
        for dependent in self.graph.dependent_indices[class_index]:
            self.unresolved_prereqs[dependent] += 1
        self.by_period[period].pop()
        self.period_by_class[class_index] = 0
        self.option_by_class[class_index] = -1
        self.assigned[class_index] = False

    def dfs(self, assigned_count: int) -> HorizonStatus:
        if now() > self.deadline:
            return HorizonStatus.TIMEOUT

        if assigned_count == len(self.classes):
            return HorizonStatus.FOUND

        class_index, placements = self.pick_next_class()
        if class_index == -1 or not placements:
            return HorizonStatus.INFEASIBLE

        for period, option_index in placements:
            self.explored_nodes += 1
            self._assign(class_index, period, option_index)

            status = self.dfs(assigned_count + 1)
            if status in (HorizonStatus.FOUND, HorizonStatus.TIMEOUT):
                return status

            self._unassign(class_index, period)

        return HorizonStatus.INFEASIBLE

    def run(self) -> HorizonOutcome:
        if any(latest < 1 for latest in self.latest):
            return HorizonOutcome(status=HorizonStatus.INFEASIBLE)

        status = self.dfs(0)
        return HorizonOutcome(
            status=status,
            explored_nodes=self.explored_nodes,
            period_by_class=list(self.period_by_class),
            option_by_class=list(self.option_by_class),
        )


def solve_horizon_feasibility(
    classes: list[CourseClass],
    graph: DependencyGraph,
    conflict_matrix: ConflictMatrix,
    horizon: int,
    deadline: float,
    max_classes_per_period: float = float("inf"),
    prefer_critical: bool = True,
) -> HorizonOutcome:
    """Decide whether every class fits within ``horizon`` periods.

    Args:
        classes: Normalized classes
        graph: Dependency graph of ``classes``
        conflict_matrix: Conflict relation of ``classes``
        horizon: Number of periods available
        deadline: Absolute ``perf_counter`` deadline, polled at every node
        max_classes_per_period: Per-period class cap
        prefer_critical: Break placement-count ties by tail depth then option
            count; otherwise keep the first class found and stop scanning at a
            class with a single placement

    Returns:
        HorizonOutcome with ``found``, ``infeasible`` or ``timeout`` status
    """
    return HorizonSearch(
        classes,
        graph,
        conflict_matrix,
        horizon,
        deadline,
        max_classes_per_period=max_classes_per_period,
        prefer_critical=prefer_critical,
    ).run()
