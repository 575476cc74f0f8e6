"""Prerequisite DAG construction and depth metrics."""

from collections import deque
from dataclasses import dataclass

from ..exceptions import CycleError, MissingPrerequisiteError
from .models import CourseClass


@dataclass(frozen=True)
class DependencyGraph:
    """Index-based view of the prerequisite DAG.

    Attributes:
        id_to_index: Class id -> position in the class list
        prereq_indices: For each class, indices of its prerequisites
        dependent_indices: For each class, indices of classes requiring it
        topological_order: Kahn order over class indices
        root_depth: Earliest feasible period under precedence alone
        tail_depth: Periods still required from this class to the end of its chain
    """

    id_to_index: dict[int, int]
    prereq_indices: tuple[tuple[int, ...], ...]
    dependent_indices: tuple[tuple[int, ...], ...]
    topological_order: tuple[int, ...]
    root_depth: tuple[int, ...]
    tail_depth: tuple[int, ...]

    @property
    def size(self) -> int:
        return len(self.root_depth)

    @property
    def lower_bound(self) -> int:
        """Longest prerequisite chain; no plan can use fewer periods."""
        return max(self.root_depth, default=0)

    def latest_period(self, index: int, horizon: int) -> int:
        """Last period a class may occupy if the plan must fit in ``horizon``."""
        return horizon - self.tail_depth[index] + 1

    def fits_horizon(self, horizon: int) -> bool:
        return all(
            self.root_depth[i] <= self.latest_period(i, horizon) for i in range(self.size)
        )


def build_graph(classes: list[CourseClass]) -> DependencyGraph:
    """Build the dependency graph for normalized classes.

    Raises:
        CycleError: If the prerequisites are not acyclic
    """
    id_to_index = {cls.id: index for index, cls in enumerate(classes)}

    prereq_indices: list[tuple[int, ...]] = []
    dependents: list[list[int]] = [[] for _ in classes]

    for index, cls in enumerate(classes):
        if cls.id in cls.prerequisites:
            raise CycleError([cls.id])

        missing = [p for p in cls.prerequisites if p not in id_to_index]
        if missing:
            raise MissingPrerequisiteError(cls.id, missing[0])

        prereqs = tuple(id_to_index[p] for p in cls.prerequisites)
        prereq_indices.append(prereqs)
        for prereq_index in prereqs:
            dependents[prereq_index].append(index)

    # Kahn's algorithm
    indegree = [len(prereqs) for prereqs in prereq_indices]
    queue = deque(i for i, degree in enumerate(indegree) if degree == 0)
    order: list[int] = []

    while queue:
        node = queue.popleft()
        order.append(node)
        for dependent in dependents[node]:
            indegree[dependent] -= 1
            if indegree[dependent] == 0:
                queue.append(dependent)

    if len(order) != len(classes):
        stuck = [classes[i].id for i, degree in enumerate(indegree) if degree > 0]
        raise CycleError(stuck)

    root_depth = [1] * len(classes)
    for index in order:
        for prereq_index in prereq_indices[index]:
            root_depth[index] = max(root_depth[index], root_depth[prereq_index] + 1)

    tail_depth = [1] * len(classes)
    for index in reversed(order):
        for dependent in dependents[index]:
            tail_depth[index] = max(tail_depth[index], tail_depth[dependent] + 1)

    return DependencyGraph(
        id_to_index=id_to_index,
        prereq_indices=tuple(prereq_indices),
        dependent_indices=tuple(tuple(d) for d in dependents),
        topological_order=tuple(order),
        root_depth=tuple(root_depth),
        tail_depth=tuple(tail_depth),
    )
