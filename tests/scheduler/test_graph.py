"""Tests for the prerequisite graph."""

import pytest

from term_planner.exceptions import CycleError, MissingPrerequisiteError
from term_planner.scheduler.graph import build_graph
from term_planner.scheduler.normalizer import normalize_classes


class TestBuildGraph:
    """Tests for build_graph function."""

    def test_depths(self, basic_classes):
        graph = build_graph(normalize_classes(basic_classes))
        assert graph.root_depth == (1, 2, 1, 3)
        assert graph.tail_depth == (3, 2, 2, 1)
        assert graph.lower_bound == 3

    def test_topological_order_respects_prerequisites(self, converging_chains):
        graph = build_graph(normalize_classes(converging_chains))
        position = {index: i for i, index in enumerate(graph.topological_order)}
        for index, prereqs in enumerate(graph.prereq_indices):
            for prereq in prereqs:
                assert position[prereq] < position[index]

    def test_dependents_mirror_prerequisites(self, basic_classes):
        graph = build_graph(normalize_classes(basic_classes))
        assert graph.dependent_indices[0] == (1,)
        assert set(graph.dependent_indices[1]) == {3}
        assert graph.dependent_indices[3] == ()

    def test_latest_period(self, basic_classes):
        graph = build_graph(normalize_classes(basic_classes))
        assert graph.latest_period(0, 3) == 1
        assert graph.latest_period(3, 3) == 3
        assert graph.fits_horizon(3)
        assert not graph.fits_horizon(2)

    def test_empty_graph(self):
        graph = build_graph([])
        assert graph.size == 0
        assert graph.lower_bound == 0


class TestCycles:
    """Tests for cycle detection."""

    def test_mutual_prerequisites(self, class_factory):
        """Test A requires B and B requires A fails before any solving."""
        classes = normalize_classes([
            class_factory(1, prerequisites=[2]),
            class_factory(2, prerequisites=[1]),
        ])
        with pytest.raises(CycleError) as exc_info:
            build_graph(classes)
        assert set(exc_info.value.class_ids) == {1, 2}

    def test_self_reference(self, class_factory):
        classes = normalize_classes([class_factory(1, prerequisites=[1])])
        with pytest.raises(CycleError):
            build_graph(classes)

    def test_cycle_message_names_classes(self, class_factory):
        classes = normalize_classes([
            class_factory(1),
            class_factory(2, prerequisites=[3]),
            class_factory(3, prerequisites=[2]),
        ])
        with pytest.raises(CycleError, match="cycle involving classes 2, 3"):
            build_graph(classes)

    def test_unknown_prerequisite(self, class_factory):
        classes = normalize_classes(
            [class_factory(1, prerequisites=[42])], strict_prerequisites=False
        )
        with pytest.raises(MissingPrerequisiteError):
            build_graph(classes)
