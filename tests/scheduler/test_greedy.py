"""Tests for the critical-path greedy solver."""

from itertools import combinations, product

import pytest

from term_planner.exceptions import CycleError
from term_planner.scheduler.conflicts import build_conflict_matrix
from term_planner.scheduler.generator import generate_random_curriculum
from term_planner.scheduler.graph import build_graph
from term_planner.scheduler.greedy import (
    pick_best_period_subset,
    priority_order,
    solve_with_critical_path_greedy,
)
from term_planner.scheduler.normalizer import normalize_classes
from term_planner.scheduler.validation import validate_plan


def _largest_compatible_subset(eligible, classes, matrix, cap):
    """Brute force over every subset and option combination."""
    for size in range(min(len(eligible), cap), 0, -1):
        for subset in combinations(eligible, size):
            for options in product(*(range(classes[i].option_count) for i in subset)):
                pairs = list(zip(subset, options))
                if all(
                    not matrix.conflicts(a, oa, b, ob)
                    for (a, oa), (b, ob) in combinations(pairs, 2)
                ):
                    return size
    return 0


class TestSolveGreedy:
    """Tests for solve_with_critical_path_greedy function."""

    def test_basic_plan_is_valid(self, basic_classes):
        result = solve_with_critical_path_greedy(basic_classes)
        assert result.success
        assert validate_plan(basic_classes, result).valid
        assert result.total_periods == 3
        assert result.meta["solver"] == "criticalPathGreedy"
        assert result.meta["lowerBound"] == 3
        assert result.optimality == "optimal_proven"

    def test_same_slot_pair_split(self, same_slot_pair):
        result = solve_with_critical_path_greedy(same_slot_pair)
        assert result.total_periods == 2
        assert {p.period for p in result.assignments.values()} == {1, 2}

    def test_not_proven_above_lower_bound(self, conflicting_classes):
        result = solve_with_critical_path_greedy(conflicting_classes)
        assert result.total_periods == 2
        assert result.meta["lowerBound"] == 1
        assert result.optimality == "feasible_not_proven"

    def test_class_cap(self, class_factory):
        classes = [
            class_factory(i, options=[[(day, "08:00", "10:00")]])
            for i, day in enumerate(["Lunes", "Martes", "Miercoles"], start=1)
        ]
        result = solve_with_critical_path_greedy(classes, max_classes_per_period=1)
        assert result.total_periods == 3
        assert validate_plan(classes, result).valid

    def test_empty_input(self):
        result = solve_with_critical_path_greedy([])
        assert result.success
        assert result.total_periods == 0
        assert result.assignments == {}

    def test_cycle_raises(self, class_factory):
        with pytest.raises(CycleError):
            solve_with_critical_path_greedy([
                class_factory(1, prerequisites=[2]),
                class_factory(2, prerequisites=[1]),
            ])

    def test_zero_budget_falls_back_to_first_fit(self):
        classes = generate_random_curriculum(12, seed=5)
        result = solve_with_critical_path_greedy(classes, period_search_time_limit_ms=0)
        assert result.success
        assert result.meta["timedOutPeriods"] > 0
        assert validate_plan(classes, result).valid

    @pytest.mark.parametrize("seed", [1, 2, 3, 4, 5, 6])
    def test_bounds_order_on_generated_input(self, seed):
        classes = generate_random_curriculum(10, seed=seed, prereq_probability=0.3)
        result = solve_with_critical_path_greedy(classes)
        assert result.success
        assert validate_plan(classes, result).valid
        assert result.meta["lowerBound"] <= result.total_periods <= len(classes)


class TestPeriodSubsetSearch:
    """Tests for pick_best_period_subset function."""

    def test_priority_prefers_long_tails(self, basic_classes):
        classes = normalize_classes(basic_classes)
        graph = build_graph(classes)
        assert priority_order([2, 0], classes, graph) == [0, 2]

    @pytest.mark.parametrize("seed", range(1, 9))
    def test_pruned_search_matches_exhaustive(self, seed):
        """Test the size bound never prunes away the largest subset."""
        classes = normalize_classes(
            generate_random_curriculum(7, seed=seed, prereq_probability=0.0, max_options_per_class=2)
        )
        graph = build_graph(classes)
        matrix = build_conflict_matrix(classes)
        eligible = list(range(len(classes)))

        pick = pick_best_period_subset(
            eligible, classes, matrix, graph, float("inf"), time_limit_ms=10_000
        )
        assert not pick.timed_out
        assert len(pick.selected) == _largest_compatible_subset(
            eligible, classes, matrix, len(classes)
        )

    def test_respects_cap(self, class_factory):
        classes = normalize_classes([
            class_factory(i, options=[[(day, "08:00", "10:00")]])
            for i, day in enumerate(["Lunes", "Martes", "Miercoles", "Jueves"], start=1)
        ])
        pick = pick_best_period_subset(
            [0, 1, 2, 3],
            classes,
            build_conflict_matrix(classes),
            build_graph(classes),
            2,
            time_limit_ms=1_000,
        )
        assert len(pick.selected) == 2
