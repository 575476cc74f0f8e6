"""Tests for the exact horizon search and the hybrid solver."""

import pytest

from term_planner.scheduler import hybrid as hybrid_module
from term_planner.scheduler.conflicts import build_conflict_matrix
from term_planner.scheduler.generator import generate_random_curriculum
from term_planner.scheduler.graph import build_graph
from term_planner.scheduler.hybrid import solve_with_hybrid_exact_first
from term_planner.scheduler.models import HorizonStatus
from term_planner.scheduler.normalizer import normalize_classes
from term_planner.scheduler.oracle import solve_with_oracle_exact
from term_planner.scheduler.search import HorizonOutcome, solve_horizon_feasibility
from term_planner.scheduler.utils import deadline_after, now
from term_planner.scheduler.validation import validate_plan


def _prepare(raw_classes):
    classes = normalize_classes(raw_classes)
    return classes, build_graph(classes), build_conflict_matrix(classes)


class TestHorizonSearch:
    """Tests for solve_horizon_feasibility function."""

    def test_feasible_horizon(self, conflicting_classes):
        classes, graph, matrix = _prepare(conflicting_classes)
        outcome = solve_horizon_feasibility(classes, graph, matrix, 2, deadline_after(1_000))
        assert outcome.found
        assert sorted(outcome.period_by_class) in ([1, 1, 2], [1, 2, 2])
        assert outcome.explored_nodes >= 3

    def test_infeasible_horizon(self, same_slot_pair):
        classes, graph, matrix = _prepare(same_slot_pair)
        outcome = solve_horizon_feasibility(classes, graph, matrix, 1, deadline_after(1_000))
        assert outcome.status == HorizonStatus.INFEASIBLE

    def test_horizon_below_chain_length(self, basic_classes):
        classes, graph, matrix = _prepare(basic_classes)
        outcome = solve_horizon_feasibility(classes, graph, matrix, 2, deadline_after(1_000))
        assert outcome.status == HorizonStatus.INFEASIBLE
        assert outcome.explored_nodes == 0

    def test_expired_deadline(self, basic_classes):
        classes, graph, matrix = _prepare(basic_classes)
        outcome = solve_horizon_feasibility(classes, graph, matrix, 3, now() - 1)
        assert outcome.status == HorizonStatus.TIMEOUT

    def test_class_cap(self, class_factory):
        classes, graph, matrix = _prepare([
            class_factory(1, options=[[("Lunes", "08:00", "10:00")]]),
            class_factory(2, options=[[("Martes", "08:00", "10:00")]]),
        ])
        outcome = solve_horizon_feasibility(
            classes, graph, matrix, 1, deadline_after(1_000), max_classes_per_period=1
        )
        assert outcome.status == HorizonStatus.INFEASIBLE

    @pytest.mark.parametrize("prefer_critical", [True, False])
    def test_tie_break_modes_agree_on_feasibility(self, converging_chains, prefer_critical):
        classes, graph, matrix = _prepare(converging_chains)
        outcome = solve_horizon_feasibility(
            classes, graph, matrix, 3, deadline_after(1_000), prefer_critical=prefer_critical
        )
        assert outcome.found
        assert outcome.period_by_class[4] == 3


class TestHybridSolver:
    """Tests for solve_with_hybrid_exact_first function."""

    def test_improves_on_lower_bound(self, converging_chains):
        result = solve_with_hybrid_exact_first(converging_chains)
        assert result.success
        assert result.total_periods == 3
        assert result.optimality == "optimal_proven"
        assert validate_plan(converging_chains, result).valid

    def test_proves_conflict_split(self, conflicting_classes):
        result = solve_with_hybrid_exact_first(conflicting_classes)
        assert result.total_periods == 2
        assert result.optimality == "optimal_proven"
        assert result.meta["infeasibleHorizons"] == [1]
        assert result.meta["unresolvedHorizons"] == []

    def test_empty_input(self):
        result = solve_with_hybrid_exact_first([])
        assert result.success
        assert result.total_periods == 0
        assert result.meta["exploredNodes"] == 0
        assert result.optimality == "optimal_proven"

    def test_zero_budget_keeps_greedy_plan(self, conflicting_classes):
        result = solve_with_hybrid_exact_first(conflicting_classes, timeout_ms=0)
        assert result.success
        assert result.total_periods == result.meta["greedyUpperBound"]
        assert result.optimality == "feasible_not_proven"
        assert result.meta["unresolvedHorizons"] == [1]

    def test_reported_periods_match_assignments(self, basic_classes):
        result = solve_with_hybrid_exact_first(basic_classes)
        assert result.total_periods == max(p.period for p in result.assignments.values())
        assert result.meta["upperBound"] == result.total_periods

    @pytest.mark.parametrize("seed", [11, 12, 13, 14])
    def test_matches_oracle_on_small_input(self, seed):
        classes = generate_random_curriculum(8, seed=seed, prereq_probability=0.25)
        hybrid = solve_with_hybrid_exact_first(classes, timeout_ms=5_000)
        oracle = solve_with_oracle_exact(classes, timeout_ms=5_000)
        assert oracle.success
        assert hybrid.success
        assert validate_plan(classes, hybrid).valid
        if hybrid.optimality == "optimal_proven":
            assert hybrid.total_periods == oracle.total_periods
        assert oracle.total_periods <= hybrid.total_periods


class TestTimedOutHorizonRetry:
    """Tests for retrying horizons whose first search timed out."""

    @staticmethod
    def _time_out_first(monkeypatch, timeouts):
        """Make the first ``timeouts`` horizon searches report a timeout."""
        searched = []

        def search_with_timeouts(*args, **kwargs):
            searched.append(args[3])
            if len(searched) <= timeouts:
                return HorizonOutcome(status=HorizonStatus.TIMEOUT)
            return solve_horizon_feasibility(*args, **kwargs)

        monkeypatch.setattr(hybrid_module, "solve_horizon_feasibility", search_with_timeouts)
        return searched

    def test_retry_settles_timed_out_horizon(self, monkeypatch, conflicting_classes):
        searched = self._time_out_first(monkeypatch, timeouts=1)
        result = solve_with_hybrid_exact_first(conflicting_classes, retry_timed_out_horizons=True)
        assert searched == [1, 1]
        assert result.total_periods == 2
        assert result.meta["unresolvedHorizons"] == []
        assert result.meta["infeasibleHorizons"] == [1]
        assert result.optimality == "optimal_proven"

    def test_retry_that_times_out_again(self, monkeypatch, conflicting_classes):
        searched = self._time_out_first(monkeypatch, timeouts=2)
        result = solve_with_hybrid_exact_first(conflicting_classes, retry_timed_out_horizons=True)
        assert searched == [1, 1]
        assert result.total_periods == 2
        assert result.meta["unresolvedHorizons"] == [1]
        assert result.optimality == "feasible_not_proven"

    def test_no_retry_without_flag(self, monkeypatch, conflicting_classes):
        searched = self._time_out_first(monkeypatch, timeouts=1)
        result = solve_with_hybrid_exact_first(conflicting_classes)
        assert searched == [1]
        assert result.meta["unresolvedHorizons"] == [1]
        assert result.optimality == "feasible_not_proven"
