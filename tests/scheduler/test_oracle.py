"""Tests for the exhaustive reference solver."""

from term_planner.scheduler.generator import generate_random_curriculum
from term_planner.scheduler.oracle import solve_with_oracle_exact
from term_planner.scheduler.validation import validate_plan


class TestOracleSolver:
    """Tests for solve_with_oracle_exact function."""

    def test_minimal_plan(self, basic_classes):
        result = solve_with_oracle_exact(basic_classes)
        assert result.success
        assert result.total_periods == 3
        assert result.meta["optimal"] is True
        assert result.optimality == "optimal_proven"
        assert validate_plan(basic_classes, result).valid

    def test_same_slot_pair(self, same_slot_pair):
        """Test two classes sharing their only slot need two periods."""
        result = solve_with_oracle_exact(same_slot_pair)
        assert result.total_periods == 2
        assert validate_plan(same_slot_pair, result).valid

    def test_converging_chains(self, converging_chains):
        result = solve_with_oracle_exact(converging_chains)
        assert result.total_periods == 3

    def test_class_cap_per_period(self, class_factory):
        classes = [
            class_factory(1, options=[[("Lunes", "08:00", "10:00")]]),
            class_factory(2, options=[[("Martes", "08:00", "10:00")]]),
            class_factory(3, options=[[("Miercoles", "08:00", "10:00")]]),
        ]
        result = solve_with_oracle_exact(classes, max_classes_per_period=2)
        assert result.total_periods == 2

    def test_refuses_large_input(self):
        classes = generate_random_curriculum(15, seed=3)
        result = solve_with_oracle_exact(classes)
        assert not result.success
        assert result.error == "Oracle exact solver capped at 14 classes"
        assert result.meta["capped"] is True

    def test_custom_size_limit(self, basic_classes):
        result = solve_with_oracle_exact(basic_classes, max_classes_for_exact=3)
        assert not result.success
        assert result.meta["capped"] is True

    def test_timeout_is_failure(self, basic_classes):
        result = solve_with_oracle_exact(basic_classes, timeout_ms=0)
        assert not result.success
        assert result.error == "Oracle exact solver timed out"
        assert result.meta["timeout"] is True
        assert "exploredNodes" in result.meta

    def test_empty_input(self):
        result = solve_with_oracle_exact([])
        assert result.success
        assert result.total_periods == 0
