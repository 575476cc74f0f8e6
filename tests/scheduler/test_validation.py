"""Tests for the independent plan validator."""

import pytest

from term_planner.exceptions import StructuralInputError
from term_planner.scheduler.models import Placement, SolveResult, ViolationType
from term_planner.scheduler.validation import validate_plan


def _plan(assignments, total=None):
    plan = {
        "assignments": {
            str(class_id): {"period": period, "optionIndex": option}
            for class_id, (period, option) in assignments.items()
        }
    }
    if total is not None:
        plan["totalPeriods"] = total
    return plan


class TestValidPlans:
    """Tests for plans that satisfy every rule."""

    def test_valid_mapping_plan(self, basic_classes):
        plan = _plan({1: (1, 0), 2: (2, 1), 3: (1, 1), 4: (3, 0)}, total=3)
        result = validate_plan(basic_classes, plan)
        assert result.valid
        assert result.to_dict() == {"valid": True, "violations": []}

    def test_valid_solve_result(self, conflicting_classes):
        result = SolveResult(
            success=True,
            assignments={
                1: Placement(period=1, option_index=0),
                2: Placement(period=2, option_index=0),
                3: Placement(period=1, option_index=0),
            },
            total_periods=2,
        )
        assert validate_plan(conflicting_classes, result).valid

    def test_integer_keys_accepted(self, conflicting_classes):
        plan = {
            "assignments": {
                1: {"period": 1, "optionIndex": 0},
                2: {"period": 2, "optionIndex": 0},
                3: {"period": 2, "optionIndex": 0},
            }
        }
        assert validate_plan(conflicting_classes, plan).valid

    def test_partial_plan_when_not_required(self, conflicting_classes):
        plan = _plan({1: (1, 0)})
        assert validate_plan(conflicting_classes, plan, require_all_classes=False).valid


class TestViolations:
    """Tests for each violation kind."""

    def test_unknown_class(self, conflicting_classes):
        plan = _plan({1: (1, 0), 2: (2, 0), 3: (1, 0), 99: (1, 0)})
        result = validate_plan(conflicting_classes, plan)
        violations = result.of_type(ViolationType.UNKNOWN_CLASS)
        assert len(violations) == 1
        assert violations[0].class_id == 99

    def test_unparseable_class_key(self, conflicting_classes):
        plan = _plan({1: (1, 0), 2: (2, 0), 3: (1, 0)})
        plan["assignments"]["abc"] = {"period": 1, "optionIndex": 0}
        violation = validate_plan(conflicting_classes, plan).of_type(ViolationType.UNKNOWN_CLASS)[0]
        assert violation.class_id is None
        assert violation.to_dict()["rawClassId"] == "abc"

    def test_invalid_assignment(self, conflicting_classes):
        plan = _plan({1: (1, 0), 2: (2, 0)})
        plan["assignments"]["3"] = "period one"
        result = validate_plan(conflicting_classes, plan)
        assert [v.class_id for v in result.of_type(ViolationType.INVALID_ASSIGNMENT)] == [3]

    @pytest.mark.parametrize("period", [0, -1, 1.5, "1", None])
    def test_invalid_period(self, conflicting_classes, period):
        plan = _plan({1: (period, 0), 2: (2, 0), 3: (1, 0)})
        result = validate_plan(conflicting_classes, plan)
        assert len(result.of_type(ViolationType.INVALID_PERIOD)) == 1

    @pytest.mark.parametrize("option", [1, -1, None])
    def test_invalid_option(self, conflicting_classes, option):
        plan = _plan({1: (1, option), 2: (2, 0), 3: (1, 0)})
        result = validate_plan(conflicting_classes, plan)
        assert len(result.of_type(ViolationType.INVALID_OPTION)) == 1

    def test_duplicate_assignment(self, conflicting_classes):
        plan = {
            "assignments": {
                1: {"period": 1, "optionIndex": 0},
                "1": {"period": 2, "optionIndex": 0},
                2: {"period": 2, "optionIndex": 0},
                3: {"period": 1, "optionIndex": 0},
            }
        }
        result = validate_plan(conflicting_classes, plan)
        assert [v.class_id for v in result.of_type(ViolationType.DUPLICATE_ASSIGNMENT)] == [1]

    def test_missing_class(self, conflicting_classes):
        result = validate_plan(conflicting_classes, _plan({1: (1, 0), 3: (1, 0)}))
        assert [v.class_id for v in result.of_type(ViolationType.MISSING_CLASS)] == [2]

    def test_prerequisite_order(self, basic_classes):
        plan = _plan({1: (2, 0), 2: (2, 1), 3: (1, 1), 4: (3, 0)})
        violations = validate_plan(basic_classes, plan).of_type(ViolationType.PREREQUISITE_ORDER)
        assert len(violations) == 1
        assert violations[0].class_id == 2
        assert violations[0].details["prerequisiteId"] == 1

    def test_missing_prerequisite_assignment(self, basic_classes):
        plan = _plan({2: (2, 1)})
        result = validate_plan(basic_classes, plan, require_all_classes=False)
        violations = result.of_type(ViolationType.MISSING_PREREQUISITE_ASSIGNMENT)
        assert [(v.class_id, v.details["prerequisiteId"]) for v in violations] == [(2, 1)]

    def test_unknown_prerequisite_is_reported(self, class_factory):
        classes = [class_factory(1, prerequisites=[50])]
        result = validate_plan(classes, _plan({1: (1, 0)}))
        assert len(result.of_type(ViolationType.UNKNOWN_PREREQUISITE)) == 1

    def test_time_conflict(self, conflicting_classes):
        plan = _plan({1: (1, 0), 2: (1, 0), 3: (1, 0)})
        violations = validate_plan(conflicting_classes, plan).of_type(ViolationType.TIME_CONFLICT)
        assert len(violations) == 1
        assert violations[0].to_dict() == {
            "type": "TIME_CONFLICT",
            "period": 1,
            "classAId": 1,
            "classBId": 2,
            "optionA": 0,
            "optionB": 0,
        }

    def test_period_count_mismatch(self, conflicting_classes):
        plan = _plan({1: (1, 0), 2: (2, 0), 3: (1, 0)}, total=5)
        violation = validate_plan(conflicting_classes, plan).of_type(
            ViolationType.PERIOD_COUNT_MISMATCH
        )[0]
        assert violation.details == {"expected": 2, "actual": 5}


class TestStructuralInput:
    """Tests for curriculum input the validator refuses."""

    def test_malformed_curriculum_raises(self):
        with pytest.raises(StructuralInputError):
            validate_plan([{"id": "x"}], {"assignments": {}})
