"""Tests for scheduler utility functions."""

import math

from term_planner.scheduler.models import Placement
from term_planner.scheduler.normalizer import normalize_classes
from term_planner.scheduler.utils import (
    assignments_from_arrays,
    cap_or_none,
    deadline_after,
    elapsed_ms,
    now,
    total_periods,
)


class TestTiming:
    """Tests for deadline helpers."""

    def test_deadline_is_in_the_future(self):
        assert deadline_after(1_000) > now()

    def test_elapsed_is_non_negative(self):
        assert elapsed_ms(now()) >= 0


class TestAssignments:
    """Tests for plan helpers."""

    def test_arrays_keyed_by_class_id(self, conflicting_classes):
        classes = normalize_classes(conflicting_classes)
        assignments = assignments_from_arrays(classes, [1, 2, 1], [0, 0, 0])
        assert assignments == {
            1: Placement(period=1, option_index=0),
            2: Placement(period=2, option_index=0),
            3: Placement(period=1, option_index=0),
        }
        assert total_periods(assignments) == 2

    def test_total_periods_empty(self):
        assert total_periods({}) == 0

    def test_cap_or_none(self):
        assert math.isinf(cap_or_none(None))
        assert cap_or_none(2) == 2
