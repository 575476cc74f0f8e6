"""Soft constraint penalties.

Soft constraints are preferences that should be satisfied when possible.
Violations add a penalty to the option but never remove it.
"""

from abc import abstractmethod
from typing import TYPE_CHECKING

from .base import OptionRule, block_in_window, option_touches_saturday

if TYPE_CHECKING:
    from ..models import ScheduleOption, UserConstraints


class SoftRule(OptionRule):
    """A rule that scores options."""

    @abstractmethod
    def penalty(self, option: "ScheduleOption") -> float:
        pass


class TimePreferencePenalty(SoftRule):
    """Weight charged once per block outside the preferred window."""

    name = "timePreference"

    def is_active(self) -> bool:
        return (
            self.constraints.time_preference is not None
            and self.constraints.time_preference_mode == "soft"
        )

    def penalty(self, option: "ScheduleOption") -> float:
        preference = self.constraints.time_preference
        mismatches = sum(1 for block in option.blocks if not block_in_window(block, preference))
        return mismatches * self.constraints.penalty_weights.time_preference


class SaturdayPenalty(SoftRule):
    """Weight charged once for an option meeting on Saturday."""

    name = "saturday"

    def is_active(self) -> bool:
        return self.constraints.soft_saturday

    def penalty(self, option: "ScheduleOption") -> float:
        if option_touches_saturday(option):
            return self.constraints.penalty_weights.saturday
        return 0


class SoftConstraints:
    """The set of active soft rules for one solve."""

    def __init__(self, constraints: "UserConstraints"):
        self.rules: list[SoftRule] = [
            rule
            for rule in (TimePreferencePenalty(constraints), SaturdayPenalty(constraints))
            if rule.is_active()
        ]

    def penalty(self, option: "ScheduleOption") -> float:
        return sum(rule.penalty(option) for rule in self.rules)
