"""Hard constraint filters.

Hard constraints remove schedule options outright. A class left with no
options cannot be scheduled at all.
"""

from abc import abstractmethod
from typing import TYPE_CHECKING

from ..constants import SATURDAY_ALIASES
from .base import OptionRule, block_in_window

if TYPE_CHECKING:
    from ..models import ScheduleOption, UserConstraints


class HardRule(OptionRule):
    """A rule that rejects options."""

    @abstractmethod
    def rejects(self, option: "ScheduleOption") -> bool:
        pass


class BlockedDaysRule(HardRule):
    """Forbidden days, keep-free days and hard Saturday avoidance."""

    name = "blockedDays"

    def __init__(self, constraints: "UserConstraints"):
        super().__init__(constraints)
        days = constraints.blocked_days()
        if constraints.hard_saturday:
            days.update(SATURDAY_ALIASES)
        self.blocked_days = days

    def is_active(self) -> bool:
        return bool(self.blocked_days)

    def rejects(self, option: "ScheduleOption") -> bool:
        return option.touches_day(self.blocked_days)


class TimePreferenceRule(HardRule):
    """Every block must start inside the preferred window."""

    name = "timePreference"

    def is_active(self) -> bool:
        return (
            self.constraints.time_preference is not None
            and self.constraints.time_preference_mode == "hard"
        )

    def rejects(self, option: "ScheduleOption") -> bool:
        preference = self.constraints.time_preference
        return not all(block_in_window(block, preference) for block in option.blocks)


class HardConstraints:
    """The set of active hard rules for one solve."""

    def __init__(self, constraints: "UserConstraints"):
        self.blocked_days_rule = BlockedDaysRule(constraints)
        self.rules: list[HardRule] = [
            rule
            for rule in (self.blocked_days_rule, TimePreferenceRule(constraints))
            if rule.is_active()
        ]

    @property
    def blocked_days(self) -> list[str]:
        """Canonical blocked days, sorted for stable output."""
        return sorted(self.blocked_days_rule.blocked_days)

    def allows(self, option: "ScheduleOption") -> bool:
        return not any(rule.rejects(option) for rule in self.rules)
