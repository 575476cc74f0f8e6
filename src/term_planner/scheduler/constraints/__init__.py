"""Option-level constraint rules for the entrypoint."""

from .base import OptionRule, block_in_window, option_touches_saturday
from .hard import BlockedDaysRule, HardConstraints, HardRule, TimePreferenceRule
from .soft import SaturdayPenalty, SoftConstraints, SoftRule, TimePreferencePenalty

__all__ = [
    "OptionRule",
    "block_in_window",
    "option_touches_saturday",
    "HardRule",
    "BlockedDaysRule",
    "TimePreferenceRule",
    "HardConstraints",
    "SoftRule",
    "TimePreferencePenalty",
    "SaturdayPenalty",
    "SoftConstraints",
]
