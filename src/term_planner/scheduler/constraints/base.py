"""Base class for per-option constraint rules."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from ..constants import SATURDAY_ALIASES, TIME_PREFERENCE_WINDOWS

if TYPE_CHECKING:
    from ..models import ScheduleOption, TimeBlock, UserConstraints


def block_in_window(block: "TimeBlock", preference: str | None) -> bool:
    """Check whether a block starts inside the preferred time-of-day window."""
    window = TIME_PREFERENCE_WINDOWS.get(preference) if preference else None
    if window is None:
        return True
    window_from, window_until = window
    return window_from <= block.start < window_until


def option_touches_saturday(option: "ScheduleOption") -> bool:
    return option.touches_day(SATURDAY_ALIASES)


class OptionRule(ABC):
    """Abstract base class for rules evaluated on a single schedule option."""

    name: str = ""

    def __init__(self, constraints: "UserConstraints"):
        """
        Initialize rule.

        Args:
            constraints: Normalized user constraints for this solve.
        """
        self.constraints = constraints

    @abstractmethod
    def is_active(self) -> bool:
        """Whether the user constraints switch this rule on."""
        pass
