"""Normalization utilities for day labels, times and preference values."""

import re
import unicodedata

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")

# Accepted spellings for the time-of-day preference, mapped to canonical values
TIME_PREFERENCE_ALIASES = {
    "morning": "morning",
    "afternoon": "afternoon",
    "evening": "evening",
    "night": "night",
    "afternoon_or_night": "afternoon_or_night",
    "afternoon-night": "afternoon_or_night",
}


def canonicalize_day(day: object) -> str:
    """Canonicalize a day label for comparison.

    Diacritics are stripped and case is folded so that "Miércoles",
    "miercoles" and " MIERCOLES " all compare equal.

    Args:
        day: Raw day label

    Returns:
        Canonical day key, or empty string for non-string input
    """
    if not isinstance(day, str):
        return ""

    decomposed = unicodedata.normalize("NFD", day)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.strip().lower()


def parse_time(value: object) -> int | None:
    """Parse an ``HH:MM`` string into minutes since midnight.

    Returns None when the value is not a well-formed 24-hour time.
    """
    if not isinstance(value, str):
        return None

    match = TIME_PATTERN.match(value)
    if not match:
        return None

    return int(match.group(1)) * 60 + int(match.group(2))


def format_minutes(minutes: int) -> str:
    """Format minutes since midnight as ``HH:MM``."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def normalize_time_preference(value: object) -> str | None:
    """Map a raw time preference to its canonical value, or None."""
    if not isinstance(value, str):
        return None
    return TIME_PREFERENCE_ALIASES.get(value.strip().lower())


def normalize_mode(value: object) -> str:
    """Constraint modes are soft unless explicitly hard."""
    return "hard" if value == "hard" else "soft"


def normalize_string_list(values: object) -> list[str]:
    """Keep only non-blank strings from a list-like value."""
    if not isinstance(values, (list, tuple)):
        return []
    return [v for v in values if isinstance(v, str) and v.strip()]
