"""Seeded synthetic curriculum generator for tests and benchmarks."""

import random
from typing import Any

from ..normalization import format_minutes
from .constants import GENERATOR_DAYS, GENERATOR_TIME_SLOTS


def generate_random_curriculum(
    class_count: int,
    seed: int = 1,
    prereq_probability: float = 0.2,
    max_prereqs_per_class: int = 3,
    max_options_per_class: int = 3,
    max_blocks_per_option: int = 2,
    days: list[str] | None = None,
    time_slots: list[tuple[int, int]] | None = None,
) -> list[dict[str, Any]]:
    """Generate curriculum records in the input shape.

    Class ids run from 1 to ``class_count`` and prerequisites only point to
    lower ids, so the result is always acyclic. Blocks within one option use
    distinct (day, slot) pairs. The same seed always gives the same output.

    Args:
        class_count: Number of classes to generate
        seed: Random seed
        prereq_probability: Chance that each earlier class becomes a prerequisite
        max_prereqs_per_class: Upper limit on prerequisites per class
        max_options_per_class: Options per class are drawn from 1..this
        max_blocks_per_option: Blocks per option are drawn from 1..this
        days: Day labels to draw from
        time_slots: (start, end) minute pairs to draw from

    Returns:
        List of class dictionaries
    """
    rng = random.Random(seed)
    days = list(days or GENERATOR_DAYS)
    time_slots = list(time_slots or GENERATOR_TIME_SLOTS)
    max_blocks = min(max_blocks_per_option, len(days) * len(time_slots))

    classes = []
    for index in range(class_count):
        class_id = index + 1

        prerequisites = []
        for candidate_id in range(1, class_id):
            if len(prerequisites) >= max_prereqs_per_class:
                break
            if rng.random() < prereq_probability:
                prerequisites.append(candidate_id)

        schedule_options = []
        for _ in range(rng.randint(1, max_options_per_class)):
            block_count = rng.randint(1, max_blocks)
            used: set[tuple[str, int]] = set()
            schedule = []
            while len(schedule) < block_count:
                day = rng.choice(days)
                slot_index = rng.randrange(len(time_slots))
                if (day, slot_index) in used:
                    continue
                used.add((day, slot_index))
                start, end = time_slots[slot_index]
                schedule.append({
                    "day": day,
                    "startTime": format_minutes(start),
                    "endTime": format_minutes(end),
                })
            schedule_options.append({"schedule": schedule})

        classes.append({
            "id": class_id,
            "name": f"Class {class_id}",
            "prerequisites": prerequisites,
            "scheduleOptions": schedule_options,
        })

    return classes
