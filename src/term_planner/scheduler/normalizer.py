"""Canonicalization of raw curriculum records."""

from collections.abc import Iterable, Mapping
from typing import Any

from ..exceptions import (
    DuplicateClassError,
    EmptyScheduleOptionError,
    InvalidTimeError,
    MissingPrerequisiteError,
    StructuralInputError,
)
from ..normalization import canonicalize_day, format_minutes, parse_time
from .models import CourseClass, ScheduleOption, TimeBlock


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _option_raw_blocks(option: Any) -> list[dict[str, Any]]:
    """Flatten any accepted option shape into ``{day, startTime, endTime}`` dicts.

    Accepted shapes:
    - ``{"schedule": [{"day", "startTime", "endTime"}, ...]}`` (canonical)
    - ``{"blocks": [{"day", "start", "end"}, ...]}`` with minute offsets or
      ``startTime``/``endTime`` strings
    - ``{"days": [...], "startTime": "HH:MM", "endTime": "HH:MM"}``
    """
    if not isinstance(option, Mapping):
        return []

    blocks = option.get("blocks")
    if isinstance(blocks, list):
        flattened = []
        for block in blocks:
            if not isinstance(block, Mapping):
                flattened.append({})
                continue
            start = block.get("start")
            end = block.get("end")
            flattened.append({
                "day": block.get("day"),
                "startTime": format_minutes(start) if _is_int(start) else block.get("startTime"),
                "endTime": format_minutes(end) if _is_int(end) else block.get("endTime"),
            })
        return flattened

    schedule = option.get("schedule")
    if isinstance(schedule, list):
        return [block if isinstance(block, Mapping) else {} for block in schedule]

    days = option.get("days")
    if isinstance(days, list) and option.get("startTime") and option.get("endTime"):
        return [
            {"day": day, "startTime": option["startTime"], "endTime": option["endTime"]}
            for day in days
        ]

    return []


def _normalize_block(
    block: Mapping[str, Any], class_id: int, option_index: int, block_index: int
) -> TimeBlock:
    day = block.get("day")
    if not isinstance(day, str) or not canonicalize_day(day):
        raise StructuralInputError(
            f"Invalid block day at class {class_id}, option {option_index}, block {block_index}",
            class_id=class_id,
        )

    start = parse_time(block.get("startTime"))
    if start is None:
        raise InvalidTimeError(block.get("startTime"), class_id, option_index, block_index)

    end = parse_time(block.get("endTime"))
    if end is None:
        raise InvalidTimeError(block.get("endTime"), class_id, option_index, block_index)

    if start >= end:
        raise InvalidTimeError(
            f"{block.get('startTime')}-{block.get('endTime')}",
            class_id,
            option_index,
            block_index,
        )

    return TimeBlock(day=canonicalize_day(day), start=start, end=end, label=day)


def _normalize_record(raw: Any) -> CourseClass:
    if not isinstance(raw, Mapping) or not _is_int(raw.get("id")):
        raise StructuralInputError("Each class must have a numeric id")

    class_id = raw["id"]
    options = []
    for option_index, option in enumerate(raw.get("scheduleOptions") or []):
        raw_blocks = _option_raw_blocks(option)
        if not raw_blocks:
            raise EmptyScheduleOptionError(class_id, option_index)

        blocks = tuple(
            _normalize_block(block, class_id, option_index, block_index)
            for block_index, block in enumerate(raw_blocks)
        )
        source_index = option.get("sourceOptionIndex")
        options.append(
            ScheduleOption(
                blocks=blocks,
                source_index=source_index if _is_int(source_index) else option_index,
            )
        )

    if not options:
        raise EmptyScheduleOptionError(class_id)

    prerequisites = raw.get("prerequisites")
    if not isinstance(prerequisites, (list, tuple)):
        prerequisites = ()

    for prereq_id in prerequisites:
        if not _is_int(prereq_id):
            raise StructuralInputError(
                f"Class {class_id} has a non-numeric prerequisite {prereq_id!r}",
                class_id=class_id,
            )

    # Preserve first-seen order while dropping repeats
    prerequisites = tuple(dict.fromkeys(prerequisites))

    name = raw.get("name")
    return CourseClass(
        id=class_id,
        name=name if isinstance(name, str) and name else f"Class {class_id}",
        prerequisites=prerequisites,
        options=tuple(options),
    )


def _check_normalized(cls: CourseClass) -> CourseClass:
    if not cls.options:
        raise EmptyScheduleOptionError(cls.id)
    for option_index, option in enumerate(cls.options):
        if not option.blocks:
            raise EmptyScheduleOptionError(cls.id, option_index)
        for block_index, block in enumerate(option.blocks):
            if block.start >= block.end:
                raise InvalidTimeError(
                    f"{format_minutes(block.start)}-{format_minutes(block.end)}",
                    cls.id,
                    option_index,
                    block_index,
                )
    return cls


def normalize_classes(
    raw_classes: Iterable[Any], strict_prerequisites: bool = True
) -> list[CourseClass]:
    """Validate and canonicalize curriculum records.

    Records may be raw dictionaries in the curriculum input shape or
    already-normalized ``CourseClass`` instances, which are re-checked and
    passed through unchanged.

    Args:
        raw_classes: Sequence of class records
        strict_prerequisites: Fail when a prerequisite id is not in the input

    Returns:
        List of CourseClass in input order

    Raises:
        StructuralInputError: On any malformed record
    """
    if isinstance(raw_classes, (str, bytes, Mapping)) or not isinstance(raw_classes, Iterable):
        raise StructuralInputError("Expected a list of classes")

    seen_ids: set[int] = set()
    classes: list[CourseClass] = []

    for raw in raw_classes:
        if isinstance(raw, CourseClass):
            cls = _check_normalized(raw)
        else:
            cls = _normalize_record(raw)

        if cls.id in seen_ids:
            raise DuplicateClassError(cls.id)
        seen_ids.add(cls.id)
        classes.append(cls)

    if strict_prerequisites:
        for cls in classes:
            for prereq_id in cls.prerequisites:
                if prereq_id not in seen_ids:
                    raise MissingPrerequisiteError(cls.id, prereq_id)

    return classes
