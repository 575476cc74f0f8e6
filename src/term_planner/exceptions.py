"""Custom exceptions for the term planner."""


class PlannerError(Exception):
    """Base exception for planner errors."""

    pass


class StructuralInputError(PlannerError):
    """Curriculum records are malformed and cannot be scheduled."""

    def __init__(self, message: str, class_id: int | None = None):
        self.class_id = class_id
        super().__init__(message)


class InvalidTimeError(StructuralInputError):
    """Time value is malformed or the interval is empty."""

    def __init__(
        self,
        value: object,
        class_id: int | None = None,
        option_index: int | None = None,
        block_index: int | None = None,
    ):
        self.value = value
        self.option_index = option_index
        self.block_index = block_index
        location = ""
        if class_id is not None:
            location += f" at class {class_id}"
        if option_index is not None:
            location += f", option {option_index}"
        if block_index is not None:
            location += f", block {block_index}"
        super().__init__(f"Invalid time {value!r}{location}", class_id=class_id)


class DuplicateClassError(StructuralInputError):
    """Two records share the same class id."""

    def __init__(self, class_id: int):
        super().__init__(f"Duplicate class id {class_id}", class_id=class_id)


class EmptyScheduleOptionError(StructuralInputError):
    """A class has no options, or an option has no blocks."""

    def __init__(self, class_id: int, option_index: int | None = None):
        self.option_index = option_index
        if option_index is None:
            message = f"Class {class_id} has no schedule options"
        else:
            message = f"Class {class_id} has an empty schedule option at index {option_index}"
        super().__init__(message, class_id=class_id)


class MissingPrerequisiteError(StructuralInputError):
    """A prerequisite references a class that is not in the curriculum."""

    def __init__(self, class_id: int, prerequisite_id: int):
        self.prerequisite_id = prerequisite_id
        super().__init__(
            f"Class {class_id} references missing prerequisite {prerequisite_id}",
            class_id=class_id,
        )


class CycleError(StructuralInputError):
    """The prerequisite graph is not acyclic."""

    def __init__(self, class_ids: list[int]):
        self.class_ids = list(class_ids)
        message = "Prerequisite graph contains a cycle"
        if self.class_ids:
            message += f" involving classes {', '.join(str(i) for i in self.class_ids)}"
        super().__init__(message, class_id=self.class_ids[0] if self.class_ids else None)
