"""Pairwise time-overlap conflicts between (class, option) pairs."""

from collections.abc import Iterator

from .models import CourseClass, ScheduleOption, TimeBlock


def blocks_overlap(block_a: TimeBlock, block_b: TimeBlock) -> bool:
    """Check whether two weekly blocks collide."""
    return block_a.overlaps(block_b)


def options_conflict(option_a: ScheduleOption, option_b: ScheduleOption) -> bool:
    """Two options conflict when any pair of their blocks overlaps."""
    for block_a in option_a.blocks:
        for block_b in option_b.blocks:
            if block_a.overlaps(block_b):
                return True
    return False


class ConflictMatrix:
    """Dense symmetric conflict relation over (class, option) pairs.

    Every (class, option) pair gets a flat slot ``offsets[class] + option``;
    the relation is stored row-major in a single bytearray so lookups are a
    single index computation.

    Two different options of the same class always conflict, since exactly one
    option is chosen per class.
    """

    def __init__(self, option_counts: list[int]):
        self.option_counts = list(option_counts)
        self.offsets: list[int] = []
        total = 0
        for count in self.option_counts:
            self.offsets.append(total)
            total += count
        self.size = total
        self._data = bytearray(total * total)

    def slot(self, class_index: int, option_index: int) -> int:
        return self.offsets[class_index] + option_index

    def conflicts(
        self, class_a: int, option_a: int, class_b: int, option_b: int
    ) -> bool:
        a = self.offsets[class_a] + option_a
        b = self.offsets[class_b] + option_b
        return self._data[a * self.size + b] == 1

    def mark(self, slot_a: int, slot_b: int) -> None:
        self._data[slot_a * self.size + slot_b] = 1
        self._data[slot_b * self.size + slot_a] = 1

    def conflicting_pairs(self) -> Iterator[tuple[int, int, int, int]]:
        """Yield cross-class conflicts as ``(class_a, option_a, class_b, option_b)``.

        Only pairs with ``class_a < class_b`` are produced, in index order.
        """
        for class_a, count_a in enumerate(self.option_counts):
            for option_a in range(count_a):
                row = (self.offsets[class_a] + option_a) * self.size
                for class_b in range(class_a + 1, len(self.option_counts)):
                    base = self.offsets[class_b]
                    for option_b in range(self.option_counts[class_b]):
                        if self._data[row + base + option_b]:
                            yield class_a, option_a, class_b, option_b

    def count(self) -> int:
        """Number of conflicting ordered slot pairs."""
        return sum(self._data)


def build_conflict_matrix(classes: list[CourseClass]) -> ConflictMatrix:
    """Precompute the conflict relation for all (class, option) pairs."""
    matrix = ConflictMatrix([cls.option_count for cls in classes])

    for class_a, cls_a in enumerate(classes):
        for option_a, opt_a in enumerate(cls_a.options):
            slot_a = matrix.slot(class_a, option_a)

            # Different options of the same class are mutually exclusive
            for option_b in range(option_a + 1, cls_a.option_count):
                matrix.mark(slot_a, matrix.slot(class_a, option_b))

            for class_b in range(class_a + 1, len(classes)):
                for option_b, opt_b in enumerate(classes[class_b].options):
                    if options_conflict(opt_a, opt_b):
                        matrix.mark(slot_a, matrix.slot(class_b, option_b))

    return matrix
