"""Numbering engine: section numbers, figure/table sequences and rename plans.

Everything here is pure: functions take the current numbers and return the new
number or an ordered rename plan. Callers apply plans to storage.
"""

from collections.abc import Hashable, Iterable, Sequence
from dataclasses import dataclass, field
from typing import TypeVar

from docgen.document.models import MAX_SECTION_LEVEL, SectionNumber
from docgen.errors import ValidationFailedError

K = TypeVar("K", bound=Hashable)


def validate_level(level: int) -> int:
    """Check a section level is within 1..6."""
    if not isinstance(level, int) or level < 1 or level > MAX_SECTION_LEVEL:
        raise ValidationFailedError(
            f"section level must be between 1 and {MAX_SECTION_LEVEL}, got {level}",
            kind="section",
            key=level,
        )
    return level


@dataclass
class SectionNode:
    """A node in the section tree; the root node is the chapter itself."""

    number: SectionNumber
    parent: int | None
    children: list[int] = field(default_factory=list)


class SectionTree:
    """Arena of section nodes linked by parent index.

    Built from a chapter's section numbers. A number whose ancestors are not
    stored (e.g. "1.2.1.1" without "1.2.1") gets implied ancestor nodes, so
    every stored number has a complete path to the chapter root.
    """

    def __init__(self, chapter_number: int, numbers: Iterable[SectionNumber] = ()):
        self.chapter_number = chapter_number
        self.nodes: list[SectionNode] = [SectionNode(number=(chapter_number,), parent=None)]
        self._index: dict[SectionNumber, int] = {(chapter_number,): 0}
        for number in numbers:
            number = tuple(number)
            if len(number) < 2 or number[0] != chapter_number:
                continue
            self._insert(number)

    def _insert(self, number: SectionNumber) -> int:
        existing = self._index.get(number)
        if existing is not None:
            return existing

        parent = self._insert(number[:-1])
        index = len(self.nodes)
        self.nodes.append(SectionNode(number=number, parent=parent))
        self.nodes[parent].children.append(index)
        self._index[number] = index
        return index

    def last_child(self, index: int) -> int | None:
        """The child with the highest number under a node, if any."""
        children = self.nodes[index].children
        if not children:
            return None
        return max(children, key=lambda child: self.nodes[child].number[-1])

    def next_number(self, level: int) -> SectionNumber:
        """Number for a new section appended at ``level``.

        Walks from the chapter root into the last child at each depth down to
        ``level - 1``; the new section becomes the next child of that node.
        Missing intermediate levels continue with 1.
        """
        validate_level(level)
        number = self.nodes[0].number
        node: int | None = 0
        for _ in range(level - 1):
            child = self.last_child(node) if node is not None else None
            if child is None:
                number = number + (1,)
                node = None
            else:
                number = self.nodes[child].number
                node = child

        last = self.last_child(node) if node is not None else None
        next_value = self.nodes[last].number[-1] + 1 if last is not None else 1
        return number + (next_value,)


def next_section_number(
    chapter_number: int, existing: Iterable[SectionNumber], level: int
) -> SectionNumber:
    """Compute the number of a new section in a chapter.

    Args:
        chapter_number: Number of the owning chapter
        existing: Numbers of the chapter's current sections
        level: Target level, 1 (``1.x``) to 6

    Returns:
        The new section number; its first part is the chapter number.
    """
    return SectionTree(chapter_number, existing).next_number(level)


def next_sequence(existing: Iterable[int]) -> int:
    """Next figure/table sequence: highest existing plus one, or 1.

    Gaps left by earlier removals are never back-filled here.
    """
    return max(existing, default=0) + 1


def descendants_of(numbers: Iterable[SectionNumber], number: SectionNumber) -> list[SectionNumber]:
    """All numbers strictly below ``number`` (longer, with ``number`` as prefix)."""
    number = tuple(number)
    depth = len(number)
    return [
        tuple(candidate)
        for candidate in numbers
        if len(candidate) > depth and tuple(candidate[:depth]) == number
    ]


def renumber_after_section_delete(
    numbers: Iterable[SectionNumber], deleted: SectionNumber
) -> list[tuple[SectionNumber, SectionNumber]]:
    """Renames needed once ``deleted`` is gone.

    A number changes when it is longer than the deleted number's level, shares
    the deleted number's prefix up to that level, and has a greater value at
    that level; that value is decremented. Everything else is untouched.

    Args:
        numbers: Remaining section numbers in the chapter
        deleted: The removed section number

    Returns:
        (old, new) pairs for the numbers that change, in ascending order.
    """
    deleted = tuple(deleted)
    level = len(deleted) - 1
    if level < 1:
        return []

    renames: list[tuple[SectionNumber, SectionNumber]] = []
    for number in numbers:
        number = tuple(number)
        if len(number) <= level:
            continue
        if number[:level] != deleted[:level]:
            continue
        if number[level] > deleted[level]:
            renamed = number[:level] + (number[level] - 1,) + number[level + 1 :]
            renames.append((number, renamed))
    return sorted(renames)


def renumber_sequence_after_delete(
    sequences: Iterable[int], deleted: int
) -> list[tuple[int, int]]:
    """Sequences above ``deleted`` move down by one, lowest first."""
    return [(sequence, sequence - 1) for sequence in sorted(sequences) if sequence > deleted]


def relabel_section_number(number: SectionNumber, chapter_number: int) -> SectionNumber:
    """Replace the leading chapter component of a section number."""
    return (chapter_number,) + tuple(number[1:])


def check_rename_plan(plan: Sequence[tuple[K, K]], existing: Iterable[K]) -> None:
    """Simulate a rename plan and reject it if any step would collide.

    Args:
        plan: Ordered (old, new) pairs
        existing: Keys occupied before the plan runs

    Raises:
        ValidationFailedError: If a source is missing or a target is occupied
            at the moment its step runs.
    """
    occupied = set(existing)
    for old, new in plan:
        if old not in occupied:
            raise ValidationFailedError(
                f"rename plan moves missing key {old!r}", kind="rename", key=old
            )
        if new in occupied and new != old:
            raise ValidationFailedError(
                f"rename plan collides: {old!r} -> {new!r} is occupied", kind="rename", key=new
            )
        occupied.discard(old)
        occupied.add(new)


def order_renames(renames: Iterable[tuple[K, K]], existing: Iterable[K]) -> list[tuple[K, K]]:
    """Order renames so no step lands on an occupied key.

    Args:
        renames: Unordered (old, new) pairs
        existing: Keys occupied before any rename runs

    Returns:
        The same pairs in an order that is safe to apply one by one.

    Raises:
        ValidationFailedError: If two renames share a target or the renames form
            a cycle that cannot be applied without staging.
    """
    pending = {old: new for old, new in renames if old != new}
    targets = list(pending.values())
    if len(set(targets)) != len(targets):
        raise ValidationFailedError("rename plan maps two keys to one target", kind="rename")

    occupied = set(existing)
    ordered: list[tuple[K, K]] = []
    while pending:
        ready = next((old for old, new in pending.items() if new not in occupied), None)
        if ready is None:
            raise ValidationFailedError(
                f"rename plan cannot be ordered without collisions: {pending!r}", kind="rename"
            )
        new = pending.pop(ready)
        occupied.discard(ready)
        occupied.add(new)
        ordered.append((ready, new))
    return ordered


def plan_chapter_shift(
    chapter_numbers: Iterable[int], start: int, offset: int
) -> list[tuple[int, int]]:
    """Plan moving every chapter numbered ``>= start`` by ``offset``.

    Upward shifts (insertion) run highest first; downward shifts (deletion) run
    lowest first.

    Args:
        chapter_numbers: Chapter numbers currently in storage
        start: First chapter number to move
        offset: +1 to make room, -1 to close a gap

    Returns:
        Ordered (old, new) chapter renames.
    """
    numbers = list(chapter_numbers)
    if offset == 0:
        return []
    affected = sorted((number for number in numbers if number >= start), reverse=offset > 0)
    plan = [(number, number + offset) for number in affected]
    for _, new in plan:
        if new < 1:
            raise ValidationFailedError(
                f"chapter shift would produce chapter {new}", kind="chapter", key=new
            )
    check_rename_plan(plan, numbers)
    return plan


def plan_chapter_reorder(ordered_numbers: Sequence[int]) -> list[tuple[int, int]]:
    """Plan renames so chapters listed in their new order occupy 1..N.

    Every chapter whose number changes is first moved to a free staging number
    above all current and target numbers, then to its target. This keeps
    cyclic moves (3 -> 1, 1 -> 2, 2 -> 3) collision free.

    Args:
        ordered_numbers: Current chapter numbers, in the desired final order

    Returns:
        Ordered (old, new) renames, staging steps first.
    """
    moves = [
        (number, position)
        for position, number in enumerate(ordered_numbers, start=1)
        if number != position
    ]
    if not moves:
        return []

    staging_base = max(max(ordered_numbers), len(ordered_numbers))
    staged = [(old, staging_base + index) for index, (old, _) in enumerate(moves, start=1)]
    final = [
        (staging_base + index, target) for index, (_, target) in enumerate(moves, start=1)
    ]
    plan = staged + final
    check_rename_plan(plan, ordered_numbers)
    return plan
