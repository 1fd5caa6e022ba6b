# =============================================================================
# core/ordering.py - Ordered Draft State and Commit Planning
# =============================================================================
# Sections of a user, links in a section and photos in a section all share the
# same editing pattern:
#
#   load -> drag / add / remove locally -> "Save" -> reconcile with the store
#
# OrderedDraft is the value that holds one container's editing state. It keeps
# the last-known server order (`committed`, with its stored positions) next to
# the local order (`draft`), so computing the writes for a save is a pure
# function of the two.
#
# Nothing in this module talks to the database.
# =============================================================================

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable

from app.exceptions import InvalidReorderError

if TYPE_CHECKING:
    from core.journal import JournalStep


def array_move(items: list[str], from_index: int, to_index: int) -> list[str]:
    """
    Return a copy of `items` with one element moved.

    Negative indexes count from the end, like list indexing.
    """
    result = list(items)
    if not result:
        return result
    length = len(result)
    start = from_index + length if from_index < 0 else from_index
    end = to_index + length if to_index < 0 else to_index
    if not (0 <= start < length) or not (0 <= end < length):
        raise IndexError(f"move {from_index} -> {to_index} out of range for {length} items")
    item = result.pop(start)
    result.insert(end, item)
    return result


@dataclass(frozen=True)
class CommitPlan:
    """
    Writes needed to turn the committed order into the draft order.

    Attributes:
        to_remove: Members dropped from the container
        to_add: (member_id, position) for members new to the container,
            appended after the highest surviving position
        renumber: (member_id, position) for every member of the container,
            positions 0..n-1 in draft order; empty when the order the store
            would return already matches the draft
    """
    container_id: str
    to_remove: tuple[str, ...] = ()
    to_add: tuple[tuple[str, int], ...] = ()
    renumber: tuple[tuple[str, int], ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.to_remove or self.to_add or self.renumber)


@dataclass
class OrderedDraft:
    """
    Editing state of one ordered container.

    `committed` maps member id -> stored position as last read from (or
    written to) the store. `draft` is the local order. `dirty` is set by
    every local mutation and cleared only by a successful commit.

    Example:
        draft = OrderedDraft.from_rows("sec-1", [("l1", 0), ("l2", 1)])
        draft.reorder(["l2", "l1"])
        plan = draft.plan()
        # plan.renumber == (("l2", 0), ("l1", 1))
    """

    container_id: str
    committed: dict[str, int] = field(default_factory=dict)
    draft: list[str] = field(default_factory=list)
    dirty: bool = False

    @classmethod
    def from_rows(cls, container_id: str, rows: Iterable[tuple[str, int]]) -> OrderedDraft:
        """Build a clean draft from (member_id, position) pairs."""
        committed = {member_id: position for member_id, position in rows}
        draft = sorted(committed, key=lambda member_id: committed[member_id])
        return cls(container_id=container_id, committed=committed, draft=draft)

    # -------------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------------

    @property
    def committed_order(self) -> list[str]:
        """Committed members in ascending stored position."""
        return sorted(self.committed, key=lambda member_id: self.committed[member_id])

    def __len__(self) -> int:
        return len(self.draft)

    def __contains__(self, member_id: object) -> bool:
        return member_id in self.draft

    # -------------------------------------------------------------------------
    # Local mutations
    # -------------------------------------------------------------------------

    def reorder(self, new_ordered_ids: list[str]) -> None:
        """
        Replace the draft order with a permutation of itself.

        Raises:
            InvalidReorderError: If `new_ordered_ids` is not a permutation of
                the current draft ids
        """
        current = set(self.draft)
        proposed = set(new_ordered_ids)
        if len(new_ordered_ids) != len(proposed) or proposed != current:
            raise InvalidReorderError(
                self.container_id,
                missing=sorted(current - proposed),
                unexpected=sorted(proposed - current),
            )
        self.draft = list(new_ordered_ids)
        self.dirty = True

    def move(self, from_index: int, to_index: int) -> None:
        """Drag-and-drop: move one member to another index."""
        self.draft = array_move(self.draft, from_index, to_index)
        self.dirty = True

    def add(self, member_ids: Iterable[str]) -> None:
        """Append members that aren't in the draft yet, keeping their order."""
        for member_id in member_ids:
            if member_id not in self.draft:
                self.draft.append(member_id)
        self.dirty = True

    def remove(self, member_ids: Iterable[str]) -> None:
        """Drop members from the draft. Unknown ids are ignored."""
        dropped = set(member_ids)
        self.draft = [member_id for member_id in self.draft if member_id not in dropped]
        self.dirty = True

    def replace(self, member_ids: Iterable[str]) -> None:
        """Set the whole desired membership, in order. Duplicates keep their first position."""
        seen: set[str] = set()
        ordered = []
        for member_id in member_ids:
            if member_id not in seen:
                seen.add(member_id)
                ordered.append(member_id)
        self.draft = ordered
        self.dirty = True

    # -------------------------------------------------------------------------
    # Reconciliation
    # -------------------------------------------------------------------------

    def plan(self) -> CommitPlan:
        """
        Compute the writes for a save.

        1. to_remove = committed - draft
        2. to_add = draft - committed, placed at 1 + max(surviving positions)
           (0 for an empty container) plus their offset in draft order
        3. if the store would then list members in a different order than
           the draft, renumber every member to its draft index
        """
        if not self.dirty:
            return CommitPlan(container_id=self.container_id)

        desired = set(self.draft)
        to_remove = tuple(m for m in self.committed_order if m not in desired)

        survivors = {m: p for m, p in self.committed.items() if m in desired}
        next_position = max(survivors.values()) + 1 if survivors else 0
        added = [m for m in self.draft if m not in self.committed]
        to_add = tuple((m, next_position + offset) for offset, m in enumerate(added))

        projected = {**survivors, **dict(to_add)}
        projected_order = sorted(projected, key=lambda m: projected[m])
        renumber: tuple[tuple[str, int], ...] = ()
        # Duplicate positions (rows inserted without an index) list in no stable order
        has_ties = len(set(projected.values())) != len(projected)
        if projected_order != self.draft or has_ties:
            renumber = tuple((m, index) for index, m in enumerate(self.draft))

        return CommitPlan(
            container_id=self.container_id,
            to_remove=to_remove,
            to_add=to_add,
            renumber=renumber,
        )

    def absorb(self, step: JournalStep) -> None:
        """Fold one applied commit step into `committed`."""
        if step.removes:
            self.absorb_removed(step.member_ids)
        else:
            self.absorb_positions(step.positions)

    def absorb_removed(self, member_ids: Iterable[str]) -> None:
        """Record that membership rows were deleted in the store."""
        for member_id in member_ids:
            self.committed.pop(member_id, None)

    def absorb_positions(self, positions: Iterable[tuple[str, int]]) -> None:
        """Record that membership rows were written with these positions."""
        for member_id, position in positions:
            self.committed[member_id] = position

    def mark_committed(self) -> None:
        """
        Clear the dirty flag after every planned step was absorbed.

        Raises:
            ValueError: If `committed` still disagrees with the draft
        """
        if self.committed_order != self.draft:
            raise ValueError(f"Draft for {self.container_id} has unsaved changes")
        self.dirty = False
