"""
Choice Classifier

Places a choice in the student's preference order:
- Ranked (covered by the authoritative allocation)
- Spare (past the end of the authoritative rank list)
"""

from typing import List, Sequence
from .contracts import ChoiceSlot, InvalidSnapshotError, StudentStanding


def classify_choice(
    preference_order: Sequence[str],
    authoritative_ranks: Sequence[int],
    index: int
) -> ChoiceSlot:
    """
    Classify the choice at `index` (0-based) of the preference order.

    Args:
        preference_order: Agreement ids, most preferred first
        authoritative_ranks: Externally allocated ranks for a prefix of the order
        index: Position of the choice

    Returns:
        ChoiceSlot with the 1-based display position and spare flag
    """
    if not 0 <= index < len(preference_order):
        raise InvalidSnapshotError(
            f"choice index {index} outside preference order of length {len(preference_order)}"
        )

    return ChoiceSlot(
        index=index,
        rank_position=index + 1,
        is_spare_choice=len(authoritative_ranks) <= index,
    )


def classify_all(student: StudentStanding) -> List[ChoiceSlot]:
    """Classify every choice of a student, in preference order."""
    return [
        classify_choice(student.preference_order, student.authoritative_ranks, i)
        for i in range(len(student.preference_order))
    ]


def count_spare_choices(slots: Sequence[ChoiceSlot]) -> int:
    return sum(1 for slot in slots if slot.is_spare_choice)
