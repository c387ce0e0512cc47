"""
Rank Estimators

One function per estimation strategy. Each takes the student's standing and
the competitive data of one agreement and returns a rank.
All logic is deterministic and side-effect free.

- Alpha: the authoritative rank, read as-is from the external allocation
- Bravo: insertion point into the grade ladder, honoring failure priority
- Charlie: first weaker candidate in the raw candidate list
"""

from typing import Optional
from .contracts import (
    AgreementStanding,
    ChoiceSlot,
    OriginalRank,
    RankEstimate,
    StudentStanding,
)
from .constants import EstimateMethod


def read_authoritative_rank(
    student: StudentStanding,
    standing: AgreementStanding,
    slot: ChoiceSlot
) -> Optional[RankEstimate]:
    """
    Surface the externally allocated rank for a ranked choice.

    Returns None for spare choices: they were not part of the allocation
    round, so there is nothing to read.
    """
    if slot.is_spare_choice:
        return None

    rank = student.authoritative_ranks[slot.index]
    return RankEstimate(
        method=EstimateMethod.ALPHA,
        rank=rank,
        admitted=rank <= standing.capacity,
    )


def estimate_grade_threshold(
    student: StudentStanding,
    standing: AgreementStanding
) -> RankEstimate:
    """
    Estimate the rank from the competing grade ladder.

    A student without a failure competes from the top of the ladder. A
    student with one cannot pass anyone in the clear segment, so the scan
    starts at the failure boundary. Ties go to the incumbent.
    """
    ladder = standing.ladder
    grades = ladder.grades
    offset = ladder.failure_boundary_index if student.has_failure else 0

    insertion = next(
        (i for i in range(offset, len(grades)) if grades[i] < student.gpa),
        len(grades)
    )
    rank = insertion + 1

    return RankEstimate(
        method=EstimateMethod.BRAVO,
        rank=rank,
        admitted=rank <= standing.capacity,
    )


def estimate_candidate_list(
    student: StudentStanding,
    standing: AgreementStanding
) -> OriginalRank:
    """
    Estimate the rank from the raw candidate list, in list order.

    The student lands before the first candidate that is either penalized
    while the student is not, or has a GPA no higher than the student's.
    """
    candidates = standing.competing_candidates

    position = next(
        (
            i for i, c in enumerate(candidates)
            if (not student.has_failure and c.has_failure) or c.gpa <= student.gpa
        ),
        len(candidates)
    )

    return OriginalRank(rank=position + 1)
