"""
Estimate Composer

Combines the classifier and the three estimators into one record per
agreement. Alpha drives the admission display when present; Bravo takes
over for spare choices; Charlie is always informational.
"""

from functools import lru_cache

from .contracts import AgreementStanding, ChoiceEstimate, InvalidSnapshotError, StudentStanding
from .classifier import classify_choice
from .estimators import (
    estimate_candidate_list,
    estimate_grade_threshold,
    read_authoritative_rank,
)


@lru_cache(maxsize=4096)
def compose_estimate(
    student: StudentStanding,
    standing: AgreementStanding,
    index: int
) -> ChoiceEstimate:
    """
    Build the estimate record for the choice at `index`.

    Inputs are frozen contracts, so the result is memoized on them.

    Args:
        student: The student's standing
        standing: Competitive data of the agreement at preference_order[index]
        index: 0-based position in the preference order

    Returns:
        ChoiceEstimate
    """
    slot = classify_choice(student.preference_order, student.authoritative_ranks, index)

    expected_id = student.preference_order[index]
    if standing.agreement_id != expected_id:
        raise InvalidSnapshotError(
            f"standing for {standing.agreement_id} given at choice #{slot.rank_position}, "
            f"which is {expected_id}"
        )

    return ChoiceEstimate(
        agreement_id=standing.agreement_id,
        rank_position=slot.rank_position,
        is_spare_choice=slot.is_spare_choice,
        capacity=standing.capacity,
        alpha=read_authoritative_rank(student, standing, slot),
        bravo=estimate_grade_threshold(student, standing),
        charlie=estimate_candidate_list(student, standing),
    )

