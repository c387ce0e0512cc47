"""
Insight Engine

Main orchestrator that runs the estimate composer over a student's whole
preference list. This is the primary entry point for computing insights.
"""

import logging
import os
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional, Sequence

from .contracts import (
    AgreementStanding,
    ChoiceEstimate,
    InsightOutput,
    InsightSnapshot,
    InvalidSnapshotError,
    StudentStanding,
)
from .composer import compose_estimate
from .constants import ENGINE_VERSION

logger = logging.getLogger(__name__)


def _default_max_workers() -> int:
    return max(1, int(os.getenv("INSIGHT_MAX_WORKERS", "1")))


def align_standings(
    student: StudentStanding,
    standings: Sequence[AgreementStanding]
) -> List[AgreementStanding]:
    """
    Order standings by the student's preference order.

    Every preferred agreement needs exactly one standing, and every standing
    must belong to a preferred agreement.
    """
    by_id: Dict[str, AgreementStanding] = {}
    for standing in standings:
        if standing.agreement_id in by_id:
            raise InvalidSnapshotError(f"duplicate standing for {standing.agreement_id}")
        by_id[standing.agreement_id] = standing

    unranked = set(by_id) - set(student.preference_order)
    if unranked:
        raise InvalidSnapshotError(
            f"standings for agreements not in preference order: {sorted(unranked)}"
        )

    missing = [a for a in student.preference_order if a not in by_id]
    if missing:
        raise InvalidSnapshotError(f"no standing for preferred agreements: {missing}")

    return [by_id[a] for a in student.preference_order]


class InsightEngine:
    """
    Computes per-choice estimates for a student.

    Pipeline flow:
    1. Alignment - Order standings by preference order
    2. Composition - Classify and estimate each choice independently
    3. Summary - Count spare and admitted choices
    """

    def __init__(self, max_workers: Optional[int] = None):
        """
        Args:
            max_workers: Threads used to compose choices. Defaults to the
                INSIGHT_MAX_WORKERS environment variable.
        """
        self.max_workers = max_workers if max_workers is not None else _default_max_workers()
        self.version = ENGINE_VERSION

    def estimate(self, snapshot: InsightSnapshot) -> InsightOutput:
        """
        Compute estimates for every choice of the snapshot's student.

        Returns:
            InsightOutput with estimates in preference order
        """
        start_time = time.perf_counter()
        student = snapshot.student

        logger.info(
            f"Starting insight pipeline for student: {student.student_id or 'anonymous'} "
            f"({len(student.preference_order)} choices)"
        )

        aligned = align_standings(student, snapshot.agreements)
        estimates = self._compose(student, aligned)

        output = InsightOutput(
            student_id=student.student_id,
            estimates=estimates,
            total_choices=len(estimates),
            spare_choices=sum(1 for e in estimates if e.is_spare_choice),
            admitted_choices=sum(1 for e in estimates if e.primary.admitted),
            engine_version=self.version,
            warnings=_generate_warnings(student, estimates),
        )

        elapsed = (time.perf_counter() - start_time) * 1000
        logger.info(
            f"Insight pipeline complete: {output.total_choices} choices, "
            f"{output.spare_choices} spare, {output.admitted_choices} admitted ({elapsed:.2f}ms)"
        )
        return output

    def estimate_from_dict(self, payload: Dict[str, Any]) -> InsightOutput:
        """
        Compute estimates from a dictionary snapshot.

        Convenience method for API integration.
        """
        return self.estimate(InsightSnapshot(**payload))

    def estimate_choice(
        self,
        student: StudentStanding,
        standing: AgreementStanding
    ) -> ChoiceEstimate:
        """Estimate a single agreement, located by id in the preference order."""
        try:
            index = student.preference_order.index(standing.agreement_id)
        except ValueError:
            raise InvalidSnapshotError(
                f"{standing.agreement_id} is not in the preference order"
            ) from None
        return compose_estimate(student, standing, index)

    def _compose(
        self,
        student: StudentStanding,
        aligned: List[AgreementStanding]
    ) -> List[ChoiceEstimate]:
        indices = range(len(aligned))
        if self.max_workers <= 1 or len(aligned) <= 1:
            return [compose_estimate(student, aligned[i], i) for i in indices]

        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            return list(pool.map(lambda i: compose_estimate(student, aligned[i], i), indices))


def _generate_warnings(
    student: StudentStanding,
    estimates: List[ChoiceEstimate]
) -> List[str]:
    warnings: List[str] = []

    if not estimates:
        warnings.append("No agreements ranked yet.")
    elif not any(e.primary.admitted for e in estimates):
        warnings.append("None of the ranked agreements currently admits you.")

    if estimates and not student.authoritative_ranks:
        warnings.append("No allocation published yet: every choice uses the grade estimate.")

    return warnings


# Convenience function for simple usage
def get_insights(
    snapshot: InsightSnapshot,
    max_workers: Optional[int] = None
) -> InsightOutput:
    """
    Convenience function to compute insights.

    Args:
        snapshot: Student profile and agreement standings
        max_workers: Optional fan-out width

    Returns:
        InsightOutput
    """
    engine = InsightEngine(max_workers)
    return engine.estimate(snapshot)
