"""
Snapshot Adapter for the Insight Engine

Reads students and agreements from the production tables and transforms
them into the frozen contracts the engine consumes.

This is a pure READ + TRANSFORM layer:
- NO estimation logic
- NO DB writes
"""

import logging
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session

from models.models import Agreement, Student
from utils.crud_student import get_student_by_email, list_agreements, competitors_by_agreement
from .contracts import (
    AgreementStanding,
    CompetingCandidate,
    InsightSnapshot,
    InvalidSnapshotError,
    StudentStanding,
)
from .constants import HOME_REGION_CODE, NO_FAILURE_BOUNDARY
from .eligibility import AgreementOffer

logger = logging.getLogger(__name__)


def student_to_standing(student: Student) -> StudentStanding:
    """Convert a Student row into a StudentStanding."""
    return StudentStanding(
        student_id=student.email,
        gpa=student.gpa,
        has_failure=bool(student.fail),
        preference_order=tuple(student.agreement_order or ()),
        authoritative_ranks=tuple(student.alpha_ranks or ()),
    )


def agreement_to_standing(
    agreement: Agreement,
    competitors: List[Student]
) -> AgreementStanding:
    """
    Convert an Agreement row plus its competitors into an AgreementStanding.

    Competitors keep the order they were fetched in; the candidate-list
    estimate depends on it.
    """
    fail_idx = agreement.fail_idx if agreement.fail_idx is not None else NO_FAILURE_BOUNDARY
    return AgreementStanding(
        agreement_id=agreement.id,
        capacity=agreement.places,
        competing_grades=list(agreement.grades or []),
        failure_boundary_index=fail_idx,
        competing_candidates=[
            CompetingCandidate(gpa=c.gpa, has_failure=bool(c.fail))
            for c in competitors
        ],
    )


def agreement_to_offer(agreement: Agreement) -> AgreementOffer:
    region = agreement.university.region_code if agreement.university else HOME_REGION_CODE
    return AgreementOffer(
        agreement_id=agreement.id,
        sections=tuple(s.upper() for s in (agreement.sections or [])),
        region_code=region or HOME_REGION_CODE,
    )


def fetch_snapshot(db: Session, email: str) -> Optional[InsightSnapshot]:
    """
    Read the snapshot for one student.

    Args:
        db: Database session
        email: Student email

    Returns:
        InsightSnapshot, or None when the student is not registered

    Raises:
        InvalidSnapshotError: when a preferred agreement no longer exists
    """
    student = get_student_by_email(db, email)
    if student is None:
        logger.debug(f"No student registered as {email}")
        return None

    order = list(student.agreement_order or [])
    agreements = {a.id: a for a in list_agreements(db, order)}

    missing = [a for a in order if a not in agreements]
    if missing:
        logger.warning(f"Student {student.email} ranks unknown agreements: {missing}")
        raise InvalidSnapshotError(f"unknown agreements in preference order: {missing}")

    competitors = competitors_by_agreement(db, order, exclude_student_id=student.id)
    standings = [agreement_to_standing(agreements[a], competitors[a]) for a in order]
    logger.debug(f"Snapshot for {student.email}: {len(standings)} agreements")

    return InsightSnapshot(
        student=student_to_standing(student),
        agreements=tuple(standings),
    )


def fetch_offers(db: Session) -> Dict[str, AgreementOffer]:
    """All agreements as access-rule offers, keyed by id."""
    return {a.id: agreement_to_offer(a) for a in list_agreements(db)}


def snapshot_from_payload(payload: Dict[str, Any]) -> InsightSnapshot:
    """
    Build a snapshot from a JSON body.

    Expects {"student": {...}, "agreements": [{...}, ...]} with agreements in
    the flat wire form (competing_grades, failure_boundary_index).
    """
    if not isinstance(payload, dict) or "student" not in payload:
        raise InvalidSnapshotError("snapshot payload needs a 'student' object")
    return InsightSnapshot(
        student=payload["student"],
        agreements=payload.get("agreements") or [],
    )
