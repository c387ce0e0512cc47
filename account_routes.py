"""
Account API Routes

Register students, manage their preference order, and remove accounts.
Authentication happens upstream; routes are keyed by email.
"""

import logging
from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import ValidationError
from sqlalchemy.orm import Session
from typing import Any, Dict

from db import get_db
from insight.logic.adapter import agreement_to_offer, fetch_offers
from insight.logic.eligibility import PreferenceRejectedError, check_preference_access, filter_accessible
from models.schemas_student import AgreementOut, PreferenceUpdate, StudentOut, StudentRegister
from utils.crud_student import create_student, delete_student, get_student_by_email, list_agreements, set_agreement_order

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/account", tags=["account"])


# ─────────────────────────────────────────────
# POST /api/account
# ─────────────────────────────────────────────
@router.post("", status_code=201, summary="Register student account")
def register(payload: Dict[str, Any] = Body(...), db: Session = Depends(get_db)):
    """
    Register a student with section, year, GPA and failure flag.
    Returns 400 on invalid fields, 409 if the email is already registered.
    """
    try:
        data = StudentRegister(**payload)
    except ValidationError as e:
        logger.warning(f"Rejected registration: {e.errors()}")
        raise HTTPException(status_code=400, detail=_first_error(e))

    if get_student_by_email(db, data.email):
        raise HTTPException(status_code=409, detail="Already registered")
    student = create_student(db, email=data.email, name=data.name, section=data.section,
                             year=data.year, gpa=data.gpa, fail=data.fail)
    logger.info(f"Registered student {student.email} ({student.section}, year {student.year})")
    return StudentOut.model_validate(student).model_dump(mode="json")


# ─────────────────────────────────────────────
# GET /api/account/{email}
# ─────────────────────────────────────────────
@router.get("/{email}", summary="Fetch student account")
def get_account(email: str, db: Session = Depends(get_db)):
    student = get_student_by_email(db, email)
    if not student:
        raise HTTPException(status_code=404, detail="Not registered")
    return StudentOut.model_validate(student).model_dump(mode="json")


# ─────────────────────────────────────────────
# GET /api/account/{email}/agreements/available
# ─────────────────────────────────────────────
@router.get("/{email}/agreements/available", summary="Agreements the student may rank")
def available_agreements(email: str, db: Session = Depends(get_db)):
    student = get_student_by_email(db, email)
    if not student:
        raise HTTPException(status_code=404, detail="Not registered")
    agreements = list_agreements(db)
    allowed = {o.agreement_id for o in filter_accessible(
        student.section, student.gpa, [agreement_to_offer(a) for a in agreements]
    )}
    return [
        AgreementOut(
            id=a.id,
            university=a.university.name,
            region_code=a.university.region_code,
            places=a.places,
        ).model_dump()
        for a in agreements if a.id in allowed
    ]


# ─────────────────────────────────────────────
# PATCH /api/account/{email}/agreements
# ─────────────────────────────────────────────
@router.patch("/{email}/agreements", summary="Replace preference order")
def update_agreements(email: str, payload: Dict[str, Any] = Body(...), db: Session = Depends(get_db)):
    """
    Replace the student's preference order after checking access rules.
    """
    try:
        update = PreferenceUpdate(**payload)
    except ValidationError:
        raise HTTPException(status_code=400, detail="Invalid agreements")

    student = get_student_by_email(db, email)
    if not student:
        raise HTTPException(status_code=404, detail="Not registered")

    try:
        check_preference_access(student.section, student.gpa, update.agreements, fetch_offers(db))
    except PreferenceRejectedError as e:
        logger.warning(f"Preference update for {student.email} rejected: {e.reason} {e.agreement_ids}")
        raise HTTPException(status_code=400, detail={"error": e.reason, "agreements": e.agreement_ids})

    set_agreement_order(db, student, update.agreements)
    logger.info(f"Student {student.email} ranked {len(update.agreements)} agreements")
    return StudentOut.model_validate(student).model_dump(mode="json")


# ─────────────────────────────────────────────
# DELETE /api/account/{email}
# ─────────────────────────────────────────────
@router.delete("/{email}", summary="Delete student account")
def delete_account(email: str, db: Session = Depends(get_db)):
    student = get_student_by_email(db, email)
    if not student:
        raise HTTPException(status_code=404, detail="Not registered")
    delete_student(db, student)
    logger.info(f"Deleted student {email}")
    return {"status": "ok", "message": "Account deleted"}


def _first_error(error: ValidationError) -> str:
    errors = error.errors()
    if not errors:
        return "Invalid fields"
    first = errors[0]
    if first.get("type") == "missing":
        return "Missing fields"
    field = ".".join(str(p) for p in first.get("loc", ()))
    return f"Invalid {field}" if field else "Invalid fields"
