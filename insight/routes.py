"""
Insight API Routes

Exposes the insight engine via REST API.
- POST /insights                      estimates for a posted snapshot
- GET  /insights/{email}              estimates for a registered student
- GET  /insights/{email}/walkthrough  display lines for a registered student
"""

import logging
from typing import Any, Dict
from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import ValidationError
from sqlalchemy.orm import Session

from db import get_db
from .logic.adapter import fetch_snapshot, snapshot_from_payload
from .logic.contracts import InsightOutput, InsightSnapshot, InvalidSnapshotError
from .logic.constants import ENGINE_VERSION
from .logic.engine import InsightEngine
from .logic.presenter import build_walkthrough

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/insights", tags=["insights"])

engine = InsightEngine()


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.get("/health", summary="Insight engine health check")
def health_check():
    """Check if insight engine is operational."""
    return {"status": "ok", "engine": "insight", "version": ENGINE_VERSION}


@router.post("", summary="Estimate ranks for a snapshot")
@router.post("/", summary="Estimate ranks for a snapshot", include_in_schema=False)
def estimate_snapshot(
    payload: Dict[str, Any] = Body(
        ...,
        examples=[{
            "student": {
                "gpa": 5.3,
                "has_failure": False,
                "preference_order": ["eth-zurich", "kth"],
                "authoritative_ranks": [3],
            },
            "agreements": [
                {
                    "agreement_id": "eth-zurich",
                    "capacity": 5,
                    "competing_grades": [5.8, 5.5, 5.2, 5.0],
                    "failure_boundary_index": -1,
                    "competing_candidates": [{"gpa": 5.9, "has_failure": False}],
                },
                {"agreement_id": "kth", "capacity": 2, "competing_grades": []},
            ],
        }],
    )
):
    """
    Compute per-choice estimates for a posted snapshot.

    **Request Body:**
    - `student`: gpa, failure flag, preference order and authoritative ranks
    - `agreements`: competitive data for every preferred agreement

    **Response:**
    - One estimate record per choice, in preference order
    """
    try:
        snapshot = snapshot_from_payload(payload)
        output = engine.estimate(snapshot)
    except (ValidationError, InvalidSnapshotError) as e:
        logger.warning(f"Rejected snapshot: {e}")
        raise HTTPException(status_code=400, detail=f"Invalid snapshot: {str(e)}")

    return _serialize_output(output)


@router.get("/{email}", summary="Estimate ranks for a registered student")
def estimate_student(email: str, db: Session = Depends(get_db)):
    """Read the student's snapshot from the database and estimate every choice."""
    output = _estimate_registered(db, email)
    return _serialize_output(output)


@router.get("/{email}/walkthrough", summary="Walkthrough lines for a registered student")
def walkthrough(email: str, db: Session = Depends(get_db)):
    """Display lines for each ranked agreement, most preferred first."""
    output = _estimate_registered(db, email)
    return {
        "student_id": output.student_id,
        "lines": [line.model_dump() for line in build_walkthrough(output)],
    }


def _estimate_registered(db: Session, email: str) -> InsightOutput:
    try:
        snapshot: InsightSnapshot | None = fetch_snapshot(db, email)
    except (ValidationError, InvalidSnapshotError) as e:
        logger.error(f"Stored snapshot for {email} is inconsistent: {e}")
        raise HTTPException(status_code=409, detail=f"Inconsistent stored data: {str(e)}")

    if snapshot is None:
        raise HTTPException(status_code=404, detail="Not registered")

    return engine.estimate(snapshot)


def _serialize_output(output: InsightOutput) -> Dict[str, Any]:
    """Convert InsightOutput to a JSON-serializable dict."""
    return {
        "student_id": output.student_id,
        "summary": {
            "total_choices": output.total_choices,
            "spare_choices": output.spare_choices,
            "admitted_choices": output.admitted_choices,
        },
        "estimates": [e.model_dump(mode="json") for e in output.estimates],
        "warnings": output.warnings,
        "engine_version": output.engine_version,
    }
