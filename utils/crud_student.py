from typing import Dict, List, Sequence
from sqlalchemy.orm import Session
from sqlalchemy import select
from models.models import Agreement, Student

def get_student_by_email(db: Session, email: str) -> Student | None:
    return db.execute(select(Student).where(Student.email == email.lower())).scalar_one_or_none()

def create_student(db: Session, *, email: str, name: str | None, section: str, year: int, gpa: float, fail: bool) -> Student:
    student = Student(email=email.lower(), name=name, section=section, year=year, gpa=gpa, fail=fail,
                      agreement_order=[], alpha_ranks=[])
    db.add(student)
    db.flush()
    return student

def delete_student(db: Session, student: Student) -> None:
    db.delete(student)
    db.flush()

def set_agreement_order(db: Session, student: Student, agreement_ids: Sequence[str]) -> Student:
    """
    Replace the preference order.

    Authoritative ranks are index-aligned with the order, so only those on the
    unchanged leading choices are kept.
    """
    old_order = list(student.agreement_order or [])
    new_order = list(agreement_ids)
    unchanged = 0
    for old_id, new_id in zip(old_order, new_order):
        if old_id != new_id:
            break
        unchanged += 1
    # assign fresh lists so the JSON columns are flagged dirty
    student.alpha_ranks = list(student.alpha_ranks or [])[:unchanged]
    student.agreement_order = new_order
    db.flush()
    return student

def list_agreements(db: Session, ids: Sequence[str] | None = None) -> List[Agreement]:
    query = select(Agreement).order_by(Agreement.id)
    if ids is not None:
        query = query.where(Agreement.id.in_(list(ids)))
    return list(db.execute(query).scalars().all())

def competitors_by_agreement(db: Session, agreement_ids: Sequence[str], exclude_student_id: int | None = None) -> Dict[str, List[Student]]:
    """Other students who ranked each agreement, in registration order. One table read."""
    buckets: Dict[str, List[Student]] = {a: [] for a in agreement_ids}
    query = select(Student).order_by(Student.id)
    if exclude_student_id is not None:
        query = query.where(Student.id != exclude_student_id)
    for s in db.execute(query).scalars():
        for agreement_id in set(s.agreement_order or []):
            if agreement_id in buckets:
                buckets[agreement_id].append(s)
    return buckets
