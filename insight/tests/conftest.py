import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from db import Base, get_db, session_scope
from models.models import Agreement, Student, University
from insight.logic.contracts import AgreementStanding, StudentStanding


# ── Contract factories ────────────────────────────────────────────────────────

SCENARIO_GRADES = [5.8, 5.5, 5.2, 5.0, 4.8, 4.5]


def make_student(gpa=5.3, has_failure=False, order=("A",), ranks=()):
    return StudentStanding(
        student_id="student@epfl.ch",
        gpa=gpa,
        has_failure=has_failure,
        preference_order=tuple(order),
        authoritative_ranks=tuple(ranks),
    )


def make_standing(agreement_id="A", capacity=5, grades=(), boundary=-1, candidates=()):
    return AgreementStanding(
        agreement_id=agreement_id,
        capacity=capacity,
        competing_grades=list(grades),
        failure_boundary_index=boundary,
        competing_candidates=[{"gpa": g, "has_failure": f} for g, f in candidates],
    )


# ── Database fixtures ─────────────────────────────────────────────────────────

@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    yield factory
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def seeded_db(db):
    """Two universities, three agreements, and two competing students."""
    epfl_partner = University(id=1, name="ETH Zurich", country="Switzerland", region_code="EUR")
    overseas = University(id=2, name="University of Toronto", country="Canada", region_code="NAM")
    db.add_all([epfl_partner, overseas])
    db.add_all([
        Agreement(id="eth-in", university_id=1, places=5, sections=["IN", "SC"],
                  grades=SCENARIO_GRADES, fail_idx=4),
        Agreement(id="eth-ma", university_id=1, places=2, sections=["MA"],
                  grades=[5.9, 5.1], fail_idx=-1),
        Agreement(id="uoft-in", university_id=2, places=1, sections=["IN"],
                  grades=[5.6], fail_idx=-1),
    ])
    db.add_all([
        Student(email="first@epfl.ch", name="First", section="IN", year=3, gpa=5.9,
                fail=False, agreement_order=["eth-in"], alpha_ranks=[1]),
        Student(email="second@epfl.ch", name="Second", section="SC", year=2, gpa=5.0,
                fail=True, agreement_order=["eth-in"], alpha_ranks=[]),
    ])
    db.commit()
    return db


@pytest.fixture
def client(session_factory):
    from fastapi.testclient import TestClient
    from main import app

    def _test_db():
        yield from session_scope(session_factory)

    app.dependency_overrides[get_db] = _test_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
