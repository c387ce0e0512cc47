from datetime import datetime
from sqlalchemy import JSON, Boolean, Column, DateTime, Float, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from db import Base


class University(Base):
    __tablename__ = "universities"
    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    country = Column(String(128))
    region_code = Column(String(8), nullable=False, default="EUR")

    agreements = relationship("Agreement", back_populates="university")


class Agreement(Base):
    __tablename__ = "agreements"
    id = Column(String(64), primary_key=True)
    university_id = Column(Integer, ForeignKey("universities.id"), nullable=False)
    places = Column(Integer, nullable=False, default=1)
    sections = Column(JSON, nullable=False, default=list)

    # Published by the allocation round: competing grades from highest
    # priority to lowest, and the index where failed applicants start.
    grades = Column(JSON, nullable=False, default=list)
    fail_idx = Column(Integer, nullable=False, default=-1)

    university = relationship("University", back_populates="agreements")


class Student(Base):
    __tablename__ = "students"
    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(255))
    section = Column(String(8), nullable=False)
    year = Column(Integer, nullable=False, default=2)
    gpa = Column(Float, nullable=False)
    fail = Column(Boolean, nullable=False, default=False)

    # Ordered agreement ids, most preferred first
    agreement_order = Column(JSON, nullable=False, default=list)
    # Authoritative ranks for a prefix of agreement_order
    alpha_ranks = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime(timezone=False), default=datetime.utcnow, nullable=False)
