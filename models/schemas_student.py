from pydantic import BaseModel, EmailStr, Field, StrictBool, field_validator
from datetime import datetime
from typing import List

from insight.logic.constants import DEFAULT_STUDY_YEAR, GPA_MAX, GPA_MIN, SECTIONS, STUDY_YEARS

class StudentRegister(BaseModel):
    email: EmailStr
    name: str | None = None
    section: str
    year: int = DEFAULT_STUDY_YEAR
    gpa: float = Field(ge=GPA_MIN, le=GPA_MAX)
    fail: StrictBool

    @field_validator("section")
    @classmethod
    def _known_section(cls, value: str) -> str:
        value = value.strip().upper()
        if value not in SECTIONS:
            raise ValueError("Invalid section")
        return value

    @field_validator("year")
    @classmethod
    def _known_year(cls, value: int) -> int:
        if value not in STUDY_YEARS:
            raise ValueError("Invalid year")
        return value

class PreferenceUpdate(BaseModel):
    agreements: List[str]

class StudentOut(BaseModel):
    id: int
    email: EmailStr
    name: str | None
    section: str
    year: int
    gpa: float
    fail: bool
    agreement_order: List[str]
    alpha_ranks: List[int]
    created_at: datetime
    class Config:
        from_attributes = True

class AgreementOut(BaseModel):
    id: str
    university: str
    region_code: str
    places: int
