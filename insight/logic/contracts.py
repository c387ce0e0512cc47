"""
Data Contracts for the Placement Insight Engine

Defines Pydantic models for the standing snapshot (input) and the per-choice
estimates (output). These contracts are the API boundary of the estimator.

Every contract is frozen: snapshots are read-only and hashable, so estimates
can be memoized by snapshot identity.
"""

from typing import Any, List, Optional, Sequence, Tuple
from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator, model_validator

from .constants import (
    EstimateMethod,
    ENGINE_VERSION,
    GPA_MAX,
    GPA_MIN,
    MIN_CAPACITY,
    NO_FAILURE_BOUNDARY,
)


class InvalidSnapshotError(ValueError):
    """A snapshot is internally inconsistent (ids, indices, alignment)."""


# =============================================================================
# INPUT CONTRACTS
# =============================================================================

class StudentStanding(BaseModel):
    """
    The student's own side of the snapshot.

    authoritative_ranks is index-aligned with a prefix of preference_order;
    choices past its end are spare choices.
    """
    model_config = ConfigDict(frozen=True)

    student_id: Optional[str] = None
    gpa: float = Field(ge=GPA_MIN, le=GPA_MAX)
    has_failure: bool = False
    preference_order: Tuple[str, ...] = ()
    authoritative_ranks: Tuple[int, ...] = ()

    @field_validator("preference_order")
    @classmethod
    def _unique_preferences(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        seen = set()
        for agreement_id in value:
            if agreement_id in seen:
                raise ValueError(f"duplicate agreement in preference order: {agreement_id}")
            seen.add(agreement_id)
        return value

    @field_validator("authoritative_ranks")
    @classmethod
    def _positive_ranks(cls, value: Tuple[int, ...]) -> Tuple[int, ...]:
        for rank in value:
            if rank < 1:
                raise ValueError(f"authoritative ranks must be positive, got {rank}")
        return value

    @model_validator(mode="after")
    def _ranks_cover_prefix(self) -> "StudentStanding":
        if len(self.authoritative_ranks) > len(self.preference_order):
            raise ValueError(
                f"{len(self.authoritative_ranks)} authoritative ranks for "
                f"{len(self.preference_order)} preferences"
            )
        return self


class CompetingCandidate(BaseModel):
    """Another applicant for the same agreement."""
    model_config = ConfigDict(frozen=True)

    gpa: float
    has_failure: bool = False


class GradeLadder(BaseModel):
    """
    Competing grades as two ordered segments.

    `clear` holds applicants without a failure flag, `penalized` those with
    one. Both are ordered from highest admission priority to lowest, and the
    whole penalized block ranks behind the clear block.
    """
    model_config = ConfigDict(frozen=True)

    clear: Tuple[float, ...] = ()
    penalized: Tuple[float, ...] = ()

    @classmethod
    def from_flat(
        cls,
        grades: Sequence[float],
        failure_boundary_index: int = NO_FAILURE_BOUNDARY
    ) -> "GradeLadder":
        """
        Split a flat grade list at the failure boundary.

        A boundary of -1 means the list has no distinguished failure block,
        which ranks a failed student after everyone, same as a boundary
        equal to the list length.
        """
        if isinstance(failure_boundary_index, bool) or not isinstance(failure_boundary_index, int):
            raise ValueError(f"failure_boundary_index must be an integer, got {failure_boundary_index!r}")
        if not isinstance(grades, (list, tuple)):
            raise ValueError(f"competing_grades must be a list, got {grades!r}")
        grades = tuple(grades)
        if not NO_FAILURE_BOUNDARY <= failure_boundary_index <= len(grades):
            raise ValueError(
                f"failure_boundary_index {failure_boundary_index} outside "
                f"[{NO_FAILURE_BOUNDARY}, {len(grades)}]"
            )
        if failure_boundary_index == NO_FAILURE_BOUNDARY:
            return cls(clear=grades)
        return cls(
            clear=grades[:failure_boundary_index],
            penalized=grades[failure_boundary_index:],
        )

    @property
    def grades(self) -> Tuple[float, ...]:
        return self.clear + self.penalized

    @property
    def failure_boundary_index(self) -> int:
        return len(self.clear)


class AgreementStanding(BaseModel):
    """
    Competitive data for one agreement the student has ranked.

    Accepts either a `ladder` or the flat wire form
    (`competing_grades` plus `failure_boundary_index`).
    """
    model_config = ConfigDict(frozen=True)

    agreement_id: str
    capacity: int = Field(ge=MIN_CAPACITY)
    ladder: GradeLadder = Field(default_factory=GradeLadder)
    competing_candidates: Tuple[CompetingCandidate, ...] = ()

    @model_validator(mode="before")
    @classmethod
    def _split_flat_grades(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        if "competing_grades" not in data and "failure_boundary_index" not in data:
            return data
        data = dict(data)
        grades = data.pop("competing_grades", None)
        if grades is None:
            grades = []
        boundary = data.pop("failure_boundary_index", NO_FAILURE_BOUNDARY)
        if boundary is None:
            boundary = NO_FAILURE_BOUNDARY
        data["ladder"] = GradeLadder.from_flat(grades, boundary)
        return data


class InsightSnapshot(BaseModel):
    """Everything the engine needs for one student: profile plus standings."""
    model_config = ConfigDict(frozen=True)

    student: StudentStanding
    agreements: Tuple[AgreementStanding, ...] = ()


# =============================================================================
# OUTPUT CONTRACTS
# =============================================================================

class ChoiceSlot(BaseModel):
    """Where a choice sits in the preference order."""
    model_config = ConfigDict(frozen=True)

    index: int
    rank_position: int
    is_spare_choice: bool


class RankEstimate(BaseModel):
    """A rank with an admission verdict (Alpha or Bravo)."""
    model_config = ConfigDict(frozen=True)

    method: EstimateMethod
    rank: int = Field(ge=1)
    admitted: bool


class OriginalRank(BaseModel):
    """Informational rank without a verdict (Charlie)."""
    model_config = ConfigDict(frozen=True)

    method: EstimateMethod = EstimateMethod.CHARLIE
    rank: int = Field(ge=1)


class ChoiceEstimate(BaseModel):
    """
    All estimates for one agreement in the preference order.

    alpha is None for spare choices; primary falls back to bravo then.
    """
    model_config = ConfigDict(frozen=True)

    agreement_id: str
    rank_position: int
    is_spare_choice: bool
    capacity: int
    alpha: Optional[RankEstimate] = None
    bravo: RankEstimate
    charlie: OriginalRank

    @computed_field
    @property
    def primary(self) -> RankEstimate:
        return self.alpha if self.alpha is not None else self.bravo


class InsightOutput(BaseModel):
    """
    Output contract of the engine.

    estimates follow the student's preference order.
    """
    student_id: Optional[str] = None
    estimates: List[ChoiceEstimate] = Field(default_factory=list)

    # Summary Statistics
    total_choices: int = 0
    spare_choices: int = 0
    admitted_choices: int = 0

    engine_version: str = ENGINE_VERSION
    warnings: List[str] = Field(default_factory=list)
