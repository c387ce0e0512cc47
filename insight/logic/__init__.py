"""
Insight Logic Module

Provides the deterministic placement rank estimator.
"""

from .contracts import (
    StudentStanding,
    AgreementStanding,
    CompetingCandidate,
    GradeLadder,
    InsightSnapshot,
    ChoiceSlot,
    RankEstimate,
    OriginalRank,
    ChoiceEstimate,
    InsightOutput,
    InvalidSnapshotError,
)
from .engine import InsightEngine, get_insights
from .composer import compose_estimate
from .constants import EstimateMethod

__all__ = [
    # Main engine
    "InsightEngine",
    "get_insights",
    "compose_estimate",

    # Contracts
    "StudentStanding",
    "AgreementStanding",
    "CompetingCandidate",
    "GradeLadder",
    "InsightSnapshot",
    "ChoiceSlot",
    "RankEstimate",
    "OriginalRank",
    "ChoiceEstimate",
    "InsightOutput",
    "InvalidSnapshotError",

    # Enums
    "EstimateMethod",
]
