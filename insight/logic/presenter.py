"""
Walkthrough Presenter

Turns estimate records into display lines. Only phrasing lives here; the
estimates themselves come from the composer untouched.
"""

from typing import List
from pydantic import BaseModel

from .contracts import ChoiceEstimate, InsightOutput


class WalkthroughLine(BaseModel):
    """One line of the walkthrough for a ranked agreement."""
    agreement_id: str
    rank_position: int
    headline: str
    detail: str
    emphasized: bool = False
    muted: bool = False


def describe_choice(estimate: ChoiceEstimate) -> WalkthroughLine:
    """
    Phrase a single choice.

    Ranked choices quote the authoritative rank; spare choices quote the
    grade estimate conditionally.
    """
    primary = estimate.primary
    places = estimate.capacity

    if estimate.is_spare_choice:
        if primary.admitted:
            headline = f"you'd get in as #{primary.rank} out of {places}"
        else:
            headline = f"you'd be rejected as #{primary.rank} out of {places}"
    elif primary.admitted:
        headline = f"getting in as #{primary.rank} out of {places}!"
    else:
        headline = f"rejected as #{primary.rank} out of {places}"

    return WalkthroughLine(
        agreement_id=estimate.agreement_id,
        rank_position=estimate.rank_position,
        headline=headline,
        detail=f"originally #{estimate.charlie.rank}",
        emphasized=not estimate.is_spare_choice and primary.admitted,
        muted=estimate.is_spare_choice or not primary.admitted,
    )


def build_walkthrough(output: InsightOutput) -> List[WalkthroughLine]:
    return [describe_choice(e) for e in output.estimates]
