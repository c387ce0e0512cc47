"""
Preference Access Rules

Checks that a student may rank the agreements they ask for before their
preference order is stored. Pure functions over AgreementOffer records.
"""

from typing import Dict, List, Sequence, Tuple
from pydantic import BaseModel, ConfigDict

from .constants import HOME_REGION_CODE, WORLD_EXCHANGE_MIN_GPA


class PreferenceRejectedError(ValueError):
    """The requested preference order breaks an access rule."""

    def __init__(self, reason: str, agreement_ids: Sequence[str] = ()):
        super().__init__(reason)
        self.reason = reason
        self.agreement_ids = list(agreement_ids)


class AgreementOffer(BaseModel):
    """What the access rules need to know about an agreement."""
    model_config = ConfigDict(frozen=True)

    agreement_id: str
    sections: Tuple[str, ...] = ()
    region_code: str = HOME_REGION_CODE


def is_world_exchange(offer: AgreementOffer) -> bool:
    return offer.region_code.upper() != HOME_REGION_CODE


def check_preference_access(
    section: str,
    gpa: float,
    requested: Sequence[str],
    offers: Dict[str, AgreementOffer]
) -> List[AgreementOffer]:
    """
    Validate a requested preference order.

    Args:
        section: The student's section code
        gpa: The student's GPA
        requested: Agreement ids in the requested order
        offers: Known agreements by id

    Returns:
        The offers in requested order

    Raises:
        PreferenceRejectedError: on duplicates, unknown agreements, agreements
            closed to the section, or world exchanges below the GPA bar
    """
    duplicates = _find_duplicates(requested)
    if duplicates:
        raise PreferenceRejectedError("Duplicate agreements", duplicates)

    unknown = [a for a in requested if a not in offers]
    if unknown:
        raise PreferenceRejectedError("Invalid agreements", unknown)

    chosen = [offers[a] for a in requested]

    closed = [o.agreement_id for o in chosen if section.upper() not in o.sections]
    if closed:
        raise PreferenceRejectedError("Invalid agreements", closed)

    if gpa < WORLD_EXCHANGE_MIN_GPA:
        world = [o.agreement_id for o in chosen if is_world_exchange(o)]
        if world:
            raise PreferenceRejectedError("Agreements outside Europe", world)

    return chosen


def _find_duplicates(ids: Sequence[str]) -> List[str]:
    seen = set()
    duplicates: List[str] = []
    for agreement_id in ids:
        if agreement_id in seen and agreement_id not in duplicates:
            duplicates.append(agreement_id)
        seen.add(agreement_id)
    return duplicates


def filter_accessible(
    section: str,
    gpa: float,
    offers: Sequence[AgreementOffer]
) -> List[AgreementOffer]:
    """Offers the student is allowed to rank, in the given order."""
    accessible = []
    for offer in offers:
        if section.upper() not in offer.sections:
            continue
        if gpa < WORLD_EXCHANGE_MIN_GPA and is_world_exchange(offer):
            continue
        accessible.append(offer)
    return accessible
