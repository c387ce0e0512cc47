"""
Insight Engine Constants

Grade domain, sentinel values, access rules and enums used by the estimator.
"""

from enum import Enum
from typing import Tuple

# =============================================================================
# GRADE DOMAIN
# =============================================================================

GPA_MIN: float = 1.0
GPA_MAX: float = 6.0

# Wire value of failure_boundary_index meaning "no distinguished failure block"
NO_FAILURE_BOUNDARY: int = -1

MIN_CAPACITY: int = 1


# =============================================================================
# ACCESS RULES
# =============================================================================

# Agreements outside this region are world exchanges
HOME_REGION_CODE: str = "EUR"

# Minimum GPA to rank a world exchange
WORLD_EXCHANGE_MIN_GPA: float = 5.0

SECTIONS: Tuple[str, ...] = (
    "AR",   # Architecture
    "CGC",  # Chemistry & Chemical Engineering
    "EL",   # Electrical Engineering
    "GC",   # Civil Engineering
    "GM",   # Mechanical Engineering
    "IN",   # Computer Science
    "MA",   # Mathematics
    "MT",   # Microengineering
    "MX",   # Materials Science
    "PH",   # Physics
    "SC",   # Communication Systems
    "SIE",  # Environmental Engineering
    "SV",   # Life Sciences
)

STUDY_YEARS: Tuple[int, ...] = (2, 3)
DEFAULT_STUDY_YEAR: int = 2


# =============================================================================
# ENUMS
# =============================================================================

class EstimateMethod(str, Enum):
    """Which strategy produced a rank."""
    ALPHA = "alpha"      # Authoritative, externally allocated
    BRAVO = "bravo"      # Grade-threshold estimate
    CHARLIE = "charlie"  # Raw candidate-list estimate


ENGINE_VERSION = "1.0.0"
