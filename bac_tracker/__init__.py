"""
BAC tracker: Widmark-based BAC estimate, time-to-zero projection, severity.
Use from project root: python -m bac_tracker.main
"""

from bac_tracker.constants import DEFAULT_CONSTANTS, BACConstants, load_constants
from bac_tracker.models import (
    Beverage,
    Gender,
    UserProfile,
    VolumeUnit,
    WeightUnit,
    sort_newest_first,
)
from bac_tracker.calculations import (
    bac_curve,
    calculate_bac,
    estimate_time_to_zero,
    hours_to_zero,
)
from bac_tracker.severity import Severity, classify_severity, format_bac
from bac_tracker.store import SessionStore

__all__ = [
    "BACConstants",
    "DEFAULT_CONSTANTS",
    "load_constants",
    "Beverage",
    "Gender",
    "UserProfile",
    "VolumeUnit",
    "WeightUnit",
    "sort_newest_first",
    "bac_curve",
    "calculate_bac",
    "estimate_time_to_zero",
    "hours_to_zero",
    "Severity",
    "classify_severity",
    "format_bac",
    "SessionStore",
]
