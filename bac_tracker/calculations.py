"""BAC calculations using Widmark-style rise and linear elimination.

Each beverage is handled on its own: its rise is computed at the moment of
consumption and eliminated linearly from then on, never below zero. Totals are
the sum of those per-drink contributions, so one drink cannot cancel another.
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta
from typing import List, Optional, Sequence, Tuple

from bac_tracker.constants import DEFAULT_CONSTANTS, BACConstants
from bac_tracker.models import Beverage, UserProfile, as_aware


def _elapsed_hours(now: datetime, then: datetime) -> float:
    if now.tzinfo is None and then.tzinfo is None:
        delta = now - then
    else:
        try:
            delta = as_aware(now) - as_aware(then)
        except OverflowError:
            delta = now.replace(tzinfo=None) - then.replace(tzinfo=None)
    return delta.total_seconds() / 3600.0


def alcohol_grams(beverage: Beverage, constants: BACConstants = DEFAULT_CONSTANTS) -> float:
    """Grams of ethanol in a beverage (volume x ABV x density)."""
    volume_ml = beverage.volume_unit.to_ml(beverage.amount, constants)
    return volume_ml * (beverage.abv / 100.0) * constants.ethanol_density


def bac_rise(
    beverage: Beverage,
    profile: UserProfile,
    constants: BACConstants = DEFAULT_CONSTANTS,
) -> float:
    """Immediate BAC rise (%) from a single beverage."""
    w_g = profile.weight_unit.to_grams(profile.weight, constants)
    r = profile.gender.ratio(constants)
    return (alcohol_grams(beverage, constants) / (w_g * r)) * 100.0


def beverage_contribution(
    beverage: Beverage,
    profile: UserProfile,
    now: datetime,
    constants: BACConstants = DEFAULT_CONSTANTS,
) -> float:
    """What is left of one beverage's rise at `now`. Never negative."""
    elapsed = _elapsed_hours(now, beverage.consumed_time)
    # Future drinks count in full; elimination waits out any absorption delay.
    effective = max(0.0, elapsed - constants.absorption_delay_hours)
    metabolized = constants.elimination_rate * effective
    return max(0.0, bac_rise(beverage, profile, constants) - metabolized)


def calculate_bac(
    profile: Optional[UserProfile],
    beverages: Sequence[Beverage],
    now: Optional[datetime] = None,
    constants: BACConstants = DEFAULT_CONSTANTS,
) -> float:
    """Estimated BAC (%) at `now`, rounded to 3 decimals.

    An empty drink list or an incomplete profile (no gender, weight <= 0)
    gives 0.0. Nothing here raises for odd input: unknown units and genders
    were already mapped to their defaults when the records were built.
    """
    if not beverages or profile is None or not profile.is_complete:
        return 0.0
    if now is None:
        now = datetime.now()

    total = sum(beverage_contribution(b, profile, now, constants) for b in beverages)
    return max(0.0, round(total, 3))


def hours_to_zero(current_bac: float, constants: BACConstants = DEFAULT_CONSTANTS) -> float:
    """Hours until `current_bac` is fully eliminated."""
    if not math.isfinite(current_bac) or current_bac <= 0:
        return 0.0
    return current_bac / constants.elimination_rate


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


def estimate_time_to_zero(
    current_bac: float,
    constants: BACConstants = DEFAULT_CONSTANTS,
    zero_label: str = "N/A",
) -> str:
    """Human readable time until BAC reaches zero, e.g. "2 hours 21 minutes".

    Minutes are rounded up, so the estimate never undershoots.
    """
    hours = hours_to_zero(current_bac, constants)
    if hours <= 0:
        return zero_label

    # Drop float noise first so an exact 90.0 doesn't ceil to 91.
    total_minutes = math.ceil(round(hours * 60.0, 6))
    whole_hours, minutes = divmod(total_minutes, 60)

    parts = []
    if whole_hours > 0:
        parts.append(_plural(whole_hours, "hour"))
    if minutes > 0:
        parts.append(_plural(minutes, "minute"))
    return " ".join(parts) or zero_label


def bac_curve(
    profile: Optional[UserProfile],
    beverages: Sequence[Beverage],
    start: Optional[datetime] = None,
    step_minutes: float = 15.0,
    max_hours: float = 24.0,
    constants: BACConstants = DEFAULT_CONSTANTS,
) -> List[Tuple[datetime, float]]:
    """Return (time, bac_percent) pairs from `start` until BAC hits zero."""
    if not beverages:
        return []
    if step_minutes <= 0:
        raise ValueError("step_minutes must be > 0")
    if start is None:
        start = datetime.now()

    end = start + timedelta(hours=max_hours)
    step = timedelta(minutes=step_minutes)
    points: List[Tuple[datetime, float]] = []
    t = start
    while t <= end:
        bac = calculate_bac(profile, beverages, now=t, constants=constants)
        points.append((t, bac))
        if bac <= 0:
            break
        t += step
    return points
