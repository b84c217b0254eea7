"""Request-side validation for profile and beverage input.

The estimator itself tolerates bad input; these helpers are what the web and
CLI layers use to reject it before anything gets stored.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Any

from bac_tracker.constants import DEFAULT_CONSTANTS
from bac_tracker.models import Beverage, Gender, UserProfile, VolumeUnit, WeightUnit

MAX_WEIGHT = {
    WeightUnit.LB: 1000.0,
    WeightUnit.KG: 450.0,
    WeightUnit.STONE: 70.0,
}
MIN_AMOUNT = 0.1
MAX_AMOUNT_ML = 5000.0
MIN_ABV = 0.1
MAX_ABV = 100.0
MIN_YEAR = 1970
MAX_YEAR = 2999


class InvalidInputError(ValueError):
    """User-supplied profile or beverage data that can't be used."""


def _parse_float(value: Any, name: str) -> float:
    if isinstance(value, bool):
        raise InvalidInputError(f"{name} must be a number")
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        raise InvalidInputError(f"{name} must be a number") from None
    if not math.isfinite(parsed):
        raise InvalidInputError(f"{name} must be a finite number")
    return parsed


def _parse_choice(value: Any, name: str, choices: dict[str, Any]) -> Any:
    text = str(value or "").strip().lower()
    if text not in choices:
        allowed = ", ".join(sorted(choices))
        raise InvalidInputError(f"{name} must be one of: {allowed}")
    return choices[text]


def parse_profile(data: dict[str, Any]) -> UserProfile:
    gender = _parse_choice(
        data.get("gender"), "gender", {g.value: g for g in Gender}
    )
    weight_unit = _parse_choice(
        data.get("weight_unit") or WeightUnit.LB.value,
        "weight_unit",
        {u.value: u for u in MAX_WEIGHT},
    )
    weight = _parse_float(data.get("weight"), "weight")
    if weight <= 0:
        raise InvalidInputError("weight must be greater than 0")
    if weight > MAX_WEIGHT[weight_unit]:
        raise InvalidInputError(
            f"weight must be at most {MAX_WEIGHT[weight_unit]:g} {weight_unit.value}"
        )
    return UserProfile(gender=gender, weight=weight, weight_unit=weight_unit)


def parse_consumed_time(value: Any, now: datetime | None = None) -> datetime:
    if value is None or value == "":
        return now or datetime.now()
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            # datetime-local inputs send "YYYY-MM-DDTHH:MM"
            parsed = datetime.fromisoformat(str(value).strip().replace("Z", "+00:00"))
        except ValueError:
            raise InvalidInputError("consumed_time must be an ISO 8601 timestamp") from None
    if not MIN_YEAR <= parsed.year <= MAX_YEAR:
        raise InvalidInputError(f"consumed_time must fall between {MIN_YEAR} and {MAX_YEAR}")
    return parsed


def parse_beverage(data: dict[str, Any], now: datetime | None = None) -> Beverage:
    """Validate a new beverage. The store assigns its id when it is added."""
    volume_unit = _parse_choice(
        data.get("volume_unit") or VolumeUnit.OZ.value,
        "volume_unit",
        {u.value: u for u in VolumeUnit},
    )
    amount = _parse_float(data.get("amount"), "amount")
    if amount < MIN_AMOUNT:
        raise InvalidInputError(f"amount must be at least {MIN_AMOUNT}")
    if volume_unit.to_ml(amount, DEFAULT_CONSTANTS) > MAX_AMOUNT_ML:
        raise InvalidInputError("amount is unrealistically large")
    abv = _parse_float(data.get("abv"), "abv")
    if abv < MIN_ABV or abv > MAX_ABV:
        raise InvalidInputError(f"abv must be between {MIN_ABV} and {MAX_ABV:g}")
    consumed_time = parse_consumed_time(data.get("consumed_time"), now)
    return Beverage(
        id=0,
        amount=amount,
        abv=abv,
        consumed_time=consumed_time,
        volume_unit=volume_unit,
    )
