"""Profile and beverage records plus the unit/gender enums they use.

Unit and gender strings are resolved once, at the edges, into closed enums.
Anything unrecognized maps to an explicit default member instead of falling
through: unknown gender -> MALE, unknown weight unit -> GRAM (no conversion),
unknown volume unit -> ML (no conversion).
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Iterable, List, Optional

from bac_tracker.constants import BACConstants

logger = logging.getLogger(__name__)


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"

    @classmethod
    def parse(cls, value: Any) -> Optional["Gender"]:
        """None for a missing gender; unknown values count as male."""
        if isinstance(value, Gender):
            return value
        if value is None:
            return None
        text = str(value).strip().lower()
        if not text:
            return None
        if text == cls.FEMALE.value:
            return cls.FEMALE
        if text != cls.MALE.value:
            logger.debug("Unknown gender %r, using male ratio", value)
        return cls.MALE

    def ratio(self, constants: BACConstants) -> float:
        if self is Gender.FEMALE:
            return constants.r_female
        return constants.r_male


class WeightUnit(str, Enum):
    LB = "lb"
    KG = "kg"
    STONE = "stone"
    GRAM = "g"  # fallback: value is taken as grams as-is

    @classmethod
    def parse(cls, value: Any) -> "WeightUnit":
        if isinstance(value, WeightUnit):
            return value
        if value is None or str(value).strip() == "":
            return cls.LB
        text = str(value).strip().lower()
        for unit in cls:
            if unit.value == text:
                return unit
        logger.debug("Unknown weight unit %r, treating weight as grams", value)
        return cls.GRAM

    def to_grams(self, weight: float, constants: BACConstants) -> float:
        if self is WeightUnit.LB:
            return weight * constants.grams_per_lb
        if self is WeightUnit.KG:
            return weight * constants.grams_per_kg
        if self is WeightUnit.STONE:
            return weight * constants.grams_per_stone
        return weight


class VolumeUnit(str, Enum):
    OZ = "oz"
    ML = "ml"

    @classmethod
    def parse(cls, value: Any) -> "VolumeUnit":
        if isinstance(value, VolumeUnit):
            return value
        if value is None or str(value).strip() == "":
            return cls.OZ
        text = str(value).strip().lower()
        if text == cls.OZ.value:
            return cls.OZ
        if text != cls.ML.value:
            logger.debug("Unknown volume unit %r, treating amount as mL", value)
        return cls.ML

    def to_ml(self, amount: float, constants: BACConstants) -> float:
        if self is VolumeUnit.OZ:
            return amount * constants.ml_per_oz
        return amount


@dataclass(frozen=True)
class UserProfile:
    gender: Optional[Gender]
    weight: float
    weight_unit: WeightUnit = WeightUnit.LB

    def __post_init__(self):
        object.__setattr__(self, "gender", Gender.parse(self.gender))
        object.__setattr__(self, "weight_unit", WeightUnit.parse(self.weight_unit))

    @property
    def is_complete(self) -> bool:
        return (
            self.gender is not None
            and isinstance(self.weight, (int, float))
            and self.weight > 0
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "gender": self.gender.value if self.gender else None,
            "weight": self.weight,
            "weight_unit": self.weight_unit.value,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "UserProfile":
        return cls(
            gender=Gender.parse(raw.get("gender")),
            weight=float(raw.get("weight", 0.0)),
            weight_unit=WeightUnit.parse(raw.get("weight_unit")),
        )


@dataclass(frozen=True)
class Beverage:
    id: int
    amount: float
    abv: float  # percent, e.g. 5.0 for 5%
    consumed_time: datetime
    volume_unit: VolumeUnit = VolumeUnit.OZ

    def __post_init__(self):
        object.__setattr__(self, "volume_unit", VolumeUnit.parse(self.volume_unit))

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "amount": self.amount,
            "volume_unit": self.volume_unit.value,
            "abv": self.abv,
            "consumed_time": self.consumed_time.isoformat(),
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "Beverage":
        consumed = raw["consumed_time"]
        if not isinstance(consumed, datetime):
            consumed = datetime.fromisoformat(str(consumed))
        return cls(
            id=int(raw.get("id", 0)),
            amount=float(raw["amount"]),
            abv=float(raw["abv"]),
            consumed_time=consumed,
            volume_unit=VolumeUnit.parse(raw.get("volume_unit")),
        )


def sort_newest_first(beverages: Iterable[Beverage]) -> List[Beverage]:
    """Display order: most recently consumed first."""
    return sorted(beverages, key=lambda b: as_aware(b.consumed_time), reverse=True)


def as_aware(moment: datetime) -> datetime:
    """Naive values are local time; attach that zone so mixed inputs compare."""
    if moment.tzinfo is not None:
        return moment
    try:
        return moment.astimezone()
    except (OverflowError, OSError, ValueError):
        # Outside the range the platform clock can resolve.
        return moment.replace(tzinfo=datetime.now().astimezone().tzinfo)


def next_beverage_id(existing_ids: Iterable[int] = ()) -> int:
    """Microsecond timestamp, bumped past any id already in use."""
    candidate = time.time_ns() // 1000
    highest = max(existing_ids, default=0)
    return max(candidate, highest + 1)
