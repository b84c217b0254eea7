"""Numeric constants for the Widmark BAC model.

Model:
- Rise: BAC = [grams / (body_weight_g * r)] * 100
- r = 0.68 (male), 0.55 (female)
- Elimination: 0.016 BAC percentage points per hour
"""

from __future__ import annotations

import math
import os
from dataclasses import dataclass, replace
from typing import Mapping


@dataclass(frozen=True)
class BACConstants:
    """Everything the estimator needs besides the profile and the drinks."""

    elimination_rate: float = 0.016  # % BAC per hour
    ethanol_density: float = 0.789  # g/mL
    ml_per_oz: float = 29.5735
    grams_per_lb: float = 453.592
    grams_per_kg: float = 1000.0
    grams_per_stone: float = 6350.29
    r_male: float = 0.68
    r_female: float = 0.55
    # Hours before elimination starts. 0 keeps the plain Widmark curve.
    absorption_delay_hours: float = 0.0


DEFAULT_CONSTANTS = BACConstants()

_ENV_OVERRIDES = {
    "BAC_ELIMINATION_RATE": "elimination_rate",
    "BAC_ABSORPTION_DELAY_HOURS": "absorption_delay_hours",
}


def load_constants(environ: Mapping[str, str] | None = None) -> BACConstants:
    """Build constants from defaults plus optional environment overrides."""
    env = os.environ if environ is None else environ
    overrides: dict[str, float] = {}
    for env_key, field_name in _ENV_OVERRIDES.items():
        raw = env.get(env_key, "").strip()
        if not raw:
            continue
        try:
            value = float(raw)
        except ValueError:
            raise ValueError(f"{env_key} must be a number, got {raw!r}") from None
        if not math.isfinite(value) or value < 0:
            raise ValueError(f"{env_key} must be a finite number >= 0")
        overrides[field_name] = value
    if overrides.get("elimination_rate") == 0:
        raise ValueError("BAC_ELIMINATION_RATE must be > 0")
    return replace(DEFAULT_CONSTANTS, **overrides)
