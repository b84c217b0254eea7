"""Profile and beverage storage on top of any mutable mapping.

In the web app the mapping is the Flask session (a signed cookie); the CLI
uses a dict loaded from a JSON file. Values are kept as plain dicts/lists of
JSON primitives so they survive either round trip unchanged.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, List, MutableMapping

from bac_tracker.models import Beverage, UserProfile, next_beverage_id

logger = logging.getLogger(__name__)

PROFILE_KEY = "user_profile"
BEVERAGES_KEY = "beverages"


class SessionStore:
    def __init__(self, backend: MutableMapping[str, Any]):
        self.backend = backend

    def get_profile(self) -> UserProfile | None:
        raw = self.backend.get(PROFILE_KEY)
        if not isinstance(raw, dict):
            return None
        try:
            return UserProfile.from_dict(raw)
        except (TypeError, ValueError):
            logger.warning("Discarding unreadable stored profile: %r", raw)
            return None

    def save_profile(self, profile: UserProfile) -> None:
        self.backend[PROFILE_KEY] = profile.to_dict()

    def get_beverages(self) -> List[Beverage]:
        raw = self.backend.get(BEVERAGES_KEY, [])
        if not isinstance(raw, list):
            return []

        beverages: List[Beverage] = []
        for item in raw:
            if not isinstance(item, dict):
                continue
            try:
                beverages.append(Beverage.from_dict(item))
            except (KeyError, TypeError, ValueError):
                logger.warning("Skipping unreadable stored beverage: %r", item)
        return beverages

    def save_beverages(self, beverages: List[Beverage]) -> None:
        self.backend[BEVERAGES_KEY] = [b.to_dict() for b in beverages]

    def add_beverage(self, beverage: Beverage) -> Beverage:
        """Store a beverage under a fresh id and return the stored copy."""
        beverages = self.get_beverages()
        stored = replace(beverage, id=next_beverage_id(b.id for b in beverages))
        beverages.append(stored)
        self.save_beverages(beverages)
        logger.info("Added beverage %s (%s %s at %s%%)", stored.id, stored.amount, stored.volume_unit.value, stored.abv)
        return stored

    def delete_beverage(self, beverage_id: int) -> bool:
        beverages = self.get_beverages()
        kept = [b for b in beverages if b.id != beverage_id]
        if len(kept) == len(beverages):
            return False
        self.save_beverages(kept)
        logger.info("Deleted beverage %s", beverage_id)
        return True

    def clear(self) -> None:
        self.backend.pop(PROFILE_KEY, None)
        self.backend.pop(BEVERAGES_KEY, None)
        logger.info("Cleared profile and beverages")
