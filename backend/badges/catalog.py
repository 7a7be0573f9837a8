"""
catalog.py - Badge Catalog
Static, ordered registry of every achievement. Entries are plain frozen records;
the catalog itself is an immutable value handed to the evaluator and selectors.
"""

from dataclasses import dataclass
from typing import Iterable, Iterator


TIERS = ("bronze", "silver", "gold", "platinum", "diamond", "legendary")
CATEGORIES = ("special", "streak", "activity", "fasting", "sleep", "total", "anniversary")


class CatalogError(ValueError):
    """Raised when a catalog entry is malformed (bad category/tier, duplicate id)."""


@dataclass(frozen=True)
class BadgeDefinition:
    id: str
    tier: str
    category: str
    value: float
    name_key: str = ""
    description_key: str = ""

    def __post_init__(self):
        # Translation keys default to the badges.<ID>.* convention
        if not self.name_key:
            object.__setattr__(self, "name_key", f"badges.{self.id}.name")
        if not self.description_key:
            object.__setattr__(self, "description_key", f"badges.{self.id}.description")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name_key": self.name_key,
            "description_key": self.description_key,
            "tier": self.tier,
            "category": self.category,
            "value": self.value,
        }


class BadgeCatalog:
    """Immutable, validated, ordered collection of BadgeDefinition."""

    def __init__(self, badges: Iterable[BadgeDefinition]):
        self._badges = tuple(badges)
        seen = set()
        for b in self._badges:
            if b.category not in CATEGORIES:
                raise CatalogError(f"Badge {b.id!r} has unknown category {b.category!r}")
            if b.tier not in TIERS:
                raise CatalogError(f"Badge {b.id!r} has unknown tier {b.tier!r}")
            if b.id in seen:
                raise CatalogError(f"Duplicate badge id {b.id!r}")
            seen.add(b.id)
        self._by_id = {b.id: b for b in self._badges}

    def __iter__(self) -> Iterator[BadgeDefinition]:
        return iter(self._badges)

    def __len__(self) -> int:
        return len(self._badges)

    def __contains__(self, badge_id) -> bool:
        return badge_id in self._by_id

    def get(self, badge_id: str) -> BadgeDefinition | None:
        return self._by_id.get(badge_id)

    def by_category(self, category: str) -> list[BadgeDefinition]:
        """Entries of one category, in catalog order."""
        return [b for b in self._badges if b.category == category]


def _tiered(category: str, entries: list[tuple[str, str, float]]) -> list[BadgeDefinition]:
    return [BadgeDefinition(id=i, tier=t, category=category, value=v) for i, t, v in entries]


DEFAULT_CATALOG = BadgeCatalog([
    # Special - one-time achievements
    BadgeDefinition("PREMIERE_GORGEE", "bronze", "special", 1),
    BadgeDefinition("PREMIER_REPAS", "bronze", "special", 1),
    BadgeDefinition("PREMIERE_ACTIVITE", "bronze", "special", 1),
    BadgeDefinition("PREMIER_JEUNE", "bronze", "special", 1),

    # Streaks - consecutive days of logging anything
    *_tiered("streak", [
        ("STREAK_3", "bronze", 3),
        ("STREAK_7", "bronze", 7),
        ("STREAK_14", "silver", 14),
        ("STREAK_30", "gold", 30),
        ("STREAK_90", "platinum", 90),
    ]),

    # Activity - cumulative minutes
    *_tiered("activity", [
        ("ACTIVITY_MINS_1000", "bronze", 1000),
        ("ACTIVITY_MINS_5000", "silver", 5000),
        ("ACTIVITY_MINS_10000", "gold", 10000),
        ("ACTIVITY_MINS_25000", "platinum", 25000),
    ]),

    # Fasting
    BadgeDefinition("JEUNE_16H", "silver", "fasting", 16),
    BadgeDefinition("JEUNE_24H", "gold", "fasting", 24),
    BadgeDefinition("JEUNE_SERIE_7", "gold", "fasting", 7),

    # Sleep
    BadgeDefinition("SOMMEIL_8H", "gold", "sleep", 480),  # minutes
    BadgeDefinition("SOMMEIL_QUALITE_3", "silver", "sleep", 3),

    # Totals - number of logs per domain
    *_tiered("total", [
        ("TOTAL_WATER_100", "bronze", 100),
        ("TOTAL_WATER_500", "silver", 500),
        ("TOTAL_WATER_1000", "gold", 1000),
    ]),
    *_tiered("total", [
        ("TOTAL_FOOD_100", "bronze", 100),
        ("TOTAL_FOOD_500", "silver", 500),
        ("TOTAL_FOOD_1000", "gold", 1000),
    ]),

    # Anniversaries - years since the first log
    BadgeDefinition("ANNIVERSARY_0_5", "silver", "anniversary", 0.5),
    BadgeDefinition("ANNIVERSARY_1", "gold", "anniversary", 1),
])
