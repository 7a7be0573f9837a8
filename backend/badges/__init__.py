from badges.catalog import BadgeCatalog, BadgeDefinition, CatalogError, DEFAULT_CATALOG
from badges.stats import LogBundle, UserStats, derive_stats, day_key, streak_from_days
from badges.evaluator import evaluate_new_badges
from badges.display import DisplayedBadge, select_summary_badges, select_gallery_badges


__all__ = [
    "BadgeCatalog",
    "BadgeDefinition",
    "CatalogError",
    "DEFAULT_CATALOG",
    "LogBundle",
    "UserStats",
    "derive_stats",
    "day_key",
    "streak_from_days",
    "evaluate_new_badges",
    "DisplayedBadge",
    "select_summary_badges",
    "select_gallery_badges",
]
