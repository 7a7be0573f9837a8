"""
evaluator.py - Badge Evaluator
Given the logs and the already-earned ids, returns exactly the catalog entries
that newly qualify, in catalog order. Never returns an id already earned.
"""

from datetime import datetime, timezone, tzinfo
from typing import Callable, Iterable

from badges.catalog import BadgeCatalog, BadgeDefinition
from badges.stats import LogBundle, UserStats, derive_stats


FAST_16H_HOURS = 16
FAST_24H_HOURS = 24
FAST_STREAK_DAYS = 7


def _special(badge: BadgeDefinition, s: UserStats) -> bool:
    firsts = {
        "PREMIERE_GORGEE": s.total_water_logs,
        "PREMIER_REPAS": s.total_food_logs,
        "PREMIERE_ACTIVITE": s.total_activity_logs,
        "PREMIER_JEUNE": s.total_completed_fasts,
    }
    return firsts.get(badge.id, 0) > 0


def _streak(badge: BadgeDefinition, s: UserStats) -> bool:
    return s.current_streak >= badge.value


def _activity(badge: BadgeDefinition, s: UserStats) -> bool:
    return s.total_activity_minutes >= badge.value


def _fasting(badge: BadgeDefinition, s: UserStats) -> bool:
    # Fixed ids: single-session duration vs. streak are different quantities
    if badge.id == "JEUNE_16H":
        return s.max_fast_duration >= FAST_16H_HOURS
    if badge.id == "JEUNE_24H":
        return s.max_fast_duration >= FAST_24H_HOURS
    if badge.id == "JEUNE_SERIE_7":
        return s.current_fasting_streak >= FAST_STREAK_DAYS
    return False


def _sleep(badge: BadgeDefinition, s: UserStats) -> bool:
    if badge.id == "SOMMEIL_8H":
        return s.max_sleep_duration_minutes >= badge.value
    if badge.id == "SOMMEIL_QUALITE_3":
        return s.current_sleep_quality_streak >= badge.value
    return False


def _total(badge: BadgeDefinition, s: UserStats) -> bool:
    if "TOTAL_WATER" in badge.id:
        return s.total_water_logs >= badge.value
    if "TOTAL_FOOD" in badge.id:
        return s.total_food_logs >= badge.value
    return False


def _anniversary(badge: BadgeDefinition, s: UserStats) -> bool:
    return s.years_with_app >= badge.value


RULES: dict[str, Callable[[BadgeDefinition, UserStats], bool]] = {
    "special": _special,
    "streak": _streak,
    "activity": _activity,
    "fasting": _fasting,
    "sleep": _sleep,
    "total": _total,
    "anniversary": _anniversary,
}


def qualifies(badge: BadgeDefinition, stats: UserStats) -> bool:
    rule = RULES.get(badge.category)
    return bool(rule and rule(badge, stats))


def evaluate_against_stats(
    catalog: BadgeCatalog, earned_ids: Iterable[str], stats: UserStats
) -> list[BadgeDefinition]:
    earned = set(earned_ids)
    return [b for b in catalog if b.id not in earned and qualifies(b, stats)]


def evaluate_new_badges(
    catalog: BadgeCatalog,
    logs: LogBundle,
    earned_ids: Iterable[str],
    first_log_date: int | None = None,
    now: datetime | None = None,
    tz: tzinfo = timezone.utc,
) -> list[BadgeDefinition]:
    """Badges that newly qualify, in catalog order.

    Pure and idempotent: the same inputs give the same result, and once the
    caller merges the result into earned_ids those badges are never returned
    again.
    """
    earned = set(earned_ids)
    if all(b.id in earned for b in catalog):
        return []

    stats = derive_stats(logs, first_log_date, now=now, tz=tz)
    return evaluate_against_stats(catalog, earned, stats)
