"""
stats.py - Stat Derivation
Reduces the five log collections into the scalar/streak statistics the badge
rules are evaluated against. Pure: no I/O, inputs are never mutated.

Records may be ORM rows or plain dicts. Missing numeric fields count as 0,
records without a usable timestamp are left out of day-key sets.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Any, Iterable, Sequence


MS_PER_HOUR = 1000 * 60 * 60
MS_PER_YEAR = MS_PER_HOUR * 24 * 365.25
QUALITY_SLEEP = ("good", "excellent")


@dataclass(frozen=True)
class LogBundle:
    """Read-only view over a user's logs, one sequence per domain."""
    water: Sequence[Any] = ()
    food: Sequence[Any] = ()
    activity: Sequence[Any] = ()
    fasting: Sequence[Any] = ()
    sleep: Sequence[Any] = ()


@dataclass(frozen=True)
class UserStats:
    total_water_logs: int = 0
    total_food_logs: int = 0
    total_activity_logs: int = 0
    total_activity_minutes: float = 0
    total_completed_fasts: int = 0
    max_fast_duration: float = 0  # hours
    max_sleep_duration_minutes: float = 0
    current_streak: int = 0
    current_fasting_streak: int = 0
    current_sleep_quality_streak: int = 0
    years_with_app: float = 0
    completed_fasts: tuple = field(default=(), repr=False, compare=False)

    def to_dict(self) -> dict:
        return {
            "total_water_logs": self.total_water_logs,
            "total_food_logs": self.total_food_logs,
            "total_activity_logs": self.total_activity_logs,
            "total_activity_minutes": self.total_activity_minutes,
            "total_completed_fasts": self.total_completed_fasts,
            "max_fast_duration": round(self.max_fast_duration, 2),
            "max_sleep_duration_minutes": self.max_sleep_duration_minutes,
            "current_streak": self.current_streak,
            "current_fasting_streak": self.current_fasting_streak,
            "current_sleep_quality_streak": self.current_sleep_quality_streak,
            "years_with_app": round(self.years_with_app, 3),
        }


def _get(record, name: str, default=None):
    """Read a field from a dict row or an attribute-style record."""
    if isinstance(record, dict):
        value = record.get(name, default)
    else:
        value = getattr(record, name, default)
    return default if value is None else value


def _number(record, name: str) -> float:
    value = _get(record, name, 0)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return value


def day_key(timestamp_ms, tz: tzinfo = timezone.utc) -> str | None:
    """YYYY-MM-DD of a millisecond timestamp in the given zone, or None if unusable."""
    if timestamp_ms is None or isinstance(timestamp_ms, bool):
        return None
    try:
        return datetime.fromtimestamp(timestamp_ms / 1000, tz).date().isoformat()
    except (TypeError, ValueError, OverflowError, OSError):
        return None


def day_keys(timestamps: Iterable, tz: tzinfo = timezone.utc) -> set[str]:
    keys = {day_key(ts, tz) for ts in timestamps}
    keys.discard(None)
    return keys


def streak_from_days(active_days: set[str], today: date) -> int:
    """Count consecutive active days ending today, or yesterday if today is still open."""
    check = today
    if check.isoformat() not in active_days:
        check = today - timedelta(days=1)

    streak = 0
    while check.isoformat() in active_days:
        streak += 1
        check -= timedelta(days=1)
    return streak


def completed_fasts(fasting_logs: Iterable) -> list:
    return [
        f for f in fasting_logs
        if _get(f, "status") == "completed" and _get(f, "end_time") is not None
    ]


def _fast_hours(fast) -> float:
    start, end = _get(fast, "start_time"), _get(fast, "end_time")
    if not all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in (start, end)):
        return 0
    return max(0, (end - start) / MS_PER_HOUR)


def derive_stats(
    logs: LogBundle,
    first_log_date: int | None = None,
    now: datetime | None = None,
    tz: tzinfo = timezone.utc,
) -> UserStats:
    now = now or datetime.now(timezone.utc)
    today = now.astimezone(tz).date()

    fasts = completed_fasts(logs.fasting)

    daily_logs = day_keys(
        (_get(r, "timestamp") for r in [*logs.food, *logs.water, *logs.activity]), tz
    )
    daily_fasts = day_keys((_get(f, "end_time") for f in fasts), tz)
    quality_nights = day_keys(
        (_get(s, "timestamp") for s in logs.sleep if _get(s, "quality") in QUALITY_SLEEP), tz
    )

    years = 0.0
    if first_log_date and isinstance(first_log_date, (int, float)):
        years = (now.timestamp() * 1000 - first_log_date) / MS_PER_YEAR

    return UserStats(
        total_water_logs=len(logs.water),
        total_food_logs=len(logs.food),
        total_activity_logs=len(logs.activity),
        total_activity_minutes=sum(max(0, _number(a, "duration_minutes")) for a in logs.activity),
        total_completed_fasts=len(fasts),
        max_fast_duration=max((_fast_hours(f) for f in fasts), default=0),
        max_sleep_duration_minutes=max(
            (max(0, _number(s, "duration_minutes")) for s in logs.sleep), default=0
        ),
        current_streak=streak_from_days(daily_logs, today),
        current_fasting_streak=streak_from_days(daily_fasts, today),
        current_sleep_quality_streak=streak_from_days(quality_nights, today),
        years_with_app=years,
        completed_fasts=tuple(fasts),
    )
