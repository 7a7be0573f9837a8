"""Stat derivation: counts, maxima, streaks and day keys."""

from datetime import date, datetime
from zoneinfo import ZoneInfo

from badges.stats import LogBundle, day_key, derive_stats, streak_from_days

from conftest import DAY_MS, HOUR_MS, NOW, days_ago, ms


def water(ts):
    return {"amount_ml": 250, "timestamp": ts}


def test_empty_logs_give_zeroed_stats():
    s = derive_stats(LogBundle(), None, now=NOW)
    assert s.total_water_logs == 0
    assert s.total_activity_minutes == 0
    assert s.max_fast_duration == 0
    assert s.max_sleep_duration_minutes == 0
    assert s.current_streak == 0
    assert s.current_fasting_streak == 0
    assert s.current_sleep_quality_streak == 0
    assert s.years_with_app == 0


def test_streak_three_days_ending_today():
    logs = LogBundle(water=[water(days_ago(2)), water(days_ago(1)), water(days_ago(0))])
    assert derive_stats(logs, now=NOW).current_streak == 3


def test_streak_kept_alive_until_today_elapses():
    logs = LogBundle(water=[water(days_ago(2)), water(days_ago(1))])
    assert derive_stats(logs, now=NOW).current_streak == 2


def test_streak_broken_by_missed_day():
    logs = LogBundle(water=[water(days_ago(2))])
    assert derive_stats(logs, now=NOW).current_streak == 0


def test_streak_stops_at_first_gap():
    logs = LogBundle(water=[water(days_ago(n)) for n in (0, 1, 3, 4, 5)])
    assert derive_stats(logs, now=NOW).current_streak == 2


def test_same_day_records_collapse_and_domains_mix():
    morning = ms(datetime(2026, 10, 19, 7, 0, tzinfo=ZoneInfo("UTC")))
    logs = LogBundle(
        water=[water(morning), water(morning + HOUR_MS)],
        food=[{"calories": 500, "timestamp": days_ago(1)}],
        activity=[{"duration_minutes": 30, "timestamp": days_ago(2)}],
    )
    s = derive_stats(logs, now=NOW)
    assert s.total_water_logs == 2
    assert s.current_streak == 3


def test_streak_walk_helper():
    days = {"2026-10-17", "2026-10-18"}
    assert streak_from_days(days, date(2026, 10, 19)) == 2
    assert streak_from_days(days, date(2026, 10, 18)) == 2
    assert streak_from_days(days, date(2026, 10, 21)) == 0
    assert streak_from_days(set(), date(2026, 10, 19)) == 0


def test_day_key_uses_given_timezone():
    late_evening_utc = ms(datetime(2026, 10, 19, 23, 30, tzinfo=ZoneInfo("UTC")))
    assert day_key(late_evening_utc) == "2026-10-19"
    assert day_key(late_evening_utc, ZoneInfo("Europe/Paris")) == "2026-10-20"


def test_day_key_rejects_unusable_timestamps():
    assert day_key(None) is None
    assert day_key("yesterday") is None
    assert day_key(10 ** 20) is None


def test_streak_across_dst_change():
    ny = ZoneInfo("America/New_York")
    noons = [ms(datetime(2026, 3, d, 12, 0, tzinfo=ny)) for d in (7, 8, 9)]
    now = datetime(2026, 3, 9, 18, 0, tzinfo=ny)
    logs = LogBundle(activity=[{"duration_minutes": 20, "timestamp": t} for t in noons])
    assert derive_stats(logs, now=now, tz=ny).current_streak == 3


def test_fasting_stats_only_count_completed_fasts():
    start = days_ago(1)
    logs = LogBundle(fasting=[
        {"status": "completed", "start_time": start, "end_time": start + 17 * HOUR_MS},
        {"status": "completed", "start_time": start, "end_time": start + 12 * HOUR_MS},
        {"status": "active", "start_time": start, "end_time": None},
        {"status": "completed", "start_time": start, "end_time": None},
    ])
    s = derive_stats(logs, now=NOW)
    assert s.total_completed_fasts == 2
    assert s.max_fast_duration == 17
    assert s.current_fasting_streak == 1


def test_fast_ending_before_it_started_counts_as_zero_hours():
    start = days_ago(0)
    logs = LogBundle(fasting=[{"status": "completed", "start_time": start, "end_time": start - HOUR_MS}])
    assert derive_stats(logs, now=NOW).max_fast_duration == 0


def test_fasting_streak_uses_end_time_days():
    fasts = [
        {"status": "completed", "start_time": days_ago(n) - 16 * HOUR_MS, "end_time": days_ago(n)}
        for n in range(7)
    ]
    assert derive_stats(LogBundle(fasting=fasts), now=NOW).current_fasting_streak == 7


def test_sleep_quality_streak_ignores_poor_nights():
    sleep = [
        {"duration_minutes": 420, "quality": "good", "timestamp": days_ago(0)},
        {"duration_minutes": 500, "quality": "excellent", "timestamp": days_ago(1)},
        {"duration_minutes": 300, "quality": "bad", "timestamp": days_ago(2)},
        {"duration_minutes": 480, "quality": "good", "timestamp": days_ago(3)},
    ]
    s = derive_stats(LogBundle(sleep=sleep), now=NOW)
    assert s.current_sleep_quality_streak == 2
    assert s.max_sleep_duration_minutes == 500


def test_activity_minutes_ignore_negative_and_missing_durations():
    activity = [
        {"duration_minutes": 45, "timestamp": days_ago(0)},
        {"duration_minutes": -30, "timestamp": days_ago(0)},
        {"duration_minutes": None, "timestamp": days_ago(0)},
        {"timestamp": days_ago(0)},
    ]
    s = derive_stats(LogBundle(activity=activity), now=NOW)
    assert s.total_activity_logs == 4
    assert s.total_activity_minutes == 45


def test_records_without_timestamp_are_counted_but_not_dated():
    logs = LogBundle(water=[{"amount_ml": 200}, {"amount_ml": 200, "timestamp": None}])
    s = derive_stats(logs, now=NOW)
    assert s.total_water_logs == 2
    assert s.current_streak == 0


def test_years_with_app():
    one_year_ago = ms(NOW) - int(365.25 * DAY_MS)
    assert abs(derive_stats(LogBundle(), one_year_ago, now=NOW).years_with_app - 1) < 1e-9
    assert derive_stats(LogBundle(), None, now=NOW).years_with_app == 0


def test_adding_logs_never_decreases_cumulative_stats():
    base = LogBundle(
        water=[water(days_ago(3))],
        activity=[{"duration_minutes": 40, "timestamp": days_ago(3)}],
    )
    more = LogBundle(
        water=[*base.water, water(days_ago(10))],
        activity=[*base.activity, {"duration_minutes": 5, "timestamp": days_ago(10)}],
    )
    before, after = derive_stats(base, now=NOW), derive_stats(more, now=NOW)
    assert after.total_water_logs >= before.total_water_logs
    assert after.total_activity_minutes >= before.total_activity_minutes
    assert after.total_activity_logs >= before.total_activity_logs
