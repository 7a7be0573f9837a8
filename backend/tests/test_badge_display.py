"""Summary and gallery selection."""

from badges.catalog import DEFAULT_CATALOG, BadgeCatalog, BadgeDefinition
from badges.display import select_gallery_badges, select_summary_badges


def shown(displayed, category):
    return [(d.badge.id, d.earned) for d in displayed if d.badge.category == category]


def test_summary_shows_next_goal_when_nothing_earned():
    summary = select_summary_badges(DEFAULT_CATALOG, [])
    assert shown(summary, "streak") == [("STREAK_3", False)]
    assert shown(summary, "activity") == [("ACTIVITY_MINS_1000", False)]
    assert shown(summary, "anniversary") == [("ANNIVERSARY_0_5", False)]


def test_summary_shows_highest_earned():
    assert shown(select_summary_badges(DEFAULT_CATALOG, ["STREAK_3"]), "streak") == [("STREAK_3", True)]
    assert shown(select_summary_badges(DEFAULT_CATALOG, ["STREAK_3", "STREAK_7"]), "streak") == [("STREAK_7", True)]


def test_summary_stops_at_first_unearned_tier():
    # STREAK_14 earned out of sequence does not skip the missing STREAK_7
    summary = select_summary_badges(DEFAULT_CATALOG, ["STREAK_3", "STREAK_14"])
    assert shown(summary, "streak") == [("STREAK_3", True)]


def test_summary_orders_fasting_by_value():
    summary = select_summary_badges(DEFAULT_CATALOG, [])
    assert shown(summary, "fasting") == [("JEUNE_SERIE_7", False)]


def test_summary_always_lists_every_special_badge():
    summary = select_summary_badges(DEFAULT_CATALOG, ["PREMIER_REPAS"])
    assert shown(summary, "special") == [
        ("PREMIERE_GORGEE", False),
        ("PREMIER_REPAS", True),
        ("PREMIERE_ACTIVITE", False),
        ("PREMIER_JEUNE", False),
    ]


def test_summary_sorted_by_category_and_skips_total():
    summary = select_summary_badges(DEFAULT_CATALOG, [])
    categories = [d.badge.category for d in summary]
    assert categories == sorted(categories)
    assert "total" not in categories
    assert len(summary) == 5 + 4


def test_summary_skips_empty_categories():
    catalog = BadgeCatalog([
        BadgeDefinition("PREMIERE_GORGEE", "bronze", "special", 1),
        BadgeDefinition("STREAK_5", "silver", "streak", 5),
    ])
    summary = select_summary_badges(catalog, [])
    assert [(d.badge.id, d.earned) for d in summary] == [("PREMIERE_GORGEE", False), ("STREAK_5", False)]


def test_gallery_lists_earned_in_earn_order_then_catalog_order():
    earned = ["SOMMEIL_8H", "PREMIERE_GORGEE", "STREAK_3"]
    gallery = select_gallery_badges(DEFAULT_CATALOG, earned)

    assert len(gallery) == len(DEFAULT_CATALOG)
    assert [d.badge.id for d in gallery[:3]] == earned
    assert all(d.earned for d in gallery[:3])

    rest = [d.badge.id for d in gallery[3:]]
    assert rest == [b.id for b in DEFAULT_CATALOG if b.id not in earned]
    assert not any(d.earned for d in gallery[3:])


def test_gallery_ignores_ids_missing_from_catalog():
    gallery = select_gallery_badges(DEFAULT_CATALOG, ["RETIRED_BADGE", "STREAK_7"])
    assert gallery[0].badge.id == "STREAK_7"
    assert sum(d.earned for d in gallery) == 1


def test_displayed_badge_serializes_earned_flag():
    d = select_summary_badges(DEFAULT_CATALOG, ["STREAK_3"])
    streak = next(x for x in d if x.badge.category == "streak").to_dict()
    assert streak["id"] == "STREAK_3"
    assert streak["is_earned"] is True
    assert streak["name_key"] == "badges.STREAK_3.name"
