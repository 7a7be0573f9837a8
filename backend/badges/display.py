"""
display.py - Display Selector
Picks which badges to surface: a compact per-category summary for the
dashboard, and the full gallery for the achievements page.
"""

from dataclasses import dataclass
from typing import Sequence

from badges.catalog import BadgeCatalog, BadgeDefinition


SUMMARY_CATEGORIES = ("streak", "activity", "fasting", "sleep", "anniversary")


@dataclass(frozen=True)
class DisplayedBadge:
    badge: BadgeDefinition
    earned: bool

    def to_dict(self) -> dict:
        return {**self.badge.to_dict(), "is_earned": self.earned}


def select_summary_badges(catalog: BadgeCatalog, earned_ids: Sequence[str]) -> list[DisplayedBadge]:
    """Highest earned badge per category (else the next goal), plus every special badge."""
    earned = set(earned_ids)
    displayed = []

    for category in SUMMARY_CATEGORIES:
        highest_earned = None
        next_unearned = None
        for badge in sorted(catalog.by_category(category), key=lambda b: b.value):
            if badge.id in earned:
                highest_earned = badge
            else:
                next_unearned = badge
                break

        if highest_earned:
            displayed.append(DisplayedBadge(highest_earned, True))
        elif next_unearned:
            displayed.append(DisplayedBadge(next_unearned, False))

    for badge in catalog.by_category("special"):
        displayed.append(DisplayedBadge(badge, badge.id in earned))

    return sorted(displayed, key=lambda d: d.badge.category)


def select_gallery_badges(catalog: BadgeCatalog, earned_ids: Sequence[str]) -> list[DisplayedBadge]:
    """All badges: earned first in earn order, then unearned in catalog order."""
    earn_order = {}
    for idx, badge_id in enumerate(earned_ids):
        earn_order.setdefault(badge_id, idx)

    earned = sorted((b for b in catalog if b.id in earn_order), key=lambda b: earn_order[b.id])
    unearned = [b for b in catalog if b.id not in earn_order]
    return [DisplayedBadge(b, True) for b in earned] + [DisplayedBadge(b, False) for b in unearned]
