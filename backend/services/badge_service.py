"""
badge_service.py - Achievements shell
Loads a user's logs, runs the badge evaluator after every log mutation, appends
new ids to the earned set and feeds the one-at-a-time celebration queue.
"""

import logging
from datetime import datetime
from zoneinfo import ZoneInfo

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from badges import (
    DEFAULT_CATALOG,
    LogBundle,
    derive_stats,
    evaluate_new_badges,
    select_gallery_badges,
    select_summary_badges,
)
from config import BADGE_TIMEZONE
from models.activity_log import ActivityLog
from models.fasting_log import FastingLog
from models.food_log import FoodLog
from models.sleep_log import SleepLog
from models.user_badge import UserBadge
from models.water_log import WaterLog
from services.profile_service import ProfileService

logger = logging.getLogger(__name__)


class BadgeService:
    catalog = DEFAULT_CATALOG
    tz = ZoneInfo(BADGE_TIMEZONE)

    @staticmethod
    def load_logs(db: Session, user_id: str) -> LogBundle:
        def rows(model):
            return db.query(model).filter_by(user_id=user_id).all()

        return LogBundle(
            water=rows(WaterLog),
            food=rows(FoodLog),
            activity=rows(ActivityLog),
            fasting=rows(FastingLog),
            sleep=rows(SleepLog),
        )

    @staticmethod
    def earned_ids(db: Session, user_id: str) -> list[str]:
        rows = db.query(UserBadge).filter_by(user_id=user_id).order_by(UserBadge.position).all()
        return [r.badge_id for r in rows]

    @classmethod
    def sync(cls, db: Session, user_id: str, now: datetime | None = None) -> list[str]:
        """Evaluate and persist newly earned badges. Returns their ids in catalog order."""
        try:
            earned = cls.earned_ids(db, user_id)
            new_badges = evaluate_new_badges(
                cls.catalog,
                cls.load_logs(db, user_id),
                earned,
                ProfileService.first_log_date(db, user_id),
                now=now,
                tz=cls.tz,
            )
            if not new_badges:
                return []

            position = db.query(func.max(UserBadge.position))\
                         .filter(UserBadge.user_id == user_id).scalar()
            position = -1 if position is None else position
            for badge in new_badges:
                position += 1
                db.add(UserBadge(user_id=user_id, badge_id=badge.id, position=position))
            db.commit()

            new_ids = [b.id for b in new_badges]
            logger.info(f"User {user_id} earned badges: {', '.join(new_ids)}")
            return new_ids
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Badge sync failed for user {user_id}: {e}")
            return []

    @classmethod
    def stats(cls, db: Session, user_id: str, now: datetime | None = None) -> dict:
        s = derive_stats(
            cls.load_logs(db, user_id),
            ProfileService.first_log_date(db, user_id),
            now=now,
            tz=cls.tz,
        )
        return s.to_dict()

    @classmethod
    def summary(cls, db: Session, user_id: str) -> list[dict]:
        return [d.to_dict() for d in select_summary_badges(cls.catalog, cls.earned_ids(db, user_id))]

    @classmethod
    def gallery(cls, db: Session, user_id: str) -> dict:
        earned = cls.earned_ids(db, user_id)
        badges = select_gallery_badges(cls.catalog, earned)
        return {
            "earned_count": sum(1 for d in badges if d.earned),
            "total_count": len(cls.catalog),
            "badges": [d.to_dict() for d in badges],
        }

    # ------------------------------------------------------------------
    # Celebration queue: un-celebrated rows in earn order, shown one at a time

    @staticmethod
    def _queue_head(db: Session, user_id: str) -> UserBadge | None:
        return db.query(UserBadge).filter_by(user_id=user_id, celebrated=False)\
                 .order_by(UserBadge.position).first()

    @classmethod
    def next_celebration(cls, db: Session, user_id: str) -> dict | None:
        head = cls._queue_head(db, user_id)
        if head is None:
            return None
        badge = cls.catalog.get(head.badge_id)
        if badge is None:
            return {"id": head.badge_id}
        return badge.to_dict()

    @classmethod
    def dismiss_celebration(cls, db: Session, user_id: str) -> str | None:
        """Pop the head of the queue. Returns the dismissed id, or None if empty."""
        try:
            head = cls._queue_head(db, user_id)
            if head is None:
                return None
            head.celebrated = True
            db.commit()
            return head.badge_id
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Could not dismiss celebration for user {user_id}: {e}")
            return None
