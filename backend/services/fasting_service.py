"""
fasting_service.py - Intermittent fasting timer
At most one active fast per user. Starting a new fast discards any fast still
running; ending it stamps end_time and marks it completed.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.fasting_log import FastingLog
from models.util import now_ms
from services.badge_service import BadgeService
from services.profile_service import ProfileService
from services.tracker_service import TrackerService

logger = logging.getLogger(__name__)


class FastingService:
    @staticmethod
    def get_active(db: Session, user_id: str) -> FastingLog | None:
        return db.query(FastingLog).filter_by(user_id=user_id, status="active").first()

    @staticmethod
    def get_all(db: Session, user_id: str) -> list:
        return db.query(FastingLog).filter_by(user_id=user_id)\
                 .order_by(FastingLog.start_time.desc()).all()

    @staticmethod
    def start(db: Session, user_id: str, goal_hours: float = 16, start_time: int | None = None) -> dict | None:
        if goal_hours <= 0:
            raise ValueError("goal_hours must be positive")
        try:
            for stale in db.query(FastingLog).filter_by(user_id=user_id, status="active").all():
                logger.info(f"Discarding unfinished fast {stale.id} for user {user_id}")
                db.delete(stale)

            fast = FastingLog(
                user_id=user_id,
                start_time=start_time or now_ms(),
                end_time=None,
                goal_hours=goal_hours,
                status="active",
            )
            db.add(fast)
            ProfileService.mark_first_log(db, user_id)
            db.commit()
            db.refresh(fast)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to start fast for user {user_id}: {e}")
            return None

        return {"log": fast, "new_badges": BadgeService.sync(db, user_id)}

    @staticmethod
    def end(db: Session, user_id: str, end_time: int | None = None) -> dict | None:
        """Complete the running fast. Returns None when no fast is active."""
        try:
            fast = FastingService.get_active(db, user_id)
            if not fast:
                return None
            fast.end_time = max(end_time or now_ms(), fast.start_time)
            fast.status = "completed"
            db.commit()
            db.refresh(fast)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to end fast for user {user_id}: {e}")
            return None

        return {"log": fast, "new_badges": BadgeService.sync(db, user_id)}

    @staticmethod
    def add_completed(db: Session, user_id: str, data: dict) -> dict | None:
        """Log a fast after the fact."""
        start, end = data.get("start_time"), data.get("end_time")
        if start is None or end is None or end < start:
            raise ValueError("A completed fast needs end_time >= start_time")
        fast = FastingLog(
            user_id=user_id,
            start_time=start,
            end_time=end,
            goal_hours=data.get("goal_hours") or 16,
            status="completed",
        )
        return TrackerService.commit_log(db, user_id, fast)

    @staticmethod
    def delete(db: Session, user_id: str, log_id: int) -> bool:
        try:
            fast = db.query(FastingLog).filter_by(id=log_id, user_id=user_id).first()
            if not fast:
                return False
            db.delete(fast)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to delete fast {log_id}: {e}")
            return False

        BadgeService.sync(db, user_id)
        return True
