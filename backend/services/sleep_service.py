"""
sleep_service.py - Sleep journal
Bedtime/wake-up clock strings; duration is derived and wraps past midnight.
"""

import logging
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.sleep_log import SleepLog
from models.util import now_ms
from services.badge_service import BadgeService
from services.tracker_service import TrackerService

logger = logging.getLogger(__name__)

QUALITIES = ("bad", "average", "good", "excellent")
MINUTES_PER_DAY = 24 * 60


def parse_clock(value: str) -> int:
    """'HH:MM' -> minutes after midnight. Raises ValueError on bad input."""
    t = datetime.strptime(value.strip(), "%H:%M")
    return t.hour * 60 + t.minute


def sleep_duration(start_time: str, end_time: str) -> int:
    """Minutes from bedtime to wake-up; a wake-up earlier than bedtime is the next day."""
    return (parse_clock(end_time) - parse_clock(start_time)) % MINUTES_PER_DAY


class SleepService:
    @staticmethod
    def log(db: Session, user_id: str, data: dict) -> dict | None:
        quality = data.get("quality")
        if quality not in QUALITIES:
            raise ValueError(f"quality must be one of {', '.join(QUALITIES)}")

        start, end = data.get("start_time") or "", data.get("end_time") or ""
        entry = SleepLog(
            user_id=user_id,
            start_time=start,
            end_time=end,
            duration_minutes=sleep_duration(start, end),
            quality=quality,
            timestamp=data.get("timestamp") or now_ms(),
        )
        return TrackerService.commit_log(db, user_id, entry)

    @staticmethod
    def get_all(db: Session, user_id: str) -> list:
        return db.query(SleepLog).filter_by(user_id=user_id).order_by(SleepLog.timestamp.desc()).all()

    @staticmethod
    def delete(db: Session, user_id: str, log_id: int) -> bool:
        try:
            entry = db.query(SleepLog).filter_by(id=log_id, user_id=user_id).first()
            if not entry:
                return False
            db.delete(entry)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to delete sleep log {log_id}: {e}")
            return False

        BadgeService.sync(db, user_id)
        return True
