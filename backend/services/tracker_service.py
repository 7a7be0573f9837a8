"""
tracker_service.py - Water, food & activity logs
Create/list/delete for the three timestamped log tables that feed the daily
logging streak. Every mutation re-runs badge evaluation.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.activity_log import ActivityLog
from models.food_log import FoodLog
from models.util import now_ms
from models.water_log import WaterLog
from models.weight_log import WeightLog
from services.badge_service import BadgeService
from services.profile_service import ProfileService

logger = logging.getLogger(__name__)


MODELS = {
    "water": WaterLog,
    "food": FoodLog,
    "activity": ActivityLog,
    "weight": WeightLog,
}
# Logs that feed the badge engine and the first-log date
BADGE_KINDS = ("water", "food", "activity")


def _non_negative(data: dict, *fields: str):
    for f in fields:
        value = data.get(f)
        if value is not None and value < 0:
            raise ValueError(f"{f} must not be negative")


class TrackerService:
    @staticmethod
    def commit_log(db: Session, user_id: str, row, badges: bool = True) -> dict | None:
        """Persist a new log row, stamp the first-log date, then evaluate badges."""
        try:
            db.add(row)
            if badges:
                ProfileService.mark_first_log(db, user_id)
            db.commit()
            db.refresh(row)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to save {row.__tablename__} for user {user_id}: {e}")
            return None

        if not badges:
            return {"log": row, "new_badges": []}
        return {"log": row, "new_badges": BadgeService.sync(db, user_id)}

    @staticmethod
    def build(kind: str, user_id: str, data: dict):
        """Validate input and construct (but do not save) a log row."""
        if kind == "water":
            amount = data.get("amount_ml")
            if not isinstance(amount, int) or amount <= 0:
                raise ValueError("amount_ml must be a positive integer")
            row = WaterLog(user_id=user_id, amount_ml=amount)
        elif kind == "food":
            _non_negative(data, "calories", "protein", "carbs", "fat")
            row = FoodLog(
                user_id=user_id,
                name=data.get("name") or "Food",
                portion=data.get("portion"),
                calories=data.get("calories") or 0,
                protein=data.get("protein") or 0,
                carbs=data.get("carbs") or 0,
                fat=data.get("fat") or 0,
            )
        elif kind == "activity":
            _non_negative(data, "duration_minutes", "calories_burned", "steps")
            row = ActivityLog(
                user_id=user_id,
                activity_name=data.get("activity_name") or "Activity",
                duration_minutes=data.get("duration_minutes") or 0,
                calories_burned=data.get("calories_burned") or 0,
                steps=data.get("steps"),
            )
        elif kind == "weight":
            weight = data.get("weight_kg")
            if not isinstance(weight, (int, float)) or isinstance(weight, bool) or weight <= 0:
                raise ValueError("weight_kg must be a positive number")
            row = WeightLog(user_id=user_id, weight_kg=weight)
        else:
            raise ValueError(f"Unknown log type: {kind}")

        row.timestamp = data.get("timestamp") or now_ms()
        return row

    @staticmethod
    def add(db: Session, user_id: str, kind: str, data: dict) -> dict | None:
        row = TrackerService.build(kind, user_id, data)
        return TrackerService.commit_log(db, user_id, row, badges=kind in BADGE_KINDS)

    @staticmethod
    def add_many(db: Session, user_id: str, kind: str, items: list[dict]) -> dict | None:
        """Several rows in one transaction (e.g. every item of an analyzed meal)."""
        rows = [TrackerService.build(kind, user_id, item) for item in items]
        if not rows:
            return {"logs": [], "new_badges": []}
        try:
            db.add_all(rows)
            ProfileService.mark_first_log(db, user_id)
            db.commit()
            for r in rows:
                db.refresh(r)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to save {kind} logs for user {user_id}: {e}")
            return None

        return {"logs": rows, "new_badges": BadgeService.sync(db, user_id)}

    @staticmethod
    def get_all(db: Session, user_id: str, kind: str) -> list:
        model = MODELS[kind]
        return db.query(model).filter_by(user_id=user_id).order_by(model.timestamp.desc()).all()

    @staticmethod
    def delete(db: Session, user_id: str, kind: str, log_id: int) -> bool:
        model = MODELS[kind]
        try:
            row = db.query(model).filter_by(id=log_id, user_id=user_id).first()
            if not row:
                return False
            db.delete(row)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to delete {kind} log {log_id}: {e}")
            return False

        if kind in BADGE_KINDS:
            BadgeService.sync(db, user_id)
        return True
