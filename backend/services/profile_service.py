"""
profile_service.py - Per-user profile row
Holds the "first ever log" timestamp used by the anniversary badges, the
user's body measurements and their daily goals.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.profile import Profile
from models.util import now_ms
from models.weight_log import WeightLog

logger = logging.getLogger(__name__)

# API name -> column
GOAL_FIELDS = {
    "calories": "goal_calories",
    "protein": "goal_protein",
    "carbs": "goal_carbs",
    "fat": "goal_fat",
    "water_ml": "goal_water_ml",
    "activity_minutes": "goal_activity_minutes",
    "fasting_hours": "goal_fasting_hours",
    "sleep_hours": "goal_sleep_hours",
    "weight_kg": "goal_weight_kg",
}
PROFILE_FIELDS = ("age", "weight_kg", "height_cm", "gender")
GENDERS = ("male", "female", "other")


def _positive(data: dict, fields) -> None:
    for f in fields:
        value = data.get(f)
        if value is not None and value <= 0:
            raise ValueError(f"{f} must be positive")


class ProfileService:
    @staticmethod
    def get_or_create(db: Session, user_id: str) -> Profile:
        profile = db.get(Profile, user_id)
        if profile is None:
            profile = Profile(id=user_id)
            db.add(profile)
            db.flush()
        return profile

    @staticmethod
    def first_log_date(db: Session, user_id: str) -> int | None:
        profile = db.get(Profile, user_id)
        return profile.first_log_date if profile else None

    @staticmethod
    def mark_first_log(db: Session, user_id: str, timestamp: int | None = None) -> Profile:
        """Set first_log_date once. Part of the caller's transaction (no commit)."""
        profile = ProfileService.get_or_create(db, user_id)
        if profile.first_log_date is None:
            profile.first_log_date = timestamp or now_ms()
            logger.info(f"First log recorded for user {user_id}")
        return profile

    # ------------------------------------------------------------------
    # Goals

    @staticmethod
    def goals_of(profile: Profile) -> dict:
        return {name: getattr(profile, column) for name, column in GOAL_FIELDS.items()}

    @staticmethod
    def get_goals(db: Session, user_id: str) -> dict:
        return ProfileService.goals_of(ProfileService.get_or_create(db, user_id))

    @staticmethod
    def update_goals(db: Session, user_id: str, data: dict) -> dict | None:
        """Partial update: only the targets present in data change."""
        unknown = set(data) - set(GOAL_FIELDS)
        if unknown:
            raise ValueError(f"Unknown goal: {', '.join(sorted(unknown))}")
        _positive(data, GOAL_FIELDS)
        try:
            profile = ProfileService.get_or_create(db, user_id)
            for name, value in data.items():
                if value is not None:
                    setattr(profile, GOAL_FIELDS[name], value)
            db.commit()
            db.refresh(profile)
            return ProfileService.goals_of(profile)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to update goals for user {user_id}: {e}")
            return None

    # ------------------------------------------------------------------
    # Body profile

    @staticmethod
    def profile_of(profile: Profile) -> dict:
        return {f: getattr(profile, f) for f in PROFILE_FIELDS}

    @staticmethod
    def get_profile(db: Session, user_id: str) -> dict:
        return ProfileService.profile_of(ProfileService.get_or_create(db, user_id))

    @staticmethod
    def update_profile(db: Session, user_id: str, data: dict) -> dict | None:
        """Partial update. A changed weight is also appended to the weight history."""
        gender = data.get("gender")
        if gender is not None and gender not in GENDERS:
            raise ValueError(f"gender must be one of {', '.join(GENDERS)}")
        _positive(data, ("age", "weight_kg", "height_cm"))
        try:
            profile = ProfileService.get_or_create(db, user_id)
            weight = data.get("weight_kg")
            if weight and weight != profile.weight_kg:
                db.add(WeightLog(user_id=user_id, weight_kg=weight, timestamp=now_ms()))
            for f in PROFILE_FIELDS:
                if f in data:
                    setattr(profile, f, data[f])
            db.commit()
            db.refresh(profile)
            return ProfileService.profile_of(profile)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to update profile for user {user_id}: {e}")
            return None
