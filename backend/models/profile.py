from datetime import datetime, timezone

from sqlalchemy import Column, String, Integer, Float, BigInteger, DateTime
from database import Base


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(String(36), primary_key=True)  # Supabase auth user id (uuid)
    first_log_date = Column(BigInteger, nullable=True)  # ms epoch, written once

    # About the user
    age = Column(Integer, nullable=True)
    weight_kg = Column(Float, nullable=True)
    height_cm = Column(Float, nullable=True)
    gender = Column(String(10), nullable=True)  # male, female, other

    # Daily targets
    goal_calories = Column(Float, default=2200)
    goal_protein = Column(Float, default=120)
    goal_carbs = Column(Float, default=250)
    goal_fat = Column(Float, default=70)
    goal_water_ml = Column(Integer, default=2500)
    goal_activity_minutes = Column(Integer, default=30)
    goal_fasting_hours = Column(Float, default=16)
    goal_sleep_hours = Column(Float, default=8)
    goal_weight_kg = Column(Float, default=70)

    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
