# Import all models so they register with SQLAlchemy Base.metadata
# This ensures Base.metadata.create_all() creates all tables

from models.profile import Profile
from models.water_log import WaterLog
from models.food_log import FoodLog
from models.activity_log import ActivityLog
from models.fasting_log import FastingLog
from models.sleep_log import SleepLog
from models.weight_log import WeightLog
from models.user_badge import UserBadge

__all__ = [
    "Profile",
    "WaterLog",
    "FoodLog",
    "ActivityLog",
    "FastingLog",
    "SleepLog",
    "WeightLog",
    "UserBadge",
]
