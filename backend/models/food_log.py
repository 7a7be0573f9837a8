from sqlalchemy import Column, Integer, String, Float, BigInteger
from database import Base
from models.util import now_ms


class FoodLog(Base):
    __tablename__ = "food_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(36), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    portion = Column(String(100), nullable=True)  # e.g., "150g", "1 cup"
    calories = Column(Float, default=0)
    protein = Column(Float, default=0)  # grams
    carbs = Column(Float, default=0)
    fat = Column(Float, default=0)
    timestamp = Column(BigInteger, nullable=False, default=now_ms)
