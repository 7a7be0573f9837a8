from sqlalchemy import Column, Integer, String, Float, BigInteger
from database import Base
from models.util import now_ms


class ActivityLog(Base):
    __tablename__ = "activity_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(36), nullable=False, index=True)
    activity_name = Column(String(100), nullable=False)
    duration_minutes = Column(Integer, nullable=False, default=0)
    calories_burned = Column(Float, default=0)
    steps = Column(Integer, nullable=True)
    timestamp = Column(BigInteger, nullable=False, default=now_ms)
