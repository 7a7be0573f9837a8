from sqlalchemy import Column, Integer, String, Float, BigInteger
from database import Base


class FastingLog(Base):
    __tablename__ = "fasting_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(36), nullable=False, index=True)
    start_time = Column(BigInteger, nullable=False)  # ms epoch
    end_time = Column(BigInteger, nullable=True)  # null while active
    goal_hours = Column(Float, default=16)
    status = Column(String(20), default="active")  # active/completed
