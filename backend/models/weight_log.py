from sqlalchemy import Column, Integer, String, Float, BigInteger
from database import Base
from models.util import now_ms


class WeightLog(Base):
    __tablename__ = "weight_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(36), nullable=False, index=True)
    weight_kg = Column(Float, nullable=False)
    timestamp = Column(BigInteger, nullable=False, default=now_ms)  # ms epoch
