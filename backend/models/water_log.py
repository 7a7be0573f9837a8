from sqlalchemy import Column, Integer, String, BigInteger
from database import Base
from models.util import now_ms


class WaterLog(Base):
    __tablename__ = "water_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(36), nullable=False, index=True)
    amount_ml = Column(Integer, nullable=False)
    timestamp = Column(BigInteger, nullable=False, default=now_ms)  # ms epoch
