from sqlalchemy import Column, Integer, String, BigInteger
from database import Base
from models.util import now_ms


class SleepLog(Base):
    __tablename__ = "sleep_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(36), nullable=False, index=True)
    start_time = Column(String(5), nullable=False)  # "23:30"
    end_time = Column(String(5), nullable=False)  # "07:00"
    duration_minutes = Column(Integer, nullable=False, default=0)
    quality = Column(String(20), nullable=False)  # bad/average/good/excellent
    timestamp = Column(BigInteger, nullable=False, default=now_ms)
