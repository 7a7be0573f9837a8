from sqlalchemy import Column, Integer, String, Boolean, BigInteger, UniqueConstraint
from database import Base
from models.util import now_ms


class UserBadge(Base):
    __tablename__ = "user_badges"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(36), nullable=False, index=True)
    badge_id = Column(String(50), nullable=False)
    position = Column(Integer, nullable=False)  # earn order
    celebrated = Column(Boolean, default=False)  # dismissed from the "new badge" queue
    earned_at = Column(BigInteger, nullable=False, default=now_ms)

    __table_args__ = (
        UniqueConstraint("user_id", "badge_id", name="uq_userbadge_user_badge"),
        UniqueConstraint("user_id", "position", name="uq_userbadge_user_position"),
    )
