from datetime import datetime
from enum import Enum

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from leaders.db.session import Base


class SwipeAction(str, Enum):
    LIKE = "like"
    PASS = "pass"


class Swipe(Base):
    __tablename__ = "swipes"
    __table_args__ = (
        UniqueConstraint("swiper_id", "swiped_id", name="uq_swipes_swiper_swiped"),
    )

    id = Column(Integer, primary_key=True, index=True)
    swiper_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    swiped_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    action = Column(String(10), nullable=False)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Swipe(id={self.id}, {self.swiper_id} -> {self.swiped_id}, action='{self.action}')>"


class Match(Base):
    __tablename__ = "matches"
    __table_args__ = (
        UniqueConstraint("user_a_id", "user_b_id", name="uq_matches_pair"),
        # Paire normalisée : le plus petit id toujours en user_a
        CheckConstraint("user_a_id < user_b_id", name="ck_matches_ordered_pair"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_a_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    user_b_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    user_a = relationship("User", foreign_keys=[user_a_id])
    user_b = relationship("User", foreign_keys=[user_b_id])

    def __repr__(self):
        return f"<Match(id={self.id}, users=({self.user_a_id}, {self.user_b_id}))>"

    def other_user_id(self, user_id: int) -> int:
        return self.user_b_id if self.user_a_id == user_id else self.user_a_id
