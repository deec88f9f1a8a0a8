from datetime import datetime
from enum import Enum

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from leaders.db.session import Base


class InspirationCategory(str, Enum):
    AFFIRMATION = "Affirmation"
    REVE = "Rêve"
    PROJET = "Projet"
    HISTOIRE = "Histoire"


class Inspiration(Base):
    __tablename__ = "inspirations"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    category = Column(String(50), nullable=False)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False, index=True)

    author = relationship("User", lazy="joined")
    likes = relationship(
        "InspirationLike",
        back_populates="inspiration",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def __repr__(self):
        return f"<Inspiration(id={self.id}, category={self.category})>"


class InspirationLike(Base):
    __tablename__ = "inspiration_likes"
    __table_args__ = (UniqueConstraint("inspiration_id", "user_id", name="uq_inspiration_like"),)

    id = Column(Integer, primary_key=True, index=True)
    inspiration_id = Column(Integer, ForeignKey("inspirations.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    inspiration = relationship("Inspiration", back_populates="likes")
