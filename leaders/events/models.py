from sqlalchemy import (
    Column, Integer, String, DateTime, Text, ForeignKey, TIMESTAMP, UniqueConstraint
)
from sqlalchemy.orm import relationship
from enum import Enum
from leaders.db.session import Base
from datetime import datetime


class EventMode(str, Enum):
    ONLINE = "online"
    IN_PERSON = "in-person"


class Event(Base):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False, index=True)
    description = Column(Text, nullable=True)
    date = Column(TIMESTAMP(timezone=True), nullable=False, index=True)
    mode = Column(String(20), nullable=False)
    # Lien visio (online) ou adresse (in-person)
    location = Column(String(500), nullable=True)

    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    instructor_id = Column(Integer, ForeignKey('users.id', ondelete="SET NULL"), nullable=True)
    instructor = relationship("User", lazy="joined")

    registrations = relationship(
        "EventRegistration",
        back_populates="event",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="EventRegistration.id",
    )

    def __repr__(self):
        return f"<Event(id={self.id}, title='{self.title}', date='{self.date}')>"

    @property
    def registration_count(self):
        return len(self.registrations)


class EventRegistration(Base):
    __tablename__ = "event_registrations"
    __table_args__ = (
        UniqueConstraint("event_id", "user_id", name="uq_event_registrations_event_user"),
    )

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey('events.id', ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey('users.id', ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    event = relationship("Event", back_populates="registrations")

    def __repr__(self):
        return f"<EventRegistration(event_id={self.event_id}, user_id={self.user_id})>"
