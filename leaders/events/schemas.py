from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from datetime import datetime, timezone

from leaders.events.models import EventMode


def to_naive_utc(v: Optional[datetime]) -> Optional[datetime]:
    """Les dates sont stockées en UTC sans fuseau"""
    if v is not None and v.tzinfo is not None:
        return v.astimezone(timezone.utc).replace(tzinfo=None)
    return v


# ===========================
# ÉVÉNEMENTS
# ===========================
class EventBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=5000)
    date: datetime
    mode: EventMode
    location: Optional[str] = Field(default=None, max_length=500)

    @field_validator('date')
    @classmethod
    def normalize_date(cls, v):
        return to_naive_utc(v)


class EventCreate(EventBase):
    # Pris en compte uniquement pour un Admin
    instructor_id: Optional[int] = None


class EventUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=5000)
    date: Optional[datetime] = None
    mode: Optional[EventMode] = None
    location: Optional[str] = Field(None, max_length=500)
    instructor_id: Optional[int] = None

    @field_validator('date')
    @classmethod
    def normalize_date(cls, v):
        return to_naive_utc(v)


class EventResponse(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    date: datetime
    mode: str
    location: Optional[str] = None
    instructor_id: Optional[int] = None
    instructor_first_name: Optional[str] = None
    instructor_last_name: Optional[str] = None
    created_at: datetime
    registrations: List[int] = []
    registration_count: int = 0


# ===========================
# INSCRIPTIONS
# ===========================
class RegistrationResponse(BaseModel):
    message: str
    event_id: int
    user_id: int
    registered: bool
