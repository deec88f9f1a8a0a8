from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from leaders.matching.models import SwipeAction


class SwipeCreate(BaseModel):
    swiped_id: Optional[int] = None
    action: Optional[str] = None


class SwipeResponse(BaseModel):
    message: str
    action: SwipeAction
    match: bool
    match_id: Optional[int] = None


class MatchOut(BaseModel):
    id: int
    created_at: datetime
    matched_user_id: int
    photo: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    country: Optional[str] = None
    city: Optional[str] = None
