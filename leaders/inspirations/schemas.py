from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class InspirationCreate(BaseModel):
    # Validé dans le service pour répondre 400 plutôt que 422
    content: Optional[str] = None
    category: Optional[str] = None


class InspirationOut(BaseModel):
    id: int
    user_id: int
    content: str
    category: str
    created_at: datetime
    photo: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    likes_count: int = 0
    user_liked: bool = False


class LikeToggleResponse(BaseModel):
    liked: bool
    likes_count: int
