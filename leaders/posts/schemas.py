from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class PostOut(BaseModel):
    id: int
    user_id: int
    content: Optional[str] = None
    image_url: Optional[str] = None
    created_at: datetime
    photo: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class PostListResponse(BaseModel):
    posts: List[PostOut]
    total: int
    page: int
    per_page: int
    pages: int
