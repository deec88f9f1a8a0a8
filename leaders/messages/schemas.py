from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class MessageCreate(BaseModel):
    receiver_id: Optional[int] = None
    content: Optional[str] = None


class MessageOut(BaseModel):
    id: int
    sender_id: int
    receiver_id: int
    content: str
    created_at: datetime
    photo: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class MessageListResponse(BaseModel):
    messages: List[MessageOut]
    total: int
    page: int
    per_page: int
    pages: int


class ConversationOut(BaseModel):
    other_user_id: int
    photo: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    last_message: str
    last_message_date: datetime


class ConversationListResponse(BaseModel):
    conversations: List[ConversationOut]
    total: int
    page: int
    per_page: int
    pages: int
