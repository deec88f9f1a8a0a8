from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from leaders.courses.models import ContentType


# ===========================
# ENTRÉES
# ===========================
class ContentBlockIn(BaseModel):
    type: ContentType = ContentType.TEXT
    content: Optional[str] = None


class ModuleIn(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    content_blocks: List[ContentBlockIn] = []


class CourseIn(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    language: Optional[str] = Field(default=None, max_length=50)
    modules: List[ModuleIn] = []


# ===========================
# SORTIES
# ===========================
class ContentBlockOut(BaseModel):
    id: int
    module_id: int
    type: str
    content: Optional[str] = None
    order_index: int

    model_config = ConfigDict(from_attributes=True)


class ModuleOut(BaseModel):
    id: int
    course_id: int
    title: str
    order_index: int
    content_count: int = 0
    content_blocks: List[ContentBlockOut] = []

    model_config = ConfigDict(from_attributes=True)


class CourseOut(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    language: Optional[str] = None
    created_at: datetime
    modules: List[ModuleOut] = []

    model_config = ConfigDict(from_attributes=True)
