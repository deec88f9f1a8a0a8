from datetime import datetime
from enum import Enum

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from leaders.db.session import Base


class ContentType(str, Enum):
    TEXT = "text"
    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"
    EMBED = "embed"  # code d'intégration brut


class Course(Base):
    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    language = Column(String(50), nullable=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    modules = relationship(
        "CourseModule",
        back_populates="course",
        cascade="all, delete-orphan",
        order_by="CourseModule.order_index",
        lazy="selectin",
    )

    def __repr__(self):
        return f"<Course(id={self.id}, title='{self.title}')>"


class CourseModule(Base):
    __tablename__ = "modules"

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    order_index = Column(Integer, nullable=False)

    course = relationship("Course", back_populates="modules")
    content_blocks = relationship(
        "ContentBlock",
        back_populates="module",
        cascade="all, delete-orphan",
        order_by="ContentBlock.order_index",
        lazy="selectin",
    )

    def __repr__(self):
        return f"<CourseModule(id={self.id}, course_id={self.course_id}, order={self.order_index})>"


class ContentBlock(Base):
    __tablename__ = "content_blocks"

    id = Column(Integer, primary_key=True, index=True)
    module_id = Column(Integer, ForeignKey("modules.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String(20), nullable=False)
    content = Column(Text, nullable=True)
    order_index = Column(Integer, nullable=False)

    module = relationship("CourseModule", back_populates="content_blocks")

    def __repr__(self):
        return f"<ContentBlock(id={self.id}, module_id={self.module_id}, type='{self.type}')>"
