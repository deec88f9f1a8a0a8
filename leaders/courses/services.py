import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from leaders.courses.models import ContentBlock, Course, CourseModule
from leaders.courses.schemas import CourseIn, ModuleIn

logger = logging.getLogger(__name__)


class CourseNotFoundError(Exception):
    pass


def build_modules(modules: List[ModuleIn]) -> List[CourseModule]:
    """Construit l'arbre modules / blocs ; l'ordre est la position dans les listes reçues"""
    return [
        CourseModule(
            title=module.title,
            order_index=module_index,
            content_blocks=[
                ContentBlock(type=block.type.value, content=block.content, order_index=block_index)
                for block_index, block in enumerate(module.content_blocks)
            ],
        )
        for module_index, module in enumerate(modules)
    ]


def serialize_course(course: Course) -> dict:
    return {
        "id": course.id,
        "title": course.title,
        "description": course.description,
        "language": course.language,
        "created_at": course.created_at,
        "modules": [
            {
                "id": module.id,
                "course_id": module.course_id,
                "title": module.title,
                "order_index": module.order_index,
                "content_count": len(module.content_blocks),
                "content_blocks": [
                    {
                        "id": block.id,
                        "module_id": block.module_id,
                        "type": block.type,
                        "content": block.content,
                        "order_index": block.order_index,
                    }
                    for block in module.content_blocks
                ],
            }
            for module in course.modules
        ],
    }


class CourseService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_course(self, course_id: int) -> Course:
        result = await self.db.execute(
            select(Course)
            .where(Course.id == course_id)
            .execution_options(populate_existing=True)
        )
        course = result.scalars().first()
        if not course:
            raise CourseNotFoundError(f"Course {course_id} not found")
        return course

    async def list_courses(self) -> List[Course]:
        result = await self.db.execute(
            select(Course).order_by(Course.created_at.desc(), Course.id.desc())
        )
        return list(result.scalars().all())

    async def create_course(self, data: CourseIn) -> Course:
        course = Course(
            title=data.title,
            description=data.description,
            language=data.language,
            modules=build_modules(data.modules),
        )
        self.db.add(course)
        try:
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Error creating course: {e}")
            raise

        logger.info(f"Course created: id={course.id}, modules={len(data.modules)}")
        return await self.get_course(course.id)

    async def update_course(self, course_id: int, data: CourseIn) -> Course:
        """Remplace les champs du cours et tout son arbre de modules"""
        course = await self.get_course(course_id)

        course.title = data.title
        course.description = data.description
        course.language = data.language
        course.modules = build_modules(data.modules)

        try:
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Error updating course {course_id}: {e}")
            raise

        logger.info(f"Course updated: id={course_id}, modules={len(data.modules)}")
        return await self.get_course(course_id)

    async def delete_course(self, course_id: int) -> None:
        course = await self.get_course(course_id)
        await self.db.delete(course)
        await self.db.commit()
        logger.info(f"Course deleted: id={course_id}")
