from typing import List
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from leaders.auth.dependencies import get_current_user
from leaders.auth.models import Role, User
from leaders.auth.permissions import require_role
from leaders.courses.schemas import CourseIn, CourseOut
from leaders.courses.services import CourseNotFoundError, CourseService, serialize_course
from leaders.db.session import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/courses", tags=["courses"])


@router.get("", response_model=List[CourseOut])
async def list_courses(
    db: AsyncSession = Depends(get_db),
    _: User = Depends(get_current_user),
):
    courses = await CourseService(db).list_courses()
    return [serialize_course(c) for c in courses]


@router.get("/{course_id}", response_model=CourseOut)
async def get_course(
    course_id: int,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(get_current_user),
):
    try:
        course = await CourseService(db).get_course(course_id)
    except CourseNotFoundError:
        raise HTTPException(status_code=404, detail="Course not found")
    return serialize_course(course)


@router.post("", response_model=CourseOut, status_code=status.HTTP_201_CREATED)
async def create_course(
    course: CourseIn,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(require_role(Role.ADMIN)),
):
    try:
        db_course = await CourseService(db).create_course(course)
    except Exception:
        logger.exception("Error creating course:")
        raise HTTPException(status_code=500, detail="Internal error while creating the course")
    return serialize_course(db_course)


@router.put("/{course_id}", response_model=CourseOut)
async def update_course(
    course_id: int,
    course: CourseIn,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(require_role(Role.ADMIN)),
):
    try:
        db_course = await CourseService(db).update_course(course_id, course)
    except CourseNotFoundError:
        raise HTTPException(status_code=404, detail="Course not found")
    except Exception:
        logger.exception("Error updating course:")
        raise HTTPException(status_code=500, detail="Internal error while updating the course")
    return serialize_course(db_course)


@router.delete("/{course_id}")
async def delete_course(
    course_id: int,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(require_role(Role.ADMIN)),
):
    try:
        await CourseService(db).delete_course(course_id)
    except CourseNotFoundError:
        raise HTTPException(status_code=404, detail="Course not found")
    return {"message": "Course deleted successfully"}
