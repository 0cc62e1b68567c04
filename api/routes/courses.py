"""Public academy course routes"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
from uuid import UUID
import logging

from domain.models import get_db_session
from domain.schemas.course_schemas import CourseResponse
from services.course_service import CourseService
from app.exceptions import NotFoundError

router = APIRouter(prefix="/courses", tags=["Academy"])
logger = logging.getLogger("chefos.api.courses")


@router.get("", response_model=List[CourseResponse])
def list_published_courses(db: Session = Depends(get_db_session)):
    return CourseService.list_courses(db, published_only=True)


@router.get("/{course_id}", response_model=CourseResponse)
def get_published_course(course_id: UUID, db: Session = Depends(get_db_session)):
    course = CourseService.get_course(db, course_id)
    if not course.is_published:
        raise NotFoundError(f"Course not found: {course_id}")
    return course
