"""Admin course management (course wizard)"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from uuid import UUID
import logging

from domain.models import get_db_session, AppUser
from domain.schemas.course_schemas import (
    CourseCreate,
    CourseUpdate,
    CourseResponse,
    PublishRequest,
)
from services.course_service import CourseService
from api.dependencies import require_admin
from api.responses import MessageResponse
from app.exceptions import NotFoundError

router = APIRouter(prefix="/admin/courses", tags=["Admin: Courses"])
logger = logging.getLogger("chefos.api.admin_courses")


@router.get("", response_model=List[CourseResponse])
def list_courses(
    admin: AppUser = Depends(require_admin), db: Session = Depends(get_db_session)
):
    return CourseService.list_courses(db)


@router.post("", response_model=CourseResponse, status_code=status.HTTP_201_CREATED)
def create_course(
    payload: CourseCreate,
    admin: AppUser = Depends(require_admin),
    db: Session = Depends(get_db_session),
):
    """Created as a draft; publish separately once it has steps."""
    return CourseService.create_course(db, admin.user_id, payload)


@router.get("/{course_id}", response_model=CourseResponse)
def get_course(
    course_id: UUID,
    admin: AppUser = Depends(require_admin),
    db: Session = Depends(get_db_session),
):
    return CourseService.get_course(db, course_id)


@router.patch("/{course_id}", response_model=CourseResponse)
def update_course(
    course_id: UUID,
    payload: CourseUpdate,
    admin: AppUser = Depends(require_admin),
    db: Session = Depends(get_db_session),
):
    return CourseService.update_course(db, course_id, payload)


@router.post("/{course_id}/publish", response_model=CourseResponse)
def publish_course(
    course_id: UUID,
    payload: PublishRequest = PublishRequest(),
    admin: AppUser = Depends(require_admin),
    db: Session = Depends(get_db_session),
):
    return CourseService.set_published(db, course_id, payload.is_published)


@router.delete("/{course_id}", response_model=MessageResponse)
def delete_course(
    course_id: UUID,
    admin: AppUser = Depends(require_admin),
    db: Session = Depends(get_db_session),
):
    if not CourseService.delete_course(db, course_id):
        raise NotFoundError(f"Course not found: {course_id}")
    return MessageResponse(message="Course deleted")
