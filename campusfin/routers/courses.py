"""Course router for CampusFin."""
from fastapi import APIRouter, Depends, status
from typing import List
from sqlmodel import Session

from campusfin.db.config import get_session
from campusfin.middleware.auth import CurrentUser, get_current_user
from campusfin.middleware.rate_limit import enforce_rate_limit
from campusfin.schemas.course import CourseCreate, CourseResponse, CourseUpdate
from campusfin.services.course_service import CourseService

router = APIRouter(prefix="/courses", tags=["Courses"], dependencies=[Depends(enforce_rate_limit)])


def get_course_service(session: Session = Depends(get_session)) -> CourseService:
    return CourseService(session)


@router.get("", response_model=List[CourseResponse])
async def list_courses(
    current_user: CurrentUser = Depends(get_current_user),
    service: CourseService = Depends(get_course_service),
):
    """Courses, newest first."""
    return service.list(current_user.user_id)


@router.post("", response_model=CourseResponse, status_code=status.HTTP_201_CREATED)
async def create_course(
    course_data: CourseCreate,
    current_user: CurrentUser = Depends(get_current_user),
    service: CourseService = Depends(get_course_service),
):
    return service.create(current_user.user_id, course_data)


@router.get("/{course_id}", response_model=CourseResponse)
async def get_course(
    course_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: CourseService = Depends(get_course_service),
):
    return service.get_or_404(course_id, current_user.user_id)


@router.patch("/{course_id}", response_model=CourseResponse)
async def update_course(
    course_id: str,
    course_data: CourseUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    service: CourseService = Depends(get_course_service),
):
    return service.update(course_id, current_user.user_id, course_data)


@router.delete("/{course_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_course(
    course_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: CourseService = Depends(get_course_service),
):
    """Delete a course; linked tasks, deadlines and exams are kept without a course."""
    service.delete(course_id, current_user.user_id)
