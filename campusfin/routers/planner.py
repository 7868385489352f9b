"""Task, deadline and exam routers.

The three resources share one set of routes; ``build_planner_router`` wires
a resource's schemas to a PlannerService bound to its table.
"""
from fastapi import APIRouter, Depends, Query, status
from typing import Callable, List, Optional, Type
from pydantic import BaseModel
from sqlmodel import Session

from campusfin.db.config import get_session
from campusfin.middleware.auth import CurrentUser, get_current_user
from campusfin.middleware.rate_limit import enforce_rate_limit
from campusfin.schemas.planner import (
    DeadlineCreate,
    DeadlineResponse,
    DeadlineUpdate,
    ExamCreate,
    ExamResponse,
    ExamUpdate,
    TaskCreate,
    TaskResponse,
    TaskUpdate,
)
from campusfin.services.planner_service import PlannerService, deadline_service, exam_service, task_service


def build_planner_router(
    prefix: str,
    tag: str,
    make_service: Callable[[Session], PlannerService],
    create_schema: Type[BaseModel],
    update_schema: Type[BaseModel],
    response_schema: Type[BaseModel],
) -> APIRouter:
    router = APIRouter(prefix=prefix, tags=[tag], dependencies=[Depends(enforce_rate_limit)])

    def get_service(session: Session = Depends(get_session)) -> PlannerService:
        return make_service(session)

    @router.get("", response_model=List[response_schema])
    async def list_items(
        current_user: CurrentUser = Depends(get_current_user),
        service: PlannerService = Depends(get_service),
        status_filter: Optional[str] = Query(None, alias="status", description="Filter by status"),
        course_id: Optional[str] = Query(None, description="Filter by course"),
        recurring_pattern_id: Optional[str] = Query(None, description="Only instances of this pattern"),
    ):
        return service.list(
            current_user.user_id,
            status=status_filter,
            course_id=course_id,
            recurring_pattern_id=recurring_pattern_id,
        )

    @router.post("", response_model=response_schema, status_code=status.HTTP_201_CREATED)
    async def create_item(
        item_data: create_schema,
        current_user: CurrentUser = Depends(get_current_user),
        service: PlannerService = Depends(get_service),
    ):
        return service.create(current_user.user_id, item_data.model_dump())

    @router.get("/{item_id}", response_model=response_schema)
    async def get_item(
        item_id: str,
        current_user: CurrentUser = Depends(get_current_user),
        service: PlannerService = Depends(get_service),
    ):
        return service.get_or_404(item_id, current_user.user_id)

    @router.patch("/{item_id}", response_model=response_schema)
    async def update_item(
        item_id: str,
        item_data: update_schema,
        current_user: CurrentUser = Depends(get_current_user),
        service: PlannerService = Depends(get_service),
    ):
        return service.update(item_id, current_user.user_id, item_data.model_dump(exclude_unset=True))

    @router.delete("/{item_id}")
    async def delete_item(
        item_id: str,
        current_user: CurrentUser = Depends(get_current_user),
        service: PlannerService = Depends(get_service),
    ):
        """Delete an item; a recurring instance also stops its series."""
        return {"deleted": service.delete(item_id, current_user.user_id)}

    return router


tasks_router = build_planner_router("/tasks", "Tasks", task_service, TaskCreate, TaskUpdate, TaskResponse)
deadlines_router = build_planner_router(
    "/deadlines", "Deadlines", deadline_service, DeadlineCreate, DeadlineUpdate, DeadlineResponse
)
exams_router = build_planner_router("/exams", "Exams", exam_service, ExamCreate, ExamUpdate, ExamResponse)
