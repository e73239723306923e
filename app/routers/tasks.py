from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import datetime
from ..database import get_db
from ..services.task_service import TaskService
from ..schemas.task import (
    TaskCreate,
    TaskUpdate,
    TaskStatusUpdate,
    TaskProgressUpdate,
    TaskResponse,
    TaskLogEntry,
    TaskSummary,
    CalendarEvent,
)
from ..schemas.common import SuccessResponse, ResponseFactory
from ..dependencies.permissions import (
    UserSession,
    get_current_user,
    require_manager,
)
from ..utils.router_helpers import handle_service_errors, RouterResponse
from ..models.enums import TaskFilter
from ..utils.constants import ResponseMessages
from ..utils.date_helpers import DateHelpers

router = APIRouter(tags=["tasks"])


@router.post(
    "/", response_model=SuccessResponse[TaskResponse], status_code=status.HTTP_201_CREATED
)
@handle_service_errors
async def create_task(
    task_data: TaskCreate,
    db: Session = Depends(get_db),
    user_household: tuple[UserSession, str] = Depends(require_manager),
):
    """Create a task in the manager's household"""
    current_user, household_id = user_household
    task_service = TaskService(db)

    task = task_service.create_task(
        task_data=task_data,
        household_id=household_id,
        created_by=current_user.id,
    )

    return ResponseFactory.created(
        data=TaskResponse.model_validate(task), message=ResponseMessages.TASK_CREATED
    )


@router.get("/", response_model=SuccessResponse[List[TaskResponse]])
@handle_service_errors
async def get_tasks(
    filter: TaskFilter = Query(TaskFilter.ALL, description="Task list filter"),
    household_id: Optional[str] = Query(None, description="Only this household"),
    helper_id: Optional[str] = Query(None, description="Only tasks assigned to this member"),
    db: Session = Depends(get_db),
    current_user: UserSession = Depends(get_current_user),
):
    """Tasks visible to the caller, filtered; sorted by due time for `all`"""
    task_service = TaskService(db)

    tasks = task_service.get_visible_tasks(
        user_id=current_user.id,
        active_filter=filter,
        household_id=household_id,
        helper_id=helper_id,
    )

    return ResponseFactory.success(data=[TaskResponse.model_validate(t) for t in tasks])


@router.get("/summary", response_model=SuccessResponse[TaskSummary])
@handle_service_errors
async def get_task_summary(
    db: Session = Depends(get_db),
    current_user: UserSession = Depends(get_current_user),
):
    """Counts and completion rate for the dashboard"""
    summary = TaskService(db).get_task_summary(current_user.id)
    return ResponseFactory.success(data=TaskSummary(**summary))


@router.get("/calendar", response_model=SuccessResponse[List[CalendarEvent]])
@handle_service_errors
async def get_calendar(
    start: Optional[datetime] = Query(None, description="Inclusive lower bound"),
    end: Optional[datetime] = Query(None, description="Exclusive upper bound"),
    year: Optional[int] = Query(None, ge=2000, le=2100),
    month: Optional[int] = Query(None, ge=1, le=12, description="Month view; overrides start/end"),
    db: Session = Depends(get_db),
    current_user: UserSession = Depends(get_current_user),
):
    if year and month:
        start, end = DateHelpers.get_month_boundaries(year, month)

    events = TaskService(db).get_calendar_events(current_user.id, start, end)
    return ResponseFactory.success(data=[CalendarEvent(**e) for e in events])


@router.get("/log", response_model=SuccessResponse[List[TaskLogEntry]])
@handle_service_errors
async def get_task_log(
    db: Session = Depends(get_db),
    current_user: UserSession = Depends(get_current_user),
):
    """Completed tasks, newest first"""
    logs = TaskService(db).get_task_log(current_user.id)
    return ResponseFactory.success(data=[TaskLogEntry(**entry) for entry in logs])


@router.get("/{task_id}", response_model=SuccessResponse[TaskResponse])
@handle_service_errors
async def get_task(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: UserSession = Depends(get_current_user),
):
    task = TaskService(db).get_task(task_id, current_user.id)
    return ResponseFactory.success(data=TaskResponse.model_validate(task))


@router.put("/{task_id}", response_model=SuccessResponse[TaskResponse])
@handle_service_errors
async def update_task(
    task_id: int,
    task_updates: TaskUpdate,
    db: Session = Depends(get_db),
    current_user: UserSession = Depends(get_current_user),
):
    """Replace a task's editable fields (manager only)"""
    task = TaskService(db).update_task(task_id, task_updates, current_user.id)
    return ResponseFactory.success(
        data=TaskResponse.model_validate(task), message=ResponseMessages.TASK_UPDATED
    )


@router.delete("/{task_id}")
@handle_service_errors
async def delete_task(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: UserSession = Depends(get_current_user),
):
    TaskService(db).delete_task(task_id, current_user.id)
    return RouterResponse.deleted(message=ResponseMessages.TASK_DELETED)


@router.put("/{task_id}/status", response_model=SuccessResponse[TaskResponse])
@handle_service_errors
async def set_task_completed(
    task_id: int,
    status_update: TaskStatusUpdate,
    db: Session = Depends(get_db),
    current_user: UserSession = Depends(get_current_user),
):
    """Checkbox toggle between completed and pending"""
    task = TaskService(db).set_completed(
        task_id, current_user.id, status_update.completed
    )
    message = (
        ResponseMessages.TASK_COMPLETED
        if status_update.completed
        else ResponseMessages.TASK_REOPENED
    )
    return ResponseFactory.success(data=TaskResponse.model_validate(task), message=message)


@router.put("/{task_id}/progress", response_model=SuccessResponse[TaskResponse])
@handle_service_errors
async def set_task_in_progress(
    task_id: int,
    progress_update: TaskProgressUpdate,
    db: Session = Depends(get_db),
    current_user: UserSession = Depends(get_current_user),
):
    task = TaskService(db).set_in_progress(
        task_id, current_user.id, progress_update.in_progress
    )
    return ResponseFactory.success(
        data=TaskResponse.model_validate(task), message=ResponseMessages.TASK_UPDATED
    )
