from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
from ..database import get_db
from ..services.suggestion_service import SuggestionService
from ..schemas.assistant import SuggestionResponse
from ..schemas.task import TaskResponse
from ..schemas.common import SuccessResponse, ResponseFactory
from ..dependencies.permissions import (
    UserSession,
    get_current_user,
    require_household_member,
)
from ..utils.router_helpers import handle_service_errors
from ..utils.constants import ResponseMessages

router = APIRouter(tags=["suggestions"])


@router.get("/", response_model=SuccessResponse[List[SuggestionResponse]])
@handle_service_errors
async def list_pending_suggestions(
    db: Session = Depends(get_db),
    user_household: tuple[UserSession, str] = Depends(require_household_member),
):
    """Pending suggestions for the caller's household, soonest first"""
    _, household_id = user_household
    suggestions = SuggestionService(db).list_pending(household_id)
    return ResponseFactory.success(
        data=[SuggestionResponse.model_validate(s) for s in suggestions]
    )


@router.post("/{suggestion_id}/accept", response_model=SuccessResponse[TaskResponse])
@handle_service_errors
async def accept_suggestion(
    suggestion_id: int,
    db: Session = Depends(get_db),
    current_user: UserSession = Depends(get_current_user),
):
    task = SuggestionService(db).accept(suggestion_id, current_user.id)
    return ResponseFactory.success(
        data=TaskResponse.model_validate(task), message=ResponseMessages.TASK_CREATED
    )


@router.post("/{suggestion_id}/ignore", response_model=SuccessResponse[SuggestionResponse])
@handle_service_errors
async def ignore_suggestion(
    suggestion_id: int,
    db: Session = Depends(get_db),
    current_user: UserSession = Depends(get_current_user),
):
    suggestion = SuggestionService(db).ignore(suggestion_id, current_user.id)
    return ResponseFactory.success(data=SuggestionResponse.model_validate(suggestion))
