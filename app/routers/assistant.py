from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from ..database import get_db
from ..services.assistant_service import AssistantService
from ..schemas.assistant import (
    ChatRequest,
    ChatResponse,
    FieldSuggestionRequest,
    FieldSuggestion,
    AffirmationResponse,
    SuggestionResponse,
)
from ..schemas.common import SuccessResponse, ResponseFactory
from ..dependencies.permissions import UserSession, get_current_user
from ..utils.router_helpers import handle_service_errors

router = APIRouter(tags=["assistant"])


def get_assistant_service(db: Session = Depends(get_db)) -> AssistantService:
    return AssistantService(db)


@router.post("/chat", response_model=ChatResponse)
@handle_service_errors
async def chat(
    request: ChatRequest,
    assistant: AssistantService = Depends(get_assistant_service),
    current_user: UserSession = Depends(get_current_user),
):
    """One chat turn with Shrimpy; `/add ...` creates a task for managers"""
    history = [m.model_dump() for m in request.history]
    return ChatResponse(**assistant.chat(current_user, request.message, history))


@router.post("/suggest-fields", response_model=FieldSuggestion)
@handle_service_errors
async def suggest_fields(
    request: FieldSuggestionRequest,
    assistant: AssistantService = Depends(get_assistant_service),
    current_user: UserSession = Depends(get_current_user),
):
    return FieldSuggestion(**assistant.suggest_fields(request.title, request.description))


@router.get("/affirmation", response_model=AffirmationResponse)
@handle_service_errors
async def daily_affirmation(
    assistant: AssistantService = Depends(get_assistant_service),
    current_user: UserSession = Depends(get_current_user),
):
    return AffirmationResponse(**assistant.daily_affirmation())


@router.post(
    "/suggestions/from-task/{task_id}",
    response_model=SuccessResponse[SuggestionResponse],
    status_code=status.HTTP_201_CREATED,
)
@handle_service_errors
async def suggest_followup(
    task_id: int,
    assistant: AssistantService = Depends(get_assistant_service),
    current_user: UserSession = Depends(get_current_user),
):
    """Ask for a follow-up chore and store it as a pending suggestion"""
    suggestion = assistant.suggest_followup(task_id, current_user.id)
    if suggestion is None:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="No suggestion could be generated",
        )
    return ResponseFactory.created(data=SuggestionResponse.model_validate(suggestion))
