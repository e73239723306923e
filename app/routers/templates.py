from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from ..database import get_db
from ..services.template_service import TemplateService
from ..schemas.task import TaskResponse
from ..schemas.task_template import (
    TemplateCreate,
    TemplateUpdate,
    TemplateResponse,
    TemplateInstantiate,
)
from ..schemas.common import SuccessResponse, ResponseFactory
from ..dependencies.permissions import (
    UserSession,
    require_household_member,
    require_manager,
)
from ..utils.router_helpers import handle_service_errors, RouterResponse
from ..utils.constants import DEFAULT_TEMPLATE_CATEGORIES, ResponseMessages

router = APIRouter(tags=["templates"])


@router.get("/", response_model=SuccessResponse[List[TemplateResponse]])
@handle_service_errors
async def list_templates(
    db: Session = Depends(get_db),
    user_household: tuple[UserSession, str] = Depends(require_household_member),
):
    _, household_id = user_household
    templates = TemplateService(db).list_templates(household_id)
    return ResponseFactory.success(
        data=[TemplateResponse.model_validate(t) for t in templates]
    )


@router.get("/categories", response_model=SuccessResponse[List[dict]])
async def list_template_categories():
    return ResponseFactory.success(data=DEFAULT_TEMPLATE_CATEGORIES)


@router.post(
    "/",
    response_model=SuccessResponse[TemplateResponse],
    status_code=status.HTTP_201_CREATED,
)
@handle_service_errors
async def create_template(
    template_data: TemplateCreate,
    db: Session = Depends(get_db),
    user_household: tuple[UserSession, str] = Depends(require_manager),
):
    current_user, household_id = user_household
    template = TemplateService(db).create_template(
        template_data, household_id, current_user.id
    )
    return ResponseFactory.created(data=TemplateResponse.model_validate(template))


@router.post("/defaults", response_model=SuccessResponse[dict])
@handle_service_errors
async def initialize_default_templates(
    db: Session = Depends(get_db),
    user_household: tuple[UserSession, str] = Depends(require_manager),
):
    """Seed the built-in templates; repeated calls change nothing"""
    current_user, household_id = user_household
    created = TemplateService(db).initialize_defaults(household_id, current_user.id)
    message = (
        ResponseMessages.TEMPLATES_SEEDED
        if created
        else ResponseMessages.TEMPLATES_ALREADY_SEEDED
    )
    return ResponseFactory.success(data={"created": created}, message=message)


@router.put("/{template_id}", response_model=SuccessResponse[TemplateResponse])
@handle_service_errors
async def update_template(
    template_id: int,
    updates: TemplateUpdate,
    db: Session = Depends(get_db),
    user_household: tuple[UserSession, str] = Depends(require_manager),
):
    current_user, household_id = user_household
    template = TemplateService(db).update_template(
        template_id, updates, household_id, current_user.id
    )
    return ResponseFactory.success(
        data=TemplateResponse.model_validate(template),
        message=ResponseMessages.UPDATED,
    )


@router.delete("/{template_id}")
@handle_service_errors
async def delete_template(
    template_id: int,
    db: Session = Depends(get_db),
    user_household: tuple[UserSession, str] = Depends(require_manager),
):
    current_user, household_id = user_household
    TemplateService(db).delete_template(template_id, household_id, current_user.id)
    return RouterResponse.deleted(message=ResponseMessages.DELETED)


@router.post(
    "/{template_id}/instantiate",
    response_model=SuccessResponse[TaskResponse],
    status_code=status.HTTP_201_CREATED,
)
@handle_service_errors
async def instantiate_template(
    template_id: int,
    request: TemplateInstantiate,
    db: Session = Depends(get_db),
    user_household: tuple[UserSession, str] = Depends(require_manager),
):
    """Create a task from a template"""
    current_user, household_id = user_household
    task = TemplateService(db).instantiate_template(
        template_id=template_id,
        household_id=household_id,
        created_by=current_user.id,
        assignee_ids=request.assignee_ids,
        due_date=request.due_date,
    )
    return ResponseFactory.created(
        data=TaskResponse.model_validate(task), message=ResponseMessages.TASK_CREATED
    )
