from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List
from ..database import get_db
from ..services.household_service import HouseholdService
from ..schemas.household import (
    HouseholdCreate,
    HouseholdCodeCheck,
    HouseholdJoin,
    HouseholdCreated,
    HouseholdDetail,
    InviteLookup,
    UserHousehold,
)
from ..schemas.common import SuccessResponse, ResponseFactory
from ..dependencies.permissions import UserSession, get_current_user
from ..utils.router_helpers import handle_service_errors, unwrap_result
from ..utils.constants import ResponseMessages
import logging

router = APIRouter(tags=["households"])
logger = logging.getLogger(__name__)


@router.post("/check-code", response_model=InviteLookup)
@handle_service_errors
async def check_household_code(
    request: HouseholdCodeCheck,
    db: Session = Depends(get_db),
):
    """Look up an invite code; joins it when the caller's profile is supplied"""
    household_service = HouseholdService(db)
    code = request.household_code.strip()

    lookup = unwrap_result(household_service.lookup_by_invite_code(code))
    if not lookup["found"] or not request.has_profile:
        return InviteLookup(**lookup)

    joined = unwrap_result(
        household_service.join_household(
            code=code,
            user_id=request.user_id,
            email=request.email,
            name=request.name,
        )
    )
    return InviteLookup(**joined)


@router.post(
    "/",
    response_model=SuccessResponse[HouseholdCreated],
    status_code=status.HTTP_201_CREATED,
)
@handle_service_errors
async def create_household(
    household_data: HouseholdCreate,
    db: Session = Depends(get_db),
    current_user: UserSession = Depends(get_current_user),
):
    """Create the caller's household (managers only)"""
    if not current_user.is_manager:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only managers can create a household",
        )

    result = HouseholdService(db).create_household(
        manager_id=current_user.id,
        manager_name=current_user.name,
        email=current_user.email,
        household_name=household_data.name,
    )
    created = unwrap_result(result)

    return ResponseFactory.created(
        data=HouseholdCreated(**created), message=ResponseMessages.HOUSEHOLD_CREATED
    )


@router.get("/mine", response_model=SuccessResponse[List[UserHousehold]])
@handle_service_errors
async def get_my_households(
    db: Session = Depends(get_db),
    current_user: UserSession = Depends(get_current_user),
):
    """Every household the caller is a member of"""
    households = unwrap_result(HouseholdService(db).get_user_households(current_user.id))
    return ResponseFactory.success(data=[UserHousehold(**h) for h in households])


@router.post("/join", response_model=SuccessResponse[InviteLookup])
@handle_service_errors
async def join_household(
    request: HouseholdJoin,
    db: Session = Depends(get_db),
    current_user: UserSession = Depends(get_current_user),
):
    result = HouseholdService(db).join_household(
        code=request.household_code.strip(),
        user_id=current_user.id,
        email=current_user.email,
        name=current_user.name,
    )
    joined = unwrap_result(result)

    return ResponseFactory.success(
        data=InviteLookup(**joined), message=ResponseMessages.HOUSEHOLD_JOINED
    )


@router.get("/{household_id}", response_model=SuccessResponse[HouseholdDetail])
@handle_service_errors
async def get_household(
    household_id: str,
    db: Session = Depends(get_db),
    current_user: UserSession = Depends(get_current_user),
):
    """Household record with its resolved members"""
    household_service = HouseholdService(db)
    household = unwrap_result(household_service.get_household(household_id))

    if not (
        household_service.is_member(current_user.id, household_id)
        or household["manager_id"] == current_user.id
    ):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied to this household",
        )

    return ResponseFactory.success(data=HouseholdDetail(**household))


@router.post("/{household_id}/leave", response_model=SuccessResponse[dict])
@handle_service_errors
async def leave_household(
    household_id: str,
    db: Session = Depends(get_db),
    current_user: UserSession = Depends(get_current_user),
):
    result = HouseholdService(db).leave_household(current_user.id, household_id)
    data = unwrap_result(result)

    return ResponseFactory.success(data=data, message=ResponseMessages.HOUSEHOLD_LEFT)


@router.delete(
    "/{household_id}/members/{member_id}", response_model=SuccessResponse[dict]
)
@handle_service_errors
async def remove_member(
    household_id: str,
    member_id: str,
    db: Session = Depends(get_db),
    current_user: UserSession = Depends(get_current_user),
):
    """Remove a member (household manager only)"""
    result = HouseholdService(db).remove_member(
        manager_id=current_user.id, household_id=household_id, member_id=member_id
    )
    data = unwrap_result(result)

    return ResponseFactory.success(data=data, message=ResponseMessages.MEMBER_REMOVED)
