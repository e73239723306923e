from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from ..config import settings
from ..database import get_db, get_supabase
from ..models.user import User
from ..models.enums import UserRole
from ..services.household_service import HouseholdService
from ..schemas.auth import (
    RegisterRequest,
    RegisterResponse,
    LoginRequest,
    LoginResponse,
    ForgotPasswordRequest,
    SessionProfile,
)
from ..utils.router_helpers import handle_service_errors, RouterResponse
from ..utils.constants import ResponseMessages
from ..dependencies.permissions import UserSession, get_current_user, load_session
from supabase import Client
import logging

router = APIRouter(tags=["authentication"])
security = HTTPBearer()
logger = logging.getLogger(__name__)

OAUTH_PROVIDERS = ("google", "facebook")


# Auth Endpoints
@router.post(
    "/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED
)
@handle_service_errors
async def register_user(
    user_data: RegisterRequest,
    db: Session = Depends(get_db),
    supabase: Client = Depends(get_supabase),
):
    """Sign up, then create (manager) or join (helper with a code) a household"""

    if db.query(User).filter(User.email == user_data.email).first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=ResponseMessages.EMAIL_IN_USE,
        )

    try:
        auth_response = supabase.auth.sign_up(
            {
                "email": user_data.email,
                "password": user_data.password,
                "options": {
                    "data": {"name": user_data.name, "role": user_data.role.value}
                },
            }
        )
    except Exception as e:
        logger.error(f"Registration error: {e}")
        if "already registered" in str(e).lower():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=ResponseMessages.EMAIL_IN_USE,
            )
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Registration failed: {str(e)}",
        )

    if not auth_response.user:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Registration failed"
        )

    user_id = auth_response.user.id
    household_service = HouseholdService(db)

    if user_data.role == UserRole.MANAGER:
        result = household_service.create_household(
            manager_id=user_id, manager_name=user_data.name, email=user_data.email
        )
        if not result.success:
            logger.error(f"Household setup failed for {user_id}: {result.details}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=result.error,
            )
        return RegisterResponse(
            message=ResponseMessages.REGISTERED,
            user_id=user_id,
            email=user_data.email,
            invite_code=result.data["invite_code"],
            household_id=result.data["household_id"],
        )

    if user_data.household_code:
        result = household_service.join_household(
            code=user_data.household_code.strip(),
            user_id=user_id,
            email=user_data.email,
            name=user_data.name,
        )
        if not result.success:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=ResponseMessages.INVALID_HOUSEHOLD_CODE,
            )
        return RegisterResponse(
            message=ResponseMessages.REGISTERED,
            user_id=user_id,
            email=user_data.email,
            household_id=result.data["household_id"],
        )

    # Helper without a code: profile only, household joined later
    db.add(
        User(
            id=user_id,
            email=user_data.email,
            name=user_data.name,
        )
    )
    db.commit()

    return RegisterResponse(
        message=ResponseMessages.REGISTERED, user_id=user_id, email=user_data.email
    )


@router.post("/login", response_model=LoginResponse)
@handle_service_errors
async def login(
    login_data: LoginRequest,
    db: Session = Depends(get_db),
    supabase: Client = Depends(get_supabase),
):
    """Login user with Supabase Auth"""

    try:
        auth_response = supabase.auth.sign_in_with_password(
            {"email": login_data.email, "password": login_data.password}
        )
    except Exception as e:
        logger.warning(f"Login error: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )

    if not auth_response.user or not auth_response.session:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )

    session = load_session(db, auth_response.user)

    return LoginResponse(
        access_token=auth_response.session.access_token,
        token_type="bearer",
        expires_in=auth_response.session.expires_in,
        user=SessionProfile(**session.to_dict()),
    )


@router.get("/me", response_model=SessionProfile)
async def get_current_user_info(
    current_user: UserSession = Depends(get_current_user),
):
    """Get current user information"""
    return SessionProfile(**current_user.to_dict())


@router.post("/logout")
async def logout(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    supabase: Client = Depends(get_supabase),
):
    """Logout user (invalidate Supabase session)"""
    try:
        supabase.auth.sign_out()
    except Exception as e:
        # The client drops the token regardless
        logger.warning(f"Logout error: {e}")
    return RouterResponse.success(message="Logged out successfully")


@router.post("/forgot-password")
@handle_service_errors
async def forgot_password(
    request: ForgotPasswordRequest,
    supabase: Client = Depends(get_supabase),
):
    """Send a password reset e-mail"""
    options = {}
    if settings.OAUTH_REDIRECT_URL:
        options["redirect_to"] = settings.OAUTH_REDIRECT_URL

    try:
        supabase.auth.reset_password_for_email(request.email, options)
    except Exception as e:
        logger.error(f"Password reset error for {request.email}: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Could not send password reset email",
        )

    return RouterResponse.success(message=ResponseMessages.PASSWORD_RESET_SENT)


@router.get("/oauth/{provider}")
@handle_service_errors
async def oauth_redirect(
    provider: str,
    supabase: Client = Depends(get_supabase),
):
    """Redirect URL for a third-party sign-in; the profile is created on first use"""
    provider = provider.lower()
    if provider not in OAUTH_PROVIDERS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unsupported provider: {provider}",
        )

    credentials = {"provider": provider}
    if settings.OAUTH_REDIRECT_URL:
        credentials["options"] = {"redirect_to": settings.OAUTH_REDIRECT_URL}

    try:
        response = supabase.auth.sign_in_with_oauth(credentials)
    except Exception as e:
        logger.error(f"OAuth error for {provider}: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{provider.capitalize()} sign-in failed",
        )

    return RouterResponse.success(data={"provider": provider, "url": response.url})
