from dataclasses import dataclass
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from ..database import get_db, get_supabase
from ..models.user import User
from ..models.enums import UserRole, SINGLE_HOUSEHOLD_ROLES
from ..services.household_service import HouseholdService, household_id_for
from supabase import Client
import logging

security = HTTPBearer()
logger = logging.getLogger(__name__)


@dataclass
class UserSession:
    """Per-request view of the signed-in user"""

    id: str
    email: str
    name: str
    role: str
    household_id: Optional[str] = None

    @property
    def is_manager(self) -> bool:
        return self.role == UserRole.MANAGER.value

    @property
    def has_single_household_view(self) -> bool:
        return self.role in SINGLE_HOUSEHOLD_ROLES

    @classmethod
    def from_profile(cls, user: User) -> "UserSession":
        household_id = user.household_id
        if not household_id and user.role == UserRole.MANAGER.value:
            household_id = household_id_for(user.id)
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            role=user.role,
            household_id=household_id,
        )

    def to_dict(self):
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "role": self.role,
            "household_id": self.household_id,
        }


def load_session(db: Session, supabase_user) -> UserSession:
    """Merge the verified identity with its profile, creating a helper profile if missing"""
    user = db.get(User, supabase_user.id)
    if not user:
        user = User.from_supabase(supabase_user)
        db.add(user)
        db.commit()
        db.refresh(user)
        logger.info(f"Created profile for first sign-in of {user.id}")
    return UserSession.from_profile(user)


# Auth Helper Functions
async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
    supabase: Client = Depends(get_supabase),
) -> UserSession:
    """Get current authenticated user from Supabase token"""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        # Verify token with Supabase
        auth_response = supabase.auth.get_user(credentials.credentials)

        if not auth_response or not auth_response.user:
            raise credentials_exception

        return load_session(db, auth_response.user)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Authentication error: {e}")
        raise credentials_exception


async def require_household_member(
    current_user: UserSession = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> tuple[UserSession, str]:
    """Ensure user has a current household they belong to"""
    household_id = current_user.household_id
    if not household_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User must be a member of a household",
        )

    household_service = HouseholdService(db)
    if not (
        household_service.is_member(current_user.id, household_id)
        or household_service.is_manager(current_user.id, household_id)
    ):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User is not a member of this household",
        )

    return current_user, household_id


async def require_manager(
    user_household: tuple[UserSession, str] = Depends(require_household_member),
    db: Session = Depends(get_db),
) -> tuple[UserSession, str]:
    """Ensure user manages their current household"""
    current_user, household_id = user_household

    if not HouseholdService(db).is_manager(current_user.id, household_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Manager permissions required",
        )

    return current_user, household_id
