from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime
from app.models.enums import UserRole


class HouseholdCreate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)


class HouseholdCodeCheck(BaseModel):
    """Invite-code lookup; joins when all profile fields are present"""

    household_code: str = Field("", max_length=50)
    user_id: Optional[str] = None
    email: Optional[str] = None
    name: Optional[str] = None
    role: Optional[UserRole] = None

    @field_validator("role")
    @classmethod
    def helpers_only(cls, v):
        # Managers come into being only by creating their own household
        if v is not None and v != UserRole.HELPER:
            raise ValueError("Only helpers can join with an invite code")
        return v

    @property
    def has_profile(self) -> bool:
        return bool(self.user_id and self.email and self.name)


class HouseholdJoin(BaseModel):
    household_code: str = Field(..., min_length=1, max_length=50)


class InviteLookup(BaseModel):
    found: bool
    household_id: Optional[str] = None
    household_name: Optional[str] = None


class HouseholdCreated(BaseModel):
    household_id: str
    invite_code: str


class HouseholdMember(BaseModel):
    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None


class HouseholdDetail(BaseModel):
    id: str
    name: str
    manager_id: str
    invite_code: str
    created_at: Optional[datetime] = None
    members: List[HouseholdMember]


class ManagerInfo(BaseModel):
    id: str
    name: Optional[str] = None
    email: Optional[str] = None


class UserHousehold(BaseModel):
    id: str
    name: str
    invite_code: str
    manager: ManagerInfo
