from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional
from app.models.enums import UserRole


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    name: str = Field(..., min_length=1, max_length=100)
    role: UserRole
    household_code: Optional[str] = None

    @field_validator("role")
    @classmethod
    def self_service_roles(cls, v):
        if v not in (UserRole.MANAGER, UserRole.HELPER):
            raise ValueError("Role must be manager or helper")
        return v


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class SessionProfile(BaseModel):
    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    role: UserRole
    household_id: Optional[str] = None


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: SessionProfile


class RegisterResponse(BaseModel):
    message: str
    user_id: str
    email: str
    invite_code: Optional[str] = None
    household_id: Optional[str] = None
