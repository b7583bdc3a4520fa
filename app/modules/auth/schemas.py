from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional, List, Literal, Dict, Any
from datetime import datetime

from app.config.permissions_config import REGISTRABLE_ROLES

RegistrableRole = Literal[REGISTRABLE_ROLES]


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8)


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8)
    name: str = Field(..., min_length=2)
    phone: str = Field(..., min_length=10)
    role: RegistrableRole = "student"
    profile_pic: Optional[str] = None
    gender: Optional[str] = None
    instagram: Optional[str] = None
    height: Optional[str] = None
    bio: Optional[str] = None

    @field_validator("profile_pic")
    @classmethod
    def profile_pic_is_url(cls, value: Optional[str]) -> Optional[str]:
        if value and not value.startswith(("http://", "https://")):
            raise ValueError("Invalid URL format")
        return value


class PasswordResetRequest(BaseModel):
    email: EmailStr


class PasswordResetConfirm(BaseModel):
    token: str = Field(..., min_length=1)
    password: str = Field(..., min_length=8)


class EmailVerificationRequest(BaseModel):
    token: str = Field(..., min_length=1)


class PasswordChangeRequest(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8)


class SessionInfo(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    token_type: str = "bearer"
    expires_at: Optional[int] = None


class RecentActivity(BaseModel):
    class_bookings: int = 0
    studio_bookings: int = 0
    gig_applications: int = 0


class EnrichedUser(BaseModel):
    id: str
    email: str
    name: Optional[str] = None
    phone: Optional[str] = None
    profile_pic: Optional[str] = None
    gender: Optional[str] = None
    instagram: Optional[str] = None
    height: Optional[str] = None
    bio: Optional[str] = None
    is_active: Optional[bool] = None
    email_verified: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    permissions: List[str] = []
    roles: List[str] = []
    user_type: Optional[Literal["artist", "studio", "student", "basic"]] = None
    recent_activity: Optional[RecentActivity] = None

    artist: Optional[Dict[str, Any]] = None
    studio: Optional[Dict[str, Any]] = None
    student: Optional[Dict[str, Any]] = None


class AuthResponse(BaseModel):
    user: EnrichedUser
    session: Optional[SessionInfo] = None


class MessageResponse(BaseModel):
    message: str
