from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime


class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2)
    phone: Optional[str] = Field(None, min_length=10)
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


class UserResponse(BaseModel):
    id: str
    email: str
    name: str
    phone: Optional[str] = None
    profile_pic: Optional[str] = None
    gender: Optional[str] = None
    instagram: Optional[str] = None
    height: Optional[str] = None
    bio: Optional[str] = None
    is_active: bool
    email_verified: bool = False
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
