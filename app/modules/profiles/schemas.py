from pydantic import BaseModel, EmailStr, Field
from typing import Optional, List, Dict, Any
from app.config.enums import ClassLevel, DanceForm


class ArtistUpdate(BaseModel):
    bio: Optional[str] = Field(None, min_length=1)
    experience: Optional[int] = Field(None, ge=0)
    specialization: Optional[str] = Field(None, min_length=1)
    portfolio: Optional[str] = None
    rate_per_hour: Optional[int] = Field(None, ge=0)
    rate_per_class: Optional[int] = Field(None, ge=0)
    availability: Optional[Dict[str, Any]] = None
    social_links: Optional[Dict[str, Any]] = None
    achievements: Optional[List[Any]] = None
    teaching_style: Optional[str] = None
    languages: Optional[List[str]] = None


class ArtistResponse(BaseModel):
    id: int
    user_id: str
    bio: str
    experience: int
    specialization: str
    portfolio: Optional[str] = None
    rate_per_hour: Optional[int] = None
    rate_per_class: Optional[int] = None
    availability: Optional[Dict[str, Any]] = None
    social_links: Optional[Dict[str, Any]] = None
    achievements: Optional[List[Any]] = None
    teaching_style: Optional[str] = None
    languages: Optional[List[str]] = None
    is_verified: bool = False
    rating: Optional[float] = 0
    total_ratings: Optional[int] = 0

    class Config:
        from_attributes = True


class StudioUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2)
    address: Optional[str] = Field(None, min_length=1)
    city: Optional[str] = Field(None, min_length=1)
    area: Optional[str] = Field(None, min_length=1)
    pincode: Optional[str] = None
    capacity: Optional[int] = Field(None, ge=0)
    price_per_hour: Optional[int] = Field(None, ge=0)
    rental_fee_per_class: Optional[int] = Field(None, ge=0)
    amenities: Optional[List[str]] = None
    images: Optional[List[str]] = None
    description: Optional[str] = None
    contact_phone: Optional[str] = Field(None, min_length=10)
    contact_email: Optional[EmailStr] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    operating_hours: Optional[Dict[str, Any]] = None
    rules: Optional[List[str]] = None
    equipment: Optional[List[str]] = None


class StudioResponse(BaseModel):
    id: int
    user_id: str
    name: str
    address: str
    city: str
    area: str
    pincode: Optional[str] = None
    capacity: int
    price_per_hour: int
    rental_fee_per_class: Optional[int] = None
    amenities: Optional[List[str]] = None
    images: Optional[List[str]] = None
    description: Optional[str] = None
    contact_phone: str
    contact_email: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    operating_hours: Optional[Dict[str, Any]] = None
    rules: Optional[List[str]] = None
    equipment: Optional[List[str]] = None
    rating: Optional[float] = 0
    total_ratings: Optional[int] = 0
    is_verified: bool = False
    is_active: bool = True

    class Config:
        from_attributes = True


class StudentUpdate(BaseModel):
    dance_experience: Optional[ClassLevel] = None
    preferred_dance_forms: Optional[List[DanceForm]] = None
    skill_level: Optional[ClassLevel] = None
    goals: Optional[str] = None
    medical_conditions: Optional[str] = None
    emergency_contact: Optional[Dict[str, Any]] = None


class StudentResponse(BaseModel):
    id: int
    user_id: str
    dance_experience: Optional[str] = None
    preferred_dance_forms: Optional[List[str]] = None
    skill_level: Optional[str] = None
    goals: Optional[str] = None
    medical_conditions: Optional[str] = None
    emergency_contact: Optional[Dict[str, Any]] = None
    is_active: bool = True

    class Config:
        from_attributes = True
