from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any, Literal
import datetime as dt
from app.config.enums import ClassLevel, DanceForm, GigStatus


class GigCreate(BaseModel):
    title: str = Field(..., min_length=3)
    description: str = Field(..., min_length=1)
    requirements: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    address: Optional[str] = None
    city: str = Field(..., min_length=1)
    area: Optional[str] = None
    date: dt.date
    start_time: Optional[dt.time] = None
    end_time: Optional[dt.time] = None
    payment: Optional[int] = Field(None, ge=0)
    spots: int = Field(..., ge=1)
    gig_type: Optional[str] = None  # performance, workshop, event, ...
    dance_form: Optional[DanceForm] = None
    skill_level: Optional[ClassLevel] = None
    age_group: Optional[str] = None
    equipment: Optional[List[str]] = None
    additional_info: Optional[Dict[str, Any]] = None
    contact_info: Optional[Dict[str, Any]] = None


class GigUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=3)
    description: Optional[str] = Field(None, min_length=1)
    requirements: Optional[str] = Field(None, min_length=1)
    location: Optional[str] = Field(None, min_length=1)
    address: Optional[str] = None
    city: Optional[str] = Field(None, min_length=1)
    area: Optional[str] = None
    date: Optional[dt.date] = None
    start_time: Optional[dt.time] = None
    end_time: Optional[dt.time] = None
    payment: Optional[int] = Field(None, ge=0)
    spots: Optional[int] = Field(None, ge=1)
    status: Optional[Literal["open", "closed"]] = None
    gig_type: Optional[str] = None
    dance_form: Optional[DanceForm] = None
    skill_level: Optional[ClassLevel] = None
    age_group: Optional[str] = None
    equipment: Optional[List[str]] = None
    additional_info: Optional[Dict[str, Any]] = None
    contact_info: Optional[Dict[str, Any]] = None


class GigResponse(BaseModel):
    id: int
    host_id: str
    title: str
    description: str
    requirements: str
    location: str
    address: Optional[str] = None
    city: str
    area: Optional[str] = None
    date: dt.date
    start_time: Optional[dt.time] = None
    end_time: Optional[dt.time] = None
    payment: Optional[int] = None
    spots: int
    filled_spots: int = 0
    status: GigStatus
    gig_type: Optional[str] = None
    dance_form: Optional[str] = None
    skill_level: Optional[str] = None
    age_group: Optional[str] = None
    equipment: Optional[List[str]] = None
    additional_info: Optional[Dict[str, Any]] = None
    contact_info: Optional[Dict[str, Any]] = None
    is_active: bool = True
    created_at: dt.datetime

    class Config:
        from_attributes = True


class GigApplicationCreate(BaseModel):
    message: Optional[str] = None
    portfolio: Optional[str] = None
    experience: Optional[str] = None
    availability: Optional[Dict[str, Any]] = None
    expected_payment: Optional[int] = Field(None, ge=0)
    additional_info: Optional[Dict[str, Any]] = None


class ApplicationReview(BaseModel):
    status: Literal["accepted", "rejected"]
    review_notes: Optional[str] = None


class GigApplicationResponse(BaseModel):
    id: int
    gig_id: int
    user_id: str
    status: str
    applied_at: dt.datetime
    message: Optional[str] = None
    portfolio: Optional[str] = None
    experience: Optional[str] = None
    availability: Optional[Dict[str, Any]] = None
    expected_payment: Optional[int] = None
    additional_info: Optional[Dict[str, Any]] = None
    reviewed_at: Optional[dt.datetime] = None
    reviewed_by: Optional[str] = None
    review_notes: Optional[str] = None

    class Config:
        from_attributes = True
