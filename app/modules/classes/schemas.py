from pydantic import BaseModel, Field, model_validator
from typing import Optional, List, Literal
import datetime as dt
from app.config.enums import ClassLevel, ClassType, DanceForm


class ClassCreate(BaseModel):
    title: str = Field(..., min_length=3)
    type: ClassType
    style: DanceForm
    level: ClassLevel
    studio_id: int
    date: dt.date
    start_time: dt.time
    end_time: dt.time
    early_bird_price: Optional[int] = Field(None, ge=0)
    regular_price: int = Field(..., ge=0)
    group_price: Optional[int] = Field(None, ge=0)
    max_participants: int = Field(..., ge=1)
    description: str = Field(..., min_length=1)
    requirements: Optional[List[str]] = None
    image: Optional[str] = None
    song_name: Optional[str] = None
    choreography_video_url: Optional[str] = None

    @model_validator(mode="after")
    def end_after_start(self):
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class ClassUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=3)
    type: Optional[ClassType] = None
    style: Optional[DanceForm] = None
    level: Optional[ClassLevel] = None
    date: Optional[dt.date] = None
    start_time: Optional[dt.time] = None
    end_time: Optional[dt.time] = None
    early_bird_price: Optional[int] = Field(None, ge=0)
    regular_price: Optional[int] = Field(None, ge=0)
    group_price: Optional[int] = Field(None, ge=0)
    max_participants: Optional[int] = Field(None, ge=1)
    description: Optional[str] = Field(None, min_length=1)
    requirements: Optional[List[str]] = None
    image: Optional[str] = None
    song_name: Optional[str] = None
    choreography_video_url: Optional[str] = None


class ClassResponse(BaseModel):
    id: int
    title: str
    type: str
    style: str
    level: str
    artist_id: int
    studio_id: int
    date: dt.date
    start_time: dt.time
    end_time: dt.time
    early_bird_price: Optional[int] = None
    regular_price: int
    group_price: Optional[int] = None
    max_participants: int
    current_participants: int = 0
    description: str
    requirements: Optional[List[str]] = None
    image: Optional[str] = None
    song_name: Optional[str] = None
    choreography_video_url: Optional[str] = None
    is_active: bool = True
    studio_approval_status: Optional[str] = "pending"
    studio_rental_fee: Optional[int] = 0
    studio_approved_at: Optional[dt.datetime] = None
    studio_rejected_at: Optional[dt.datetime] = None
    studio_rejection_reason: Optional[str] = None
    rental_payment_status: Optional[str] = "pending"
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    created_at: dt.datetime

    class Config:
        from_attributes = True


class StudioApprovalUpdate(BaseModel):
    status: Literal["approved", "rejected"]
    rejection_reason: Optional[str] = None

    @model_validator(mode="after")
    def reason_for_rejection(self):
        if self.status == "rejected" and not self.rejection_reason:
            raise ValueError("rejection_reason is required when rejecting")
        return self


class ClassBookingCreate(BaseModel):
    price_tier: Literal["regular", "early_bird", "group"] = "regular"
    payment_method: Optional[str] = None
    notes: Optional[str] = None


class ClassBookingResponse(BaseModel):
    id: int
    user_id: str
    class_id: int
    booking_date: Optional[dt.datetime] = None
    price: int
    original_price: int
    discount_amount: int = 0
    final_price: int
    gst_amount: int
    total_amount: int
    status: str
    booking_code: str
    payment_method: Optional[str] = None
    attended: Optional[bool] = False
    notes: Optional[str] = None
    created_at: dt.datetime

    class Config:
        from_attributes = True
