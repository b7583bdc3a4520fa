from pydantic import BaseModel, Field, model_validator
from typing import Optional, List
import datetime as dt


class StudioBookingCreate(BaseModel):
    studio_id: int
    booking_date: dt.date
    start_time: dt.time
    end_time: dt.time
    additional_services: Optional[List[str]] = None
    equipment_needed: Optional[List[str]] = None
    payment_method: Optional[str] = None
    purpose: Optional[str] = None  # class, practice, event, ...
    notes: Optional[str] = None

    @model_validator(mode="after")
    def end_after_start(self):
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class StudioBookingResponse(BaseModel):
    id: int
    user_id: str
    studio_id: int
    booking_date: dt.date
    start_time: dt.time
    end_time: dt.time
    price: int
    original_price: int
    discount_amount: int = 0
    final_price: int
    gst_amount: int
    total_amount: int
    status: str
    booking_code: str
    additional_services: Optional[List[str]] = None
    equipment_needed: Optional[List[str]] = None
    payment_method: Optional[str] = None
    purpose: Optional[str] = None
    notes: Optional[str] = None
    created_at: dt.datetime

    class Config:
        from_attributes = True


class RentalTransactionResponse(BaseModel):
    id: int
    studio_booking_id: int
    studio_id: int
    renter_id: str
    rental_fee: int
    platform_fee: int
    total_amount: int
    status: Optional[str] = "pending"
    payment_date: Optional[dt.datetime] = None
    transaction_id: Optional[str] = None
    notes: Optional[str] = None
    created_at: dt.datetime

    class Config:
        from_attributes = True


class StudioBookingWithTransaction(StudioBookingResponse):
    transaction: Optional[RentalTransactionResponse] = None
