from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.studio_bookings.schemas import (
    StudioBookingCreate, StudioBookingResponse, StudioBookingWithTransaction
)
from app.modules.studio_bookings.service import StudioBookingService
from app.core.dependencies import require_permission
from app.config.enums import BookingStatus
from app.config.permissions_config import PERMISSIONS
from supabase import Client
from typing import List, Dict, Optional

router = APIRouter(prefix="/studio-bookings", tags=["studio-bookings"])

STUDIO_BOOKINGS = PERMISSIONS["STUDIO_BOOKINGS"]


def get_studio_booking_service(supabase: Client = Depends(get_supabase)) -> StudioBookingService:
    return StudioBookingService(supabase)


@router.post("", response_model=StudioBookingWithTransaction, status_code=201)
async def book_studio(
    booking_data: StudioBookingCreate,
    user_data: Dict = Depends(require_permission(STUDIO_BOOKINGS["CREATE"])),
    service: StudioBookingService = Depends(get_studio_booking_service)
):
    """Rent a studio slot"""
    return service.create_booking(user_data["id"], booking_data)


@router.get("/me", response_model=List[StudioBookingResponse])
async def list_my_bookings(
    status: Optional[BookingStatus] = None,
    user_data: Dict = Depends(require_permission(STUDIO_BOOKINGS["READ"])),
    service: StudioBookingService = Depends(get_studio_booking_service)
):
    return service.list_user_bookings(user_data["id"], status=status)


@router.get("/studio", response_model=List[StudioBookingWithTransaction])
async def list_my_studio_bookings(
    user_data: Dict = Depends(require_permission(PERMISSIONS["STUDIOS"]["READ"])),
    service: StudioBookingService = Depends(get_studio_booking_service)
):
    """Bookings made at the caller's studio"""
    return service.list_studio_bookings(user_data["id"])


@router.get("/{booking_id}", response_model=StudioBookingWithTransaction)
async def get_booking(
    booking_id: int,
    user_data: Dict = Depends(require_permission(STUDIO_BOOKINGS["READ"])),
    service: StudioBookingService = Depends(get_studio_booking_service)
):
    return service.get_booking(user_data["id"], booking_id)


@router.delete("/{booking_id}", response_model=StudioBookingResponse)
async def cancel_booking(
    booking_id: int,
    user_data: Dict = Depends(require_permission(STUDIO_BOOKINGS["DELETE"])),
    service: StudioBookingService = Depends(get_studio_booking_service)
):
    return service.cancel_booking(user_data["id"], booking_id)
