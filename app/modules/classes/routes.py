from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.classes.schemas import (
    ClassCreate, ClassUpdate, ClassResponse, StudioApprovalUpdate,
    ClassBookingCreate, ClassBookingResponse
)
from app.modules.classes.service import ClassService
from app.core.dependencies import require_permission
from app.config.enums import BookingStatus, ClassLevel, DanceForm
from app.config.permissions_config import PERMISSIONS
from supabase import Client
from typing import List, Dict, Optional

router = APIRouter(prefix="/classes", tags=["classes"])

CLASSES = PERMISSIONS["CLASSES"]
CLASS_BOOKINGS = PERMISSIONS["CLASS_BOOKINGS"]


def get_class_service(supabase: Client = Depends(get_supabase)) -> ClassService:
    return ClassService(supabase)


@router.post("", response_model=ClassResponse, status_code=201)
async def create_class(
    class_data: ClassCreate,
    user_data: Dict = Depends(require_permission(CLASSES["CREATE"])),
    service: ClassService = Depends(get_class_service)
):
    """Create a class (caller must have an artist profile)"""
    return service.create_class(user_data["id"], class_data)


@router.get("", response_model=List[ClassResponse])
async def list_classes(
    style: Optional[DanceForm] = None,
    level: Optional[ClassLevel] = None,
    city: Optional[str] = None,
    artist_id: Optional[int] = None,
    studio_id: Optional[int] = None,
    limit: int = 20,
    offset: int = 0,
    user_data: Dict = Depends(require_permission(CLASSES["READ"])),
    service: ClassService = Depends(get_class_service)
):
    """List active classes"""
    return service.list_classes(
        style=style, level=level, city=city,
        artist_id=artist_id, studio_id=studio_id,
        limit=limit, offset=offset
    )


@router.get("/bookings/me", response_model=List[ClassBookingResponse])
async def list_my_bookings(
    status: Optional[BookingStatus] = None,
    user_data: Dict = Depends(require_permission(CLASS_BOOKINGS["READ"])),
    service: ClassService = Depends(get_class_service)
):
    return service.list_user_bookings(user_data["id"], status=status)


@router.delete("/bookings/{booking_id}", response_model=ClassBookingResponse)
async def cancel_booking(
    booking_id: int,
    user_data: Dict = Depends(require_permission(CLASS_BOOKINGS["DELETE"])),
    service: ClassService = Depends(get_class_service)
):
    """Cancel one of your bookings"""
    return service.cancel_booking(user_data["id"], booking_id)


@router.get("/{class_id}", response_model=ClassResponse)
async def get_class(
    class_id: int,
    user_data: Dict = Depends(require_permission(CLASSES["READ"])),
    service: ClassService = Depends(get_class_service)
):
    return service.get_class(class_id)


@router.put("/{class_id}", response_model=ClassResponse)
async def update_class(
    class_id: int,
    class_data: ClassUpdate,
    user_data: Dict = Depends(require_permission(CLASSES["UPDATE"])),
    service: ClassService = Depends(get_class_service)
):
    return service.update_class(user_data["id"], class_id, class_data)


@router.delete("/{class_id}", response_model=ClassResponse)
async def delete_class(
    class_id: int,
    user_data: Dict = Depends(require_permission(CLASSES["DELETE"])),
    service: ClassService = Depends(get_class_service)
):
    """Deactivate a class"""
    return service.delete_class(user_data["id"], class_id)


@router.put("/{class_id}/studio-approval", response_model=ClassResponse)
async def review_studio_approval(
    class_id: int,
    approval: StudioApprovalUpdate,
    user_data: Dict = Depends(require_permission(PERMISSIONS["STUDIOS"]["UPDATE"])),
    service: ClassService = Depends(get_class_service)
):
    """Approve or reject a class hosted at your studio"""
    return service.review_studio_approval(user_data["id"], class_id, approval)


@router.post("/{class_id}/bookings", response_model=ClassBookingResponse, status_code=201)
async def book_class(
    class_id: int,
    booking_data: ClassBookingCreate,
    user_data: Dict = Depends(require_permission(CLASS_BOOKINGS["CREATE"])),
    service: ClassService = Depends(get_class_service)
):
    return service.create_booking(user_data["id"], class_id, booking_data)
