import logging
from datetime import datetime, timezone
from typing import List, Optional, Dict, Any

from supabase import Client
from fastapi import HTTPException

from app.config.settings import settings
from app.core.pricing import price_breakdown, generate_booking_code
from app.modules.classes.schemas import (
    ClassCreate, ClassUpdate, ClassResponse, StudioApprovalUpdate,
    ClassBookingCreate, ClassBookingResponse
)

logger = logging.getLogger(__name__)

PRICE_TIERS = {
    "regular": "regular_price",
    "early_bird": "early_bird_price",
    "group": "group_price",
}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class ClassService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _one(self, table: str, column: str, value: Any) -> Optional[Dict[str, Any]]:
        result = self.supabase.table(table)\
            .select("*")\
            .eq(column, value)\
            .limit(1)\
            .execute()
        return result.data[0] if result.data else None

    def _artist_for_user(self, user_id: str) -> Dict[str, Any]:
        artist = self._one("artists", "user_id", user_id)
        if not artist:
            raise HTTPException(status_code=403, detail="An artist profile is required")
        return artist

    def _class_row(self, class_id: int) -> Dict[str, Any]:
        row = self._one("classes", "id", class_id)
        if not row:
            raise HTTPException(status_code=404, detail="Class not found")
        return row

    def _owned_class(self, user_id: str, class_id: int) -> Dict[str, Any]:
        artist = self._artist_for_user(user_id)
        row = self._class_row(class_id)
        if row["artist_id"] != artist["id"]:
            raise HTTPException(status_code=403, detail="Only the class artist can change this class")
        return row

    def create_class(self, user_id: str, class_data: ClassCreate) -> ClassResponse:
        """Create a class taught by the caller's artist profile at an active studio"""
        try:
            artist = self._artist_for_user(user_id)
            studio = self._one("studios", "id", class_data.studio_id)
            if not studio or not studio.get("is_active", True):
                raise HTTPException(status_code=404, detail="Studio not found")

            values = class_data.model_dump(mode="json")
            rental_fee = studio.get("rental_fee_per_class")
            result = self.supabase.table("classes").insert({
                **values,
                "artist_id": artist["id"],
                "current_participants": 0,
                "is_active": True,
                "studio_approval_status": "pending",
                "studio_rental_fee": settings.default_studio_rental_fee if rental_fee is None else rental_fee,
                "rental_payment_status": "pending",
                "latitude": studio.get("latitude"),
                "longitude": studio.get("longitude"),
                "created_at": _now(),
            }).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create class")

            created = result.data[0]
            logger.info(f"Artist {artist['id']} created class {created['id']} at studio {studio['id']}")
            return ClassResponse(**created)
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_class(self, class_id: int) -> ClassResponse:
        try:
            return ClassResponse(**self._class_row(class_id))
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def list_classes(
        self,
        style: Optional[str] = None,
        level: Optional[str] = None,
        city: Optional[str] = None,
        artist_id: Optional[int] = None,
        studio_id: Optional[int] = None,
        limit: int = 20,
        offset: int = 0
    ) -> List[ClassResponse]:
        """List active classes; city filters through the hosting studio"""
        try:
            query = self.supabase.table("classes").select("*").eq("is_active", True)
            if style:
                query = query.eq("style", style)
            if level:
                query = query.eq("level", level)
            if artist_id is not None:
                query = query.eq("artist_id", artist_id)
            if studio_id is not None:
                query = query.eq("studio_id", studio_id)
            if city:
                studios = self.supabase.table("studios")\
                    .select("id")\
                    .eq("city", city)\
                    .execute()
                studio_ids = [s["id"] for s in studios.data or []]
                if not studio_ids:
                    return []
                query = query.in_("studio_id", studio_ids)
            result = query.order("date")\
                .limit(limit)\
                .offset(offset)\
                .execute()
            return [ClassResponse(**row) for row in result.data]
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def update_class(self, user_id: str, class_id: int, class_data: ClassUpdate) -> ClassResponse:
        try:
            row = self._owned_class(user_id, class_id)
            changes = class_data.model_dump(mode="json", exclude_none=True)
            if not changes:
                return ClassResponse(**row)
            if changes.get("max_participants", row["max_participants"]) < row["current_participants"]:
                raise HTTPException(status_code=422, detail="max_participants cannot drop below current bookings")

            result = self.supabase.table("classes")\
                .update(changes)\
                .eq("id", class_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Class not found")
            return ClassResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def delete_class(self, user_id: str, class_id: int) -> ClassResponse:
        """Soft delete: the class disappears from listings, bookings stay"""
        try:
            self._owned_class(user_id, class_id)
            result = self.supabase.table("classes")\
                .update({"is_active": False})\
                .eq("id", class_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Class not found")
            logger.info(f"Class {class_id} deactivated by {user_id}")
            return ClassResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def review_studio_approval(self, user_id: str, class_id: int, approval: StudioApprovalUpdate) -> ClassResponse:
        """The hosting studio's owner approves or rejects a class"""
        try:
            row = self._class_row(class_id)
            studio = self._one("studios", "user_id", user_id)
            if not studio or studio["id"] != row["studio_id"]:
                raise HTTPException(status_code=403, detail="Only the hosting studio can review this class")
            if row.get("studio_approval_status") == approval.status:
                raise HTTPException(status_code=409, detail=f"Class already {approval.status}")

            changes = {"studio_approval_status": approval.status}
            if approval.status == "approved":
                changes.update({"studio_approved_at": _now(), "studio_rejection_reason": None})
            else:
                changes.update({"studio_rejected_at": _now(), "studio_rejection_reason": approval.rejection_reason})

            result = self.supabase.table("classes")\
                .update(changes)\
                .eq("id", class_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Class not found")
            logger.info(f"Studio {studio['id']} {approval.status} class {class_id}")
            return ClassResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    # Bookings

    def create_booking(self, user_id: str, class_id: int, booking_data: ClassBookingCreate) -> ClassBookingResponse:
        """Book a seat; GST is charged on the discounted price"""
        try:
            row = self._class_row(class_id)
            if not row.get("is_active", True):
                raise HTTPException(status_code=404, detail="Class not found")
            if row["current_participants"] >= row["max_participants"]:
                raise HTTPException(status_code=409, detail="Class is full")

            existing = self.supabase.table("class_bookings")\
                .select("id, status")\
                .eq("class_id", class_id)\
                .eq("user_id", user_id)\
                .execute()
            if any(b["status"] != "cancelled" for b in existing.data or []):
                raise HTTPException(status_code=409, detail="Class already booked")

            tier_price = row.get(PRICE_TIERS[booking_data.price_tier])
            if tier_price is None:
                raise HTTPException(status_code=422, detail=f"Class has no {booking_data.price_tier} price")
            # Early-bird and group tiers are discounts off the regular price
            original_price = max(row["regular_price"], tier_price)
            pricing = price_breakdown(original_price, original_price - tier_price)

            result = self.supabase.table("class_bookings").insert({
                "user_id": user_id,
                "class_id": class_id,
                **pricing,
                "status": "confirmed",
                "booking_code": generate_booking_code("CLS"),
                "payment_method": booking_data.payment_method,
                "notes": booking_data.notes,
                "attended": False,
                "booking_date": _now(),
                "created_at": _now(),
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create booking")

            self.supabase.table("classes")\
                .update({"current_participants": row["current_participants"] + 1})\
                .eq("id", class_id)\
                .execute()

            booking = result.data[0]
            logger.info(f"User {user_id} booked class {class_id} ({booking['booking_code']})")
            return ClassBookingResponse(**booking)
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def list_user_bookings(self, user_id: str, status: Optional[str] = None) -> List[ClassBookingResponse]:
        try:
            query = self.supabase.table("class_bookings").select("*").eq("user_id", user_id)
            if status:
                query = query.eq("status", status)
            result = query.order("created_at", desc=True).execute()
            return [ClassBookingResponse(**b) for b in result.data]
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def cancel_booking(self, user_id: str, booking_id: int) -> ClassBookingResponse:
        """Cancel the caller's booking and free its seat"""
        try:
            booking = self._one("class_bookings", "id", booking_id)
            if not booking or booking["user_id"] != user_id:
                raise HTTPException(status_code=404, detail="Booking not found")
            if booking["status"] == "cancelled":
                raise HTTPException(status_code=409, detail="Booking already cancelled")

            result = self.supabase.table("class_bookings")\
                .update({"status": "cancelled"})\
                .eq("id", booking_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Booking not found")

            row = self._one("classes", "id", booking["class_id"])
            if row:
                self.supabase.table("classes")\
                    .update({"current_participants": max(row["current_participants"] - 1, 0)})\
                    .eq("id", row["id"])\
                    .execute()
            return ClassBookingResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
