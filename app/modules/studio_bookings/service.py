import logging
import datetime as dt
from typing import List, Optional, Dict, Any

from supabase import Client
from fastapi import HTTPException

from app.core.pricing import price_breakdown, platform_fee, generate_booking_code
from app.modules.studio_bookings.schemas import (
    StudioBookingCreate, StudioBookingResponse, StudioBookingWithTransaction,
    RentalTransactionResponse
)

logger = logging.getLogger(__name__)


def _minutes(value: Any) -> int:
    if isinstance(value, str):
        value = dt.time.fromisoformat(value)
    return value.hour * 60 + value.minute


def _overlaps(booking: Dict[str, Any], start: dt.time, end: dt.time) -> bool:
    return _minutes(booking["start_time"]) < _minutes(end) and _minutes(start) < _minutes(booking["end_time"])


class StudioBookingService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _active_studio(self, studio_id: int) -> Dict[str, Any]:
        result = self.supabase.table("studios")\
            .select("*")\
            .eq("id", studio_id)\
            .limit(1)\
            .execute()
        if not result.data or not result.data[0].get("is_active", True):
            raise HTTPException(status_code=404, detail="Studio not found")
        return result.data[0]

    def _booking_row(self, booking_id: int) -> Dict[str, Any]:
        result = self.supabase.table("studio_bookings")\
            .select("*")\
            .eq("id", booking_id)\
            .limit(1)\
            .execute()
        if not result.data:
            raise HTTPException(status_code=404, detail="Booking not found")
        return result.data[0]

    def _transaction_for(self, booking_id: int) -> Optional[Dict[str, Any]]:
        result = self.supabase.table("studio_rental_transactions")\
            .select("*")\
            .eq("studio_booking_id", booking_id)\
            .limit(1)\
            .execute()
        return result.data[0] if result.data else None

    def create_booking(self, user_id: str, booking_data: StudioBookingCreate) -> StudioBookingWithTransaction:
        """Rent a studio slot. Price is price_per_hour pro rata; a pending payout row is recorded."""
        try:
            studio = self._active_studio(booking_data.studio_id)

            same_day = self.supabase.table("studio_bookings")\
                .select("id, start_time, end_time, status")\
                .eq("studio_id", studio["id"])\
                .eq("booking_date", booking_data.booking_date.isoformat())\
                .execute()
            for other in same_day.data or []:
                if other["status"] != "cancelled" and _overlaps(other, booking_data.start_time, booking_data.end_time):
                    raise HTTPException(status_code=409, detail="Studio is already booked for this slot")

            minutes = _minutes(booking_data.end_time) - _minutes(booking_data.start_time)
            original_price = round(studio["price_per_hour"] * minutes / 60)
            pricing = price_breakdown(original_price)

            values = booking_data.model_dump(mode="json")
            now = dt.datetime.now(dt.timezone.utc).isoformat()
            result = self.supabase.table("studio_bookings").insert({
                **values,
                **pricing,
                "user_id": user_id,
                "status": "confirmed",
                "booking_code": generate_booking_code("STU"),
                "created_at": now,
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create booking")
            booking = result.data[0]

            commission = platform_fee(pricing["final_price"])
            try:
                transaction = self.supabase.table("studio_rental_transactions").insert({
                    "studio_booking_id": booking["id"],
                    "studio_id": studio["id"],
                    "renter_id": user_id,
                    "rental_fee": pricing["final_price"] - commission,
                    "platform_fee": commission,
                    "total_amount": pricing["total_amount"],
                    "status": "pending",
                    "created_at": now,
                }).execute()
            except Exception:
                self.supabase.table("studio_bookings").delete().eq("id", booking["id"]).execute()
                raise

            logger.info(f"User {user_id} booked studio {studio['id']} ({booking['booking_code']})")
            return StudioBookingWithTransaction(
                **booking,
                transaction=RentalTransactionResponse(**transaction.data[0]) if transaction.data else None
            )
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def list_user_bookings(self, user_id: str, status: Optional[str] = None) -> List[StudioBookingResponse]:
        try:
            query = self.supabase.table("studio_bookings").select("*").eq("user_id", user_id)
            if status:
                query = query.eq("status", status)
            result = query.order("booking_date", desc=True).execute()
            return [StudioBookingResponse(**b) for b in result.data]
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def list_studio_bookings(self, owner_id: str) -> List[StudioBookingWithTransaction]:
        """Bookings of the caller's own studio, with payout rows"""
        try:
            studio = self.supabase.table("studios")\
                .select("id")\
                .eq("user_id", owner_id)\
                .limit(1)\
                .execute()
            if not studio.data:
                raise HTTPException(status_code=404, detail="Studio profile not found")
            result = self.supabase.table("studio_bookings")\
                .select("*")\
                .eq("studio_id", studio.data[0]["id"])\
                .order("booking_date", desc=True)\
                .execute()
            bookings = []
            for booking in result.data or []:
                transaction = self._transaction_for(booking["id"])
                bookings.append(StudioBookingWithTransaction(
                    **booking,
                    transaction=RentalTransactionResponse(**transaction) if transaction else None
                ))
            return bookings
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_booking(self, user_id: str, booking_id: int) -> StudioBookingWithTransaction:
        try:
            booking = self._booking_row(booking_id)
            if booking["user_id"] != user_id:
                raise HTTPException(status_code=404, detail="Booking not found")
            transaction = self._transaction_for(booking_id)
            return StudioBookingWithTransaction(
                **booking,
                transaction=RentalTransactionResponse(**transaction) if transaction else None
            )
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def cancel_booking(self, user_id: str, booking_id: int) -> StudioBookingResponse:
        """Cancel the caller's rental; an unpaid payout row is marked failed"""
        try:
            booking = self._booking_row(booking_id)
            if booking["user_id"] != user_id:
                raise HTTPException(status_code=404, detail="Booking not found")
            if booking["status"] == "cancelled":
                raise HTTPException(status_code=409, detail="Booking already cancelled")

            result = self.supabase.table("studio_bookings")\
                .update({"status": "cancelled"})\
                .eq("id", booking_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Booking not found")

            self.supabase.table("studio_rental_transactions")\
                .update({"status": "failed", "notes": "Booking cancelled"})\
                .eq("studio_booking_id", booking_id)\
                .eq("status", "pending")\
                .execute()
            logger.info(f"Studio booking {booking_id} cancelled by {user_id}")
            return StudioBookingResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
