import logging
from datetime import datetime, timezone
from typing import List, Optional, Dict, Any

from supabase import Client
from fastapi import HTTPException

from app.modules.gigs.schemas import (
    GigCreate, GigUpdate, GigResponse,
    GigApplicationCreate, GigApplicationResponse, ApplicationReview
)

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class GigService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _gig_row(self, gig_id: int) -> Dict[str, Any]:
        result = self.supabase.table("gigs")\
            .select("*")\
            .eq("id", gig_id)\
            .limit(1)\
            .execute()
        if not result.data or not result.data[0].get("is_active", True):
            raise HTTPException(status_code=404, detail="Gig not found")
        return result.data[0]

    def _hosted_gig(self, host_id: str, gig_id: int) -> Dict[str, Any]:
        gig = self._gig_row(gig_id)
        if gig["host_id"] != host_id:
            raise HTTPException(status_code=403, detail="Only the gig host can do this")
        return gig

    def _update_gig(self, gig_id: int, changes: Dict[str, Any]) -> Dict[str, Any]:
        result = self.supabase.table("gigs")\
            .update(changes)\
            .eq("id", gig_id)\
            .execute()
        if not result.data:
            raise HTTPException(status_code=404, detail="Gig not found")
        return result.data[0]

    def create_gig(self, host_id: str, gig_data: GigCreate) -> GigResponse:
        try:
            result = self.supabase.table("gigs").insert({
                **gig_data.model_dump(mode="json"),
                "host_id": host_id,
                "filled_spots": 0,
                "status": "open",
                "is_active": True,
                "created_at": _now(),
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create gig")
            gig = result.data[0]
            logger.info(f"User {host_id} created gig {gig['id']}")
            return GigResponse(**gig)
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def list_gigs(
        self,
        city: Optional[str] = None,
        dance_form: Optional[str] = None,
        status: Optional[str] = "open",
        host_id: Optional[str] = None,
        limit: int = 20,
        offset: int = 0
    ) -> List[GigResponse]:
        try:
            query = self.supabase.table("gigs").select("*").eq("is_active", True)
            if city:
                query = query.eq("city", city)
            if dance_form:
                query = query.eq("dance_form", dance_form)
            if status:
                query = query.eq("status", status)
            if host_id:
                query = query.eq("host_id", host_id)
            result = query.order("date")\
                .limit(limit)\
                .offset(offset)\
                .execute()
            return [GigResponse(**gig) for gig in result.data]
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_gig(self, gig_id: int) -> GigResponse:
        try:
            return GigResponse(**self._gig_row(gig_id))
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def update_gig(self, host_id: str, gig_id: int, gig_data: GigUpdate) -> GigResponse:
        try:
            gig = self._hosted_gig(host_id, gig_id)
            if gig["status"] == "cancelled":
                raise HTTPException(status_code=409, detail="Gig is cancelled")
            changes = gig_data.model_dump(mode="json", exclude_none=True)
            if not changes:
                return GigResponse(**gig)
            filled = gig.get("filled_spots") or 0
            if changes.get("spots", gig["spots"]) < filled:
                raise HTTPException(status_code=422, detail="spots cannot drop below accepted applications")
            return GigResponse(**self._update_gig(gig_id, changes))
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def cancel_gig(self, host_id: str, gig_id: int) -> GigResponse:
        try:
            gig = self._hosted_gig(host_id, gig_id)
            if gig["status"] == "cancelled":
                raise HTTPException(status_code=409, detail="Gig already cancelled")
            logger.info(f"Gig {gig_id} cancelled by host {host_id}")
            return GigResponse(**self._update_gig(gig_id, {"status": "cancelled"}))
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    # Applications

    def apply(self, user_id: str, gig_id: int, application_data: GigApplicationCreate) -> GigApplicationResponse:
        """Apply to an open gig, once per user"""
        try:
            gig = self._gig_row(gig_id)
            if gig["host_id"] == user_id:
                raise HTTPException(status_code=403, detail="Hosts cannot apply to their own gig")
            if gig["status"] != "open":
                raise HTTPException(status_code=409, detail=f"Gig is {gig['status']}")
            if (gig.get("filled_spots") or 0) >= gig["spots"]:
                raise HTTPException(status_code=409, detail="Gig is full")

            existing = self.supabase.table("gig_applications")\
                .select("id")\
                .eq("gig_id", gig_id)\
                .eq("user_id", user_id)\
                .execute()
            if existing.data:
                raise HTTPException(status_code=409, detail="Already applied to this gig")

            result = self.supabase.table("gig_applications").insert({
                **application_data.model_dump(mode="json"),
                "gig_id": gig_id,
                "user_id": user_id,
                "status": "applied",
                "applied_at": _now(),
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to apply")
            return GigApplicationResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def list_applications(self, user_id: str, gig_id: int) -> List[GigApplicationResponse]:
        """The host sees every application; anyone else only their own"""
        try:
            gig = self._gig_row(gig_id)
            query = self.supabase.table("gig_applications").select("*").eq("gig_id", gig_id)
            if gig["host_id"] != user_id:
                query = query.eq("user_id", user_id)
            result = query.order("applied_at").execute()
            return [GigApplicationResponse(**a) for a in result.data]
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def list_user_applications(self, user_id: str) -> List[GigApplicationResponse]:
        try:
            result = self.supabase.table("gig_applications")\
                .select("*")\
                .eq("user_id", user_id)\
                .order("applied_at", desc=True)\
                .execute()
            return [GigApplicationResponse(**a) for a in result.data]
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def review_application(
        self,
        host_id: str,
        gig_id: int,
        application_id: int,
        review: ApplicationReview
    ) -> GigApplicationResponse:
        """Accept or reject; acceptance takes a spot and fills the gig on the last one"""
        try:
            gig = self._hosted_gig(host_id, gig_id)
            result = self.supabase.table("gig_applications")\
                .select("*")\
                .eq("id", application_id)\
                .eq("gig_id", gig_id)\
                .limit(1)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Application not found")
            application = result.data[0]
            if application["status"] != "applied":
                raise HTTPException(status_code=409, detail=f"Application already {application['status']}")

            filled = gig.get("filled_spots") or 0
            if review.status == "accepted" and filled >= gig["spots"]:
                raise HTTPException(status_code=409, detail="Gig is full")

            updated = self.supabase.table("gig_applications")\
                .update({
                    "status": review.status,
                    "reviewed_at": _now(),
                    "reviewed_by": host_id,
                    "review_notes": review.review_notes,
                })\
                .eq("id", application_id)\
                .execute()
            if not updated.data:
                raise HTTPException(status_code=404, detail="Application not found")

            if review.status == "accepted":
                filled += 1
                changes = {"filled_spots": filled}
                if filled >= gig["spots"]:
                    changes["status"] = "filled"
                self._update_gig(gig_id, changes)
                logger.info(f"Gig {gig_id}: accepted application {application_id} ({filled}/{gig['spots']})")
            return GigApplicationResponse(**updated.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def withdraw_application(self, user_id: str, application_id: int) -> None:
        """Applicants may withdraw until the host has reviewed the application"""
        try:
            result = self.supabase.table("gig_applications")\
                .select("*")\
                .eq("id", application_id)\
                .limit(1)\
                .execute()
            if not result.data or result.data[0]["user_id"] != user_id:
                raise HTTPException(status_code=404, detail="Application not found")
            if result.data[0]["status"] != "applied":
                raise HTTPException(status_code=409, detail="Reviewed applications cannot be withdrawn")
            self.supabase.table("gig_applications")\
                .delete()\
                .eq("id", application_id)\
                .execute()
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
