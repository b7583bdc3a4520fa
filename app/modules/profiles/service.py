import logging
from typing import List, Optional, Dict, Any

from supabase import Client
from fastapi import HTTPException

from app.modules.profiles.schemas import (
    ArtistUpdate, ArtistResponse,
    StudioUpdate, StudioResponse,
    StudentUpdate, StudentResponse
)
from app.modules.audit.service import AuditService

logger = logging.getLogger(__name__)


class ProfileService:
    """Artist, studio and student extension rows. Each user owns at most one row per table."""

    def __init__(self, supabase: Client, audit: Optional[AuditService] = None):
        self.supabase = supabase
        self.audit = audit or AuditService(supabase)

    def _row_by_user(self, table: str, user_id: str) -> Optional[Dict[str, Any]]:
        result = self.supabase.table(table)\
            .select("*")\
            .eq("user_id", user_id)\
            .limit(1)\
            .execute()
        return result.data[0] if result.data else None

    def _update_row(self, table: str, row: Dict[str, Any], changes: Dict[str, Any], actor_id: str) -> Dict[str, Any]:
        result = self.supabase.table(table)\
            .update(changes)\
            .eq("id", row["id"])\
            .execute()
        if not result.data:
            raise HTTPException(status_code=500, detail=f"Failed to update {table} row")
        self.audit.record(
            action="profile_updated",
            entity_type=table,
            entity_id=row["id"],
            actor_id=actor_id,
            target_user_id=row["user_id"],
            old_values={key: row.get(key) for key in changes},
            new_values=changes,
        )
        return result.data[0]

    # Artists

    def get_artist_by_user(self, user_id: str) -> ArtistResponse:
        try:
            row = self._row_by_user("artists", user_id)
            if not row:
                raise HTTPException(status_code=404, detail="Artist profile not found")
            return ArtistResponse(**row)
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_artist(self, artist_id: int) -> ArtistResponse:
        try:
            result = self.supabase.table("artists")\
                .select("*")\
                .eq("id", artist_id)\
                .limit(1)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Artist not found")
            return ArtistResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def update_artist(self, user_id: str, artist_data: ArtistUpdate) -> ArtistResponse:
        """Update the caller's own artist row"""
        try:
            row = self._row_by_user("artists", user_id)
            if not row:
                raise HTTPException(status_code=404, detail="Artist profile not found")
            changes = artist_data.model_dump(exclude_none=True)
            if not changes:
                return ArtistResponse(**row)
            return ArtistResponse(**self._update_row("artists", row, changes, user_id))
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    # Studios

    def get_studio(self, studio_id: int) -> StudioResponse:
        try:
            result = self.supabase.table("studios")\
                .select("*")\
                .eq("id", studio_id)\
                .limit(1)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Studio not found")
            return StudioResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_studio_by_user(self, user_id: str) -> StudioResponse:
        try:
            row = self._row_by_user("studios", user_id)
            if not row:
                raise HTTPException(status_code=404, detail="Studio profile not found")
            return StudioResponse(**row)
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def list_studios(
        self,
        city: Optional[str] = None,
        area: Optional[str] = None,
        limit: int = 20,
        offset: int = 0
    ) -> List[StudioResponse]:
        """List active studios, optionally filtered by location"""
        try:
            query = self.supabase.table("studios").select("*").eq("is_active", True)
            if city:
                query = query.eq("city", city)
            if area:
                query = query.eq("area", area)
            result = query.order("name")\
                .limit(limit)\
                .offset(offset)\
                .execute()
            return [StudioResponse(**studio) for studio in result.data]
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def update_studio(self, user_id: str, studio_data: StudioUpdate) -> StudioResponse:
        """Update the caller's own studio row"""
        try:
            row = self._row_by_user("studios", user_id)
            if not row:
                raise HTTPException(status_code=404, detail="Studio profile not found")
            changes = studio_data.model_dump(exclude_none=True)
            if not changes:
                return StudioResponse(**row)
            return StudioResponse(**self._update_row("studios", row, changes, user_id))
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def deactivate_studio(self, user_id: str) -> StudioResponse:
        """Hide the caller's studio from listings and new bookings"""
        try:
            row = self._row_by_user("studios", user_id)
            if not row:
                raise HTTPException(status_code=404, detail="Studio profile not found")
            if not row.get("is_active", True):
                return StudioResponse(**row)
            logger.info(f"Deactivating studio {row['id']} of user {user_id}")
            return StudioResponse(**self._update_row("studios", row, {"is_active": False}, user_id))
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    # Students

    def get_student_by_user(self, user_id: str) -> StudentResponse:
        try:
            row = self._row_by_user("students", user_id)
            if not row:
                raise HTTPException(status_code=404, detail="Student profile not found")
            return StudentResponse(**row)
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def upsert_student(self, user_id: str, student_data: StudentUpdate) -> StudentResponse:
        """Students get no row at registration; the first update creates it"""
        try:
            changes = student_data.model_dump(exclude_none=True)
            row = self._row_by_user("students", user_id)
            if row:
                if not changes:
                    return StudentResponse(**row)
                return StudentResponse(**self._update_row("students", row, changes, user_id))

            result = self.supabase.table("students").insert({
                "user_id": user_id,
                "is_active": True,
                **changes
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create student profile")
            created = result.data[0]
            self.audit.record(
                action="profile_created",
                entity_type="students",
                entity_id=created["id"],
                actor_id=user_id,
                target_user_id=user_id,
                new_values=changes,
            )
            return StudentResponse(**created)
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
