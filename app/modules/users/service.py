import logging
from datetime import datetime, timezone
from typing import List, Optional

from supabase import Client
from fastapi import HTTPException

from app.modules.users.schemas import UserUpdate, UserResponse
from app.modules.audit.service import AuditService

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, supabase: Client, audit: Optional[AuditService] = None):
        self.supabase = supabase
        self.audit = audit or AuditService(supabase)

    def get_user_by_id(self, user_id: str) -> UserResponse:
        """Get user profile by ID"""
        try:
            result = self.supabase.table("users")\
                .select("*")\
                .eq("id", user_id)\
                .limit(1)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="User not found")

            return UserResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def list_users(self, limit: int = 10, offset: int = 0, include_inactive: bool = False) -> List[UserResponse]:
        """List user profiles, newest first. Deactivated users are hidden unless asked for."""
        try:
            query = self.supabase.table("users").select("*")
            if not include_inactive:
                query = query.eq("is_active", True)
            result = query.order("created_at", desc=True)\
                .limit(limit)\
                .offset(offset)\
                .execute()
            return [UserResponse(**user) for user in result.data]
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def update_user(self, user_id: str, user_data: UserUpdate, actor_id: Optional[str] = None) -> UserResponse:
        """Update user profile"""
        try:
            current = self.get_user_by_id(user_id)
            changes = user_data.model_dump(exclude_none=True)
            if not changes:
                return current

            update_data = {**changes, "updated_at": datetime.now(timezone.utc).isoformat()}
            result = self.supabase.table("users")\
                .update(update_data)\
                .eq("id", user_id)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="User not found")

            old_values = current.model_dump(include=set(changes))
            self.audit.record(
                action="user_updated",
                entity_type="user",
                entity_id=user_id,
                actor_id=actor_id,
                target_user_id=user_id,
                old_values=old_values,
                new_values=changes,
            )
            return UserResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def deactivate_user(self, user_id: str, actor_id: Optional[str] = None) -> UserResponse:
        """Soft delete: the row stays, flagged inactive"""
        try:
            current = self.get_user_by_id(user_id)
            if not current.is_active:
                return current

            result = self.supabase.table("users")\
                .update({"is_active": False, "updated_at": datetime.now(timezone.utc).isoformat()})\
                .eq("id", user_id)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="User not found")

            logger.info(f"Deactivated user {user_id} (by {actor_id})")
            self.audit.record(
                action="user_deactivated",
                entity_type="user",
                entity_id=user_id,
                actor_id=actor_id,
                target_user_id=user_id,
                old_values={"is_active": True},
                new_values={"is_active": False},
            )
            return UserResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
