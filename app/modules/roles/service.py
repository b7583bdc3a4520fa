import logging
from datetime import datetime, timezone
from typing import List, Optional, Dict, Any

from supabase import Client
from fastapi import HTTPException

from app.modules.roles.schemas import (
    ActionCreate, ActionResponse,
    RoleCreate, RoleResponse, RoleWithActionsResponse,
    RolePermissionResponse, UserRoleResponse, UserPermissionsResponse
)
from app.modules.audit.service import AuditService
from app.core.permissions import resolve_user_permissions, resolve_user_roles

logger = logging.getLogger(__name__)


def _first(result) -> Optional[Dict[str, Any]]:
    return result.data[0] if result.data else None


class ActionService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def create_action(self, action_data: ActionCreate) -> ActionResponse:
        """Add an action to the catalog"""
        try:
            existing = self.supabase.table("actions")\
                .select("id")\
                .eq("name", action_data.name)\
                .execute()
            if existing.data:
                raise HTTPException(status_code=409, detail="Action with this name already exists")

            result = self.supabase.table("actions").insert({
                "name": action_data.name,
                "description": action_data.description,
                "category": action_data.category,
                "table_name": action_data.table_name,
                "operation": action_data.operation,
                "is_active": True
            }).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create action")

            logger.info(f"Created action {action_data.name}")
            return ActionResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_action_by_id(self, action_id: str) -> ActionResponse:
        """Get action by ID"""
        try:
            result = self.supabase.table("actions")\
                .select("*")\
                .eq("id", action_id)\
                .limit(1)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="Action not found")

            return ActionResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def list_actions(
        self,
        category: Optional[str] = None,
        operation: Optional[str] = None,
        limit: int = 100,
        offset: int = 0
    ) -> List[ActionResponse]:
        """List catalog actions, optionally filtered by category and/or operation"""
        try:
            query = self.supabase.table("actions").select("*")
            if category:
                query = query.eq("category", category)
            if operation:
                query = query.eq("operation", operation)
            result = query.order("name")\
                .limit(limit)\
                .offset(offset)\
                .execute()
            return [ActionResponse(**action) for action in result.data]
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))


class RoleService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def create_role(self, role_data: RoleCreate) -> RoleResponse:
        """Create a new role"""
        try:
            existing = self.supabase.table("roles")\
                .select("id")\
                .eq("name", role_data.name)\
                .execute()
            if existing.data:
                raise HTTPException(status_code=409, detail="Role with this name already exists")

            result = self.supabase.table("roles").insert({
                "name": role_data.name,
                "description": role_data.description,
                "is_active": True,
                "is_wildcard": False
            }).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create role")

            logger.info(f"Created role {role_data.name}")
            return RoleResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_role_by_id(self, role_id: str) -> RoleResponse:
        """Get role by ID"""
        try:
            result = self.supabase.table("roles")\
                .select("*")\
                .eq("id", role_id)\
                .limit(1)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="Role not found")

            return RoleResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_role_with_actions(self, role_id: str) -> RoleWithActionsResponse:
        """Get role with all actively granted actions"""
        try:
            role = self.get_role_by_id(role_id)

            grants_result = self.supabase.table("role_permissions")\
                .select("action_id, actions(*)")\
                .eq("role_id", role_id)\
                .eq("is_active", True)\
                .execute()

            actions = []
            for item in grants_result.data or []:
                if item.get("actions"):
                    actions.append(ActionResponse(**item["actions"]))
            actions.sort(key=lambda a: a.name)

            return RoleWithActionsResponse(**role.model_dump(), actions=actions)
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def list_roles(self, limit: int = 50, offset: int = 0) -> List[RoleResponse]:
        """List roles"""
        try:
            result = self.supabase.table("roles")\
                .select("*")\
                .order("name")\
                .limit(limit)\
                .offset(offset)\
                .execute()
            return [RoleResponse(**role) for role in result.data]
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))


class GrantService:
    """Role -> action and user -> role grants. Revocation flips is_active; rows are never deleted."""

    def __init__(self, supabase: Client, audit: Optional[AuditService] = None):
        self.supabase = supabase
        self.audit = audit or AuditService(supabase)
        self.roles = RoleService(supabase)
        self.actions = ActionService(supabase)

    def _ensure_user(self, user_id: str) -> Dict[str, Any]:
        user = _first(self.supabase.table("users")
                      .select("id, email, is_active")
                      .eq("id", user_id)
                      .limit(1)
                      .execute())
        if not user:
            raise HTTPException(status_code=404, detail="User not found")
        return user

    # Role -> action

    def grant_action_to_role(self, role_id: str, action_id: str, granted_by: Optional[str] = None) -> RolePermissionResponse:
        """Grant an action to a role, reactivating a previously revoked grant"""
        try:
            role = self.roles.get_role_by_id(role_id)
            action = self.actions.get_action_by_id(action_id)

            existing = self.supabase.table("role_permissions")\
                .select("*")\
                .eq("role_id", role_id)\
                .eq("action_id", action_id)\
                .execute()

            if any(row["is_active"] for row in existing.data):
                raise HTTPException(status_code=409, detail="Action already granted to role")

            if existing.data:
                row = existing.data[0]
                result = self.supabase.table("role_permissions")\
                    .update({"is_active": True})\
                    .eq("id", row["id"])\
                    .execute()
                old_values = {"is_active": False}
            else:
                result = self.supabase.table("role_permissions").insert({
                    "role_id": role_id,
                    "action_id": action_id,
                    "is_active": True
                }).execute()
                old_values = None

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to grant action")

            grant = result.data[0]
            logger.info(f"Granted {action.name} to role {role.name}")
            self.audit.record(
                action="permission_granted",
                entity_type="role_permission",
                entity_id=grant["id"],
                actor_id=granted_by,
                old_values=old_values,
                new_values={"role": role.name, "action": action.name, "is_active": True},
            )
            return RolePermissionResponse(**grant)
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def revoke_action_from_role(self, role_id: str, action_id: str, revoked_by: Optional[str] = None) -> RolePermissionResponse:
        """Soft-revoke an action from a role"""
        try:
            result = self.supabase.table("role_permissions")\
                .update({"is_active": False})\
                .eq("role_id", role_id)\
                .eq("action_id", action_id)\
                .eq("is_active", True)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="Active grant not found")

            grant = result.data[0]
            logger.info(f"Revoked action {action_id} from role {role_id}")
            self.audit.record(
                action="permission_revoked",
                entity_type="role_permission",
                entity_id=grant["id"],
                actor_id=revoked_by,
                old_values={"is_active": True},
                new_values={"is_active": False},
            )
            return RolePermissionResponse(**grant)
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    # User -> role

    def list_user_roles(self, user_id: str, include_inactive: bool = False) -> List[UserRoleResponse]:
        """List a user's role grants"""
        try:
            self._ensure_user(user_id)
            query = self.supabase.table("user_roles")\
                .select("*, roles(name)")\
                .eq("user_id", user_id)
            if not include_inactive:
                query = query.eq("is_active", True)
            result = query.order("assigned_at", desc=True).execute()
            grants = []
            for row in result.data or []:
                role = row.pop("roles", None) or {}
                grants.append(UserRoleResponse(**row, role_name=role.get("name")))
            return grants
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def grant_role_to_user(
        self,
        user_id: str,
        role_id: str,
        granted_by: Optional[str] = None,
        notes: Optional[str] = None
    ) -> UserRoleResponse:
        """Grant a role to a user, reactivating a previously revoked grant"""
        try:
            self._ensure_user(user_id)
            role = self.roles.get_role_by_id(role_id)

            existing = self.supabase.table("user_roles")\
                .select("*")\
                .eq("user_id", user_id)\
                .eq("role_id", role_id)\
                .execute()

            if any(row["is_active"] for row in existing.data):
                raise HTTPException(status_code=409, detail="Role already granted to user")

            values = {
                "assigned_by": granted_by,
                "assigned_at": datetime.now(timezone.utc).isoformat(),
                "is_active": True,
                "notes": notes
            }
            if existing.data:
                result = self.supabase.table("user_roles")\
                    .update(values)\
                    .eq("id", existing.data[0]["id"])\
                    .execute()
                old_values = {"is_active": False}
            else:
                result = self.supabase.table("user_roles").insert({
                    "user_id": user_id,
                    "role_id": role_id,
                    **values
                }).execute()
                old_values = None

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to grant role")

            grant = result.data[0]
            logger.info(f"Granted role {role.name} to user {user_id} (by {granted_by})")
            self.audit.record(
                action="role_granted",
                entity_type="user_role",
                entity_id=grant["id"],
                actor_id=granted_by,
                target_user_id=user_id,
                old_values=old_values,
                new_values={"role": role.name, "is_active": True, "notes": notes},
            )
            return UserRoleResponse(**grant, role_name=role.name)
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def revoke_role_from_user(self, user_id: str, role_id: str, revoked_by: Optional[str] = None) -> UserRoleResponse:
        """Soft-revoke a user's role grant"""
        try:
            result = self.supabase.table("user_roles")\
                .update({"is_active": False})\
                .eq("user_id", user_id)\
                .eq("role_id", role_id)\
                .eq("is_active", True)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="Active role grant not found")

            grant = result.data[0]
            logger.info(f"Revoked role {role_id} from user {user_id} (by {revoked_by})")
            self.audit.record(
                action="role_revoked",
                entity_type="user_role",
                entity_id=grant["id"],
                actor_id=revoked_by,
                target_user_id=user_id,
                old_values={"is_active": True},
                new_values={"is_active": False},
            )
            return UserRoleResponse(**grant)
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_user_permissions(self, user_id: str) -> UserPermissionsResponse:
        """Resolved role names and permission strings for a user"""
        try:
            self._ensure_user(user_id)
            return UserPermissionsResponse(
                user_id=user_id,
                roles=resolve_user_roles(self.supabase, user_id),
                permissions=sorted(resolve_user_permissions(self.supabase, user_id)),
            )
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
