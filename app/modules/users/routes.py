from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.users.schemas import UserUpdate, UserResponse
from app.modules.users.service import UserService
from app.modules.roles.schemas import UserRoleAssign, UserRoleResponse, UserPermissionsResponse
from app.modules.roles.service import GrantService
from app.modules.roles.routes import get_grant_service
from app.core.dependencies import (
    require_permission, get_current_user, get_access_cache, ensure_self_or_permission
)
from app.config.permissions_config import PERMISSIONS
from supabase import Client
from typing import List, Dict, Any

router = APIRouter(prefix="/users", tags=["users"])

READ_USER = PERMISSIONS["USERS"]["READ"]
UPDATE_USER = PERMISSIONS["USERS"]["UPDATE"]
DELETE_USER = PERMISSIONS["USERS"]["DELETE"]
MANAGE_USER_ROLES = PERMISSIONS["USERS"]["MANAGE_USER_ROLES"]
READ_USER_ROLES = PERMISSIONS["USERS"]["READ_USER_ROLES"]


def get_user_service(supabase: Client = Depends(get_supabase)) -> UserService:
    return UserService(supabase)


@router.get("", response_model=List[UserResponse])
async def list_users(
    limit: int = 10,
    offset: int = 0,
    include_inactive: bool = False,
    user_data: Dict = Depends(require_permission(READ_USER)),
    service: UserService = Depends(get_user_service)
):
    """List users"""
    return service.list_users(limit=limit, offset=offset, include_inactive=include_inactive)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str,
    user_data: Dict = Depends(require_permission(READ_USER)),
    service: UserService = Depends(get_user_service)
):
    """Get user by ID"""
    return service.get_user_by_id(user_id)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: str,
    user_data_body: UserUpdate,
    user_data: Dict = Depends(require_permission(UPDATE_USER)),
    cache: Dict[str, Any] = Depends(get_access_cache),
    service: UserService = Depends(get_user_service),
    supabase: Client = Depends(get_supabase)
):
    """Update a profile: your own, or anyone's with manage_user_roles"""
    ensure_self_or_permission(user_id, user_data, MANAGE_USER_ROLES, supabase, cache)
    return service.update_user(user_id, user_data_body, actor_id=user_data["id"])


@router.delete("/{user_id}", response_model=UserResponse)
async def deactivate_user(
    user_id: str,
    user_data: Dict = Depends(require_permission(DELETE_USER)),
    service: UserService = Depends(get_user_service)
):
    """Deactivate a user (soft delete)"""
    return service.deactivate_user(user_id, actor_id=user_data["id"])


@router.get("/{user_id}/roles", response_model=List[UserRoleResponse])
async def list_user_roles(
    user_id: str,
    include_inactive: bool = False,
    user_data: Dict = Depends(get_current_user),
    cache: Dict[str, Any] = Depends(get_access_cache),
    service: GrantService = Depends(get_grant_service),
    supabase: Client = Depends(get_supabase)
):
    """List a user's role grants (own, or anyone's with read_user_roles)"""
    ensure_self_or_permission(user_id, user_data, READ_USER_ROLES, supabase, cache)
    return service.list_user_roles(user_id, include_inactive=include_inactive)


@router.post("/{user_id}/roles", response_model=UserRoleResponse, status_code=201)
async def grant_user_role(
    user_id: str,
    grant_data: UserRoleAssign,
    user_data: Dict = Depends(require_permission(MANAGE_USER_ROLES)),
    service: GrantService = Depends(get_grant_service)
):
    """Grant a role to a user"""
    return service.grant_role_to_user(user_id, grant_data.role_id, granted_by=user_data["id"], notes=grant_data.notes)


@router.delete("/{user_id}/roles/{role_id}", response_model=UserRoleResponse)
async def revoke_user_role(
    user_id: str,
    role_id: str,
    user_data: Dict = Depends(require_permission(MANAGE_USER_ROLES)),
    service: GrantService = Depends(get_grant_service)
):
    """Revoke a user's role (the grant row is kept, marked inactive)"""
    return service.revoke_role_from_user(user_id, role_id, revoked_by=user_data["id"])


@router.get("/{user_id}/permissions", response_model=UserPermissionsResponse)
async def get_user_permissions(
    user_id: str,
    user_data: Dict = Depends(get_current_user),
    cache: Dict[str, Any] = Depends(get_access_cache),
    service: GrantService = Depends(get_grant_service),
    supabase: Client = Depends(get_supabase)
):
    """Resolved roles and permission strings for a user"""
    ensure_self_or_permission(user_id, user_data, READ_USER_ROLES, supabase, cache)
    return service.get_user_permissions(user_id)
