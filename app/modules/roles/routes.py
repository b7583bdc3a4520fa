from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.roles.schemas import (
    ActionCreate, ActionResponse,
    RoleCreate, RoleResponse, RoleWithActionsResponse,
    RolePermissionAssign, RolePermissionResponse
)
from app.modules.roles.service import RoleService, ActionService, GrantService
from app.core.dependencies import require_permission, get_current_user
from app.config.permissions_config import PERMISSIONS
from supabase import Client
from typing import List, Optional, Dict

router = APIRouter(prefix="/roles", tags=["roles"])

MANAGE_ROLES = PERMISSIONS["SYSTEM"]["MANAGE_ROLES"]
MANAGE_PERMISSIONS = PERMISSIONS["SYSTEM"]["MANAGE_PERMISSIONS"]


def get_role_service(supabase: Client = Depends(get_supabase)) -> RoleService:
    return RoleService(supabase)


def get_action_service(supabase: Client = Depends(get_supabase)) -> ActionService:
    return ActionService(supabase)


def get_grant_service(supabase: Client = Depends(get_supabase)) -> GrantService:
    return GrantService(supabase)


# Action catalog endpoints
@router.get("/actions", response_model=List[ActionResponse])
async def list_actions(
    category: Optional[str] = None,
    operation: Optional[str] = None,
    limit: int = 100,
    offset: int = 0,
    user_data: Dict = Depends(get_current_user),
    service: ActionService = Depends(get_action_service)
):
    """List the action catalog"""
    return service.list_actions(category=category, operation=operation, limit=limit, offset=offset)


@router.post("/actions", response_model=ActionResponse, status_code=201)
async def create_action(
    action_data: ActionCreate,
    user_data: Dict = Depends(require_permission(MANAGE_PERMISSIONS)),
    service: ActionService = Depends(get_action_service)
):
    """Add an action to the catalog"""
    return service.create_action(action_data)


@router.get("/actions/{action_id}", response_model=ActionResponse)
async def get_action(
    action_id: str,
    user_data: Dict = Depends(get_current_user),
    service: ActionService = Depends(get_action_service)
):
    """Get action by ID"""
    return service.get_action_by_id(action_id)


# Role endpoints
@router.get("", response_model=List[RoleResponse])
async def list_roles(
    limit: int = 50,
    offset: int = 0,
    user_data: Dict = Depends(get_current_user),
    service: RoleService = Depends(get_role_service)
):
    """List roles"""
    return service.list_roles(limit=limit, offset=offset)


@router.post("", response_model=RoleResponse, status_code=201)
async def create_role(
    role_data: RoleCreate,
    user_data: Dict = Depends(require_permission(MANAGE_ROLES)),
    service: RoleService = Depends(get_role_service)
):
    """Create a new role"""
    return service.create_role(role_data)


@router.get("/{role_id}", response_model=RoleWithActionsResponse)
async def get_role(
    role_id: str,
    user_data: Dict = Depends(get_current_user),
    service: RoleService = Depends(get_role_service)
):
    """Get role with its active actions"""
    return service.get_role_with_actions(role_id)


@router.post("/{role_id}/actions", response_model=RolePermissionResponse, status_code=201)
async def grant_action(
    role_id: str,
    grant_data: RolePermissionAssign,
    user_data: Dict = Depends(require_permission(MANAGE_PERMISSIONS)),
    service: GrantService = Depends(get_grant_service)
):
    """Grant an action to a role"""
    return service.grant_action_to_role(role_id, grant_data.action_id, granted_by=user_data["id"])


@router.delete("/{role_id}/actions/{action_id}", response_model=RolePermissionResponse)
async def revoke_action(
    role_id: str,
    action_id: str,
    user_data: Dict = Depends(require_permission(MANAGE_PERMISSIONS)),
    service: GrantService = Depends(get_grant_service)
):
    """Revoke an action from a role (the grant row is kept, marked inactive)"""
    return service.revoke_action_from_role(role_id, action_id, revoked_by=user_data["id"])
