"""
Core dependencies for route protection and permission checking
"""

from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.database.supabase_client import get_supabase, get_supabase_admin
from app.modules.auth.service import AuthService
from app.core.permissions import resolve_user_permissions
from supabase import Client
from typing import List, Optional, Dict, Any
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer()


def _get_request_cache(request: Request) -> Dict[str, Any]:
    """Return request-scoped cache for access data (permission_names)."""
    if not hasattr(request.state, "access_cache"):
        request.state.access_cache = {}
    return request.state.access_cache


def get_auth_service(
    supabase: Client = Depends(get_supabase),
    admin_supabase: Client = Depends(get_supabase_admin)
) -> AuthService:
    return AuthService(supabase, admin_supabase)


def get_current_token(
    credentials: HTTPAuthorizationCredentials = Security(security)
) -> str:
    """Extract JWT token from Authorization header"""
    return credentials.credentials


def get_current_user(
    token: str = Depends(get_current_token),
    auth_service: AuthService = Depends(get_auth_service)
) -> dict:
    """Extract current user info from JWT token"""
    return auth_service.get_current_user(token)


def get_user_permissions(user_id: str, supabase: Client, cache: Optional[Dict[str, Any]] = None) -> List[str]:
    """Get all permissions for a user through their roles. Populates request-scoped cache when provided."""
    if cache is not None and "permission_names" in cache:
        return cache["permission_names"]
    try:
        names = sorted(resolve_user_permissions(supabase, user_id))
    except Exception as e:
        logger.error(f"Error resolving permissions for user {user_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to resolve user permissions"
        )
    if cache is not None:
        cache["permission_names"] = names
    return names


def require_permission(required_permission: str):
    """Factory function to create permission check dependency"""
    def check_permission(
        request: Request,
        user_data: dict = Depends(get_current_user),
        supabase: Client = Depends(get_supabase)
    ) -> dict:
        """Dependency to check if user has required permission"""
        cache = _get_request_cache(request)
        user_permissions = get_user_permissions(user_data["id"], supabase, cache)
        if required_permission not in user_permissions:
            logger.warning(f"User {user_data['id']} denied: missing {required_permission}")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Insufficient permissions. Required: {required_permission}"
            )
        return user_data
    return check_permission


def get_access_cache(request: Request) -> Dict[str, Any]:
    """Dependency that returns request-scoped access cache (populated by require_permission when used)."""
    return _get_request_cache(request)


def user_has_permission(user_data: dict, permission: str, supabase: Client, cache: Optional[Dict[str, Any]] = None) -> bool:
    """Non-raising check, for handlers that widen access (e.g. acting on another user's records)."""
    return permission in get_user_permissions(user_data["id"], supabase, cache)


def ensure_self_or_permission(
    target_user_id: str,
    user_data: dict,
    permission: str,
    supabase: Client,
    cache: Optional[Dict[str, Any]] = None
) -> dict:
    """Allow if the caller is the target user, otherwise require an additional permission."""
    if user_data["id"] == target_user_id:
        return user_data
    if user_has_permission(user_data, permission, supabase, cache):
        return user_data
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail=f"Insufficient permissions. Required: {permission}"
    )
