"""
Grant resolution: user -> active role grants -> active role-permission grants -> action names.

Permissions are additive across every role a user holds; there is no deny grant.
"""

import logging
from typing import Any, Dict, List, Set

from supabase import Client

from app.config import settings

logger = logging.getLogger(__name__)


def _active_role_grants(supabase: Client, user_id: str) -> List[Dict[str, Any]]:
    result = supabase.table("user_roles")\
        .select("role_id, roles(name, is_active, is_wildcard)")\
        .eq("user_id", user_id)\
        .eq("is_active", True)\
        .execute()
    grants = []
    for grant in result.data or []:
        role = grant.get("roles")
        if role and role.get("is_active", True):
            grants.append(grant)
    return grants


def resolve_user_roles(supabase: Client, user_id: str) -> List[str]:
    """Names of the roles a user currently holds through active grants."""
    return sorted({grant["roles"]["name"] for grant in _active_role_grants(supabase, user_id)})


def resolve_role_permissions(supabase: Client, role_ids: List[str]) -> Set[str]:
    """Action names granted to any of role_ids through active role_permissions rows."""
    if not role_ids:
        return set()
    result = supabase.table("role_permissions")\
        .select("action_id, actions(name, is_active)")\
        .in_("role_id", role_ids)\
        .eq("is_active", True)\
        .execute()
    names = set()
    for row in result.data or []:
        action = row.get("actions")
        if action and action.get("is_active", True) and action.get("name"):
            names.add(action["name"])
    return names


def _all_active_actions(supabase: Client) -> Set[str]:
    result = supabase.table("actions")\
        .select("name")\
        .eq("is_active", True)\
        .execute()
    return {row["name"] for row in result.data or []}


def resolve_user_permissions(supabase: Client, user_id: str) -> Set[str]:
    """
    Effective permission set for user_id.

    A user without active role grants resolves to an empty set. Inactive grants
    (soft-deleted user_roles or role_permissions rows) never contribute.
    With settings.wildcard_resolution == "dynamic", holding an active wildcard
    role yields the whole active action catalog at query time.
    """
    grants = _active_role_grants(supabase, user_id)
    if not grants:
        return set()
    if settings.wildcard_resolution == "dynamic" and any(g["roles"].get("is_wildcard") for g in grants):
        return _all_active_actions(supabase)
    return resolve_role_permissions(supabase, [g["role_id"] for g in grants])
