"""
Post-authentication hooks.

after_sign_in runs once credentials are accepted; enrich_session shapes the
session payload handed back to clients with the user's roles, permissions and
extension rows.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from supabase import Client

from app.core.permissions import resolve_user_permissions, resolve_user_roles

logger = logging.getLogger(__name__)

EXTENSION_LOOKUPS = (
    ("artist", "artists"),
    ("studio", "studios"),
    ("student", "students"),
)


def after_sign_in(supabase: Client, user_id: str) -> None:
    """Touch the profile row; a failure here must not block the sign-in."""
    try:
        supabase.table("users")\
            .update({"updated_at": datetime.now(timezone.utc).isoformat()})\
            .eq("id", user_id)\
            .execute()
    except Exception as e:
        logger.error(f"Post sign-in hook failed for {user_id}: {e}")


def _first_row(supabase: Client, table: str, user_id: str) -> Optional[Dict[str, Any]]:
    result = supabase.table(table).select("*").eq("user_id", user_id).limit(1).execute()
    return result.data[0] if result.data else None


def _count(supabase: Client, table: str, column: str, value: str) -> int:
    result = supabase.table(table).select("id").eq(column, value).execute()
    return len(result.data or [])


def enrich_session(supabase: Client, user: Dict[str, Any], session: Any = None) -> Dict[str, Any]:
    """
    Return {"session", "user"} with the user extended by permissions, roles,
    user_type, recent_activity and the artist/studio/student rows it owns.
    On any lookup failure the bare payload is returned.
    """
    try:
        user_id = user["id"]
        enriched = dict(user)
        enriched["permissions"] = sorted(resolve_user_permissions(supabase, user_id))
        enriched["roles"] = resolve_user_roles(supabase, user_id)

        user_type = "basic"
        for key, table in EXTENSION_LOOKUPS:
            row = _first_row(supabase, table, user_id)
            enriched[key] = row
            if row and user_type == "basic":
                user_type = key
        enriched["user_type"] = user_type

        enriched["recent_activity"] = {
            "class_bookings": _count(supabase, "class_bookings", "user_id", user_id),
            "studio_bookings": _count(supabase, "studio_bookings", "user_id", user_id),
            "gig_applications": _count(supabase, "gig_applications", "user_id", user_id),
        }
        return {"session": session, "user": enriched}
    except Exception as e:
        logger.error(f"Session enrichment failed for {user.get('id')}: {e}")
        return {"session": session, "user": user}
