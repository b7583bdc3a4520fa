import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import HTTPException
from supabase import Client

from app.modules.audit.schemas import AuditLogResponse

logger = logging.getLogger(__name__)


class AuditService:
    """Append-only writer/reader for the audit_log table."""

    def __init__(self, supabase: Client):
        self.supabase = supabase

    def record(
        self,
        action: str,
        entity_type: str,
        entity_id: Optional[str] = None,
        actor_id: Optional[str] = None,
        target_user_id: Optional[str] = None,
        old_values: Optional[Dict[str, Any]] = None,
        new_values: Optional[Dict[str, Any]] = None,
        metadata: Optional[Dict[str, Any]] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> Optional[Dict[str, Any]]:
        """
        Insert one audit entry. The mutation being audited has already happened,
        so a failed write is logged and reported as None rather than undoing it.
        """
        try:
            result = self.supabase.table("audit_log").insert({
                "user_id": actor_id,
                "target_user_id": target_user_id,
                "action": action,
                "entity_type": entity_type,
                "entity_id": str(entity_id) if entity_id is not None else None,
                "old_values": old_values,
                "new_values": new_values,
                "metadata": metadata,
                "ip_address": ip_address,
                "user_agent": user_agent,
                "created_at": datetime.now(timezone.utc).isoformat(),
            }).execute()
            return result.data[0] if result.data else None
        except Exception as e:
            logger.error(f"Failed to write audit entry {action} for {entity_type} {entity_id}: {e}")
            return None

    def list_entries(
        self,
        actor_id: Optional[str] = None,
        target_user_id: Optional[str] = None,
        entity_type: Optional[str] = None,
        action: Optional[str] = None,
        limit: int = 50,
        offset: int = 0
    ) -> List[AuditLogResponse]:
        """List audit entries, newest first"""
        try:
            query = self.supabase.table("audit_log").select("*")
            if actor_id:
                query = query.eq("user_id", actor_id)
            if target_user_id:
                query = query.eq("target_user_id", target_user_id)
            if entity_type:
                query = query.eq("entity_type", entity_type)
            if action:
                query = query.eq("action", action)
            result = query.order("created_at", desc=True)\
                .limit(limit)\
                .offset(offset)\
                .execute()
            return [AuditLogResponse(**entry) for entry in result.data]
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
