from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.audit.schemas import AuditLogResponse
from app.modules.audit.service import AuditService
from app.core.dependencies import require_permission
from app.config.permissions_config import PERMISSIONS
from supabase import Client
from typing import List, Dict, Optional

router = APIRouter(prefix="/audit-log", tags=["audit"])


def get_audit_service(supabase: Client = Depends(get_supabase)) -> AuditService:
    return AuditService(supabase)


@router.get("", response_model=List[AuditLogResponse])
async def list_audit_entries(
    actor_id: Optional[str] = None,
    target_user_id: Optional[str] = None,
    entity_type: Optional[str] = None,
    action: Optional[str] = None,
    limit: int = 50,
    offset: int = 0,
    user_data: Dict = Depends(require_permission(PERMISSIONS["SYSTEM"]["READ_AUDIT_LOG"])),
    service: AuditService = Depends(get_audit_service)
):
    """List audit entries (newest first)"""
    return service.list_entries(
        actor_id=actor_id,
        target_user_id=target_user_id,
        entity_type=entity_type,
        action=action,
        limit=limit,
        offset=offset,
    )
