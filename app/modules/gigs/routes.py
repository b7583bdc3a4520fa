from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.gigs.schemas import (
    GigCreate, GigUpdate, GigResponse,
    GigApplicationCreate, GigApplicationResponse, ApplicationReview
)
from app.modules.gigs.service import GigService
from app.core.dependencies import require_permission
from app.config.enums import DanceForm, GigStatus
from app.config.permissions_config import PERMISSIONS
from supabase import Client
from typing import List, Dict, Optional

router = APIRouter(prefix="/gigs", tags=["gigs"])

GIGS = PERMISSIONS["GIGS"]
GIG_APPLICATIONS = PERMISSIONS["GIG_APPLICATIONS"]


def get_gig_service(supabase: Client = Depends(get_supabase)) -> GigService:
    return GigService(supabase)


@router.post("", response_model=GigResponse, status_code=201)
async def create_gig(
    gig_data: GigCreate,
    user_data: Dict = Depends(require_permission(GIGS["CREATE"])),
    service: GigService = Depends(get_gig_service)
):
    return service.create_gig(user_data["id"], gig_data)


@router.get("", response_model=List[GigResponse])
async def list_gigs(
    city: Optional[str] = None,
    dance_form: Optional[DanceForm] = None,
    status: Optional[GigStatus] = "open",
    host_id: Optional[str] = None,
    limit: int = 20,
    offset: int = 0,
    user_data: Dict = Depends(require_permission(GIGS["READ"])),
    service: GigService = Depends(get_gig_service)
):
    """List gigs (open ones by default)"""
    return service.list_gigs(
        city=city, dance_form=dance_form, status=status, host_id=host_id,
        limit=limit, offset=offset
    )


@router.get("/applications/me", response_model=List[GigApplicationResponse])
async def list_my_applications(
    user_data: Dict = Depends(require_permission(GIG_APPLICATIONS["READ"])),
    service: GigService = Depends(get_gig_service)
):
    return service.list_user_applications(user_data["id"])


@router.delete("/applications/{application_id}", status_code=204)
async def withdraw_application(
    application_id: int,
    user_data: Dict = Depends(require_permission(GIG_APPLICATIONS["DELETE"])),
    service: GigService = Depends(get_gig_service)
):
    service.withdraw_application(user_data["id"], application_id)
    return None


@router.get("/{gig_id}", response_model=GigResponse)
async def get_gig(
    gig_id: int,
    user_data: Dict = Depends(require_permission(GIGS["READ"])),
    service: GigService = Depends(get_gig_service)
):
    return service.get_gig(gig_id)


@router.put("/{gig_id}", response_model=GigResponse)
async def update_gig(
    gig_id: int,
    gig_data: GigUpdate,
    user_data: Dict = Depends(require_permission(GIGS["UPDATE"])),
    service: GigService = Depends(get_gig_service)
):
    return service.update_gig(user_data["id"], gig_id, gig_data)


@router.delete("/{gig_id}", response_model=GigResponse)
async def cancel_gig(
    gig_id: int,
    user_data: Dict = Depends(require_permission(GIGS["DELETE"])),
    service: GigService = Depends(get_gig_service)
):
    """Cancel a gig you host"""
    return service.cancel_gig(user_data["id"], gig_id)


@router.post("/{gig_id}/applications", response_model=GigApplicationResponse, status_code=201)
async def apply_to_gig(
    gig_id: int,
    application_data: GigApplicationCreate,
    user_data: Dict = Depends(require_permission(GIG_APPLICATIONS["CREATE"])),
    service: GigService = Depends(get_gig_service)
):
    return service.apply(user_data["id"], gig_id, application_data)


@router.get("/{gig_id}/applications", response_model=List[GigApplicationResponse])
async def list_gig_applications(
    gig_id: int,
    user_data: Dict = Depends(require_permission(GIGS["READ"])),
    service: GigService = Depends(get_gig_service)
):
    """Hosts see all applications, applicants see their own"""
    return service.list_applications(user_data["id"], gig_id)


@router.put("/{gig_id}/applications/{application_id}", response_model=GigApplicationResponse)
async def review_application(
    gig_id: int,
    application_id: int,
    review: ApplicationReview,
    user_data: Dict = Depends(require_permission(GIGS["UPDATE"])),
    service: GigService = Depends(get_gig_service)
):
    """Accept or reject an application to a gig you host"""
    return service.review_application(user_data["id"], gig_id, application_id, review)
