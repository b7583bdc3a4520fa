from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.profiles.schemas import (
    ArtistUpdate, ArtistResponse,
    StudioUpdate, StudioResponse,
    StudentUpdate, StudentResponse
)
from app.modules.profiles.service import ProfileService
from app.core.dependencies import require_permission, get_current_user
from app.config.permissions_config import PERMISSIONS
from supabase import Client
from typing import List, Dict, Optional

router = APIRouter(prefix="/profiles", tags=["profiles"])


def get_profile_service(supabase: Client = Depends(get_supabase)) -> ProfileService:
    return ProfileService(supabase)


# Artists: the artist row is owned by the caller, no extra permission needed
@router.get("/artists/me", response_model=ArtistResponse)
async def get_my_artist_profile(
    user_data: Dict = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service)
):
    return service.get_artist_by_user(user_data["id"])


@router.put("/artists/me", response_model=ArtistResponse)
async def update_my_artist_profile(
    artist_data: ArtistUpdate,
    user_data: Dict = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service)
):
    """Replace registration placeholders with real artist details"""
    return service.update_artist(user_data["id"], artist_data)


@router.get("/artists/{artist_id}", response_model=ArtistResponse)
async def get_artist(
    artist_id: int,
    user_data: Dict = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service)
):
    return service.get_artist(artist_id)


# Studios
@router.get("/studios", response_model=List[StudioResponse])
async def list_studios(
    city: Optional[str] = None,
    area: Optional[str] = None,
    limit: int = 20,
    offset: int = 0,
    user_data: Dict = Depends(require_permission(PERMISSIONS["STUDIOS"]["READ"])),
    service: ProfileService = Depends(get_profile_service)
):
    """List active studios"""
    return service.list_studios(city=city, area=area, limit=limit, offset=offset)


@router.get("/studios/me", response_model=StudioResponse)
async def get_my_studio(
    user_data: Dict = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service)
):
    return service.get_studio_by_user(user_data["id"])


@router.put("/studios/me", response_model=StudioResponse)
async def update_my_studio(
    studio_data: StudioUpdate,
    user_data: Dict = Depends(require_permission(PERMISSIONS["STUDIOS"]["UPDATE"])),
    service: ProfileService = Depends(get_profile_service)
):
    """Replace registration placeholders with real studio details"""
    return service.update_studio(user_data["id"], studio_data)


@router.delete("/studios/me", response_model=StudioResponse)
async def deactivate_my_studio(
    user_data: Dict = Depends(require_permission(PERMISSIONS["STUDIOS"]["DELETE"])),
    service: ProfileService = Depends(get_profile_service)
):
    return service.deactivate_studio(user_data["id"])


@router.get("/studios/{studio_id}", response_model=StudioResponse)
async def get_studio(
    studio_id: int,
    user_data: Dict = Depends(require_permission(PERMISSIONS["STUDIOS"]["READ"])),
    service: ProfileService = Depends(get_profile_service)
):
    return service.get_studio(studio_id)


# Students
@router.get("/students/me", response_model=StudentResponse)
async def get_my_student_profile(
    user_data: Dict = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service)
):
    return service.get_student_by_user(user_data["id"])


@router.put("/students/me", response_model=StudentResponse)
async def upsert_my_student_profile(
    student_data: StudentUpdate,
    user_data: Dict = Depends(require_permission(PERMISSIONS["USERS"]["UPDATE"])),
    service: ProfileService = Depends(get_profile_service)
):
    """Create or update the caller's student profile"""
    return service.upsert_student(user_data["id"], student_data)
