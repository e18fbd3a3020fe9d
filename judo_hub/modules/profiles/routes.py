from fastapi import APIRouter, Depends
from judo_hub.core.dependencies import (
    get_authenticated_session, get_session_registry, get_supabase, require_profile
)
from judo_hub.core.session import SessionManager, SessionRegistry
from judo_hub.modules.profiles.schemas import (
    ProfileResponse, ProfileSelfUpdate, ProfileAdminUpdate,
    UserCreate, UserCreateResponse
)
from judo_hub.modules.profiles.service import ProfileService
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/profiles", tags=["profiles"])


def get_profile_service(
    supabase: Client = Depends(get_supabase),
    registry: SessionRegistry = Depends(get_session_registry)
) -> ProfileService:
    return ProfileService(supabase, client_factory=registry.client_factory)


@router.get("", response_model=List[ProfileResponse])
async def list_profiles(
    group_id: Optional[str] = None,
    profile: ProfileResponse = Depends(require_profile),
    service: ProfileService = Depends(get_profile_service)
):
    """List profiles, newest first (RLS limits non-admins to their own row)"""
    return service.list_profiles(group_id=group_id)


@router.post("", response_model=UserCreateResponse, status_code=201)
async def create_user(
    user_data: UserCreate,
    profile: ProfileResponse = Depends(require_profile),
    service: ProfileService = Depends(get_profile_service)
):
    """Create an account and fill in its profile"""
    user = service.admin_create_user(user_data)
    return UserCreateResponse(
        user_id=user.id,
        email=user.email or user_data.email,
        message=f"User created. A confirmation email has been sent to {user_data.email}."
    )


@router.put("/me", response_model=ProfileResponse)
async def update_own_profile(
    updates: ProfileSelfUpdate,
    session: SessionManager = Depends(get_authenticated_session),
    profile: ProfileResponse = Depends(require_profile),
    service: ProfileService = Depends(get_profile_service)
):
    """Update the caller's own profile and reload it into the session"""
    service.update_own_profile(profile.id, updates)
    session.refetch_profile()
    return service.get_profile(profile.id)


@router.get("/{user_id}", response_model=ProfileResponse)
async def get_profile(
    user_id: str,
    profile: ProfileResponse = Depends(require_profile),
    service: ProfileService = Depends(get_profile_service)
):
    return service.get_profile(user_id)


@router.put("/{user_id}", response_model=ProfileResponse)
async def update_profile(
    user_id: str,
    updates: ProfileAdminUpdate,
    session: SessionManager = Depends(get_authenticated_session),
    profile: ProfileResponse = Depends(require_profile),
    service: ProfileService = Depends(get_profile_service)
):
    """Update any profile field, including group and role"""
    service.admin_update_profile(user_id, updates)
    if user_id == profile.id:
        session.refetch_profile()
    return service.get_profile(user_id)


@router.delete("/{user_id}", status_code=204)
async def delete_user(
    user_id: str,
    profile: ProfileResponse = Depends(require_profile),
    service: ProfileService = Depends(get_profile_service)
):
    """Remove a user from the portal; the auth account itself is kept"""
    service.delete_user(user_id)
    return None
