from fastapi import APIRouter, Depends
from judo_hub.core.dependencies import get_supabase, require_profile
from judo_hub.modules.groups.schemas import (
    GroupCreate, GroupUpdate, GroupResponse, GroupCountsResponse
)
from judo_hub.modules.groups.service import GroupService
from judo_hub.modules.profiles.schemas import ProfileResponse
from supabase import Client
from typing import List

# Admin-only writes are enforced by row-level security on the groups table.
router = APIRouter(prefix="/groups", tags=["groups"])


def get_group_service(supabase: Client = Depends(get_supabase)) -> GroupService:
    return GroupService(supabase)


@router.get("", response_model=List[GroupResponse])
async def list_groups(
    profile: ProfileResponse = Depends(require_profile),
    service: GroupService = Depends(get_group_service)
):
    """List all groups ordered by name"""
    return service.list_groups()


@router.post("", response_model=List[GroupResponse], status_code=201)
async def create_group(
    group_data: GroupCreate,
    profile: ProfileResponse = Depends(require_profile),
    service: GroupService = Depends(get_group_service)
):
    """Create a group and return the refreshed group list"""
    service.create_group(group_data)
    return service.list_groups()


@router.get("/{group_id}", response_model=GroupResponse)
async def get_group(
    group_id: str,
    profile: ProfileResponse = Depends(require_profile),
    service: GroupService = Depends(get_group_service)
):
    return service.get_group(group_id)


@router.get("/{group_id}/counts", response_model=GroupCountsResponse)
async def get_group_counts(
    group_id: str,
    profile: ProfileResponse = Depends(require_profile),
    service: GroupService = Depends(get_group_service)
):
    """Number of users and documents assigned to the group"""
    return GroupCountsResponse(
        group_id=group_id,
        user_count=service.count_members(group_id),
        document_count=service.count_documents(group_id)
    )


@router.put("/{group_id}", response_model=GroupResponse)
async def update_group(
    group_id: str,
    group_data: GroupUpdate,
    profile: ProfileResponse = Depends(require_profile),
    service: GroupService = Depends(get_group_service)
):
    service.update_group(group_id, group_data)
    return service.get_group(group_id)


@router.delete("/{group_id}", status_code=204)
async def delete_group(
    group_id: str,
    profile: ProfileResponse = Depends(require_profile),
    service: GroupService = Depends(get_group_service)
):
    """Delete a group after un-assigning its users and documents"""
    service.delete_group(group_id)
    return None
