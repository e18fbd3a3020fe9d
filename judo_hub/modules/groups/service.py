from supabase import Client
from judo_hub.modules.groups.schemas import GroupCreate, GroupUpdate, GroupResponse
from typing import List
import logging

logger = logging.getLogger(__name__)


class GroupService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_groups(self) -> List[GroupResponse]:
        """List all groups ordered by name"""
        result = self.supabase.table("groups")\
            .select("*")\
            .order("name")\
            .execute()
        return [GroupResponse(**group) for group in result.data]

    def get_group(self, group_id: str) -> GroupResponse:
        result = self.supabase.table("groups")\
            .select("*")\
            .eq("id", group_id)\
            .single()\
            .execute()
        return GroupResponse(**result.data)

    def create_group(self, group_data: GroupCreate) -> None:
        # No representation is requested back: the caller refetches the list.
        self.supabase.table("groups").insert({
            "name": group_data.name,
            "description": group_data.description,
            "color": group_data.color
        }).execute()

    def update_group(self, group_id: str, group_data: GroupUpdate) -> None:
        update_data = group_data.model_dump(exclude_unset=True)
        if not update_data:
            return
        self.supabase.table("groups")\
            .update(update_data)\
            .eq("id", group_id)\
            .execute()

    def delete_group(self, group_id: str) -> None:
        """Delete a group after un-assigning everything that references it.

        Profiles first, then documents, then the group row. Each step is its own
        request; a failure stops the sequence and is re-raised, leaving earlier
        steps applied.
        """
        try:
            self.supabase.table("profiles")\
                .update({"group_id": None})\
                .eq("group_id", group_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error un-assigning users from group {group_id}: {e}")
            raise

        try:
            self.supabase.table("documents")\
                .update({"group_id": None})\
                .eq("group_id", group_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error un-assigning documents from group {group_id}: {e}")
            raise

        try:
            self.supabase.table("groups")\
                .delete()\
                .eq("id", group_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error deleting group {group_id}: {e}")
            raise
        logger.info("Deleted group %s", group_id)

    def count_members(self, group_id: str) -> int:
        result = self.supabase.table("profiles")\
            .select("id", count="exact", head=True)\
            .eq("group_id", group_id)\
            .execute()
        return result.count or 0

    def count_documents(self, group_id: str) -> int:
        result = self.supabase.table("documents")\
            .select("id", count="exact", head=True)\
            .eq("group_id", group_id)\
            .execute()
        return result.count or 0
