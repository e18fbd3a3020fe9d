from supabase import Client
from judo_hub.config import settings
from judo_hub.modules.profiles.schemas import (
    ProfileResponse, ProfileSelfUpdate, ProfileAdminUpdate,
    UserCreate, UserRole
)
from typing import Any, Callable, Dict, List, Optional
import logging

logger = logging.getLogger(__name__)


class ProfileService:
    def __init__(self, supabase: Client, client_factory: Optional[Callable[[], Client]] = None):
        self.supabase = supabase
        # Builds the throwaway client used for admin-initiated sign-ups
        self.client_factory = client_factory

    def get_profile(self, user_id: str) -> ProfileResponse:
        """Get a profile joined with its group"""
        result = self.supabase.table("profiles")\
            .select("*, groups(*)")\
            .eq("id", user_id)\
            .single()\
            .execute()
        return ProfileResponse(**result.data)

    def list_profiles(self, group_id: Optional[str] = None) -> List[ProfileResponse]:
        """List profiles joined with their group, newest first"""
        query = self.supabase.table("profiles").select("*, groups(*)")
        if group_id:
            query = query.eq("group_id", group_id)
        result = query.order("created_at", desc=True).execute()
        return [ProfileResponse(**profile) for profile in result.data]

    def update_profile(self, user_id: str, updates: Dict[str, Any]) -> None:
        # No representation is requested back: callers refetch.
        self.supabase.table("profiles")\
            .update(updates)\
            .eq("id", user_id)\
            .execute()

    def update_own_profile(self, user_id: str, data: ProfileSelfUpdate) -> None:
        self.update_profile(user_id, data.model_dump(mode="json", exclude_unset=True))

    def admin_update_profile(self, user_id: str, data: ProfileAdminUpdate) -> None:
        self.update_profile(user_id, data.model_dump(mode="json", exclude_unset=True))

    def admin_create_user(self, data: UserCreate):
        """Create an auth account, then fill in the profile row the sign-up trigger created.

        The sign-up runs on a separate client: signing up on the admin's own
        client would replace the admin's session with the new user's.
        """
        if self.client_factory is None:
            raise RuntimeError("ProfileService needs a client_factory to create users")
        signup_client = self.client_factory()
        auth_response = signup_client.auth.sign_up({
            "email": data.email,
            "password": data.password
        })
        if not auth_response.user:
            raise RuntimeError("User creation failed in authentication.")

        user = auth_response.user
        profile_data = data.model_dump(mode="json", exclude={"email", "password"})
        profile_data["email"] = user.email or data.email
        profile_data["role"] = profile_data.get("role") or UserRole.USER.value
        try:
            self.update_profile(user.id, profile_data)
        except Exception as e:
            # The account exists now; removing it needs the service role key.
            logger.error(f"Auth user {user.id} was created, but profile update failed: {e}")
            raise
        logger.info("Created user %s", user.id)
        return user

    def delete_user(self, user_id: str) -> None:
        """Remove a user from the portal according to settings.user_deletion_policy.

        auth.users rows cannot be deleted with the anon key, so the account
        always survives.
        """
        if settings.user_deletion_policy == "delete_profile":
            self._delete_profile_row(user_id)
        else:
            self._anonymize(user_id)

    def _release_documents(self, user_id: str) -> None:
        # documents.uploader_id references profiles.id, so uploads are detached
        # from the user before the profile is blanked or removed.
        try:
            self.supabase.table("documents")\
                .update({"uploader_id": None, "uploader_email": settings.deleted_user_label})\
                .eq("uploader_id", user_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error updating documents of user {user_id} before deletion: {e}")
            raise

    def _anonymize(self, user_id: str) -> None:
        self._release_documents(user_id)

        anonymized_data = {
            "full_name": settings.deleted_user_name,
            "surnames": "",
            "phone": "",
            "age": None,
            "address": "",
            "tutor_name": "",
            "belt": None,
            "group_id": None,
            "role": UserRole.USER.value,
        }
        try:
            self.update_profile(user_id, anonymized_data)
        except Exception as e:
            logger.error(f"Error anonymizing profile {user_id}: {e}")
            raise
        logger.info("Anonymized user %s", user_id)

    def _delete_profile_row(self, user_id: str) -> None:
        self._release_documents(user_id)
        # Leaves the auth account without a profile.
        self.supabase.table("profiles")\
            .delete()\
            .eq("id", user_id)\
            .execute()
        logger.warning("Deleted profile row of user %s; auth account left in place", user_id)
