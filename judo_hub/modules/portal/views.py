"""
Page payloads. Each builder returns the data one portal page needs, fetched
fresh from Supabase on every render.
"""

from typing import Any, Callable, Dict, List

from supabase import Client

from judo_hub.core.navigation import Page
from judo_hub.modules.documents.schemas import DocumentResponse
from judo_hub.modules.documents.service import DocumentService
from judo_hub.modules.groups.schemas import GroupWithCountsResponse
from judo_hub.modules.groups.service import GroupService
from judo_hub.modules.portal.schemas import (
    AdminGroupsViewData, AdminUsersViewData, DocumentFilters,
    DocumentsViewData, ProfileViewData
)
from judo_hub.modules.profiles.schemas import ProfileResponse, UserRole
from judo_hub.modules.profiles.service import ProfileService


def filter_documents(documents: List[DocumentResponse], filters: DocumentFilters) -> List[DocumentResponse]:
    term = filters.search.strip().lower()
    out = []
    for doc in documents:
        if filters.file_type != "all" and doc.file_type.value != filters.file_type:
            continue
        if filters.group == "none":
            if doc.group_id:
                continue
        elif filters.group != "all" and doc.group_id != filters.group:
            continue
        if term and term not in doc.title.lower() and term not in (doc.description or "").lower():
            continue
        out.append(doc)
    return out


class PortalViews:
    def __init__(self, supabase: Client):
        self.documents = DocumentService(supabase)
        self.groups = GroupService(supabase)
        self.profiles = ProfileService(supabase)

    def render(
        self,
        page: Page,
        profile: ProfileResponse,
        filters: Dict[str, Any],
        document_filters: DocumentFilters
    ):
        builders: Dict[Page, Callable[[], Any]] = {
            Page.DOCUMENTS: lambda: self.documents_view(profile, self._with_group(document_filters, filters)),
            Page.PROFILE: lambda: self.profile_view(profile),
            Page.ADMIN_DOCUMENTS: lambda: self.admin_documents_view(self._with_group(document_filters, filters)),
            Page.ADMIN_GROUPS: self.admin_groups_view,
            Page.ADMIN_USERS: lambda: self.admin_users_view(filters.get("group")),
        }
        return builders[page]()

    @staticmethod
    def _with_group(document_filters: DocumentFilters, filters: Dict[str, Any]) -> DocumentFilters:
        if filters.get("group"):
            return document_filters.model_copy(update={"group": str(filters["group"])})
        return document_filters

    def documents_view(self, profile: ProfileResponse, filters: DocumentFilters) -> DocumentsViewData:
        documents = self.documents.list_documents()
        groups = self.groups.list_groups()
        member_group = profile.groups if profile.role == UserRole.USER else None
        return DocumentsViewData(
            documents=filter_documents(documents, filters),
            groups=groups,
            filters=filters,
            member_group=member_group
        )

    def profile_view(self, profile: ProfileResponse) -> ProfileViewData:
        return ProfileViewData(profile=profile)

    def admin_documents_view(self, filters: DocumentFilters) -> DocumentsViewData:
        documents = self.documents.list_documents()
        groups = self.groups.list_groups()
        return DocumentsViewData(
            documents=filter_documents(documents, filters),
            groups=groups,
            filters=filters
        )

    def admin_groups_view(self) -> AdminGroupsViewData:
        groups = []
        for group in self.groups.list_groups():
            groups.append(GroupWithCountsResponse(
                **group.model_dump(),
                user_count=self.groups.count_members(group.id),
                document_count=self.groups.count_documents(group.id)
            ))
        return AdminGroupsViewData(groups=groups)

    def admin_users_view(self, group_id=None) -> AdminUsersViewData:
        return AdminUsersViewData(
            profiles=self.profiles.list_profiles(group_id=group_id),
            groups=self.groups.list_groups(),
            group_filter=group_id
        )
