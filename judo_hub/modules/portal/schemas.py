from pydantic import BaseModel, Field
from typing import Any, Dict, List, Literal, Optional

from judo_hub.core.navigation import Page
from judo_hub.modules.documents.schemas import DocumentResponse
from judo_hub.modules.groups.schemas import GROUP_COLORS, GroupResponse, GroupWithCountsResponse
from judo_hub.modules.profiles.schemas import BELT_OPTIONS, ProfileResponse


class NavigateRequest(BaseModel):
    page: str
    filters: Optional[Dict[str, Any]] = None


class NavigationState(BaseModel):
    page: str
    menu_open: bool


class DocumentFilters(BaseModel):
    search: str = ""
    file_type: Literal["all", "document", "image"] = "all"
    group: str = "all"  # "all", "none" or a group id


class DocumentsViewData(BaseModel):
    documents: List[DocumentResponse]
    groups: List[GroupResponse]
    filters: DocumentFilters
    member_group: Optional[GroupResponse] = None


class ProfileViewData(BaseModel):
    profile: ProfileResponse
    belt_options: List[str] = Field(default_factory=lambda: list(BELT_OPTIONS))


class AdminGroupsViewData(BaseModel):
    groups: List[GroupWithCountsResponse]
    colors: List[str] = Field(default_factory=lambda: list(GROUP_COLORS))


class AdminUsersViewData(BaseModel):
    profiles: List[ProfileResponse]
    groups: List[GroupResponse]
    group_filter: Optional[str] = None
    belt_options: List[str] = Field(default_factory=lambda: list(BELT_OPTIONS))


class PortalView(BaseModel):
    page: Page
    requested_page: str
    filters: Dict[str, Any] = Field(default_factory=dict)
    menu_open: bool = False
    data: Any
