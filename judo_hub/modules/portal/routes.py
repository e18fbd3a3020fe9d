from fastapi import APIRouter, Depends
from judo_hub.core.dependencies import get_authenticated_session, require_profile
from judo_hub.core.session import SessionManager
from judo_hub.modules.portal.schemas import (
    DocumentFilters, NavigateRequest, NavigationState, PortalView
)
from judo_hub.modules.portal.views import PortalViews
from judo_hub.modules.profiles.schemas import ProfileResponse
from typing import Literal

router = APIRouter(prefix="/portal", tags=["portal"])


def get_portal_views(session: SessionManager = Depends(get_authenticated_session)) -> PortalViews:
    return PortalViews(session.supabase)


@router.post("/navigate", response_model=NavigationState)
async def navigate(
    request: NavigateRequest,
    session: SessionManager = Depends(get_authenticated_session)
):
    """Switch page; filters are delivered to the next render of that page only"""
    session.navigator.navigate(request.page, request.filters)
    return NavigationState(page=session.navigator.current_page, menu_open=session.navigator.menu_open)


@router.post("/menu", response_model=NavigationState)
async def toggle_menu(session: SessionManager = Depends(get_authenticated_session)):
    """Open or close the navigation overlay"""
    session.navigator.toggle_menu()
    return NavigationState(page=session.navigator.current_page, menu_open=session.navigator.menu_open)


@router.get("/view", response_model=PortalView)
async def render_view(
    search: str = "",
    file_type: Literal["all", "document", "image"] = "all",
    group: str = "all",
    session: SessionManager = Depends(get_authenticated_session),
    profile: ProfileResponse = Depends(require_profile),
    views: PortalViews = Depends(get_portal_views)
):
    """Render the current page for the caller's role. Unknown or forbidden pages show documents."""
    requested_page = session.navigator.current_page
    page, filters = session.navigator.resolve(profile.role)
    data = views.render(
        page,
        profile,
        filters,
        DocumentFilters(search=search, file_type=file_type, group=group)
    )
    return PortalView(
        page=page,
        requested_page=requested_page,
        filters=filters,
        menu_open=session.navigator.menu_open,
        data=data
    )
