"""
Page routing for the portal: which page a caller may see and the one-shot
filters handed from one page to the next.
"""

from enum import Enum
from typing import Any, Dict, Optional, Tuple

from judo_hub.modules.profiles.schemas import UserRole


class Page(str, Enum):
    DOCUMENTS = "documents"
    PROFILE = "profile"
    ADMIN_DOCUMENTS = "admin-documents"
    ADMIN_GROUPS = "admin-groups"
    ADMIN_USERS = "admin-users"


DEFAULT_PAGE = Page.DOCUMENTS
MEMBER_PAGES = frozenset({Page.DOCUMENTS, Page.PROFILE})
ADMIN_PAGES = frozenset(Page)


def resolve_page(page_key: Optional[str], role: Optional[UserRole]) -> Page:
    """Map a requested page key to the page the role may see. Falls back to documents."""
    try:
        page = Page(page_key)
    except ValueError:
        return DEFAULT_PAGE
    allowed = ADMIN_PAGES if role == UserRole.ADMIN else MEMBER_PAGES
    return page if page in allowed else DEFAULT_PAGE


class Navigator:
    """Per-session navigation state."""

    def __init__(self):
        self.current_page: str = DEFAULT_PAGE.value
        self.menu_open = False
        self._flash_filters: Dict[str, Dict[str, Any]] = {}

    def navigate(self, page_key: str, filters: Optional[Dict[str, Any]] = None) -> None:
        """Switch page. Filters not yet rendered are discarded by any later navigate."""
        self.current_page = page_key
        self._flash_filters = {page_key: dict(filters)} if filters else {}
        self.menu_open = False

    def toggle_menu(self) -> bool:
        self.menu_open = not self.menu_open
        return self.menu_open

    def resolve(self, role: Optional[UserRole]) -> Tuple[Page, Dict[str, Any]]:
        """Resolve the current page and consume its flash filters.

        Filters stored for the requested key are dropped on this render either
        way; they only reach the page when the role actually lets the caller
        see the requested page.
        """
        page = resolve_page(self.current_page, role)
        filters = self._flash_filters.pop(self.current_page, None) or {}
        if page.value != self.current_page:
            filters = {}
        return page, filters
