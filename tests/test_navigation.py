"""
Page resolution by role and one-shot navigation filters.
"""

import pytest

from judo_hub.core.navigation import Navigator, Page, resolve_page
from judo_hub.modules.profiles.schemas import UserRole


@pytest.mark.parametrize("page", [p.value for p in Page])
def test_admin_reaches_every_page(page):
    assert resolve_page(page, UserRole.ADMIN).value == page


@pytest.mark.parametrize("page,expected", [
    ("documents", Page.DOCUMENTS),
    ("profile", Page.PROFILE),
    ("admin-documents", Page.DOCUMENTS),
    ("admin-groups", Page.DOCUMENTS),
    ("admin-users", Page.DOCUMENTS),
])
def test_member_pages(page, expected):
    assert resolve_page(page, UserRole.USER) == expected


@pytest.mark.parametrize("role", [UserRole.ADMIN, UserRole.USER, None])
@pytest.mark.parametrize("page", ["settings", "", None, "ADMIN-USERS"])
def test_unknown_page_falls_back_to_documents(page, role):
    assert resolve_page(page, role) == Page.DOCUMENTS


def test_filters_are_consumed_by_one_render():
    nav = Navigator()
    nav.navigate("admin-documents", {"group": "g1"})

    assert nav.resolve(UserRole.ADMIN) == (Page.ADMIN_DOCUMENTS, {"group": "g1"})
    assert nav.resolve(UserRole.ADMIN) == (Page.ADMIN_DOCUMENTS, {})


def test_navigating_again_delivers_new_filters():
    nav = Navigator()
    nav.navigate("admin-users", {"group": "g1"})
    nav.resolve(UserRole.ADMIN)
    nav.navigate("admin-users", {"group": "g2"})

    assert nav.resolve(UserRole.ADMIN) == (Page.ADMIN_USERS, {"group": "g2"})


def test_filters_for_forbidden_page_are_dropped():
    nav = Navigator()
    nav.navigate("admin-users", {"group": "g1"})

    assert nav.resolve(UserRole.USER) == (Page.DOCUMENTS, {})
    # Already consumed, even for a role that could have used them
    assert nav.resolve(UserRole.ADMIN) == (Page.ADMIN_USERS, {})


def test_unrendered_filters_do_not_survive_a_later_visit():
    nav = Navigator()
    nav.navigate("admin-users", {"group": "g1"})
    nav.navigate("documents")
    nav.resolve(UserRole.ADMIN)

    nav.navigate("admin-users")

    assert nav.resolve(UserRole.ADMIN) == (Page.ADMIN_USERS, {})


def test_plain_navigate_to_same_page_clears_filters():
    nav = Navigator()
    nav.navigate("admin-documents", {"group": "g1"})
    nav.navigate("admin-documents")

    assert nav.resolve(UserRole.ADMIN) == (Page.ADMIN_DOCUMENTS, {})


def test_navigate_closes_menu():
    nav = Navigator()
    assert nav.toggle_menu() is True

    nav.navigate("profile")

    assert nav.menu_open is False
    assert nav.current_page == "profile"
