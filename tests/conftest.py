import pytest
from fastapi.testclient import TestClient

from judo_hub.core.dependencies import get_session_registry
from judo_hub.core.rate_limit import limiter
from judo_hub.core.session import SessionRegistry
from judo_hub.main import app as fastapi_app
from tests.fakes import FakeBackend


@pytest.fixture()
def backend():
    return FakeBackend()


@pytest.fixture()
def registry(backend):
    registry = SessionRegistry(client_factory=backend.client)
    yield registry
    registry.close_all()


@pytest.fixture()
def client(registry):
    limiter.enabled = False
    fastapi_app.dependency_overrides[get_session_registry] = lambda: registry
    with TestClient(fastapi_app) as c:
        yield c
    fastapi_app.dependency_overrides.clear()
    limiter.enabled = True


@pytest.fixture()
def academy(backend):
    """Two groups, an admin, two members and a few documents."""
    red = backend.add_group("Infantil", color="#ef4444")
    blue = backend.add_group("Adultos", color="#3b82f6")
    admin_id = backend.add_account("admin@judoclub.es", "AdminPassw0rd!", role="admin", full_name="Sensei")
    member_id = backend.add_account("member@judoclub.es", "MemberPassw0rd!", full_name="Ana", group_id=red)
    other_id = backend.add_account("other@judoclub.es", "OtherPassw0rd!", full_name="Luis", group_id=blue)
    docs = {
        "katas": backend.add_document("Katas básicos", "1-katas.pdf", group_id=red, uploader_id=admin_id,
                                      uploader_email="admin@judoclub.es", description="Nage no kata"),
        "torneo": backend.add_document("Cartel torneo", "2-torneo.png", file_type="image", group_id=blue,
                                       uploader_id=admin_id, uploader_email="admin@judoclub.es"),
        "normas": backend.add_document("Normas del dojo", "3-normas.pdf", uploader_id=admin_id,
                                       uploader_email="admin@judoclub.es"),
    }
    return {
        "groups": {"red": red, "blue": blue},
        "admin_id": admin_id,
        "member_id": member_id,
        "other_id": other_id,
        "documents": docs,
    }
