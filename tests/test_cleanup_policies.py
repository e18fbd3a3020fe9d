"""
Deletion rules that touch more than one record: groups, documents and users.
"""

import pytest
from supabase import PostgrestAPIError, StorageException

from judo_hub.config import settings
from judo_hub.modules.documents.schemas import DocumentCreate
from judo_hub.modules.documents.service import DocumentService
from judo_hub.modules.groups.service import GroupService
from judo_hub.modules.profiles.service import ProfileService


@pytest.fixture()
def crowded_group(backend):
    group_id = backend.add_group("Competición")
    profiles = [backend.add_account(f"p{i}@judoclub.es", "Passw0rd!", group_id=group_id) for i in range(3)]
    documents = [backend.add_document(f"Doc {i}", f"{i}-doc.pdf", group_id=group_id) for i in range(2)]
    return group_id, profiles, documents


def test_delete_group_unassigns_everything_first(backend, crowded_group):
    group_id, profiles, documents = crowded_group
    service = GroupService(backend.client())

    service.delete_group(group_id)
    delete_calls = backend.calls[-3:]

    assert delete_calls == [
        ("profiles", "update"),
        ("documents", "update"),
        ("groups", "delete"),
    ]
    for profile_id in profiles:
        assert backend.find("profiles", profile_id)["group_id"] is None
    for document_id in documents:
        assert backend.find("documents", document_id)["group_id"] is None
    assert group_id not in [g.id for g in service.list_groups()]


def test_delete_group_stops_when_profiles_step_fails(backend, crowded_group):
    group_id, profiles, documents = crowded_group
    backend.fail("profiles", "update")

    with pytest.raises(PostgrestAPIError):
        GroupService(backend.client()).delete_group(group_id)

    assert ("documents", "update") not in backend.calls
    assert ("groups", "delete") not in backend.calls
    assert backend.find("groups", group_id) is not None
    assert backend.find("documents", documents[0])["group_id"] == group_id


def test_delete_group_stops_when_documents_step_fails(backend, crowded_group):
    group_id, profiles, documents = crowded_group
    backend.fail("documents", "update")

    with pytest.raises(PostgrestAPIError) as exc_info:
        GroupService(backend.client()).delete_group(group_id)

    assert exc_info.value.code == "42501"
    # First step stays applied; no rollback
    assert backend.find("profiles", profiles[0])["group_id"] is None
    assert backend.find("groups", group_id) is not None
    assert ("groups", "delete") not in backend.calls


def test_group_counts(backend, crowded_group):
    group_id, _, _ = crowded_group
    service = GroupService(backend.client())

    assert service.count_members(group_id) == 3
    assert service.count_documents(group_id) == 2
    assert service.count_members(backend.add_group("Vacío")) == 0


def test_delete_document_removes_blob_then_row(backend):
    document_id = backend.add_document("Katas", "1-katas.pdf")

    DocumentService(backend.client()).delete_document(document_id, "1-katas.pdf")

    assert backend.find("documents", document_id) is None
    assert "1-katas.pdf" not in backend.buckets["judo_resources"]
    assert backend.calls[-2:] == [("storage", "remove"), ("documents", "delete")]


def test_delete_document_keeps_row_when_blob_removal_fails(backend):
    document_id = backend.add_document("Katas", "1-katas.pdf")
    backend.fail("storage", "remove")

    with pytest.raises(StorageException):
        DocumentService(backend.client()).delete_document(document_id, "1-katas.pdf")

    assert backend.find("documents", document_id) is not None
    assert ("documents", "delete") not in backend.calls


def test_delete_document_row_failure_leaves_orphaned_row(backend, caplog):
    document_id = backend.add_document("Katas", "1-katas.pdf")
    backend.fail("documents", "delete")

    with pytest.raises(PostgrestAPIError):
        DocumentService(backend.client()).delete_document(document_id, "1-katas.pdf")

    assert backend.find("documents", document_id) is not None
    assert "1-katas.pdf" not in backend.buckets["judo_resources"]
    assert "was not deleted" in caplog.text


def test_failed_upload_creates_no_document(backend):
    backend.fail("storage", "upload")
    service = DocumentService(backend.client())

    with pytest.raises(StorageException):
        service.publish_document(
            DocumentCreate(title="Katas"), b"%PDF", "katas.pdf", "application/pdf",
            uploader_id=None, uploader_email=None
        )

    assert ("documents", "insert") not in backend.calls
    assert backend.tables["documents"] == []


def test_publish_document_stores_blob_and_row(backend):
    group_id = backend.add_group("Infantil")
    service = DocumentService(backend.client())

    path = service.publish_document(
        DocumentCreate(title="Horario", file_type="image", group_id=group_id),
        b"png", "horario de verano.png", "image/png",
        uploader_id="u1", uploader_email="sensei@judoclub.es"
    )

    assert path.endswith("-horario_de_verano.png")
    assert backend.buckets["judo_resources"][path] == b"png"
    doc = service.list_documents()[0]
    assert doc.file_path == path
    assert doc.file_type.value == "image"
    assert doc.groups.name == "Infantil"
    assert doc.uploader_email == "sensei@judoclub.es"


def test_download_url_lives_sixty_seconds(backend):
    backend.add_document("Katas", "1-katas.pdf")

    url = DocumentService(backend.client()).get_download_url("1-katas.pdf")

    assert url.endswith("expires_in=60")


def test_anonymize_user(backend):
    group_id = backend.add_group("Adultos")
    user_id = backend.add_account(
        "luis@judoclub.es", "Passw0rd!", full_name="Luis", surnames="García", phone="600000000",
        age=31, address="Calle Mayor 1", tutor_name="", belt="Azul", group_id=group_id, role="admin"
    )
    mine = backend.add_document("Mi doc", "1-mine.pdf", uploader_id=user_id, uploader_email="luis@judoclub.es")
    theirs = backend.add_document("Otro", "2-other.pdf", uploader_id="someone", uploader_email="x@judoclub.es")

    ProfileService(backend.client()).delete_user(user_id)

    profile = backend.find("profiles", user_id)
    assert profile["full_name"] == settings.deleted_user_name
    assert profile["surnames"] == profile["phone"] == profile["address"] == ""
    assert profile["belt"] is None
    assert profile["age"] is None
    assert profile["group_id"] is None
    assert profile["role"] == "user"
    assert profile["email"] == "luis@judoclub.es"
    assert "luis@judoclub.es" in backend.accounts

    assert backend.find("documents", mine)["uploader_id"] is None
    assert backend.find("documents", mine)["uploader_email"] == settings.deleted_user_label
    assert backend.find("documents", theirs)["uploader_id"] == "someone"


def test_anonymize_stops_when_documents_step_fails(backend):
    user_id = backend.add_account("luis@judoclub.es", "Passw0rd!", full_name="Luis")
    backend.fail("documents", "update")

    with pytest.raises(PostgrestAPIError):
        ProfileService(backend.client()).delete_user(user_id)

    assert backend.find("profiles", user_id)["full_name"] == "Luis"


def test_delete_profile_policy(backend, monkeypatch):
    monkeypatch.setattr(settings, "user_deletion_policy", "delete_profile")
    user_id = backend.add_account("luis@judoclub.es", "Passw0rd!")

    ProfileService(backend.client()).delete_user(user_id)

    assert backend.find("profiles", user_id) is None
    assert "luis@judoclub.es" in backend.accounts


def test_delete_profile_policy_detaches_uploads_first(backend, monkeypatch):
    monkeypatch.setattr(settings, "user_deletion_policy", "delete_profile")
    user_id = backend.add_account("luis@judoclub.es", "Passw0rd!")
    upload = backend.add_document("Mi doc", "1-mine.pdf", uploader_id=user_id, uploader_email="luis@judoclub.es")

    ProfileService(backend.client()).delete_user(user_id)

    assert backend.find("profiles", user_id) is None
    assert backend.find("documents", upload)["uploader_id"] is None
    assert backend.find("documents", upload)["uploader_email"] == settings.deleted_user_label
    assert backend.calls[-2:] == [("documents", "update"), ("profiles", "delete")]


def test_profile_with_uploads_cannot_be_deleted_directly(backend):
    user_id = backend.add_account("luis@judoclub.es", "Passw0rd!")
    backend.add_document("Mi doc", "1-mine.pdf", uploader_id=user_id)

    with pytest.raises(PostgrestAPIError) as exc_info:
        backend.client().table("profiles").delete().eq("id", user_id).execute()

    assert exc_info.value.code == "23503"
