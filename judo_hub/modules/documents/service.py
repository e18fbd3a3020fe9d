from supabase import Client
from judo_hub.modules.documents.schemas import (
    DocumentCreate, DocumentUpdate, DocumentResponse
)
from judo_hub.modules.documents.storage import DocumentStorage
from typing import List, Optional
import logging

logger = logging.getLogger(__name__)


class DocumentService:
    def __init__(self, supabase: Client, storage: Optional[DocumentStorage] = None):
        self.supabase = supabase
        self.storage = storage or DocumentStorage(supabase)

    def list_documents(self) -> List[DocumentResponse]:
        """List documents joined with their group, newest first.

        RLS filters this for non-admin users.
        """
        result = self.supabase.table("documents")\
            .select("*, groups(*)")\
            .order("created_at", desc=True)\
            .execute()
        return [DocumentResponse(**doc) for doc in result.data]

    def get_document(self, document_id: str) -> DocumentResponse:
        result = self.supabase.table("documents")\
            .select("*, groups(*)")\
            .eq("id", document_id)\
            .single()\
            .execute()
        return DocumentResponse(**result.data)

    def get_download_url(self, file_path: str) -> str:
        return self.storage.create_signed_url(file_path)

    def upload_file(self, file_content: bytes, filename: str, content_type: Optional[str] = None) -> str:
        return self.storage.upload_file(file_content, filename, content_type)

    def create_document(
        self,
        doc: DocumentCreate,
        file_path: str,
        uploader_id: Optional[str],
        uploader_email: Optional[str]
    ) -> None:
        # No representation is requested back: callers refetch.
        self.supabase.table("documents").insert({
            "title": doc.title,
            "description": doc.description,
            "file_type": doc.file_type.value,
            "file_path": file_path,
            "uploader_id": uploader_id,
            "uploader_email": uploader_email,
            "group_id": doc.group_id
        }).execute()

    def publish_document(
        self,
        doc: DocumentCreate,
        file_content: bytes,
        filename: str,
        content_type: Optional[str],
        uploader_id: Optional[str],
        uploader_email: Optional[str]
    ) -> str:
        """Upload the blob, then create its row. No row is written if the upload fails."""
        file_path = self.upload_file(file_content, filename, content_type)
        self.create_document(doc, file_path, uploader_id, uploader_email)
        return file_path

    def update_document(self, document_id: str, doc: DocumentUpdate) -> None:
        update_data = doc.model_dump(mode="json", exclude_unset=True)
        if not update_data:
            return
        self.supabase.table("documents")\
            .update(update_data)\
            .eq("id", document_id)\
            .execute()

    def delete_document(self, document_id: str, file_path: str) -> None:
        """Remove the blob, then the row.

        If the blob cannot be removed the row is kept. If the row delete fails
        after the blob is gone, the row is left pointing at a missing blob and
        the error is re-raised.
        """
        self.storage.delete_file(file_path)
        try:
            self.supabase.table("documents")\
                .delete()\
                .eq("id", document_id)\
                .execute()
        except Exception as e:
            logger.error(f"Blob {file_path} removed but document row {document_id} was not deleted: {e}")
            raise
