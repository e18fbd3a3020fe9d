from fastapi import APIRouter, Depends, HTTPException, UploadFile, File, Form
from judo_hub.config import settings
from judo_hub.core.dependencies import get_authenticated_session, get_supabase, require_profile
from judo_hub.core.session import SessionManager
from judo_hub.modules.documents.schemas import (
    DocumentCreate, DocumentUpdate, DocumentResponse, DownloadUrlResponse, FileType
)
from judo_hub.modules.documents.service import DocumentService
from judo_hub.modules.profiles.schemas import ProfileResponse
from supabase import Client
from typing import List, Optional

# Admin-only writes are enforced by row-level security on documents and the bucket.
router = APIRouter(prefix="/documents", tags=["documents"])


def get_document_service(supabase: Client = Depends(get_supabase)) -> DocumentService:
    return DocumentService(supabase)


@router.get("", response_model=List[DocumentResponse])
async def list_documents(
    profile: ProfileResponse = Depends(require_profile),
    service: DocumentService = Depends(get_document_service)
):
    """List the documents visible to the caller, newest first"""
    return service.list_documents()


@router.post("", response_model=List[DocumentResponse], status_code=201)
async def upload_document(
    file: UploadFile = File(...),
    title: str = Form(...),
    description: Optional[str] = Form(None),
    file_type: FileType = Form(FileType.DOCUMENT),
    group_id: Optional[str] = Form(None),
    session: SessionManager = Depends(get_authenticated_session),
    profile: ProfileResponse = Depends(require_profile),
    service: DocumentService = Depends(get_document_service)
):
    """
    Upload a file to storage and register it as a document.
    The document row is only created once the upload succeeded.
    Returns the refreshed document list.
    """
    if not file.filename:
        raise HTTPException(status_code=400, detail="Please select a file to upload")
    doc = DocumentCreate(
        title=title,
        description=description,
        file_type=file_type,
        group_id=group_id
    )
    content = await file.read()
    service.publish_document(
        doc,
        content,
        file.filename,
        file.content_type,
        uploader_id=session.user.id,
        uploader_email=session.user.email
    )
    return service.list_documents()


@router.get("/{document_id}/download", response_model=DownloadUrlResponse)
async def get_download_url(
    document_id: str,
    profile: ProfileResponse = Depends(require_profile),
    service: DocumentService = Depends(get_document_service)
):
    """Short-lived signed URL for the document's file"""
    document = service.get_document(document_id)
    return DownloadUrlResponse(
        document_id=document_id,
        url=service.get_download_url(document.file_path),
        expires_in=settings.signed_url_ttl_seconds
    )


@router.get("/{document_id}", response_model=DocumentResponse)
async def get_document(
    document_id: str,
    profile: ProfileResponse = Depends(require_profile),
    service: DocumentService = Depends(get_document_service)
):
    return service.get_document(document_id)


@router.put("/{document_id}", response_model=DocumentResponse)
async def update_document(
    document_id: str,
    document_data: DocumentUpdate,
    profile: ProfileResponse = Depends(require_profile),
    service: DocumentService = Depends(get_document_service)
):
    """Update title, description, type or group"""
    service.update_document(document_id, document_data)
    return service.get_document(document_id)


@router.delete("/{document_id}", status_code=204)
async def delete_document(
    document_id: str,
    profile: ProfileResponse = Depends(require_profile),
    service: DocumentService = Depends(get_document_service)
):
    """Delete the stored file, then the document"""
    document = service.get_document(document_id)
    service.delete_document(document.id, document.file_path)
    return None
