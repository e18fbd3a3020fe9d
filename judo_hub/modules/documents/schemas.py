from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime
from enum import Enum

from judo_hub.modules.groups.schemas import GroupResponse


class FileType(str, Enum):
    DOCUMENT = "document"
    IMAGE = "image"


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    return value or None


class DocumentCreate(BaseModel):
    title: str = Field(min_length=1)
    description: Optional[str] = None
    file_type: FileType = FileType.DOCUMENT
    group_id: Optional[str] = None

    validate_group = field_validator("group_id")(_blank_to_none)


class DocumentUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    file_type: Optional[FileType] = None
    group_id: Optional[str] = None

    validate_group = field_validator("group_id")(_blank_to_none)


class DocumentResponse(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    file_path: str
    file_type: FileType
    group_id: Optional[str] = None
    uploader_id: Optional[str] = None
    uploader_email: Optional[str] = None
    created_at: datetime
    groups: Optional[GroupResponse] = None

    class Config:
        from_attributes = True


class DownloadUrlResponse(BaseModel):
    document_id: str
    url: str
    expires_in: int
