"""Supabase Storage access for document blobs."""
import logging
import re
import time
from typing import Optional

from supabase import Client
from judo_hub.config import settings

logger = logging.getLogger(__name__)


class DocumentStorage:
    def __init__(self, supabase: Client, bucket_name: Optional[str] = None):
        self.bucket_name = bucket_name or settings.storage_bucket
        self._bucket = supabase.storage.from_(self.bucket_name)

    @staticmethod
    def object_name(filename: str) -> str:
        """Unique object key: upload time in epoch millis plus the filename without whitespace."""
        safe_name = re.sub(r"\s", "_", filename)
        return f"{int(time.time() * 1000)}-{safe_name}"

    def upload_file(self, file_content: bytes, filename: str, content_type: Optional[str] = None) -> str:
        """Upload a blob and return its stored path"""
        key = self.object_name(filename)
        file_options = {"content-type": content_type} if content_type else None
        response = self._bucket.upload(key, file_content, file_options=file_options)
        path = getattr(response, "path", None) or key
        logger.info(f"Uploaded {path} to bucket {self.bucket_name}")
        return path

    def create_signed_url(self, path: str, expires_in: Optional[int] = None) -> str:
        expires_in = expires_in or settings.signed_url_ttl_seconds
        response = self._bucket.create_signed_url(path, expires_in)
        return response.get("signedUrl") or response["signedURL"]

    def delete_file(self, path: str) -> None:
        self._bucket.remove([path])
        logger.info(f"Deleted {path} from bucket {self.bucket_name}")
