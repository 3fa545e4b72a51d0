"""Pydantic schemas for file operation endpoints."""

from typing import Any, Optional

from pydantic import BaseModel

from common.constants import ROOT_PARENT_ID
from common.types import FileRecord


class UploadRequest(BaseModel):
    """
    Request model for file upload.

    Fields are untyped so that wrong JSON types reach the service, which
    reports the first invalid field in a fixed order.
    """
    name: Any = None
    type: Any = None
    parentId: Any = ROOT_PARENT_ID
    isPublic: Any = False
    data: Any = None


class FileResponse(BaseModel):
    """Response model for file metadata."""
    id: str
    userId: str
    name: str
    type: str
    isPublic: bool
    parentId: str
    thumbnailsQueued: Optional[bool] = None

    @classmethod
    def from_record(cls, record: FileRecord, thumbnails_queued: Optional[bool] = None) -> "FileResponse":
        return cls(
            id=record.file_id,
            userId=record.owner_id,
            name=record.name,
            type=record.type.value,
            isPublic=record.is_public,
            parentId=record.parent_id,
            thumbnailsQueued=thumbnails_queued,
        )
