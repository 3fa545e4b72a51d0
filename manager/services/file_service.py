"""File service for business logic: uploads, listings, visibility and content reads."""

import mimetypes
from dataclasses import dataclass
from typing import Any, List, Optional

from common.constants import DEFAULT_CONTENT_TYPE, ROOT_PARENT_ID, VARIANT_SIZES
from common.exceptions import (
    FolderHasNoContentError,
    NotFoundError,
    TransientBackendError,
    ValidationError,
)
from common.logging_config import get_logger
from common.types import (
    RECORD_CLASSES,
    FileRecord,
    FileType,
    FolderRecord,
    ThumbnailJob,
    has_content,
)
from common.utils import decode_base64, generate_uuid
from manager.access import check_owner, check_read
from manager.job_queue import ThumbnailQueue
from manager.repositories.file_repository import FileRepository
from manager.session_store import SessionStore
from storage.content_store import ContentStore

logger = get_logger(__name__)

_WIDTHS_BY_ALIAS = {str(width): width for width in VARIANT_SIZES.values()}


@dataclass(frozen=True)
class UploadResult:
    """
    A created record plus the state of its thumbnail job.

    thumbnails_queued is None for non-images, False when the job could not be
    submitted (the upload itself still succeeded).
    """
    record: FileRecord
    thumbnails_queued: Optional[bool] = None


@dataclass(frozen=True)
class FileContent:
    name: str
    data: bytes
    mime_type: str


def parse_variant_size(size: Optional[str]) -> Optional[int]:
    """
    Map a size token (small, medium, large) or its pixel width to a width.

    Returns:
        Width in pixels, or None when no size was requested

    Raises:
        ValidationError: If the size is not supported
    """
    if size is None or size == "":
        return None
    if size in VARIANT_SIZES:
        return VARIANT_SIZES[size]
    if size in _WIDTHS_BY_ALIAS:
        return _WIDTHS_BY_ALIAS[size]
    raise ValidationError("Invalid size parameter")


def _normalize_parent(parent_id: Any) -> str:
    if parent_id in (None, "", 0) and not isinstance(parent_id, bool):
        return ROOT_PARENT_ID
    if isinstance(parent_id, str):
        return parent_id
    if isinstance(parent_id, int) and not isinstance(parent_id, bool):
        return str(parent_id)
    raise ValidationError("Parent not found")


class FileService:
    def __init__(
        self,
        file_repo: FileRepository,
        content_store: ContentStore,
        sessions: SessionStore,
        thumbnail_queue: ThumbnailQueue,
    ):
        self.file_repo = file_repo
        self.content_store = content_store
        self.sessions = sessions
        self.thumbnail_queue = thumbnail_queue

    async def upload(
        self,
        owner_id: str,
        name: Any,
        file_type: Any,
        parent_id: Any = ROOT_PARENT_ID,
        is_public: Any = False,
        data: Any = None,
    ) -> UploadResult:
        """
        Validate and store a new folder, file or image.

        Fields arrive as decoded JSON, so wrong types are rejected here in the
        same order as missing values. The parent is checked by
        FileRepository.create; content is written before the metadata row and
        removed again if the row is rejected. A crash in between can leave an
        unreferenced blob but never a record pointing at missing content.

        Raises:
            ValidationError: On the first invalid field, checked in order
                name, type, data, visibility, parent
        """
        if not name:
            raise ValidationError("Missing name")
        if not isinstance(name, str):
            raise ValidationError("Invalid name")
        if not file_type:
            raise ValidationError("Missing type")
        kind = FileType.parse(file_type) if isinstance(file_type, str) else None
        if kind is None:
            raise ValidationError("Invalid type")

        content = None
        if kind is not FileType.FOLDER:
            if not data:
                raise ValidationError("Missing data")
            content = decode_base64(data) if isinstance(data, str) else None
            if content is None:
                raise ValidationError("Invalid data")
            if not content:
                raise ValidationError("Missing data")

        if is_public is None:
            is_public = False
        if not isinstance(is_public, bool):
            raise ValidationError("Invalid isPublic")

        parent = _normalize_parent(parent_id)

        file_id = generate_uuid()
        if kind is FileType.FOLDER:
            record = FolderRecord(
                file_id=file_id,
                owner_id=owner_id,
                name=name,
                parent_id=parent,
                is_public=is_public,
            )
            record = self.file_repo.create(record)
        else:
            storage_key = self.content_store.new_key()
            self.content_store.write(storage_key, content)
            record = RECORD_CLASSES[kind](
                file_id=file_id,
                owner_id=owner_id,
                name=name,
                storage_key=storage_key,
                parent_id=parent,
                is_public=is_public,
            )
            try:
                record = self.file_repo.create(record)
            except ValidationError:
                self.content_store.delete(storage_key)
                raise

        if kind is not FileType.IMAGE:
            return UploadResult(record=record)

        try:
            await self.thumbnail_queue.submit(ThumbnailJob(owner_id=owner_id, file_id=file_id))
        except TransientBackendError:
            logger.error(
                f"Image stored without thumbnails, job submission failed [file_id={file_id}]"
            )
            return UploadResult(record=record, thumbnails_queued=False)

        return UploadResult(record=record, thumbnails_queued=True)

    def get_file(self, owner_id: str, file_id: str) -> FileRecord:
        return check_owner(owner_id, self.file_repo.get(file_id))

    def list_files(self, owner_id: str, parent_id: Optional[str], page: int) -> List[FileRecord]:
        parent = parent_id if parent_id else ROOT_PARENT_ID
        return self.file_repo.list_children(owner_id, parent, page)

    def set_visibility(self, owner_id: str, file_id: str, is_public: bool) -> FileRecord:
        check_owner(owner_id, self.file_repo.get(file_id))
        return self.file_repo.set_visibility(file_id, is_public)

    async def read(
        self,
        file_id: str,
        token: Optional[str] = None,
        size: Optional[str] = None,
    ) -> FileContent:
        """
        Read the content of a file, or one of its thumbnail variants.

        An unknown or expired token reads as anonymous.

        Raises:
            NotFoundError: Missing file, access denied, or blob not (yet) stored
            FolderHasNoContentError: The record is a folder
            ValidationError: Unsupported size
        """
        requester_id = await self.sessions.resolve(token) if token else None

        record = check_read(requester_id, self.file_repo.get(file_id))
        if not has_content(record):
            raise FolderHasNoContentError()

        width = parse_variant_size(size)
        if width is None:
            data = self.content_store.read(record.storage_key)
        else:
            data = self.content_store.read_variant(record.storage_key, width)

        if data is None:
            raise NotFoundError()

        mime_type, _ = mimetypes.guess_type(record.name)
        return FileContent(name=record.name, data=data, mime_type=mime_type or DEFAULT_CONTENT_TYPE)
