"""Shared data type definitions (file records, thumbnail jobs, job results)."""

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, List, Optional, Union

from common.constants import ROOT_PARENT_ID


class FileType(str, Enum):
    """
    Kinds of file records a user can create.
    """
    FOLDER = "folder"
    FILE = "file"
    IMAGE = "image"

    @classmethod
    def parse(cls, value: str) -> Optional["FileType"]:
        try:
            return cls(value)
        except ValueError:
            return None


@dataclass(frozen=True)
class FolderRecord:
    """
    A folder. Folders group other records and never reference content.
    """
    file_id: str
    owner_id: str
    name: str
    parent_id: str = ROOT_PARENT_ID
    is_public: bool = False

    type: ClassVar[FileType] = FileType.FOLDER


@dataclass(frozen=True)
class StoredFileRecord:
    """
    A plain file whose bytes live in the content store under storage_key.
    """
    file_id: str
    owner_id: str
    name: str
    storage_key: str
    parent_id: str = ROOT_PARENT_ID
    is_public: bool = False

    type: ClassVar[FileType] = FileType.FILE


@dataclass(frozen=True)
class ImageRecord(StoredFileRecord):
    """
    An image; the thumbnail worker derives size variants from its content.
    """
    type: ClassVar[FileType] = FileType.IMAGE


FileRecord = Union[FolderRecord, StoredFileRecord, ImageRecord]

RECORD_CLASSES = {
    FileType.FOLDER: FolderRecord,
    FileType.FILE: StoredFileRecord,
    FileType.IMAGE: ImageRecord,
}


def has_content(record: FileRecord) -> bool:
    return isinstance(record, StoredFileRecord)


@dataclass(frozen=True)
class ThumbnailJob:
    """
    Request to derive size variants for one image.
    """
    owner_id: str
    file_id: str


class JobStatus(str, Enum):
    RECEIVED = "received"
    VALIDATED = "validated"
    PROCESSING = "processing"
    DONE = "done"
    FAILED = "failed"


@dataclass
class JobResult:
    """
    Outcome of processing a ThumbnailJob.

    permanent is only meaningful for failures: a permanent failure will never
    succeed on retry, a transient one may.
    """
    job: ThumbnailJob
    status: JobStatus
    permanent: bool = False
    reason: Optional[str] = None
    variant_keys: List[str] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.status is JobStatus.DONE

    def to_dict(self) -> dict:
        return {
            "owner_id": self.job.owner_id,
            "file_id": self.job.file_id,
            "status": self.status.value,
            "permanent": self.permanent,
            "reason": self.reason,
            "variant_keys": list(self.variant_keys),
        }
