"""Access control rules for file records."""

from typing import Optional

from common.exceptions import NotFoundError
from common.types import FileRecord


def can_read(requester_id: Optional[str], record: FileRecord) -> bool:
    """
    Public records are readable by anyone, including anonymous requesters.
    Private records only by their owner.
    """
    if record.is_public:
        return True
    return requester_id is not None and requester_id == record.owner_id


def can_modify(requester_id: Optional[str], record: FileRecord) -> bool:
    """
    Only the owner may change a record, whatever its visibility.
    """
    return requester_id is not None and requester_id == record.owner_id


def check_read(requester_id: Optional[str], record: Optional[FileRecord]) -> FileRecord:
    """
    Return the record if the requester may read it.

    Raises:
        NotFoundError: If the record is missing or the requester may not read it
    """
    if record is None or not can_read(requester_id, record):
        raise NotFoundError()
    return record


def check_owner(requester_id: Optional[str], record: Optional[FileRecord]) -> FileRecord:
    """
    Return the record if the requester owns it.

    Raises:
        NotFoundError: If the record is missing or owned by someone else
    """
    if record is None or not can_modify(requester_id, record):
        raise NotFoundError()
    return record
