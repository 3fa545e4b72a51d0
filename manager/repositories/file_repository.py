"""File repository for database operations."""

import sqlite3
from datetime import datetime
from typing import List, Optional

from common.constants import PAGE_SIZE, ROOT_PARENT_ID
from common.exceptions import NotFoundError, ValidationError
from common.logging_config import get_logger
from common.types import (
    RECORD_CLASSES,
    FileRecord,
    FileType,
    FolderRecord,
    StoredFileRecord,
)
from manager.database import Database

logger = get_logger(__name__)

_COLUMNS = "file_id, owner_id, name, type, parent_id, is_public, storage_key"


class FileRepository:
    """
    Durable store of file and folder metadata.

    Each method touches at most one row, so no cross-record transaction is
    needed. The parent check in create() reads the parent row and inserts the
    child inside one connection.
    """

    def __init__(self, database: Database):
        self.database = database

    def create(self, record: FileRecord) -> FileRecord:
        """
        Insert a file record after validating its parent.

        Args:
            record: Record with an already assigned file_id

        Returns:
            The stored record

        Raises:
            ValidationError: If the parent is missing, owned by someone else,
                or not a folder
        """
        storage_key = record.storage_key if isinstance(record, StoredFileRecord) else None

        with self.database.connection() as conn:
            cursor = conn.cursor()

            if record.parent_id != ROOT_PARENT_ID:
                cursor.execute(
                    "SELECT type FROM files WHERE file_id = ? AND owner_id = ?",
                    (record.parent_id, record.owner_id)
                )
                parent = cursor.fetchone()
                if parent is None:
                    raise ValidationError("Parent not found")
                if parent["type"] != FileType.FOLDER.value:
                    raise ValidationError("Parent is not a folder")

            cursor.execute(
                """
                INSERT INTO files (file_id, owner_id, name, type, parent_id, is_public, storage_key, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    record.file_id,
                    record.owner_id,
                    record.name,
                    record.type.value,
                    record.parent_id,
                    int(record.is_public),
                    storage_key,
                    datetime.utcnow().isoformat(),
                )
            )
            conn.commit()

        logger.info(
            f"File record created [file_id={record.file_id}] [type={record.type.value}] "
            f"[owner_id={record.owner_id}]"
        )
        return record

    def get(self, file_id: str) -> Optional[FileRecord]:
        with self.database.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(f"SELECT {_COLUMNS} FROM files WHERE file_id = ?", (file_id,))
            return self._row_to_record(cursor.fetchone())

    def list_children(self, owner_id: str, parent_id: str, page: int) -> List[FileRecord]:
        """
        List one page of an owner's records under a parent.

        Pages hold PAGE_SIZE records, are zero-indexed and follow insertion order.
        """
        offset = max(page, 0) * PAGE_SIZE
        with self.database.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"""
                SELECT {_COLUMNS} FROM files
                WHERE owner_id = ? AND parent_id = ?
                ORDER BY rowid
                LIMIT ? OFFSET ?
                """,
                (owner_id, parent_id, PAGE_SIZE, offset)
            )
            return [self._row_to_record(row) for row in cursor.fetchall()]

    def set_visibility(self, file_id: str, is_public: bool) -> FileRecord:
        """
        Set the public flag. Applying the current value again is a no-op.

        Raises:
            NotFoundError: If the file does not exist
        """
        with self.database.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "UPDATE files SET is_public = ? WHERE file_id = ?",
                (int(is_public), file_id)
            )
            conn.commit()
            if cursor.rowcount == 0:
                raise NotFoundError()

            cursor.execute(f"SELECT {_COLUMNS} FROM files WHERE file_id = ?", (file_id,))
            record = self._row_to_record(cursor.fetchone())

        logger.info(f"Visibility updated [file_id={file_id}] [is_public={is_public}]")
        return record

    def count(self) -> int:
        with self.database.connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT COUNT(*) AS c FROM files")
            return int(cursor.fetchone()["c"])

    @staticmethod
    def _row_to_record(row: Optional[sqlite3.Row]) -> Optional[FileRecord]:
        if row is None:
            return None

        file_type = FileType(row["type"])
        common = dict(
            file_id=row["file_id"],
            owner_id=row["owner_id"],
            name=row["name"],
            parent_id=row["parent_id"],
            is_public=bool(row["is_public"]),
        )
        if file_type is FileType.FOLDER:
            return FolderRecord(**common)
        return RECORD_CLASSES[file_type](storage_key=row["storage_key"], **common)
