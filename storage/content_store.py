"""Manages content blobs on disk: primary file content and thumbnail variants."""

import os
import tempfile
from pathlib import Path
from typing import Optional

from common.exceptions import TransientBackendError
from common.logging_config import get_logger
from common.utils import generate_uuid

logger = get_logger(__name__)


def variant_key(storage_key: str, width: int) -> str:
    """
    Derive the key of a thumbnail variant.

    The key depends only on the primary key and the width, so a retried job
    overwrites the same blob instead of adding a new one.

    Args:
        storage_key: Key of the primary blob
        width: Thumbnail width in pixels

    Returns:
        Variant key, e.g. "<storage_key>_250"
    """
    return f"{storage_key}_{width}"


class ContentStore:
    """
    Key -> bytes store backed by a local directory.
    """

    def __init__(self, root: Path):
        self.root = Path(root)

    def ensure_directory(self) -> None:
        """Ensure the storage directory exists."""
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Cannot create content directory {self.root}: {e}", exc_info=True)
            raise TransientBackendError() from e

    def new_key(self) -> str:
        """
        Generate a fresh, globally unique storage key for a primary blob.
        """
        return generate_uuid()

    def get_path(self, key: str) -> Path:
        """
        Get file path for a blob.

        Args:
            key: Storage key

        Returns:
            Path object for the blob
        """
        if not key or "/" in key or os.sep in key or key in (".", ".."):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.root / key

    def write(self, key: str, data: bytes) -> str:
        """
        Write a blob to disk.

        The bytes go to a temporary file in the same directory which is then
        renamed over the target, so readers never see a partial blob.

        Args:
            key: Storage key
            data: Raw content

        Returns:
            String path to written file

        Raises:
            TransientBackendError: If the write fails
        """
        self.ensure_directory()
        filepath = self.get_path(key)
        tmp_path = None
        try:
            fd, tmp_path = tempfile.mkstemp(dir=self.root, prefix=f".{key}.", suffix=".tmp")
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, filepath)
            tmp_path = None
        except OSError as e:
            logger.error(f"Failed to write blob {key}: {e}", exc_info=True)
            raise TransientBackendError() from e
        finally:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)

        logger.debug(f"Wrote blob {key} ({len(data)} bytes)")
        return str(filepath)

    def read(self, key: str) -> Optional[bytes]:
        """
        Read an entire blob from disk.

        Args:
            key: Storage key

        Returns:
            Raw content, or None if the blob does not exist

        Raises:
            TransientBackendError: If the read fails for any other reason
        """
        filepath = self.get_path(key)
        try:
            return filepath.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.error(f"Failed to read blob {key}: {e}", exc_info=True)
            raise TransientBackendError() from e

    def delete(self, key: str) -> bool:
        """
        Remove a blob from disk.

        Returns:
            True if the blob existed, False otherwise

        Raises:
            TransientBackendError: If the removal fails for any other reason
        """
        filepath = self.get_path(key)
        try:
            filepath.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.error(f"Failed to delete blob {key}: {e}", exc_info=True)
            raise TransientBackendError() from e

        logger.debug(f"Deleted blob {key}")
        return True

    def exists(self, key: str) -> bool:
        """
        Check if a blob exists on disk.
        """
        return self.get_path(key).is_file()

    def read_variant(self, key: str, width: int) -> Optional[bytes]:
        return self.read(variant_key(key, width))

    def write_variant(self, key: str, width: int, data: bytes) -> str:
        return self.write(variant_key(key, width), data)
