"""Derives fixed-width thumbnail variants for image records."""

import io
from typing import Optional, Tuple

from PIL import Image, UnidentifiedImageError

from common.constants import THUMBNAIL_WIDTHS
from common.exceptions import PermanentProcessingError, TransientBackendError
from common.logging_config import get_logger
from common.types import FileType, ImageRecord, JobResult, JobStatus, ThumbnailJob
from manager.repositories.file_repository import FileRepository
from storage.content_store import ContentStore, variant_key

logger = get_logger(__name__)

# Formats Pillow can write back; anything else is re-encoded as PNG
_WRITABLE_FORMATS = {"PNG", "JPEG", "GIF", "WEBP", "BMP", "TIFF"}


def make_thumbnail(data: bytes, width: int) -> bytes:
    """
    Resize an image to the given width, keeping its aspect ratio.

    The output depends only on the input bytes and the width.

    Args:
        data: Encoded source image
        width: Target width in pixels

    Returns:
        Encoded thumbnail, in the source format when Pillow can write it

    Raises:
        UnidentifiedImageError: If data is not a readable image
        OSError: If decoding or encoding fails
    """
    with Image.open(io.BytesIO(data)) as img:
        img.load()
        fmt = img.format if img.format in _WRITABLE_FORMATS else "PNG"
        height = max(1, round(img.height * width / img.width))
        resized = img.resize((width, height), Image.Resampling.LANCZOS)

    if fmt == "JPEG" and resized.mode not in ("RGB", "L"):
        resized = resized.convert("RGB")

    out = io.BytesIO()
    resized.save(out, format=fmt)
    return out.getvalue()


class ThumbnailProcessor:
    """
    Runs one ThumbnailJob through received -> validated -> processing -> done.

    Validation failures are permanent and write nothing. Decode and I/O
    failures are transient; since variant keys are derived from the primary
    key, re-running a partially processed job simply overwrites the variants.
    """

    def __init__(self, file_repo: FileRepository, content_store: ContentStore):
        self.file_repo = file_repo
        self.content_store = content_store

    def process(self, job: ThumbnailJob) -> JobResult:
        logger.info(f"Thumbnail job {JobStatus.RECEIVED.value} [file_id={job.file_id}] [owner_id={job.owner_id}]")

        try:
            record, primary = self._validate(job)
        except PermanentProcessingError as e:
            logger.warning(f"Thumbnail job rejected [file_id={job.file_id}]: {e}")
            return JobResult(job=job, status=JobStatus.FAILED, permanent=True, reason=str(e))
        except TransientBackendError as e:
            logger.error(f"Thumbnail job could not be validated [file_id={job.file_id}]: {e}")
            return JobResult(job=job, status=JobStatus.FAILED, reason=str(e))

        logger.debug(f"Thumbnail job {JobStatus.VALIDATED.value}, now {JobStatus.PROCESSING.value} [file_id={job.file_id}]")

        written = []
        for width in THUMBNAIL_WIDTHS:
            try:
                thumbnail = make_thumbnail(primary, width)
                self.content_store.write_variant(record.storage_key, width, thumbnail)
            except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
                logger.error(f"Error creating thumbnail of width {width} [file_id={job.file_id}]: {e}")
                return JobResult(
                    job=job,
                    status=JobStatus.FAILED,
                    reason=f"Cannot create thumbnail of width {width}",
                    variant_keys=written,
                )
            except TransientBackendError as e:
                logger.error(f"Error storing thumbnail of width {width} [file_id={job.file_id}]: {e}")
                return JobResult(job=job, status=JobStatus.FAILED, reason=str(e), variant_keys=written)

            key = variant_key(record.storage_key, width)
            written.append(key)
            logger.info(f"Thumbnail created at width {width}: {key}")

        logger.info(f"Thumbnail job {JobStatus.DONE.value} [file_id={job.file_id}]")
        return JobResult(job=job, status=JobStatus.DONE, variant_keys=written)

    def _validate(self, job: ThumbnailJob) -> Tuple[ImageRecord, bytes]:
        if not job.file_id:
            raise PermanentProcessingError("Missing fileId")
        if not job.owner_id:
            raise PermanentProcessingError("Missing userId")

        record = self.file_repo.get(job.file_id)
        if record is None or record.owner_id != job.owner_id:
            raise PermanentProcessingError("File not found")
        if record.type is not FileType.IMAGE:
            raise PermanentProcessingError("File is not an image")

        primary: Optional[bytes] = self.content_store.read(record.storage_key)
        if primary is None:
            raise PermanentProcessingError("Primary content is missing")

        return record, primary
