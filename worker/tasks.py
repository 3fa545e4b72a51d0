"""saq task functions run by the thumbnail worker."""

import asyncio
from typing import Any, Dict

from common.exceptions import TransientBackendError
from common.logging_config import get_logger
from common.types import JobStatus, ThumbnailJob

logger = get_logger(__name__)


async def generate_thumbnails(ctx: Dict[str, Any], *, owner_id: str, file_id: str) -> Dict[str, Any]:
    """
    Generate the thumbnail variants of one image.

    The processor runs in a worker thread so image decoding does not block the
    event loop. A permanent failure is returned as the job result, which
    completes the saq job without retry. A transient failure is raised so saq
    retries the job with backoff.

    Args:
        ctx: saq worker context; holds the ThumbnailProcessor under "processor"
        owner_id: Owner named in the job
        file_id: Image to process

    Returns:
        JobResult as a dict
    """
    processor = ctx["processor"]
    result = await asyncio.to_thread(processor.process, ThumbnailJob(owner_id=owner_id, file_id=file_id))

    if result.status is JobStatus.FAILED and not result.permanent:
        raise TransientBackendError(result.reason or "Thumbnail generation failed")

    if not result.succeeded:
        logger.warning(f"Thumbnail job dropped without retry [file_id={file_id}]: {result.reason}")

    return result.to_dict()
