"""Producer side of the thumbnail job queue (saq on Redis)."""

from typing import Optional

from redis.exceptions import RedisError
from saq import Queue

from common.constants import THUMBNAIL_TASK_NAME
from common.exceptions import TransientBackendError
from common.logging_config import get_logger
from common.types import ThumbnailJob

logger = get_logger(__name__)


class ThumbnailQueue:
    """
    Submits ThumbnailJobs to a saq queue.

    Submission never waits for a worker. Delivery is at-least-once; failed
    attempts are retried by saq with exponential backoff. Jobs have no
    timeout: once dequeued they run to completion or failure.
    """

    def __init__(self, queue: Queue, retries: int = 3, retry_delay: float = 1.0):
        self.queue = queue
        self.retries = retries
        self.retry_delay = retry_delay

    @classmethod
    def from_url(cls, redis_url: str, name: str, **kwargs) -> "ThumbnailQueue":
        return cls(Queue.from_url(redis_url, name=name), **kwargs)

    async def submit(self, job: ThumbnailJob) -> Optional[str]:
        """
        Enqueue a job.

        Returns:
            The saq job key

        Raises:
            TransientBackendError: If the queue backend is unreachable
        """
        try:
            saq_job = await self.queue.enqueue(
                THUMBNAIL_TASK_NAME,
                owner_id=job.owner_id,
                file_id=job.file_id,
                retries=self.retries,
                retry_delay=self.retry_delay,
                retry_backoff=True,
                timeout=0,
            )
        except (RedisError, OSError) as e:
            logger.error(f"Failed to enqueue thumbnail job [file_id={job.file_id}]: {e}", exc_info=True)
            raise TransientBackendError() from e

        key = saq_job.key if saq_job is not None else None
        logger.info(f"Thumbnail job queued [file_id={job.file_id}] [job_key={key}]")
        return key

    async def close(self) -> None:
        await self.queue.disconnect()
