"""Entry point for the thumbnail worker."""

import asyncio
from pathlib import Path
from typing import Any, Dict

from saq import Queue, Worker

from common.logging_config import setup_logging
from manager import config
from manager.database import Database
from manager.repositories.file_repository import FileRepository
from storage.content_store import ContentStore
from worker.tasks import generate_thumbnails
from worker.thumbnail_processor import ThumbnailProcessor

logger = setup_logging('worker')


async def startup(ctx: Dict[str, Any]) -> None:
    """
    Build the processor and its backend handles once per worker process.
    """
    database = Database(config.DATABASE_PATH)
    database.init_schema()
    content_store = ContentStore(Path(config.FOLDER_PATH))
    content_store.ensure_directory()
    ctx["processor"] = ThumbnailProcessor(FileRepository(database), content_store)
    logger.info("Thumbnail worker ready")


async def shutdown(ctx: Dict[str, Any]) -> None:
    ctx.pop("processor", None)
    logger.info("Thumbnail worker stopped")


def build_worker(queue: Queue, concurrency: int = config.WORKER_CONCURRENCY) -> Worker:
    """
    Create a saq worker consuming thumbnail jobs from queue.

    Args:
        queue: saq queue the API server enqueues into
        concurrency: Number of jobs processed at the same time
    """
    return Worker(
        queue,
        functions=[generate_thumbnails],
        concurrency=concurrency,
        startup=startup,
        shutdown=shutdown,
    )


async def run_worker() -> None:
    queue = Queue.from_url(config.REDIS_URL, name=config.QUEUE_NAME)
    worker = build_worker(queue)
    logger.info(
        f"Starting thumbnail worker [queue={config.QUEUE_NAME}] [concurrency={config.WORKER_CONCURRENCY}]"
    )
    try:
        await worker.start()
    finally:
        await worker.stop()
        await queue.disconnect()


def main() -> None:
    asyncio.run(run_worker())


if __name__ == "__main__":
    main()
