"""Explicit construction of backend handles and services.

One ServiceContainer is built at process startup and closed at shutdown;
components receive their handles through their constructors.
"""

from pathlib import Path
from typing import Optional

from redis.asyncio import Redis

from common.logging_config import get_logger
from manager import config
from manager.database import Database
from manager.job_queue import ThumbnailQueue
from manager.repositories.file_repository import FileRepository
from manager.repositories.user_repository import UserRepository
from manager.services.auth_service import AuthService
from manager.services.file_service import FileService
from manager.session_store import SessionStore
from storage.content_store import ContentStore

logger = get_logger(__name__)


class ServiceContainer:
    def __init__(
        self,
        database: Database,
        content_store: ContentStore,
        sessions: SessionStore,
        thumbnail_queue: ThumbnailQueue,
        redis_client: Optional[Redis] = None,
    ):
        self.database = database
        self.content_store = content_store
        self.sessions = sessions
        self.thumbnail_queue = thumbnail_queue
        self._redis = redis_client

        self.user_repo = UserRepository(database)
        self.file_repo = FileRepository(database)
        self.auth_service = AuthService(self.user_repo, sessions)
        self.file_service = FileService(self.file_repo, content_store, sessions, thumbnail_queue)

    @classmethod
    def from_config(cls) -> "ServiceContainer":
        """
        Build every handle from manager.config settings.
        """
        redis_client = Redis.from_url(config.REDIS_URL)
        return cls(
            database=Database(config.DATABASE_PATH),
            content_store=ContentStore(Path(config.FOLDER_PATH)),
            sessions=SessionStore(redis_client, ttl_seconds=config.SESSION_TTL),
            thumbnail_queue=ThumbnailQueue.from_url(
                config.REDIS_URL,
                config.QUEUE_NAME,
                retries=config.JOB_RETRIES,
                retry_delay=config.JOB_RETRY_DELAY_SECONDS,
            ),
            redis_client=redis_client,
        )

    def start(self) -> None:
        self.database.init_schema()
        self.content_store.ensure_directory()
        logger.info("Service container started")

    async def close(self) -> None:
        await self.thumbnail_queue.close()
        if self._redis is not None:
            await self._redis.aclose()
        logger.info("Service container closed")
