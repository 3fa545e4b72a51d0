"""Shared pytest fixtures for all tests."""

import base64
import io
from datetime import datetime
from typing import Dict, Optional, Tuple
from unittest.mock import AsyncMock, MagicMock

import pytest
from PIL import Image
from redis.exceptions import ConnectionError as RedisConnectionError

from manager.container import ServiceContainer
from manager.database import Database
from manager.job_queue import ThumbnailQueue
from manager.repositories.file_repository import FileRepository
from manager.repositories.user_repository import UserRepository
from manager.session_store import SessionStore
from storage.content_store import ContentStore
from worker.thumbnail_processor import ThumbnailProcessor


class FakeClock:
    """Manually advanced clock in seconds."""

    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class InMemoryRedis:
    """
    Minimal async stand-in for the redis client calls SessionStore makes.
    Keys expire according to the injected clock.
    """

    def __init__(self, clock: FakeClock):
        self.clock = clock
        self.data: Dict[str, Tuple[bytes, Optional[float]]] = {}

    def _alive(self, key: str) -> bool:
        entry = self.data.get(key)
        if entry is None:
            return False
        _, expires_at = entry
        if expires_at is not None and self.clock() >= expires_at:
            del self.data[key]
            return False
        return True

    async def set(self, key: str, value: str, ex: Optional[int] = None):
        expires_at = self.clock() + ex if ex is not None else None
        self.data[key] = (value.encode('utf-8'), expires_at)
        return True

    async def get(self, key: str) -> Optional[bytes]:
        if not self._alive(key):
            return None
        return self.data[key][0]

    async def delete(self, *keys: str) -> int:
        deleted = 0
        for key in keys:
            if self._alive(key):
                del self.data[key]
                deleted += 1
        return deleted

    async def ping(self) -> bool:
        return True

    async def aclose(self) -> None:
        return None


class UnreachableRedis:
    """Redis client whose every call fails as if the server were down."""

    async def set(self, *args, **kwargs):
        raise RedisConnectionError("Connection refused")

    async def get(self, *args, **kwargs):
        raise RedisConnectionError("Connection refused")

    async def delete(self, *args, **kwargs):
        raise RedisConnectionError("Connection refused")

    async def ping(self):
        raise RedisConnectionError("Connection refused")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def fake_redis(clock):
    return InMemoryRedis(clock)


@pytest.fixture
def session_store(fake_redis):
    return SessionStore(fake_redis, ttl_seconds=24 * 3600)


@pytest.fixture
def database(tmp_path):
    """
    Create a temporary metadata database with schema.
    """
    db = Database(str(tmp_path / "metadata.db"))
    db.init_schema()
    return db


@pytest.fixture
def content_store(tmp_path):
    store = ContentStore(tmp_path / "files")
    store.ensure_directory()
    return store


@pytest.fixture
def user_repo(database):
    return UserRepository(database)


@pytest.fixture
def file_repo(database):
    return FileRepository(database)


@pytest.fixture
def saq_queue():
    """
    Mocked saq queue; enqueue returns a job with a key.
    """
    queue = MagicMock()
    queue.enqueue = AsyncMock(return_value=MagicMock(key="saq:job:1"))
    queue.disconnect = AsyncMock()
    return queue


@pytest.fixture
def thumbnail_queue(saq_queue):
    return ThumbnailQueue(saq_queue, retries=3, retry_delay=0.1)


@pytest.fixture
def container(database, content_store, session_store, thumbnail_queue):
    return ServiceContainer(
        database=database,
        content_store=content_store,
        sessions=session_store,
        thumbnail_queue=thumbnail_queue,
    )


@pytest.fixture
def file_service(container):
    return container.file_service


@pytest.fixture
def auth_service(container):
    return container.auth_service


@pytest.fixture
def processor(file_repo, content_store):
    return ThumbnailProcessor(file_repo, content_store)


def _create_user(user_repo: UserRepository, user_id: str, email: str):
    return user_repo.create_user(
        user_id=user_id,
        email=email,
        password_hash="not-a-real-hash",
        created_at=datetime.now(),
    )


@pytest.fixture
def owner(user_repo):
    return _create_user(user_repo, "user-owner", "owner@example.com")


@pytest.fixture
def other_user(user_repo):
    return _create_user(user_repo, "user-other", "other@example.com")


def make_png(width: int = 800, height: int = 600, color=(200, 30, 30)) -> bytes:
    image = Image.new("RGB", (width, height), color)
    out = io.BytesIO()
    image.save(out, format="PNG")
    return out.getvalue()


@pytest.fixture
def png_bytes():
    return make_png()


@pytest.fixture
def png_b64(png_bytes):
    return base64.b64encode(png_bytes).decode('ascii')


@pytest.fixture
def text_b64():
    return base64.b64encode(b"Hello Webstack!\n").decode('ascii')


@pytest.fixture
def unreachable_redis():
    return UnreachableRedis()


@pytest.fixture
def png_factory():
    return make_png
