"""Redis-backed session store mapping opaque tokens to user ids."""

import uuid
from typing import Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError

from common.constants import SESSION_KEY_PREFIX, SESSION_TTL_SECONDS
from common.exceptions import TransientBackendError
from common.logging_config import get_logger

logger = get_logger(__name__)


class SessionStore:
    """
    Token -> user id mapping with a fixed time-to-live.

    Expiry is absolute: resolving a token never extends its lifetime.
    Backend failures raise TransientBackendError so callers can tell
    "Redis is down" apart from "token unknown".
    """

    def __init__(self, redis_client: Redis, ttl_seconds: int = SESSION_TTL_SECONDS):
        self._redis = redis_client
        self.ttl_seconds = ttl_seconds

    @staticmethod
    def _make_key(token: str) -> str:
        return f"{SESSION_KEY_PREFIX}{token}"

    async def issue(self, user_id: str) -> str:
        """
        Create a new session for user_id.

        Returns:
            The new token
        """
        token = str(uuid.uuid4())
        try:
            await self._redis.set(self._make_key(token), user_id, ex=self.ttl_seconds)
        except RedisError as e:
            logger.error(f"Failed to store session [user_id={user_id}]: {e}", exc_info=True)
            raise TransientBackendError() from e

        logger.info(f"Session issued [user_id={user_id}] [ttl={self.ttl_seconds}s]")
        return token

    async def resolve(self, token: str) -> Optional[str]:
        """
        Look up the user id behind a token.

        Returns:
            user_id, or None if the token is unknown or expired
        """
        if not token:
            return None
        try:
            value = await self._redis.get(self._make_key(token))
        except RedisError as e:
            logger.error(f"Failed to resolve session: {e}", exc_info=True)
            raise TransientBackendError() from e

        if value is None:
            return None
        return value.decode("utf-8") if isinstance(value, bytes) else str(value)

    async def revoke(self, token: str) -> bool:
        """
        Delete a session.

        Returns:
            True if the token existed, False otherwise
        """
        try:
            deleted = await self._redis.delete(self._make_key(token))
        except RedisError as e:
            logger.error(f"Failed to revoke session: {e}", exc_info=True)
            raise TransientBackendError() from e

        return bool(deleted)

    async def ping(self) -> bool:
        try:
            return bool(await self._redis.ping())
        except RedisError as e:
            logger.warning(f"Redis ping failed: {e}")
            return False
