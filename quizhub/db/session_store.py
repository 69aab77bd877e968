"""
Delivery session store for QuizHub

In-progress quiz state is kept in Redis under the caller's session id.
When Redis is disabled or unreachable the store keeps state in process.
"""

import logging
import time
from typing import Dict, Optional, Tuple

import redis.asyncio as redis
from pydantic import ValidationError
from redis.exceptions import RedisError

from quizhub.core.config import settings
from quizhub.core.exceptions import SessionStoreException
from quizhub.schemas.delivery import DeliveryState

logger = logging.getLogger(__name__)


class DeliverySessionStore:
    """Session state manager with graceful fallback"""

    KEY_PREFIX = "quizhub:delivery:"

    def __init__(self, ttl: Optional[int] = None):
        self.redis_client: Optional[redis.Redis] = None
        self.is_connected = False
        self.ttl = ttl or settings.DELIVERY_SESSION_TTL
        self._local: Dict[str, Tuple[float, str]] = {}

    @property
    def backend(self) -> str:
        return "redis" if self.is_connected else "memory"

    async def connect(self):
        """Connect to Redis"""
        if not settings.REDIS_ENABLED:
            logger.info("Redis disabled, keeping quiz sessions in process")
            return
        try:
            self.redis_client = redis.from_url(
                settings.get_redis_url(),
                encoding="utf-8",
                decode_responses=True,
            )
            await self.redis_client.ping()
            self.is_connected = True
            logger.info("Redis connected successfully")
        except (RedisError, OSError) as e:
            logger.warning(f"Redis connection failed: {e}. Keeping quiz sessions in process.")
            self.is_connected = False

    async def disconnect(self):
        """Disconnect from Redis"""
        if self.redis_client:
            await self.redis_client.aclose()
            self.is_connected = False

    def _key(self, session_id: str) -> str:
        return f"{self.KEY_PREFIX}{session_id}"

    async def load(self, session_id: str) -> Optional[DeliveryState]:
        """Get the state for a session, or None when there is none"""
        payload = await self._get(self._key(session_id))
        if payload is None:
            return None
        try:
            return DeliveryState.model_validate_json(payload)
        except ValidationError as e:
            logger.error(f"Discarding unreadable quiz session {session_id}: {e}")
            await self.discard(session_id)
            return None

    async def save(self, session_id: str, state: DeliveryState) -> bool:
        return await self._set(self._key(session_id), state.model_dump_json())

    async def discard(self, session_id: str) -> bool:
        """Remove a session; True if one existed"""
        key = self._key(session_id)
        if not self.is_connected:
            return self._local.pop(key, None) is not None
        try:
            return await self.redis_client.delete(key) > 0
        except RedisError as e:
            logger.error(f"Redis delete error: {e}", extra={"session_id": session_id})
            raise SessionStoreException("Failed to clear quiz session") from e

    async def _get(self, key: str) -> Optional[str]:
        if not self.is_connected:
            entry = self._local.get(key)
            if entry is None:
                return None
            expires_at, payload = entry
            if expires_at < time.monotonic():
                del self._local[key]
                return None
            return payload
        try:
            return await self.redis_client.get(key)
        except RedisError as e:
            logger.error(f"Redis get error: {e}")
            raise SessionStoreException("Failed to read quiz session") from e

    async def _set(self, key: str, payload: str) -> bool:
        if not self.is_connected:
            now = time.monotonic()
            self._purge_expired(now)
            self._local[key] = (now + self.ttl, payload)
            return True
        try:
            await self.redis_client.set(key, payload, ex=self.ttl)
            return True
        except RedisError as e:
            logger.error(f"Redis set error: {e}")
            raise SessionStoreException("Failed to save quiz session") from e

    def _purge_expired(self, now: float) -> None:
        expired = [key for key, (expires_at, _) in self._local.items() if expires_at < now]
        for key in expired:
            del self._local[key]


# Global session store instance
sessions = DeliverySessionStore()
