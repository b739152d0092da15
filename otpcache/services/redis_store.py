"""Entry store backed by Redis for deployments running several workers."""

import hashlib
import hmac
import json
import logging
import time
from typing import Awaitable, TypeVar

import anyio
from redis.asyncio import Redis
from redis.exceptions import RedisError

from otpcache.core.config import settings
from otpcache.services.errors import StorageUnavailable
from otpcache.services.store import Clock, normalize_subject

logger = logging.getLogger(__name__)

T = TypeVar("T")


def create_redis_client(url: str = settings.REDIS_URL, timeout: float = settings.OTP_STORE_TIMEOUT_SECONDS) -> Redis:
    """Build a Redis client whose socket operations respect the store timeout."""
    return Redis.from_url(
        url,
        decode_responses=True,
        socket_timeout=timeout,
        socket_connect_timeout=timeout,
    )


def _otp_key(namespace: str, subject: str) -> str:
    """Generate the Redis key that scopes an OTP to a purpose and a user's email."""
    return f"otp:{namespace}:{normalize_subject(subject)}"


class RedisEntryStore:
    """Store a keyed digest of each pending code as a JSON payload under a Redis key with a TTL.

    Only `HMAC-SHA256(hash_secret, code)` reaches Redis, so reading the tier does
    not reveal pending codes.

    Redis reclaims the key on its own once the TTL elapses. The payload also
    carries `expires_at` from the injected clock, which `check` honours so the
    accepted window never depends on Redis eviction timing.
    """

    def __init__(
        self,
        redis_client: Redis,
        clock: Clock = time.time,
        timeout: float = settings.OTP_STORE_TIMEOUT_SECONDS,
        hash_secret: str = settings.OTP_HASH_SECRET,
    ):
        self.redis = redis_client
        self._clock = clock
        self.timeout = timeout
        self._hash_key = hash_secret.encode()

    def _digest(self, code: str) -> str:
        return hmac.new(self._hash_key, code.encode(), hashlib.sha256).hexdigest()

    async def _call(self, operation: str, awaitable: Awaitable[T]) -> T:
        try:
            with anyio.fail_after(self.timeout):
                return await awaitable
        except TimeoutError as exc:
            logger.warning("Redis %s timed out after %.2fs", operation, self.timeout)
            raise StorageUnavailable(f"Redis {operation} timed out.") from exc
        except RedisError as exc:
            logger.warning("Redis %s failed: %s", operation, exc)
            raise StorageUnavailable(f"Redis {operation} failed.") from exc

    async def put(self, namespace: str, subject: str, code: str, ttl: float) -> None:
        payload = json.dumps({"digest": self._digest(code), "expires_at": self._clock() + ttl})
        await self._call("set", self.redis.set(_otp_key(namespace, subject), payload, px=max(1, int(ttl * 1000))))

    async def check(self, namespace: str, subject: str, candidate: str) -> bool:
        raw = await self._call("get", self.redis.get(_otp_key(namespace, subject)))
        if raw is None:
            return False
        try:
            payload = json.loads(raw)
            stored, expires_at = str(payload["digest"]), float(payload["expires_at"])
        except (ValueError, KeyError, TypeError):
            logger.warning("Discarding malformed verification payload for namespace %r", namespace)
            return False
        # Left for Redis to evict; deleting here could race with a newer put.
        if self._clock() >= expires_at:
            return False
        return hmac.compare_digest(stored, self._digest(candidate))

    async def clear(self, namespace: str, subject: str) -> None:
        await self._call("delete", self.redis.delete(_otp_key(namespace, subject)))

    async def purge_expired(self) -> int:
        """Redis expires keys itself, so there is nothing to sweep."""
        return 0

    async def close(self) -> None:
        """Close the client; invoked during application shutdown."""
        await self.redis.aclose()
