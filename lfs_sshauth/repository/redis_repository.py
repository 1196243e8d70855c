"""Redis repository for cached git-lfs-authenticate output."""

import logging
from typing import Optional

from redis import Redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError

from lfs_sshauth.config.settings import Settings
from lfs_sshauth.repository.base_repository import CacheRepository, make_cache_name

logger = logging.getLogger(__name__)


class RedisRepository(CacheRepository):
    """Repository keeping credential cache entries in Redis.

    Entries never expire on their own, same as the file backend.
    """

    def __init__(self, settings: Settings, client: Optional[Redis] = None) -> None:
        """Initialize Redis repository."""
        self.settings = settings
        self._client: Optional[Redis] = client

    def connect(self) -> None:
        """Connect to Redis."""
        if self._client:
            try:
                self._client.close()
            except RedisError:
                pass
            self._client = None

        if not self.settings.redis_url:
            raise ValueError("LFS_SSHAUTH_REDIS_URL must be set for the redis backend")
        self._client = Redis.from_url(self.settings.redis_url)

        # Test connection
        try:
            self._client.ping()
        except Exception:
            self._client = None
            raise

    def disconnect(self) -> None:
        """Disconnect from Redis."""
        if self._client:
            self._client.close()
            self._client = None

    def _make_key(self, host_identity: str, operation: str) -> str:
        return self.settings.redis_key_prefix + make_cache_name(host_identity, operation)

    def _call(self, method: str, *args):
        if not self._client:
            self.connect()
        try:
            return getattr(self._client, method)(*args)
        except (RedisConnectionError, OSError):
            self.connect()
            return getattr(self._client, method)(*args)

    def get(self, host_identity: str, operation: str) -> Optional[bytes]:
        key = self._make_key(host_identity, operation)
        try:
            return self._call("get", key)
        except (RedisError, OSError, ValueError) as e:
            logger.error(f"Error reading credential cache {key} from Redis: {e}")
            return None

    def set(self, host_identity: str, operation: str, content: bytes) -> None:
        key = self._make_key(host_identity, operation)
        try:
            self._call("set", key, content)
        except (RedisError, OSError, ValueError) as e:
            logger.error(f"Error writing credential cache {key} to Redis: {e}")

    def delete(self, host_identity: str, operation: str) -> None:
        self._call("delete", self._make_key(host_identity, operation))
