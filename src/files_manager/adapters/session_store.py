import logging
from typing import Optional

from redis import Redis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)


class RedisSessionStore:
    """Key-value store for session tokens, backed by Redis.

    Values are stored as strings with an expiry; a missing or expired key reads
    back as ``None``.
    """

    def __init__(self, host: str = "localhost", port: int = 6379, db: int = 0, client: Optional[Redis] = None):
        self.host = host
        self.port = port
        self.db = db
        self._r = client
        self._owns_client = client is None

    def connect(self) -> None:
        if self._r is None:
            self._r = Redis(host=self.host, port=self.port, db=self.db, decode_responses=True)
        try:
            self._r.ping()
            logger.info(f"Connected to Redis session store at {self.host}:{self.port}")
        except RedisError as e:
            logger.error(f"Failed to connect to Redis: {e}")
            raise

    @property
    def client(self) -> Redis:
        if self._r is None:
            raise RuntimeError("RedisSessionStore is not connected; call connect() first")
        return self._r

    def is_alive(self) -> bool:
        if self._r is None:
            return False
        try:
            return bool(self._r.ping())
        except RedisError as e:
            logger.warning(f"Redis is not reachable: {e}")
            return False

    def get(self, key: str) -> Optional[str]:
        value = self.client.get(key)
        if isinstance(value, (bytes, bytearray)):
            return value.decode()
        return value

    def set(self, key: str, value: str, ttl: int) -> None:
        self.client.set(key, value, ex=ttl)

    def delete(self, key: str) -> None:
        self.client.delete(key)

    def close(self) -> None:
        """Release the connection; an injected client is left to its owner."""
        if self._r is not None and self._owns_client:
            self._r.close()
            self._r = None
