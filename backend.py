import redis
from typing import Optional, Tuple
from constants import REDIS_HOST, REDIS_PORT, REDIS_PASSWORD
from redis_keys import REDIS_CLIP_KEY, REDIS_CLIP_PATTERN
from logging_config import get_logger

logger = get_logger(__name__)

# redis-py connects lazily, so nothing touches the network until the first command
redis_client = redis.Redis(host=REDIS_HOST, port=REDIS_PORT, password=REDIS_PASSWORD, decode_responses=True)


class ClipBackend:
    """Short-lived text snippets for the copy/paste fallback. Independent of room state."""

    def __init__(self, client: redis.Redis = None):
        self.redis_client = client or redis_client
        logger.info(f"Initializing ClipBackend with connection to {REDIS_HOST}:{REDIS_PORT}")

    def ping(self) -> bool:
        try:
            self.redis_client.ping()
            logger.info(f"Redis client connected successfully to {REDIS_HOST}:{REDIS_PORT}")
            return True
        except redis.RedisError as e:
            logger.error(f"Failed to connect to Redis at {REDIS_HOST}:{REDIS_PORT}: {e}", exc_info=True)
            return False

    def put_clip(self, code: str, text: str, ttl: int) -> str:
        key = REDIS_CLIP_KEY.format(code=code)
        self.redis_client.set(key, text, ex=ttl)
        logger.info(f"Stored clip {code} ({len(text)} chars) with TTL {ttl} seconds")
        return code

    def clip_exists(self, code: str) -> bool:
        return bool(self.redis_client.exists(REDIS_CLIP_KEY.format(code=code)))

    def get_clip(self, code: str) -> Optional[Tuple[str, int]]:
        """Return (text, seconds left) or None when the clip is missing or expired."""
        key = REDIS_CLIP_KEY.format(code=code)
        text = self.redis_client.get(key)
        if text is None:
            logger.debug(f"Clip {code} not found in Redis")
            return None
        ttl = self.redis_client.ttl(key)
        return text, max(ttl, 0)

    def delete_clip(self, code: str) -> bool:
        deleted = self.redis_client.delete(REDIS_CLIP_KEY.format(code=code))
        logger.debug(f"Clip {code} deleted: {deleted}")
        return bool(deleted)

    def count_clips(self) -> int:
        return sum(1 for _ in self.redis_client.scan_iter(match=REDIS_CLIP_PATTERN, count=100))


clip_backend = ClipBackend()
