import json
import logging
from datetime import datetime
from typing import NamedTuple, Optional

import redis.exceptions

from urlshort.db.Models.models import UrlRecord
from urlshort.utils.clock import utcnow

logger = logging.getLogger(__name__)
CACHE_TTL = 86400


class CachedUrl(NamedTuple):
    original_url: str
    expires_at: Optional[datetime]


class RedisURLCache:
    """Read-through cache of token -> (original_url, expires_at).

    Redis being down is never fatal: reads turn into misses and writes are
    skipped.
    """

    def __init__(self, client, ttl: int = CACHE_TTL, clock=utcnow):
        self.client = client
        self.ttl = ttl
        self.clock = clock

    @staticmethod
    def _key(token: str) -> str:
        return f"url:{token}"

    def get(self, token: str) -> Optional[CachedUrl]:
        try:
            cached = self.client.get(self._key(token))
        except redis.exceptions.RedisError as e:
            logger.warning(f"Redis lookup failed for {token}: {e}")
            return None

        if not cached:
            return None

        if isinstance(cached, (bytes, bytearray)):
            cached = cached.decode()
        try:
            payload = json.loads(cached)
            expires_at = payload["expires_at"]
            hit = CachedUrl(
                original_url=payload["original_url"],
                expires_at=datetime.fromisoformat(expires_at) if expires_at else None,
            )
        except (ValueError, KeyError, TypeError):
            logger.warning(f"Discarding malformed cache entry for {token}")
            return None

        logger.info(f"Redirect cache HIT for {token} -> {hit.original_url[:50]}")
        return hit

    def put(self, token: str, record: UrlRecord):
        ttl = self.ttl
        if record.expires_at is not None:
            remaining = int((record.expires_at - self.clock()).total_seconds())
            if remaining <= 0:
                return
            ttl = min(ttl, remaining)

        payload = json.dumps({
            "original_url": record.original_url,
            "expires_at": record.expires_at.isoformat() if record.expires_at else None,
        })
        try:
            self.client.setex(self._key(token), ttl, payload)
            logger.debug(f"Cached {token} -> {record.original_url[:50]}")
        except redis.exceptions.RedisError:
            logger.warning(f"Failed to cache {token}, Redis unavailable")
