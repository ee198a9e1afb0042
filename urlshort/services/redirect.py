import logging
from typing import Optional

from urlshort.core.exceptions import ExpiredError, NotFoundError, PersistenceError
from urlshort.db.Models.models import UrlRecord
from urlshort.db.repository import UrlStore
from urlshort.services.RedisURLCache import RedisURLCache
from urlshort.utils.clock import utcnow

logger = logging.getLogger(__name__)


class RedirectService:
    """Resolves tokens to their destination and keeps access stats."""

    def __init__(self, store: UrlStore, cache: Optional[RedisURLCache] = None, clock=utcnow):
        self.store = store
        self.cache = cache
        self.clock = clock

    def _lookup(self, token: str):
        if self.cache is not None:
            cached = self.cache.get(token)
            if cached:
                return cached

        record = self.store.find_by_token(token)
        if record is None:
            return None
        if self.cache is not None:
            self.cache.put(token, record)
        return record

    def resolve(self, token: str) -> str:
        """Return the original URL for ``token`` and count the access.

        Raises NotFoundError / ExpiredError. Expired links are not counted.
        """
        entry = self._lookup(token)
        if entry is None:
            logger.warning(f"Redirect 404: token not found: {token}")
            raise NotFoundError()

        now = self.clock()
        if entry.expires_at is not None and now > entry.expires_at:
            logger.warning(f"Redirect 410: token {token} expired at {entry.expires_at}")
            raise ExpiredError()

        self.record_access(token, now)
        return entry.original_url

    def record_access(self, token: str, now) -> None:
        # Stats are best effort, a failed write must not block the redirect
        try:
            self.store.record_access(token, now)
        except PersistenceError:
            logger.exception(f"Failed to update access count and timestamp for {token}")

    def stats(self, token: str) -> UrlRecord:
        record = self.store.find_by_token(token)
        if record is None:
            logger.warning(f"Stats 404: token not found: {token}")
            raise NotFoundError()
        return record
