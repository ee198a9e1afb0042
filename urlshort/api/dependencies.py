from typing import Optional

from fastapi import Depends
from sqlalchemy.orm import Session

from urlshort.core.config import settings
from urlshort.db.Connection import database
from urlshort.db.repository import UrlStore
from urlshort.services.RedisURLCache import RedisURLCache
from urlshort.services.redirect import RedirectService
from urlshort.services.shortener import ShortenService
from urlshort.utils.encoding import TokenGenerator


def get_cache() -> Optional[RedisURLCache]:
    if database.redis_client is None:
        return None
    return RedisURLCache(database.redis_client, ttl=settings.CACHE_TTL)


def get_store(db: Session = Depends(database.get_db)) -> UrlStore:
    return UrlStore(db)


def get_shorten_service(
    store: UrlStore = Depends(get_store),
    cache: Optional[RedisURLCache] = Depends(get_cache),
) -> ShortenService:
    return ShortenService(
        store,
        generator=TokenGenerator(length=settings.TOKEN_LENGTH),
        cache=cache,
        unmatched_expiration=settings.UNMATCHED_EXPIRATION,
        max_attempts=settings.MAX_TOKEN_ATTEMPTS,
    )


def get_redirect_service(
    store: UrlStore = Depends(get_store),
    cache: Optional[RedisURLCache] = Depends(get_cache),
) -> RedirectService:
    return RedirectService(store, cache=cache)
