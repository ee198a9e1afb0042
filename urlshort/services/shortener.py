import logging
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional

from urlshort.core.exceptions import AliasInUseError, EmptyURLError, TokenExhaustionError
from urlshort.db.repository import TokenConflictError, UrlStore
from urlshort.services.RedisURLCache import RedisURLCache
from urlshort.utils.clock import utcnow
from urlshort.utils.encoding import TokenGenerator

logger = logging.getLogger(__name__)

MAX_TOKEN_ATTEMPTS = 10


class ExpirationOption(str, Enum):
    ONE_DAY = "1 Day"
    ONE_MONTH = "1 Month"
    ONE_YEAR = "1 Year"
    LIFETIME = "Lifetime"


# None means the link never expires
EXPIRATION_DURATIONS = {
    ExpirationOption.ONE_DAY: timedelta(hours=24),
    ExpirationOption.ONE_MONTH: timedelta(days=30),
    ExpirationOption.ONE_YEAR: timedelta(days=365),
    ExpirationOption.LIFETIME: None,
}

UNMATCHED_NEVER = "never"
UNMATCHED_IMMEDIATE = "immediate"


def resolve_expiration(option: Optional[str], now: datetime, unmatched: str = UNMATCHED_NEVER) -> Optional[datetime]:
    """Map a form expiration option to an ``expires_at`` timestamp.

    Unknown or missing options follow ``unmatched``: ``"never"`` gives a
    non-expiring link, ``"immediate"`` gives ``expires_at = now`` (the link is
    dead as soon as it is created).
    """
    try:
        duration = EXPIRATION_DURATIONS[ExpirationOption(option)]
    except ValueError:
        if unmatched == UNMATCHED_IMMEDIATE:
            logger.info(f"Unknown expiration option {option!r}, expiring immediately")
            return now
        return None

    if duration is None:
        return None
    return now + duration


class ShortenService:

    def __init__(
        self,
        store: UrlStore,
        generator: TokenGenerator = None,
        cache: Optional[RedisURLCache] = None,
        clock=utcnow,
        unmatched_expiration: str = UNMATCHED_NEVER,
        max_attempts: int = MAX_TOKEN_ATTEMPTS,
    ):
        self.store = store
        self.generator = generator or TokenGenerator()
        self.cache = cache
        self.clock = clock
        self.unmatched_expiration = unmatched_expiration
        self.max_attempts = max_attempts

    def shorten(self, original_url: str, custom_alias: Optional[str] = None, expiration_option: Optional[str] = None) -> str:
        if not original_url:
            raise EmptyURLError()

        expires_at = resolve_expiration(expiration_option, self.clock(), self.unmatched_expiration)

        if custom_alias:
            record = self._create_with_alias(original_url, custom_alias, expires_at)
        else:
            record = self._create_with_generated_token(original_url, expires_at)

        token = record.token
        logger.info(f"Shortened {original_url[:50]} to {token} (expires_at={expires_at})")
        if self.cache is not None:
            self.cache.put(token, record)
        return token

    def _create_with_alias(self, original_url, alias, expires_at):
        # Aliases and generated tokens share one keyspace
        if self.store.token_exists(alias):
            logger.warning(f"Custom alias collision: '{alias}'")
            raise AliasInUseError()
        try:
            return self.store.insert(original_url, custom_alias=alias, expires_at=expires_at)
        except TokenConflictError:
            # lost the race to a concurrent insert of the same alias
            raise AliasInUseError()

    def _create_with_generated_token(self, original_url, expires_at):
        for attempt in range(self.max_attempts):
            token = self.generator.generate()
            if self.store.token_exists(token):
                logger.info(f"Short token collision on attempt {attempt + 1}/{self.max_attempts}")
                continue
            try:
                return self.store.insert(original_url, short_url=token, expires_at=expires_at)
            except TokenConflictError:
                logger.info(f"Short token insert conflict on attempt {attempt + 1}/{self.max_attempts}")

        logger.error(f"Failed to generate unique short token after {self.max_attempts} attempts")
        raise TokenExhaustionError(f"No free token after {self.max_attempts} attempts")
