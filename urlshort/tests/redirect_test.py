from datetime import timedelta

import pytest

from urlshort.core.exceptions import ExpiredError, NotFoundError, PersistenceError
from urlshort.db.repository import UrlStore
from urlshort.services.redirect import RedirectService
from urlshort.services.shortener import ShortenService, UNMATCHED_IMMEDIATE


class FailingStatsStore(UrlStore):
    def record_access(self, token, accessed_at):
        raise PersistenceError("database is locked")


def test_resolve_generated_token(store, clock):
    token = ShortenService(store, clock=clock).shorten("https://example.com", "", "1 Day")

    assert RedirectService(store, clock=clock).resolve(token) == "https://example.com"

    record = store.find_by_token(token)
    assert record.access_count == 1
    assert record.last_accessed_at == clock.now


def test_resolve_alias(store):
    ShortenService(store).shorten("https://example.com", "mylink", "Lifetime")
    assert RedirectService(store).resolve("mylink") == "https://example.com"


def test_resolve_unknown_token(store):
    with pytest.raises(NotFoundError):
        RedirectService(store).resolve("doesnotexist")


def test_repeated_resolve_counts_each_access(store, clock):
    token = ShortenService(store).shorten("https://example.com/repeat", "", "Lifetime")
    service = RedirectService(store, clock=clock)

    for expected in range(1, 6):
        clock.advance(minutes=1)
        assert service.resolve(token) == "https://example.com/repeat"
        record = store.find_by_token(token)
        assert record.access_count == expected
        assert record.last_accessed_at == clock.now


def test_expired_link_is_gone_and_not_counted(store, clock):
    store.insert("https://example.com", custom_alias="old", expires_at=clock.now - timedelta(seconds=1))

    with pytest.raises(ExpiredError):
        RedirectService(store, clock=clock).resolve("old")

    record = store.find_by_token("old")
    assert record.access_count == 0
    assert record.last_accessed_at is None


def test_link_not_yet_expired_resolves(store, clock):
    store.insert("https://example.com", custom_alias="fresh", expires_at=clock.now + timedelta(hours=1))
    assert RedirectService(store, clock=clock).resolve("fresh") == "https://example.com"


def test_link_expires_over_time(store, clock):
    token = ShortenService(store, clock=clock).shorten("https://example.com", "", "1 Day")
    service = RedirectService(store, clock=clock)

    clock.advance(hours=24)
    assert service.resolve(token) == "https://example.com"

    clock.advance(seconds=1)
    with pytest.raises(ExpiredError):
        service.resolve(token)
    assert store.find_by_token(token).access_count == 1


def test_legacy_unmatched_option_creates_dead_link(store, clock):
    token = ShortenService(store, clock=clock, unmatched_expiration=UNMATCHED_IMMEDIATE).shorten("https://example.com")

    clock.advance(seconds=1)
    with pytest.raises(ExpiredError):
        RedirectService(store, clock=clock).resolve(token)


def test_default_unmatched_option_creates_permanent_link(store, clock):
    token = ShortenService(store, clock=clock).shorten("https://example.com", "", "bogus")

    clock.advance(days=3650)
    assert RedirectService(store, clock=clock).resolve(token) == "https://example.com"


def test_stat_update_failure_does_not_block_redirect(db_session):
    UrlStore(db_session).insert("https://example.com", custom_alias="busy")

    service = RedirectService(FailingStatsStore(db_session))
    assert service.resolve("busy") == "https://example.com"
    assert UrlStore(db_session).find_by_token("busy").access_count == 0


def test_stats_does_not_count_access(store):
    ShortenService(store).shorten("https://example.com", "peek", "Lifetime")

    record = RedirectService(store).stats("peek")
    assert record.original_url == "https://example.com"
    assert record.access_count == 0


def test_stats_unknown_token(store):
    with pytest.raises(NotFoundError):
        RedirectService(store).stats("nope")
