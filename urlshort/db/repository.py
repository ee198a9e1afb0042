from typing import Optional
from datetime import datetime
import logging

from sqlalchemy import or_
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from urlshort.core.exceptions import PersistenceError
from urlshort.db.Models.models import UrlRecord

logger = logging.getLogger(__name__)


class TokenConflictError(Exception):
    """Insert rejected by a uniqueness constraint on short_url or custom_alias."""


class UrlStore:
    """All SQL for the ``urls`` table goes through here.

    SQLAlchemy errors are rolled back and re-raised as PersistenceError, except
    unique violations on insert which become TokenConflictError so callers can
    decide between retrying and reporting the alias as taken.
    """

    def __init__(self, db: Session):
        self.db = db

    def _matching(self, token: str):
        return self.db.query(UrlRecord).filter(
            or_(UrlRecord.short_url == token, UrlRecord.custom_alias == token)
        )

    def token_exists(self, token: str) -> bool:
        try:
            return self._matching(token).first() is not None
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Failed to check token %s: %s", token, e)
            raise PersistenceError(str(e)) from e

    def find_by_token(self, token: str) -> Optional[UrlRecord]:
        try:
            return self._matching(token).first()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Database query error for %s: %s", token, e)
            raise PersistenceError(str(e)) from e

    def insert(
        self,
        original_url: str,
        short_url: Optional[str] = None,
        custom_alias: Optional[str] = None,
        expires_at: Optional[datetime] = None,
    ) -> UrlRecord:
        record = UrlRecord(
            original_url=original_url,
            short_url=short_url,
            custom_alias=custom_alias,
            expires_at=expires_at,
        )
        try:
            self.db.add(record)
            self.db.commit()
            self.db.refresh(record)
            return record
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(
                "IntegrityError inserting short_url=%s custom_alias=%s: %s",
                short_url, custom_alias, e.orig,
            )
            raise TokenConflictError(str(e.orig)) from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Failed to insert URL %s: %s", original_url[:50], e)
            raise PersistenceError(str(e)) from e

    def record_access(self, token: str, accessed_at: datetime) -> int:
        try:
            updated = self._matching(token).update(
                {
                    UrlRecord.access_count: UrlRecord.access_count + 1,
                    UrlRecord.last_accessed_at: accessed_at,
                },
                synchronize_session=False,
            )
            self.db.commit()
            return updated
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceError(str(e)) from e
