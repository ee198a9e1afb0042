from sqlalchemy import Column, String, Integer, DateTime
from sqlalchemy.orm import declarative_base

from urlshort.utils.clock import utcnow

Base = declarative_base()


class UrlRecord(Base):
    __tablename__ = "urls"
    # ids are never reused, also on SQLite
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)

    # Exactly one of short_url / custom_alias is set. Both are unique and
    # together form the token keyspace that /s/{token} resolves against.
    short_url = Column(String, unique=True, index=True, nullable=True)
    custom_alias = Column(String, unique=True, index=True, nullable=True)

    original_url = Column(String, nullable=False)

    access_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    last_accessed_at = Column(DateTime, nullable=True)
    # NULL means the link never expires. Never updated after insert.
    expires_at = Column(DateTime, nullable=True)

    @property
    def token(self) -> str:
        return self.custom_alias or self.short_url

    def is_expired(self, now) -> bool:
        return self.expires_at is not None and now > self.expires_at
