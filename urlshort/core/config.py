from typing import Literal, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    PROJECT_NAME: str = "URL Shortener"

    DATABASE_URL: str = "sqlite:///./urlshortener.db"

    # Lookup cache is only enabled when a Redis URL is configured
    REDIS_URL: Optional[str] = None
    CACHE_TTL: int = 86400

    BASE_URL: str = "http://localhost:8080"

    TOKEN_LENGTH: int = 8
    MAX_TOKEN_ATTEMPTS: int = 10

    # "never": an unknown expiration option means the link does not expire.
    # "immediate": legacy behaviour, the link expires at creation time.
    UNMATCHED_EXPIRATION: Literal["never", "immediate"] = "never"

    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"

settings = Settings()
