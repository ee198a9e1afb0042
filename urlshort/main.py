from contextlib import asynccontextmanager
from pathlib import Path
import logging

from fastapi import FastAPI, Request
from fastapi.responses import FileResponse, JSONResponse

from urlshort.api import shortener
from urlshort.core.config import settings
from urlshort.core.exceptions import ShortenerError
from urlshort.core.logging_config import configure_logging
from urlshort.db.Connection import database
from urlshort.db.Models import models
from urlshort.routers import health

logger = configure_logging()

STATIC_DIR = Path(__file__).resolve().parent / "static"


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Application '{settings.PROJECT_NAME}' starting up.")
    models.Base.metadata.create_all(bind=database.engine)
    logger.info("Database models initialized/checked.")
    database.verify_database_connection()
    database.verify_redis_connection()
    yield
    logger.info("Shutting down gracefully...")
    database.engine.dispose()
    if database.redis_client is not None:
        database.redis_client.close()


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="URL shortener with expiring links and access stats",
    lifespan=lifespan,
)


@app.get("/", include_in_schema=False)
def landing_page():
    return FileResponse(STATIC_DIR / "index.html", media_type="text/html")


app.include_router(health.router)
app.include_router(shortener.router)


@app.exception_handler(ShortenerError)
async def shortener_exception_handler(request: Request, exc: ShortenerError):
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__} at {request.url.path}: {exc}", exc_info=exc)
    else:
        logger.warning(f"{exc.status_code} at {request.url.path}: {exc}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})
