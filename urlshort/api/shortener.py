from fastapi import APIRouter, Depends, Form, status
from fastapi.responses import HTMLResponse, RedirectResponse
import html
from urllib.parse import quote
import logging

from urlshort.api.dependencies import get_redirect_service, get_shorten_service
from urlshort.core.config import settings
from urlshort.db.Models.models import UrlRecord
from urlshort.schemas import URLCreateRequest, URLInfoResponse
from urlshort.services.redirect import RedirectService
from urlshort.services.shortener import ShortenService

logger = logging.getLogger(__name__)

router = APIRouter()


def build_short_url(token: str) -> str:
    # aliases are arbitrary strings, keep "?", "#" and "%" inside the path
    return f"{settings.BASE_URL.rstrip('/')}/s/{quote(token, safe='/')}"


def to_response(record: UrlRecord, now) -> URLInfoResponse:
    return URLInfoResponse(
        original_url=record.original_url,
        token=record.token,
        short_url=build_short_url(record.token),
        custom_alias=record.custom_alias,
        created_at=record.created_at,
        last_accessed_at=record.last_accessed_at,
        expires_at=record.expires_at,
        expired=record.is_expired(now),
        access_count=record.access_count,
    )


@router.post("/shorten", response_class=HTMLResponse, tags=["web"])
def shorten_form_endpoint(
    url: str = Form(""),
    custom_alias: str = Form("", alias="customAlias"),
    expiration: str = Form(""),
    service: ShortenService = Depends(get_shorten_service),
):
    token = service.shorten(url, custom_alias, expiration)
    full_url = html.escape(build_short_url(token))
    return f'Shortened URL: <a href="{full_url}" target="_blank">{full_url}</a>'


@router.get("/s/{token:path}", tags=["redirect"])
def redirect_endpoint(token: str, service: RedirectService = Depends(get_redirect_service)):
    logger.info(f"Requested token: {token}")
    original_url = service.resolve(token)
    return RedirectResponse(url=original_url, status_code=status.HTTP_302_FOUND)


@router.post("/api/v1/shorten", response_model=URLInfoResponse, status_code=status.HTTP_201_CREATED, tags=["api"])
def shorten_api_endpoint(
    url_request: URLCreateRequest,
    shorten_service: ShortenService = Depends(get_shorten_service),
    redirect_service: RedirectService = Depends(get_redirect_service),
):
    token = shorten_service.shorten(url_request.original_url, url_request.custom_alias, url_request.expiration)
    record = redirect_service.stats(token)
    logger.info(f"API success: Shortened {record.original_url[:50]}... to {token}")
    return to_response(record, shorten_service.clock())


@router.get("/api/v1/stats/{token:path}", response_model=URLInfoResponse, tags=["api"])
def stats_endpoint(token: str, service: RedirectService = Depends(get_redirect_service)):
    """Link metadata and access stats. Does not count as an access."""
    record = service.stats(token)
    return to_response(record, service.clock())
