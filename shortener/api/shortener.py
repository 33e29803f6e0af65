from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session
import logging

from shortener.core.config import Settings, get_settings
from shortener.db import database
from shortener.schemas import URLCreateRequest, URLInfoResponse
from shortener.services.shortener import URLService

logger = logging.getLogger(__name__)

api_router = APIRouter(prefix="/api/v1", tags=["api"])
redirect_router = APIRouter(tags=["redirect"])


@api_router.post("/shorten", response_model=URLInfoResponse, status_code=status.HTTP_201_CREATED)
def shorten_url_endpoint(
    url_request: URLCreateRequest,
    db: Session = Depends(database.get_db),
    settings: Settings = Depends(get_settings),
):
    try:
        db_url = URLService.create_short_url(db, url_request.long_url, settings)
    except ValueError as e:
        logger.error(
            f"Failed to create short URL for {url_request.long_url[:50]}.. due to: {str(e)}"
        )
        raise HTTPException(status_code=409, detail=str(e))

    logger.info(f"API success: Shortened {db_url.longurl[:50]}... to {db_url.shorturl}")
    return URLInfoResponse.from_row(db_url, settings.base_url)


@api_router.get("/stats/{short_code}", response_model=URLInfoResponse)
def get_url_statistics_endpoint(
    short_code: str,
    db: Session = Depends(database.get_db),
    settings: Settings = Depends(get_settings),
):
    db_url = URLService.get_url_stats(db, short_code)
    if db_url is None:
        logger.warning(f"Stats 404: Short code not found: {short_code}")
        raise HTTPException(status_code=404, detail="URL not found")
    return URLInfoResponse.from_row(db_url, settings.base_url)


@redirect_router.get("/{short_code}")
def redirect_to_url_endpoint(short_code: str, db: Session = Depends(database.get_db)):
    """
    Access the shortened URL and get redirected to the original long URL.
    """
    long_url = URLService.resolve(db, short_code)
    if long_url is None:
        logger.warning(f"Redirect 404: Short code not found: {short_code}")
        raise HTTPException(status_code=404, detail="URL not found")

    return RedirectResponse(url=long_url, status_code=status.HTTP_302_FOUND)
