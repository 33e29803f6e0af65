from shortener.db.models import Url
from shortener.db import repository
from shortener.utils.encoding import is_valid_short_code
from sqlalchemy.orm import Session
from typing import Optional
import logging


logger = logging.getLogger(__name__)


class URLService:

    @staticmethod
    def create_short_url(db: Session, long_url: str, settings, created_by: Optional[int] = None) -> Url:
        if settings.dedupe_long_urls:
            existing = repository.get_url_by_original(db, long_url, created_by)
            if existing:
                logger.info("short URL already existed : '%s' for URL: %s", existing.shorturl, long_url[:50])
                return existing

        url_item = repository.create_url(
            db,
            long_url,
            created_by=created_by,
            code_length=settings.short_code_length,
            max_attempts=settings.max_code_attempts,
        )
        logger.info("Created short code '%s' for URL: %s", url_item.shorturl, long_url[:50])
        return url_item

    @staticmethod
    def resolve(db: Session, short_code: str) -> Optional[str]:
        """Count one visit and return the long URL, or None if the code was never issued."""
        if not is_valid_short_code(short_code):
            return None
        return repository.increment_click(db, short_code)

    @staticmethod
    def get_url_stats(db: Session, short_code: str) -> Optional[Url]:
        if not is_valid_short_code(short_code):
            return None
        return repository.get_url_by_short_code(db, short_code)
