from typing import Optional
from sqlalchemy import update
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
import logging
from shortener.utils import encoding

from shortener.db.models import Url, User

logger = logging.getLogger(__name__)


class ShortCodeSpaceExhausted(RuntimeError):
    """Every generated short code collided with an existing row."""


def get_url_by_short_code(db: Session, short_code: str) -> Optional[Url]:
    return db.query(Url).filter(Url.shorturl == short_code).first()

def get_url_by_original(db: Session, long_url: str, created_by: Optional[int] = None) -> Optional[Url]:
    query = db.query(Url).filter(Url.longurl == long_url)
    if created_by is None:
        query = query.filter(Url.created_by.is_(None))
    else:
        query = query.filter(Url.created_by == created_by)
    return query.order_by(Url.id).first()


def _is_short_code_collision(error: IntegrityError) -> bool:
    message = str(error.orig) if getattr(error, "orig", None) is not None else str(error)
    return "shorturl" in message.lower()

def _commit_and_refresh(db: Session, db_url: Url) -> Url:
    try:
        db.add(db_url)
        db.commit()
        db.refresh(db_url)
        return db_url
    except IntegrityError as e:
        db.rollback()
        logger.warning(
            "IntegrityError creating Url shorturl=%s longurl=%s: %s",
            db_url.shorturl, db_url.longurl[:50], str(e.orig)
        )
        raise

def create_url(
    db: Session,
    long_url: str,
    created_by: Optional[int] = None,
    code_length: int = encoding.SHORT_CODE_LENGTH,
    max_attempts: int = 5,
) -> Url:
    for attempt in range(max_attempts):
        short_code = encoding.generate_short_code(code_length)
        if encoding.is_reserved(short_code):
            logger.info(f"Generated reserved short code '{short_code}' on attempt {attempt + 1}/{max_attempts}")
            continue
        db_url = Url(shorturl=short_code, longurl=long_url, created_by=created_by, clicks=0)

        try:
            return _commit_and_refresh(db, db_url)
        except IntegrityError as e:
            if not _is_short_code_collision(e):
                raise ValueError("Failed to create Url") from e
            logger.info(f"Short code collision on attempt {attempt + 1}/{max_attempts}")

    logger.critical(
        "Short code space exhausted: %d attempts at length %d all collided (space of %d codes). "
        "Increase short_code_length.",
        max_attempts, code_length, encoding.code_space_size(code_length)
    )
    raise ShortCodeSpaceExhausted(f"Failed to generate unique short code after {max_attempts} attempts")

def increment_click(db: Session, short_code: str) -> Optional[str]:
    """Atomically bump the click counter and return the long URL, or None on a miss."""
    stmt = (
        update(Url)
        .where(Url.shorturl == short_code)
        .values(clicks=Url.clicks + 1)
        .returning(Url.longurl)
        .execution_options(synchronize_session=False)
    )
    long_url = db.execute(stmt).scalar_one_or_none()
    db.commit()
    return long_url


def create_user(db: Session, username: str, hashed_pw: str, email: str) -> User:
    user = User(username=username, hashed_pw=hashed_pw, email=email)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user

def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.get(User, user_id)
