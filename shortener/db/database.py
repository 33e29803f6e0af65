import logging

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker

logger = logging.getLogger(__name__)


def build_engine(settings):
    url = settings.sqlalchemy_database_url
    if str(url).startswith("sqlite"):
        return create_engine(url, connect_args={"check_same_thread": False}, future=True)
    return create_engine(
        url,
        pool_pre_ping=True,
        pool_size=settings.db_pool_size,
        future=True,
    )


def build_session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine, future=True)


def get_db(request: Request):
    """
    FastAPI dependency: yield a SQLAlchemy session and ensure it's closed.
    Usage: db: Session = Depends(database.get_db)
    """
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def verify_database_connection(engine):
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        logger.info("Database connection verified")
        return True
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        return False
