import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from shortener.main import create_app
from shortener.db.models import Base
from shortener.db import database
from shortener.core.config import Settings


# Create in-memory SQLite database for testing
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    """Keep any config.toml in the checkout out of the tests."""
    monkeypatch.chdir(tmp_path)
    for var in ("SHORTENER_DEDUPE_LONG_URLS", "SHORTENER_SHORT_CODE_LENGTH", "SHORTENER_DATABASE_URL"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def settings():
    return Settings(database_url=SQLALCHEMY_TEST_DATABASE_URL, base_url="http://sho.rt")


@pytest.fixture
def db_session():
    """Creates a fresh database for each test."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app, db_session):
    """Creates a test client with overridden database dependency."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[database.get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def sample_urls():
    """Provides sample URLs for testing."""
    return [
        "https://example.com/test1",
        "https://google.com/search?q=test",
        "https://github.com/user/repo",
    ]
