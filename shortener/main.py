from contextlib import asynccontextmanager
from pathlib import Path
import argparse
import logging
import sys

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import ValidationError

from shortener.api import pages, shortener
from shortener.core.config import CONFIG_FILE, Settings, write_default_config
from shortener.core.logging_config import configure_logging
from shortener.db import database
from shortener.db.models import Base

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).resolve().parent / "static"


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    engine = database.build_engine(settings)
    if not database.verify_database_connection(engine):
        engine.dispose()
        raise RuntimeError("Database unreachable, check the db_* settings in config.toml")
    Base.metadata.create_all(bind=engine)
    logger.info("Database models initialized/checked.")

    app.state.engine = engine
    app.state.session_factory = database.build_session_factory(engine)

    yield

    logger.info("Shutting down gracefully...")
    engine.dispose()


def create_app(settings: Settings) -> FastAPI:
    app = FastAPI(
        title=settings.project_name,
        description="Minimal URL shortener with click counting",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")
    app.include_router(pages.router)
    app.include_router(shortener.api_router)

    @app.get("/health", tags=["health"])
    def health_check():
        return {"status": "healthy", "service": "url-shortener"}

    # Catch-all short code route goes last
    app.include_router(shortener.redirect_router)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})

    return app


def _generate_config(path: Path) -> int:
    if path.exists():
        logger.error(f"{path} already exists, refusing to overwrite it")
        return 1
    write_default_config(path)
    logger.warning(f"Wrote default configuration to {path}. Edit it before starting the server.")
    return 0


def _serve(path: Path) -> int:
    if not path.exists():
        write_default_config(path)
        logger.error(f"No configuration found. Wrote defaults to {path}; edit it and restart.")
        return 1

    try:
        settings = Settings()
    except ValidationError as e:
        logger.error(f"Invalid configuration in {path}:\n{e}")
        return 1
    configure_logging(settings.log_level)
    if settings.uses_default_password and not settings.database_url:
        logger.warning("Using default database password. THIS MUST BE CHANGED!")

    logger.info(f"Application '{settings.project_name}' starting up on {settings.http_ip}:{settings.port}.")
    uvicorn.run(create_app(settings), host=settings.http_ip, port=settings.port, log_config=None)
    return 0


def run(argv=None) -> int:
    parser = argparse.ArgumentParser(prog="url-shortener", description="Minimal URL shortener")
    parser.add_argument(
        "mode",
        nargs="?",
        default="serve",
        choices=["serve", "config"],
        help="'serve' (default) runs the web server, 'config' writes a default config.toml and exits",
    )
    args = parser.parse_args(argv)

    configure_logging()
    path = Path(CONFIG_FILE)
    if args.mode == "config":
        return _generate_config(path)
    return _serve(path)


def main():
    sys.exit(run())
