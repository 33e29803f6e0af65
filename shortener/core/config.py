import logging
from pathlib import Path
from typing import Optional, Tuple, Type

import tomli_w
from fastapi import Request
from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)
from sqlalchemy.engine import URL

CONFIG_FILE = "config.toml"
DEFAULT_DB_PASS = "THISISVERYBAD PLEASE CHANGE ME"


class Settings(BaseSettings):
    project_name: str = "URL Shortener"

    # HTTP
    base_url: str = "http://localhost:8080"
    http_ip: str = "127.0.0.1"
    port: int = 8080

    # PostgreSQL
    db_ip: str = "127.0.0.1"
    db_port: int = 5432
    db_name: str = "shortener"
    db_user: str = "postgres"
    db_pass: str = DEFAULT_DB_PASS
    db_pool_size: int = Field(10, ge=1)
    # Full SQLAlchemy URL; takes precedence over the db_* keys when set
    database_url: Optional[str] = None

    # Short codes
    short_code_length: int = Field(7, ge=4, le=32)
    max_code_attempts: int = Field(5, ge=1)
    dedupe_long_urls: bool = False

    log_level: str = "INFO"

    @field_validator("log_level")
    def normalize_log_level(cls, v):
        level = v.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level '{v}'")
        return level

    model_config = SettingsConfigDict(
        env_prefix="SHORTENER_",
        toml_file=CONFIG_FILE,
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        return (init_settings, env_settings, TomlConfigSettingsSource(settings_cls))

    @property
    def sqlalchemy_database_url(self):
        if self.database_url:
            return self.database_url
        return URL.create(
            "postgresql+psycopg2",
            username=self.db_user,
            password=self.db_pass,
            host=self.db_ip,
            port=self.db_port,
            database=self.db_name,
        )

    @property
    def uses_default_password(self) -> bool:
        return self.db_pass == DEFAULT_DB_PASS


def default_config() -> dict:
    """Default settings as they are written to config.toml."""
    return Settings.model_construct().model_dump(exclude_none=True)


def write_default_config(path=CONFIG_FILE) -> Path:
    path = Path(path)
    with path.open("wb") as f:
        tomli_w.dump(default_config(), f)
    return path


def get_settings(request: Request) -> Settings:
    """
    FastAPI dependency: the Settings instance the app was built with.
    """
    return request.app.state.settings
