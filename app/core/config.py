"""Application configuration using pydantic settings with structured sections."""

from functools import lru_cache
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


class ServerSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8080
    reload: bool = False
    max_body_size: int = 1 << 20


class DatabaseSettings(BaseModel):
    url: str = Field(default="sqlite+aiosqlite:///./wallet.db", alias="url")
    echo: bool = False
    create_tables: bool = True
    # pool_size + max_overflow is the hard bound on open connections
    pool_size: Optional[int] = 5
    max_overflow: Optional[int] = 20
    pool_timeout: float = 30.0
    pool_recycle: int = 60 * 60
    pool_pre_ping: bool = True
    isolation_level: Optional[str] = "READ COMMITTED"
    sqlite_busy_timeout: float = 30.0


class LoggingSettings(BaseModel):
    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)s [%(request_id)s] %(name)s: %(message)s"

    @field_validator("level", mode="before")
    @classmethod
    def _normalize_level(cls, value: object) -> str:
        level = str(value or "").strip().upper()
        return level if level in _LOG_LEVELS else "INFO"


class Settings(BaseSettings):
    """Top-level application settings with nested sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
        case_sensitive=False,
    )

    environment: Literal["development", "staging", "production", "test"] = "development"
    debug: bool = False
    project_name: str = "Wallet Ledger Service"
    api_prefix: str = "/api/v1"

    server: ServerSettings = ServerSettings()
    database: DatabaseSettings = DatabaseSettings()
    logging: LoggingSettings = LoggingSettings()

    @property
    def database_url(self) -> str:
        return self.database.url

    @property
    def host(self) -> str:
        return self.server.host

    @property
    def port(self) -> int:
        return self.server.port

    @property
    def log_level(self) -> str:
        return self.logging.level


@lru_cache()
def get_settings() -> Settings:
    return Settings()
