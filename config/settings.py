"""Application settings and configuration."""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(
        default="KV Image Store",
        description="Application name"
    )
    app_version: str = Field(
        default="0.1.0",
        description="Application version"
    )
    environment: Literal["local", "dev", "stage", "prod"] = Field(
        default="local",
        description="Deployment environment"
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode"
    )

    # Server Configuration
    host: str = Field(
        default="127.0.0.1",
        description="Interface the HTTP server binds to"
    )
    port: int = Field(
        default=3000,
        description="Port the HTTP server listens on"
    )

    # API Configuration
    cors_origins: list[str] = Field(
        default=["*"],
        description="Allowed CORS origins"
    )

    # Storage Configuration
    storage_backend: Literal["memory", "database"] = Field(
        default="memory",
        description="Backend holding the key-value entries"
    )
    lock_timeout: float = Field(
        default=5.0,
        gt=0,
        description="Seconds to wait for the in-memory store lock before failing"
    )

    # Database Configuration (for the database backend)
    database_url: str = Field(
        default="sqlite:///data/kv_store.sqlite3",
        description="Database connection URL"
    )
    database_echo: bool = Field(
        default=False,
        description="Echo SQL statements (for debugging)"
    )

    # Image Configuration
    thumbnail_width: int = Field(
        default=100,
        gt=0,
        description="Maximum width of images returned by the thumbnail endpoint"
    )
    thumbnail_height: int = Field(
        default=100,
        gt=0,
        description="Maximum height of images returned by the thumbnail endpoint"
    )

    # Logging Configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level"
    )
    log_format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log message format"
    )
    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format"
    )
    log_file: Optional[Path] = Field(
        default=None,
        description="Path to log file (if None, logs to stdout only)"
    )

    # Performance Configuration
    max_upload_size: int = Field(
        default=10 * 1024 * 1024,  # 10MB
        description="Maximum request body size in bytes"
    )

    @field_validator("log_file", mode="before")
    @classmethod
    def resolve_log_file(cls, v: str | Path | None) -> Path | None:
        """Ensure log file is a Path object."""
        if isinstance(v, str):
            return Path(v) if v else None
        return v

    @property
    def log_level_numeric(self) -> int:
        """Get numeric log level."""
        return getattr(logging, self.log_level)

    @property
    def thumbnail_size(self) -> tuple[int, int]:
        """Bounding box used by the thumbnail endpoint."""
        return (self.thumbnail_width, self.thumbnail_height)

    def configure_logging(self) -> None:
        """Configure logging based on settings."""
        import sys

        handlers: list[logging.Handler] = []

        # Console handler
        console_handler = logging.StreamHandler(sys.stdout)
        handlers.append(console_handler)

        # File handler if specified
        if self.log_file:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(self.log_file)
            handlers.append(file_handler)

        if self.log_json:
            import json

            class JSONFormatter(logging.Formatter):
                def format(self, record: logging.LogRecord) -> str:
                    log_obj = {
                        "timestamp": self.formatTime(record),
                        "level": record.levelname,
                        "logger": record.name,
                        "message": record.getMessage(),
                        "module": record.module,
                        "function": record.funcName,
                        "line": record.lineno,
                    }
                    if record.exc_info:
                        log_obj["exception"] = self.formatException(record.exc_info)
                    return json.dumps(log_obj)

            formatter = JSONFormatter()
        else:
            formatter = logging.Formatter(self.log_format)

        for handler in handlers:
            handler.setFormatter(formatter)

        logging.basicConfig(
            level=self.log_level_numeric,
            handlers=handlers,
            force=True,
        )

        if self.debug:
            logging.getLogger("kv_image_store").setLevel(logging.DEBUG)
        else:
            # Pillow logs every plugin it tries at debug level
            logging.getLogger("PIL").setLevel(logging.WARNING)
            logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
