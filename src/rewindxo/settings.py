"""Application configuration and logging for RewindXO.

Settings are read from real environment variables first, then from ``.env``
and ``.env.local`` in the working directory.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevelName = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    """Typed configuration for the web server and logging.

    Attributes
    ----------
    host : str
        Interface uvicorn binds to; maps from `REWINDXO_HOST`.
    port : int
        Port uvicorn listens on; maps from `REWINDXO_PORT`.
    log_level : LogLevelName
        Global log level string; maps from `LOG_LEVEL`.
    """

    host: str = Field(default="0.0.0.0", alias="REWINDXO_HOST")
    port: int = Field(default=8000, ge=1, le=65535, alias="REWINDXO_PORT")
    log_level: LogLevelName = Field(default="INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    def log_level_numeric(self) -> int:
        """Return the numeric logging level corresponding to `self.log_level`."""
        return getattr(logging, self.log_level, logging.INFO)


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Create and cache a `Settings` instance.

    Tests can force a rebuild with `load_settings.cache_clear()` after
    changing `os.environ`.
    """
    return Settings()


settings: Settings = load_settings()


def get_logger(name: str = "rewindxo") -> logging.Logger:
    """Return a logger configured to the current `LOG_LEVEL`."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
        )
        logger.addHandler(handler)
    logger.setLevel(load_settings().log_level_numeric())
    logger.propagate = False
    return logger
