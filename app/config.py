"""Application configuration using pydantic-settings.

Values load from environment variables prefixed with ``TSV_`` or a ``.env`` file.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .rules import MODE_NORMALIZE

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="TSV_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    static_page: Path = Field(
        default=Path(__file__).parent / "static" / "tsv.html",
        description="HTML page served on GET /.",
    )
    max_input_bytes: int = Field(
        default=1024 * 1024,
        gt=0,
        description="Request bodies above this size are rejected; normalize output grows exponentially.",
    )
    default_mode: str = Field(
        default=MODE_NORMALIZE,
        description="Mode used when the request carries no mode parameter.",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level: DEBUG, INFO, WARNING, ERROR.",
    )

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings()


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        level=getattr(logging, settings.log_level, logging.INFO),
    )
