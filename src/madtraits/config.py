"""Application settings.

Values come from environment variables prefixed with ``MADTRAITS_`` (or a
``.env`` file in the working directory), e.g.::

    MADTRAITS_CACHE_DIR=~/.cache/madtraits
    MADTRAITS_DELAY=10
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path  # noqa: TC003

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration for MADtraits."""

    model_config = SettingsConfigDict(
        env_prefix="MADTRAITS_",
        env_file=".env",
        extra="ignore",
    )

    app_name: str = "madtraits"
    app_env: str = "development"
    debug: bool = False

    cache_dir: Path | None = Field(
        default=None, description="Directory for cached datasets (strongly recommended)"
    )
    delay: float = Field(
        default=5.0, ge=0, description="Seconds to wait between downloading datasets"
    )
    wide_traits: int = Field(
        default=10, gt=0, description="Default number of traits in a wide table"
    )


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings (read once)."""
    return Settings()
