"""Runtime settings, read from ``LINEUP_*`` environment variables."""

from __future__ import annotations

import logging

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="LINEUP_", env_file=".env", extra="ignore")

    max_bulk_ids: int = 200
    recheck_conflicts_on_apply: bool = True
    log_level: str = "INFO"
    seed_demo_data: bool = False


settings = Settings()


def get_settings() -> Settings:
    """FastAPI dependency; tests override it via ``app.dependency_overrides``."""
    return settings


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
