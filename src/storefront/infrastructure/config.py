"""Application settings, read from the environment or a ``.env`` file.

Every variable carries the ``STOREFRONT_`` prefix, e.g.
``STOREFRONT_DATABASE_URL=postgresql+psycopg2://...``.
"""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):

    model_config = SettingsConfigDict(
        env_prefix="STOREFRONT_",
        env_file=".env",
        extra="ignore",
    )

    # Database
    database_url: str = "sqlite:///data/storefront.db"
    sql_echo: bool = False

    # Stock Ledger: compare-and-set attempts per write before giving up
    stock_max_retries: int = 5

    # Logging
    environment: str = "development"
    log_level: str | None = None
