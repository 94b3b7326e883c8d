"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from sqlalchemy import Engine

from storefront.infrastructure.config import Settings
from storefront.infrastructure.persistence.database import (
    create_db_engine,
    create_session_factory,
)
from storefront.infrastructure.persistence.sqlalchemy_unit_of_work import (
    SqlAlchemyUnitOfWork,
)

# One engine (and connection pool) per database URL for the process.
_engines: dict[str, Engine] = {}


def settings() -> Settings:
    return Settings()


def engine(config: Settings) -> Engine:
    if config.database_url not in _engines:
        _engines[config.database_url] = create_db_engine(
            config.database_url, echo=config.sql_echo
        )
    return _engines[config.database_url]


def unit_of_work(config: Settings, read_only: bool = False) -> SqlAlchemyUnitOfWork:
    return SqlAlchemyUnitOfWork(create_session_factory(engine(config)), read_only=read_only)
