"""Fixtures for tests against a real SQLite database file."""

import pytest

from storefront.application.add_product import AddProductHandler
from storefront.infrastructure.persistence.database import (
    create_db_engine,
    create_session_factory,
)
from storefront.infrastructure.persistence.sqlalchemy_unit_of_work import (
    SqlAlchemyUnitOfWork,
)


@pytest.fixture
def engine(tmp_path):
    engine = create_db_engine(f"sqlite:///{tmp_path / 'storefront.db'}")
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def new_uow(session_factory):
    """Build a fresh unit of work, as one request would."""
    return lambda read_only=False: SqlAlchemyUnitOfWork(session_factory, read_only=read_only)


@pytest.fixture
def add_product(new_uow):
    def _add(name: str = "Widget", units_in_stock: int = 10, price: str = "15.00") -> int:
        product = AddProductHandler(new_uow()).handle(
            name=name, price=price, units_in_stock=units_in_stock
        )
        return product.id

    return _add
