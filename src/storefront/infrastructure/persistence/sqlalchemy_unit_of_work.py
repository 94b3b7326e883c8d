"""SQLAlchemy implementation of UnitOfWork.

Each ``with`` block opens a fresh session, i.e. one database
transaction.  A unit of work instance is not shared between threads;
build one per request.  Queries pass ``read_only=True``, which lets them
run without taking the SQLite write lock.
"""

from __future__ import annotations

from sqlalchemy.orm import Session, sessionmaker

from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.infrastructure.persistence.database import READ_ONLY
from storefront.infrastructure.persistence.sqlalchemy_order_repository import (
    SqlAlchemyOrderRepository,
)
from storefront.infrastructure.persistence.sqlalchemy_product_repository import (
    SqlAlchemyProductRepository,
)


class SqlAlchemyUnitOfWork(UnitOfWork):

    def __init__(
        self, session_factory: sessionmaker[Session], read_only: bool = False
    ) -> None:
        self._session_factory = session_factory
        self._read_only = read_only
        self._session: Session | None = None

    def __enter__(self) -> SqlAlchemyUnitOfWork:
        self._session = self._session_factory()
        if self._read_only:
            self._session.connection(execution_options={READ_ONLY: True})
        self.products = SqlAlchemyProductRepository(self._session)
        self.orders = SqlAlchemyOrderRepository(self._session)
        super().__enter__()
        return self

    def __exit__(self, *args) -> None:
        try:
            super().__exit__(*args)
        finally:
            assert self._session is not None
            self._session.close()
            self._session = None

    def commit(self) -> None:
        assert self._session is not None, "commit() outside of a unit of work"
        self._session.commit()

    def rollback(self) -> None:
        if self._session is not None:
            self._session.rollback()
