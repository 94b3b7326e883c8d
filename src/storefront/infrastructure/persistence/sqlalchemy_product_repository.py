"""SQLAlchemy implementation of ProductRepository."""

from __future__ import annotations

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.product_repository import ProductRepository
from storefront.infrastructure.persistence.models import ProductRecord


class SqlAlchemyProductRepository(ProductRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    # --- ProductRepository interface ------------------------------------------

    def get_by_id(self, product_id: int, lock: bool = False) -> Product | None:
        stmt = select(ProductRecord).where(ProductRecord.id == product_id)
        if lock:
            stmt = stmt.with_for_update()
        record = self._session.execute(
            stmt.execution_options(populate_existing=True)
        ).scalar_one_or_none()
        return self._to_domain(record) if record is not None else None

    def list_all(self) -> list[Product]:
        records = self._session.scalars(
            select(ProductRecord)
            .order_by(ProductRecord.id)
            .execution_options(populate_existing=True)
        ).all()
        return [self._to_domain(r) for r in records]

    def add(self, product: Product) -> None:
        record = ProductRecord(
            name=product.name,
            description=product.description,
            price=product.price.amount,
            units_in_stock=product.units_in_stock,
            version=product.version,
        )
        self._session.add(record)
        self._session.flush()
        product.id = record.id

    def compare_and_set_stock(
        self, product_id: int, expected_version: int, units_in_stock: int
    ) -> bool:
        result = self._session.execute(
            update(ProductRecord)
            .where(
                ProductRecord.id == product_id,
                ProductRecord.version == expected_version,
            )
            .values(
                units_in_stock=units_in_stock,
                version=ProductRecord.version + 1,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    # --- Mapping --------------------------------------------------------------

    @staticmethod
    def _to_domain(record: ProductRecord) -> Product:
        return Product(
            id=record.id,
            name=record.name,
            description=record.description,
            price=Money(record.price),
            units_in_stock=record.units_in_stock,
            version=record.version,
        )
