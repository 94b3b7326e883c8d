"""SQLAlchemy implementation of OrderRepository."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from storefront.domain.model.order import Order, OrderItem, OrderStatus
from storefront.domain.model.value_objects import Money, Quantity
from storefront.domain.repository.order_repository import OrderRepository
from storefront.infrastructure.persistence.models import OrderItemRecord, OrderRecord

_SORT_COLUMNS = {
    "id": OrderRecord.id,
    "user_id": OrderRecord.user_id,
    "status": OrderRecord.status,
    "start_date": OrderRecord.start_date,
    "delivery_date": OrderRecord.delivery_date,
    "delivery_price": OrderRecord.delivery_price,
}


class SqlAlchemyOrderRepository(OrderRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    # --- OrderRepository interface --------------------------------------------

    def get_by_id(self, order_id: int, lock: bool = False) -> Order | None:
        record = self._load(OrderRecord.id == order_id, lock)
        return self._to_domain(record) if record is not None else None

    def get_by_item_id(self, item_id: int, lock: bool = False) -> Order | None:
        owner = select(OrderItemRecord.order_id).where(OrderItemRecord.id == item_id)
        record = self._load(OrderRecord.id.in_(owner.scalar_subquery()), lock)
        return self._to_domain(record) if record is not None else None

    def list_items(self) -> list[OrderItem]:
        records = self._session.scalars(
            select(OrderItemRecord).order_by(OrderItemRecord.id)
        ).all()
        return [self._item_to_domain(r) for r in records]

    def save(self, order: Order) -> None:
        record = self._session.get(OrderRecord, order.id) if order.id is not None else None
        if record is None:
            record = OrderRecord()
            self._session.add(record)

        record.user_id = order.user_id
        record.status = order.status.value
        record.delivery_price = order.delivery_price.amount
        record.start_date = order.start_date
        record.delivery_date = order.delivery_date

        # Sync items: update kept ones, add new ones, orphan the rest.
        existing = {r.id: r for r in record.items}
        kept: list[OrderItemRecord] = []
        created: list[tuple[OrderItem, OrderItemRecord]] = []
        for item in order.items:
            item_record = existing.get(item.id) if item.id is not None else None
            if item_record is None:
                item_record = OrderItemRecord(product_id=item.product_id)
                created.append((item, item_record))
            item_record.quantity = item.quantity.value
            kept.append(item_record)
        record.items = kept

        self._session.flush()

        order.id = record.id
        for item in order.items:
            item.order_id = record.id
        for item, item_record in created:
            item.id = item_record.id

    def delete(self, order: Order) -> None:
        record = self._session.get(OrderRecord, order.id)
        if record is not None:
            self._session.delete(record)
            self._session.flush()

    def list_page(
        self,
        offset: int,
        limit: int,
        sort_by: str = "id",
        user_id: int | None = None,
    ) -> tuple[list[Order], int]:
        criteria = []
        if user_id is not None:
            criteria.append(OrderRecord.user_id == user_id)

        total = self._session.scalar(
            select(func.count()).select_from(OrderRecord).where(*criteria)
        )
        records = self._session.scalars(
            select(OrderRecord)
            .where(*criteria)
            .order_by(_SORT_COLUMNS[sort_by], OrderRecord.id)
            .offset(offset)
            .limit(limit)
        ).all()
        return [self._to_domain(r) for r in records], total or 0

    def units_per_product(self) -> dict[int, int]:
        rows = self._session.execute(
            select(OrderItemRecord.product_id, func.sum(OrderItemRecord.quantity))
            .join(OrderRecord, OrderItemRecord.order_id == OrderRecord.id)
            .where(OrderRecord.status != OrderStatus.CANCELLED.value)
            .group_by(OrderItemRecord.product_id)
            .order_by(OrderItemRecord.product_id)
        ).all()
        return {product_id: int(units) for product_id, units in rows}

    # --- Helpers --------------------------------------------------------------

    def _load(self, criterion, lock: bool) -> OrderRecord | None:
        stmt = select(OrderRecord).where(criterion)
        if lock:
            # Held until the transaction ends. SQLite ignores it; a writing
            # transaction there already holds the database write lock.
            stmt = stmt.with_for_update()
        return self._session.execute(
            stmt.execution_options(populate_existing=True)
        ).scalar_one_or_none()

    @staticmethod
    def _to_domain(record: OrderRecord) -> Order:
        return Order(
            id=record.id,
            user_id=record.user_id,
            status=OrderStatus(record.status),
            delivery_price=Money(record.delivery_price),
            start_date=record.start_date,
            delivery_date=record.delivery_date,
            items=[SqlAlchemyOrderRepository._item_to_domain(r) for r in record.items],
        )

    @staticmethod
    def _item_to_domain(record: OrderItemRecord) -> OrderItem:
        return OrderItem(
            id=record.id,
            product_id=record.product_id,
            quantity=Quantity(record.quantity),
            order_id=record.order_id,
        )
