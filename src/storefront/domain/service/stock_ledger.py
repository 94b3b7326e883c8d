"""Domain service: Stock Ledger.

The single writer of ``Product.units_in_stock``.  Order handlers never
touch stock directly; they reserve, release and adjust through here.

Every write is a compare-and-set against the version the new count was
computed from.  When a concurrent writer bumps the version first, the
ledger re-reads and tries again, up to ``max_retries`` attempts, before
giving up with ``ContentionError``.  Two reservations that together
exceed the stock can therefore never both succeed.

The read behind each attempt is a locking read (``SELECT ... FOR
UPDATE`` where the store supports it).  Under REPEATABLE READ a plain
re-read would keep returning the transaction's first snapshot, so every
retry would lose against the newer committed version; a locking read
always sees the latest committed row.

The ledger runs inside the caller's unit of work: a write becomes
durable when that unit of work commits, and disappears with it on
rollback.

Callers must never release more units than they reserved.  The ledger
has no record of individual reservations and cannot detect it.
"""

from __future__ import annotations

import structlog

from storefront.domain.exceptions import (
    ContentionError,
    EntityNotFoundError,
    InsufficientStockError,
    ValidationError,
)
from storefront.domain.model.product import StockSnapshot
from storefront.domain.repository.unit_of_work import UnitOfWork

logger = structlog.get_logger(__name__)

DEFAULT_MAX_RETRIES = 5


class StockLedger:

    def __init__(self, uow: UnitOfWork, max_retries: int = DEFAULT_MAX_RETRIES) -> None:
        if max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        self._uow = uow
        self._max_retries = max_retries

    def reserve(self, product_id: int, quantity: int) -> int:
        """Take *quantity* units out of stock and return the new count.

        Raises InsufficientStockError if fewer units are available.
        """
        self._require_positive(quantity, "Reservation")
        return self._apply(product_id, -quantity, "Stock reserved")

    def release(self, product_id: int, quantity: int) -> int:
        """Give *quantity* previously reserved units back to stock."""
        self._require_positive(quantity, "Release")
        return self._apply(product_id, quantity, "Stock released")

    def adjust(self, product_id: int, delta: int) -> int:
        """Change an existing reservation by *delta* units in one write.

        A positive delta takes more units from stock, a negative one
        gives units back.  Equivalent to releasing the old quantity and
        reserving the new one, without a window in between.
        """
        if isinstance(delta, bool) or not isinstance(delta, int):
            raise ValidationError(f"Adjustment must be an integer, got {delta!r}")
        if delta == 0:
            return self.snapshot(product_id).units_in_stock
        return self._apply(product_id, -delta, "Stock adjusted")

    def restock(self, product_id: int, quantity: int) -> int:
        """Add newly received units to stock."""
        self._require_positive(quantity, "Restock")
        return self._apply(product_id, quantity, "Stock replenished")

    def snapshot(self, product_id: int) -> StockSnapshot:
        product = self._uow.products.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product #{product_id} not found")
        return StockSnapshot.of(product)

    # --- Internal helpers -----------------------------------------------------

    def _apply(self, product_id: int, change: int, event: str) -> int:
        for attempt in range(1, self._max_retries + 1):
            product = self._uow.products.get_by_id(product_id, lock=True)
            if product is None:
                raise EntityNotFoundError(f"Product #{product_id} not found")

            new_units = product.units_in_stock + change
            if new_units < 0:
                raise InsufficientStockError(
                    f"Insufficient stock for {product.name} "
                    f"(need {-change}, have {product.units_in_stock} available)"
                )

            if self._uow.products.compare_and_set_stock(
                product_id, product.version, new_units
            ):
                logger.info(
                    event,
                    product_id=product_id,
                    change=change,
                    units_in_stock=new_units,
                    attempt=attempt,
                )
                return new_units

            logger.warning(
                "Stock write conflict, retrying",
                product_id=product_id,
                attempt=attempt,
                max_retries=self._max_retries,
            )

        raise ContentionError(
            f"Could not update stock for product #{product_id} after "
            f"{self._max_retries} attempts"
        )

    @staticmethod
    def _require_positive(quantity: int, what: str) -> None:
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise ValidationError(f"{what} quantity must be a positive integer, got {quantity!r}")
