"""Inventory Reservation — all-or-nothing stock decrement for one order.

Every line is re-validated at decrement time by a conditional UPDATE
(``stock >= quantity AND is_active``) inside one database transaction. A line
that cannot be satisfied raises, the transaction rolls back, and no product of
the order is decremented. Conflicting reservations on the same product are
serialised by the database (row lock on PostgreSQL, writer lock on SQLite),
so two orders racing for the last unit cannot both succeed and stock never
goes negative.

Lines are applied in product-id order so that concurrent multi-line orders
take their row locks in the same order.
"""

from dataclasses import dataclass
from datetime import UTC, datetime

import structlog
from protean.exceptions import ValidationError
from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError

from catalogue import get_store
from catalogue.product import Product
from catalogue.schema import products
from shared.errors import InsufficientStock, ProductNotFound

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class OrderLineRequest:
    """One requested line: input only, never persisted as-is."""

    product_id: str
    quantity: int
    size: str | None = None
    color: str | None = None


@dataclass(frozen=True)
class ReservedLine:
    """A line whose stock has been taken, with the product as it was at that instant."""

    product: Product
    quantity: int
    size: str | None = None
    color: str | None = None

    @property
    def product_id(self) -> str:
        return self.product.id

    @property
    def unit_price(self) -> int:
        return self.product.price


def _validate(lines) -> None:
    if not lines:
        raise ValidationError({"items": ["Order items are required"]})
    for line in lines:
        if not line.product_id:
            raise ValidationError({"product_id": ["Product ID is required"]})
        if isinstance(line.quantity, bool) or not isinstance(line.quantity, int) or line.quantity < 1:
            raise ValidationError({"quantity": [f"Quantity must be a positive integer for product {line.product_id}"]})


def reserve(lines: list[OrderLineRequest]) -> list[ReservedLine]:
    """Take stock for every line or for none of them.

    Returns the reserved lines in request order. Raises ProductNotFound for an
    unknown or inactive product and InsufficientStock when a line asks for
    more than is on hand.
    """
    _validate(lines)

    store = get_store()
    reserved: dict[int, ReservedLine] = {}
    now = datetime.now(UTC)

    try:
        with store.engine.begin() as conn:
            for index, line in sorted(enumerate(lines), key=lambda pair: pair[1].product_id):
                result = conn.execute(
                    update(products)
                    .where(
                        products.c.id == line.product_id,
                        products.c.is_active.is_(True),
                        products.c.stock >= line.quantity,
                    )
                    .values(stock=products.c.stock - line.quantity, updated_at=now)
                )
                row = conn.execute(select(products).where(products.c.id == line.product_id)).first()

                if result.rowcount == 0:
                    if row is None or not row.is_active:
                        raise ProductNotFound(line.product_id)
                    raise InsufficientStock(line.product_id, available=row.stock, requested=line.quantity)

                reserved[index] = ReservedLine(
                    product=Product.from_row(row),
                    quantity=line.quantity,
                    size=line.size,
                    color=line.color,
                )
    except (ProductNotFound, InsufficientStock) as exc:
        logger.info(
            "Reservation rejected",
            kind=exc.kind,
            product_id=exc.product_id,
            line_count=len(lines),
        )
        raise
    except SQLAlchemyError:
        # The transaction never committed, so there is nothing to compensate
        logger.exception(
            "Reservation failed in storage",
            product_ids=[line.product_id for line in lines],
        )
        raise

    logger.info(
        "Stock reserved",
        lines=[{"product_id": line.product_id, "quantity": line.quantity} for line in lines],
    )
    return [reserved[index] for index in range(len(lines))]


def release(lines: list[ReservedLine]) -> None:
    """Compensation: put the quantities of a committed reservation back on hand."""
    if not lines:
        return

    store = get_store()
    now = datetime.now(UTC)
    with store.engine.begin() as conn:
        for line in sorted(lines, key=lambda reserved_line: reserved_line.product_id):
            conn.execute(
                update(products)
                .where(products.c.id == line.product_id)
                .values(stock=products.c.stock + line.quantity, updated_at=now)
            )

    logger.warning(
        "Reservation released",
        lines=[{"product_id": line.product_id, "quantity": line.quantity} for line in lines],
    )
