"""Order aggregate (CQRS) — an accepted purchase with its fixed financial total.

Lines carry the unit price and a product snapshot captured at reservation
time, so later catalogue edits never change an order's history. After
creation only ``status`` (mirrored from the tracking record) and
``payment_status`` (reported by the payment collaborator) move.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import (
    DateTime,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from ordering.domain import ordering
from ordering.order.events import OrderPlaced, OrderStatusChanged, PaymentStatusRecorded
from ordering.order.pricing import CURRENCY


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    CREATED = "CREATED"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


class PaymentMethod(Enum):
    COD = "COD"
    CARD = "CARD"
    UPI = "UPI"
    NET_BANKING = "NET_BANKING"
    WALLET = "WALLET"


class PaymentStatus(Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    FAILED = "FAILED"


class Channel(Enum):
    SESSION = "session"
    PARTNER = "partner"


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@ordering.value_object(part_of="Order")
class ShippingAddress:
    """Where the order ships, as captured when it was placed."""

    street = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    postal_code = String(required=True, max_length=20)
    country = String(max_length=100, default="India")


@ordering.value_object(part_of="Order")
class ContactDetails:
    name = String(max_length=150)
    email = String(max_length=254)
    phone = String(max_length=20)


@ordering.value_object(part_of="Order")
class OrderPricing:
    """Financial summary in minor units, fixed at creation."""

    subtotal = Integer(required=True, min_value=0)
    shipping = Integer(required=True, min_value=0)
    tax = Integer(required=True, min_value=0)
    total = Integer(required=True, min_value=0)
    currency = String(max_length=3, default=CURRENCY)

    @invariant.post
    def total_is_sum_of_parts(self):
        if self.total != self.subtotal + self.shipping + self.tax:
            raise ValidationError({"total": ["Total must equal subtotal + shipping + tax"]})


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderLine:
    line_number = Integer(required=True, min_value=1)
    product_id = String(required=True, max_length=64)
    product_name = String(required=True, max_length=255)
    quantity = Integer(required=True, min_value=1)
    unit_price = Integer(required=True, min_value=0)
    size = String(max_length=50)
    color = String(max_length=50)
    product_snapshot = Text()  # JSON: name, category, images, sizes, colors

    @property
    def line_total(self) -> int:
        return self.unit_price * self.quantity


# ---------------------------------------------------------------------------
# Aggregate Root (CQRS)
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    order_number = String(required=True, max_length=40, unique=True)
    customer_id = Identifier(required=True)
    lines = HasMany(OrderLine)
    pricing = ValueObject(OrderPricing)
    status = String(
        max_length=20,
        choices=OrderStatus,
        default=OrderStatus.CREATED.value,
    )
    payment_method = String(
        max_length=20,
        choices=PaymentMethod,
        default=PaymentMethod.COD.value,
    )
    payment_status = String(
        max_length=20,
        choices=PaymentStatus,
        default=PaymentStatus.PENDING.value,
    )
    contact = ValueObject(ContactDetails)
    shipping_address = ValueObject(ShippingAddress)
    notes = Text()
    channel = String(max_length=20, choices=Channel, default=Channel.SESSION.value)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        order_number: str,
        customer_id: str,
        lines_data: list[dict],
        pricing: dict,
        shipping_address: dict,
        contact: dict | None = None,
        payment_method: str | None = None,
        notes: str | None = None,
        channel: str = Channel.SESSION.value,
    ):
        """Create an order from reserved, priced lines.

        ``lines_data`` items carry product_id, product_name, quantity,
        unit_price, size, color and a ``product_snapshot`` dict. Cash on
        delivery starts unpaid; any other method was settled upstream.
        """
        if not lines_data:
            raise ValidationError({"lines": ["An order needs at least one line"]})

        now = datetime.now(UTC)
        method = payment_method or PaymentMethod.COD.value
        payment_status = PaymentStatus.PENDING.value if method == PaymentMethod.COD.value else PaymentStatus.PAID.value

        order = cls(
            order_number=order_number,
            customer_id=customer_id,
            pricing=OrderPricing(**pricing),
            status=OrderStatus.CREATED.value,
            payment_method=method,
            payment_status=payment_status,
            contact=ContactDetails(**contact) if contact else None,
            shipping_address=ShippingAddress(**shipping_address),
            notes=notes,
            channel=channel,
            created_at=now,
            updated_at=now,
        )
        for number, line in enumerate(lines_data, start=1):
            order.add_lines(
                OrderLine(
                    line_number=number,
                    product_id=line["product_id"],
                    product_name=line["product_name"],
                    quantity=line["quantity"],
                    unit_price=line["unit_price"],
                    size=line.get("size"),
                    color=line.get("color"),
                    product_snapshot=json.dumps(line.get("product_snapshot") or {}),
                )
            )

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_number=order_number,
                customer_id=str(customer_id),
                channel=channel,
                item_count=len(lines_data),
                total=order.pricing.total,
                currency=order.pricing.currency,
                payment_method=method,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Status (driven by the tracking record)
    # -------------------------------------------------------------------
    def mirror_tracking_status(self, new_status: str) -> None:
        previous = self.status
        if previous == new_status:
            return
        now = datetime.now(UTC)
        self.status = new_status
        self.updated_at = now
        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=previous,
                new_status=new_status,
                changed_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Payment status (driven by the payment collaborator)
    # -------------------------------------------------------------------
    def record_payment_status(self, payment_status: str) -> None:
        try:
            target = PaymentStatus(payment_status)
        except ValueError:
            raise ValidationError({"payment_status": [f"Unknown payment status: {payment_status}"]}) from None

        previous = self.payment_status
        now = datetime.now(UTC)
        self.payment_status = target.value
        self.updated_at = now
        self.raise_(
            PaymentStatusRecorded(
                order_id=str(self.id),
                previous_status=previous,
                payment_status=target.value,
                recorded_at=now,
            )
        )
