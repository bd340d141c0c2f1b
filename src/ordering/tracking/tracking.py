"""OrderTracking aggregate (CQRS) — fulfillment status and its step history.

State Machine:
    CREATED → PROCESSING → SHIPPED → DELIVERED
    {CREATED, PROCESSING} → CANCELLED

Steps are append-only. Creation seeds one completed "Order Placed" step at
index 0; every accepted transition appends one completed step and moves
``current_step`` to it. Cancelling does not restock.
"""

from datetime import UTC, datetime, timedelta

from protean.fields import Boolean, DateTime, HasMany, Identifier, Integer, String, Text

from ordering.domain import ordering
from ordering.order.order import OrderStatus
from ordering.tracking.events import TrackingAdvanced, TrackingStarted
from shared.errors import InvalidTransition

ESTIMATED_DELIVERY_DAYS = 7

_VALID_TRANSITIONS = {
    OrderStatus.CREATED: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),  # terminal
    OrderStatus.CANCELLED: set(),  # terminal
}

INITIAL_STEP = ("Order Placed", "Your order has been received and is being processed")

_STEP_FOR_STATUS = {
    OrderStatus.PROCESSING: ("Order Processing", "Your order is being prepared for shipment"),
    OrderStatus.SHIPPED: ("Order Shipped", "Your order has been handed to the courier"),
    OrderStatus.DELIVERED: ("Order Delivered", "Your order has been delivered"),
    OrderStatus.CANCELLED: ("Order Cancelled", "Your order has been cancelled"),
}


@ordering.entity(part_of="OrderTracking")
class TrackingStep:
    sequence = Integer(required=True, min_value=0)
    step = String(required=True, max_length=100)
    description = Text()
    is_completed = Boolean(default=False)
    timestamp = DateTime(required=True)


@ordering.aggregate
class OrderTracking:
    order_id = Identifier(required=True, unique=True)
    status = String(
        max_length=20,
        choices=OrderStatus,
        default=OrderStatus.CREATED.value,
    )
    current_step = Integer(default=0, min_value=0)
    estimated_delivery = DateTime()
    steps = HasMany(TrackingStep)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def start(cls, order_id: str):
        """Tracking for a freshly placed order: status CREATED, one completed step."""
        now = datetime.now(UTC)
        tracking = cls(
            order_id=order_id,
            status=OrderStatus.CREATED.value,
            current_step=0,
            estimated_delivery=now + timedelta(days=ESTIMATED_DELIVERY_DAYS),
            created_at=now,
            updated_at=now,
        )
        title, description = INITIAL_STEP
        tracking.add_steps(
            TrackingStep(
                sequence=0,
                step=title,
                description=description,
                is_completed=True,
                timestamp=now,
            )
        )
        tracking.raise_(
            TrackingStarted(
                tracking_id=str(tracking.id),
                order_id=str(order_id),
                estimated_delivery=tracking.estimated_delivery,
                started_at=now,
            )
        )
        return tracking

    def ordered_steps(self) -> list:
        return sorted(self.steps or [], key=lambda s: (s.timestamp, s.sequence))

    def can_transition_to(self, target: OrderStatus) -> bool:
        return target in _VALID_TRANSITIONS.get(OrderStatus(self.status), set())

    def advance(self, target_status: str) -> None:
        """Move to ``target_status``, or raise InvalidTransition and change nothing."""
        try:
            target = OrderStatus(target_status)
        except ValueError:
            raise InvalidTransition(self.status, target_status) from None

        if not self.can_transition_to(target):
            raise InvalidTransition(self.status, target.value)

        now = datetime.now(UTC)
        previous = self.status
        sequence = len(self.steps or [])
        title, description = _STEP_FOR_STATUS[target]
        self.add_steps(
            TrackingStep(
                sequence=sequence,
                step=title,
                description=description,
                is_completed=True,
                timestamp=now,
            )
        )
        self.status = target.value
        self.current_step = sequence
        self.updated_at = now
        self.raise_(
            TrackingAdvanced(
                tracking_id=str(self.id),
                order_id=str(self.order_id),
                previous_status=previous,
                new_status=target.value,
                current_step=sequence,
                step=title,
                advanced_at=now,
            )
        )
