"""Order domain events — facts about placed orders and their later status changes."""

from protean.fields import DateTime, Identifier, Integer, String

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderPlaced:
    """An order was accepted, its stock reserved and its total fixed."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    customer_id = Identifier(required=True)
    channel = String(required=True)
    item_count = Integer(required=True)
    total = Integer(required=True)
    currency = String(required=True)
    payment_method = String(required=True)
    placed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderStatusChanged:
    """The order's fulfillment status followed its tracking record."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class PaymentStatusRecorded:
    """The payment collaborator reported a new payment status."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    payment_status = String(required=True)
    recorded_at = DateTime(required=True)
