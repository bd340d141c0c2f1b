"""Order read side — lookup by order number and a customer's order history.

Views are plain dicts ready for JSON: amounts in minor units, timestamps in
ISO-8601, product snapshots parsed back from their stored JSON.
"""

import json

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from ordering.order.order import Order
from ordering.order.placement import find_order_by_number
from ordering.tracking.advancement import find_tracking
from ordering.tracking.tracking import OrderTracking


def _iso(value):
    return value.isoformat() if value is not None else None


def line_view(line) -> dict:
    snapshot = json.loads(line.product_snapshot) if line.product_snapshot else {}
    return {
        "id": str(line.id),
        "line_number": line.line_number,
        "product_id": line.product_id,
        "product_name": line.product_name,
        "quantity": line.quantity,
        "unit_price": line.unit_price,
        "line_total": line.line_total,
        "size": line.size,
        "color": line.color,
        "product": {
            "id": line.product_id,
            "name": snapshot.get("name", line.product_name),
            "category": snapshot.get("category", ""),
            "images": snapshot.get("images", []),
            "sizes": snapshot.get("sizes", []),
            "colors": snapshot.get("colors", []),
        },
    }


def tracking_view(tracking: OrderTracking | None) -> dict | None:
    if tracking is None:
        return None
    return {
        "status": tracking.status,
        "current_step": tracking.current_step,
        "estimated_delivery": _iso(tracking.estimated_delivery),
        "steps": [
            {
                "sequence": step.sequence,
                "step": step.step,
                "description": step.description,
                "is_completed": step.is_completed,
                "timestamp": _iso(step.timestamp),
            }
            for step in tracking.ordered_steps()
        ],
    }


def order_view(order: Order, tracking: OrderTracking | None = None) -> dict:
    address = order.shipping_address
    contact = order.contact
    return {
        "id": str(order.id),
        "order_number": order.order_number,
        "customer_id": str(order.customer_id),
        "status": order.status,
        "payment_method": order.payment_method,
        "payment_status": order.payment_status,
        "subtotal": order.pricing.subtotal,
        "shipping": order.pricing.shipping,
        "tax": order.pricing.tax,
        "total": order.pricing.total,
        "currency": order.pricing.currency,
        "contact": {
            "name": contact.name if contact else None,
            "email": contact.email if contact else None,
            "phone": contact.phone if contact else None,
        },
        "shipping_address": {
            "street": address.street,
            "city": address.city,
            "state": address.state,
            "postal_code": address.postal_code,
            "country": address.country,
        }
        if address
        else None,
        "notes": order.notes,
        "channel": order.channel,
        "created_at": _iso(order.created_at),
        "items": [line_view(line) for line in sorted(order.lines or [], key=lambda line: line.line_number)],
        "tracking": tracking_view(tracking),
    }


def get_order_by_number(order_number: str) -> dict:
    order = find_order_by_number(order_number)
    if order is None:
        raise ObjectNotFoundError(f"Order {order_number} not found")
    return order_view(order, find_tracking(order.id))


def list_orders_for_customer(customer_id: str) -> list[dict]:
    """A customer's orders, newest first, each with its tracking."""
    orders = (
        current_domain.repository_for(Order)
        ._dao.query.filter(customer_id=str(customer_id))
        .order_by("-created_at")
        .limit(None)
        .all()
        .items
    )
    return [order_view(order, find_tracking(order.id)) for order in orders]
