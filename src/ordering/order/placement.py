"""Order Assembler — turns a validated order request into a persisted order.

The flow is a saga across two stores:

1. validate the request (nothing is touched if this fails)
2. resolve the owning customer (guest customers by email)
3. reserve stock in the catalogue store, all lines or none
4. price the reserved lines
5. number and persist Order + OrderTracking in one unit of work,
   retrying with a fresh number on collision

Any failure after step 3 releases the reservation before the error reaches
the caller. None of this awaits, so a dropped client connection cannot stop
the saga between reserving and compensating.
"""

import json
from dataclasses import dataclass, field

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Integer, String, Text
from protean.utils.globals import current_domain

from inventory.reservation import OrderLineRequest, release, reserve
from ordering.customer.resolution import ResolveCustomer
from ordering.domain import ordering
from ordering.gateway.caller import Caller, PartnerCaller, SessionCaller
from ordering.order.numbering import generate_order_number
from ordering.order.order import Channel, ContactDetails, Order, PaymentMethod, ShippingAddress
from ordering.order.pricing import CURRENCY, price
from ordering.tracking.tracking import OrderTracking
from shared.errors import InternalError, OrderDeskError, OrderNumberCollision

logger = structlog.get_logger(__name__)

MAX_ORDER_NUMBER_ATTEMPTS = 5
REQUIRED_ADDRESS_FIELDS = ("street", "city", "state", "postal_code")


@dataclass
class OrderRequest:
    """Canonical order request, whichever gateway it came through."""

    caller: Caller
    lines: list[OrderLineRequest]
    shipping_address: dict
    customer_id: str | None = None
    contact: dict = field(default_factory=dict)
    payment_method: str | None = None
    notes: str | None = None

    @property
    def channel(self) -> str:
        return Channel.PARTNER.value if isinstance(self.caller, PartnerCaller) else Channel.SESSION.value

    def log_context(self) -> dict:
        context = {
            "channel": self.channel,
            "customer_id": self.customer_id,
            "line_count": len(self.lines or []),
            "product_ids": [line.product_id for line in self.lines or []],
        }
        if isinstance(self.caller, SessionCaller):
            context["user_id"] = self.caller.user_id
        else:
            context["api_key_id"] = self.caller.api_key_id
        return context


# ---------------------------------------------------------------------------
# Persistence command
# ---------------------------------------------------------------------------
@ordering.command(part_of="Order")
class PlaceOrder:
    order_number = String(required=True, max_length=40)
    customer_id = String(required=True, max_length=255)
    lines = Text(required=True)  # JSON list of line dicts
    subtotal = Integer(required=True)
    shipping = Integer(required=True)
    tax = Integer(required=True)
    total = Integer(required=True)
    currency = String(max_length=3, default=CURRENCY)
    shipping_address = Text(required=True)  # JSON: address dict
    contact = Text()  # JSON: name, email, phone
    payment_method = String(max_length=20)
    notes = Text()
    channel = String(required=True, max_length=20)


def find_order_by_number(order_number: str) -> Order | None:
    records = current_domain.repository_for(Order)._dao.query.filter(order_number=order_number).all().items
    return records[0] if records else None


@ordering.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        if find_order_by_number(command.order_number) is not None:
            raise OrderNumberCollision(command.order_number)

        order = Order.place(
            order_number=command.order_number,
            customer_id=command.customer_id,
            lines_data=json.loads(command.lines),
            pricing={
                "subtotal": command.subtotal,
                "shipping": command.shipping,
                "tax": command.tax,
                "total": command.total,
                "currency": command.currency or CURRENCY,
            },
            shipping_address=json.loads(command.shipping_address),
            contact=json.loads(command.contact) if command.contact else None,
            payment_method=command.payment_method,
            notes=command.notes,
            channel=command.channel,
        )
        tracking = OrderTracking.start(str(order.id))

        try:
            current_domain.repository_for(Order).add(order)
        except ValidationError as exc:
            # A concurrent placement took the number between the check and the add
            if "order_number" in exc.messages:
                raise OrderNumberCollision(command.order_number) from exc
            raise
        current_domain.repository_for(OrderTracking).add(tracking)
        return str(order.id)


# ---------------------------------------------------------------------------
# Saga
# ---------------------------------------------------------------------------
def validate_request(request: OrderRequest) -> None:
    if not request.lines:
        raise ValidationError({"items": ["Order items are required"]})
    for line in request.lines:
        if not line.product_id:
            raise ValidationError({"product_id": ["Product ID is required"]})
        if isinstance(line.quantity, bool) or not isinstance(line.quantity, int) or line.quantity < 1:
            raise ValidationError({"quantity": [f"Quantity must be a positive integer for product {line.product_id}"]})

    address = request.shipping_address or {}
    missing = [name for name in REQUIRED_ADDRESS_FIELDS if not address.get(name)]
    if missing:
        raise ValidationError(
            {"shipping_address": [f"Complete shipping address is required (missing: {', '.join(missing)})"]}
        )

    if request.payment_method and request.payment_method not in {m.value for m in PaymentMethod}:
        raise ValidationError({"payment_method": [f"Unsupported payment method: {request.payment_method}"]})

    if not request.customer_id and not (request.contact or {}).get("email"):
        raise ValidationError({"customer": ["User ID or customer email is required"]})

    # Value object field limits, checked before any stock is taken
    ShippingAddress(**address)
    contact = _contact_fields(request)
    if contact:
        ContactDetails(**contact)


def _contact_fields(request: OrderRequest) -> dict:
    return {key: value for key, value in (request.contact or {}).items() if key in ("name", "email", "phone")}


def resolve_owner(request: OrderRequest) -> str:
    if request.customer_id:
        return str(request.customer_id)
    contact = request.contact
    return current_domain.process(
        ResolveCustomer(email=contact["email"], name=contact.get("name"), phone=contact.get("phone")),
        asynchronous=False,
    )


def _lines_payload(reserved_lines) -> list[dict]:
    return [
        {
            "product_id": line.product_id,
            "product_name": line.product.name,
            "quantity": line.quantity,
            "unit_price": line.unit_price,
            "size": line.size,
            "color": line.color,
            "product_snapshot": line.product.snapshot(),
        }
        for line in reserved_lines
    ]


def _persist_order(request: OrderRequest, customer_id: str, reserved_lines, breakdown, order_number: str) -> str:
    contact = _contact_fields(request)
    command = PlaceOrder(
        order_number=order_number,
        customer_id=customer_id,
        lines=json.dumps(_lines_payload(reserved_lines)),
        subtotal=breakdown.subtotal,
        shipping=breakdown.shipping,
        tax=breakdown.tax,
        total=breakdown.total,
        currency=breakdown.currency,
        shipping_address=json.dumps(request.shipping_address),
        contact=json.dumps(contact) if contact else None,
        payment_method=request.payment_method,
        notes=request.notes,
        channel=request.channel,
    )
    return current_domain.process(command, asynchronous=False)


def _persist_with_fresh_number(request, customer_id, reserved_lines, breakdown) -> str:
    for attempt in range(1, MAX_ORDER_NUMBER_ATTEMPTS + 1):
        order_number = generate_order_number()
        try:
            return _persist_order(request, customer_id, reserved_lines, breakdown, order_number)
        except OrderNumberCollision:
            logger.warning("Order number collision, retrying", order_number=order_number, attempt=attempt)

    logger.error("Could not allocate a unique order number", attempts=MAX_ORDER_NUMBER_ATTEMPTS)
    raise InternalError()


def _compensate(reserved_lines, request: OrderRequest) -> None:
    try:
        release(reserved_lines)
    except Exception:
        logger.exception("Failed to release reservation", **request.log_context())


def create_order(request: OrderRequest) -> Order:
    """Run the placement saga and return the persisted order.

    Domain errors (validation, unknown product, insufficient stock) reach the
    caller unchanged. Anything unexpected is logged with the request context
    and surfaces as InternalError.
    """
    try:
        validate_request(request)
        customer_id = resolve_owner(request)
        request.customer_id = customer_id

        reserved_lines = reserve(request.lines)
        try:
            breakdown = price(reserved_lines)
            order_id = _persist_with_fresh_number(request, customer_id, reserved_lines, breakdown)
        except Exception:
            _compensate(reserved_lines, request)
            raise

        order = current_domain.repository_for(Order).get(order_id)
    except (OrderDeskError, ValidationError, ObjectNotFoundError):
        raise
    except Exception as exc:
        logger.exception("Order placement failed", **request.log_context())
        raise InternalError() from exc

    logger.info(
        "Order placed",
        order_id=str(order.id),
        order_number=order.order_number,
        total=order.pricing.total,
        **request.log_context(),
    )
    return order
