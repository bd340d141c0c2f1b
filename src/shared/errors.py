"""Error kinds shared by the catalogue, inventory and ordering packages.

Field-level validation failures use Protean's ``ValidationError`` and missing
aggregates use ``ObjectNotFoundError``; everything else that callers need to
tell apart is one of the classes below. ``kind`` is the stable name surfaced
over HTTP.
"""


class OrderDeskError(Exception):
    """Base class for errors with a caller-visible kind."""

    kind = "Internal"

    def __init__(self, message=None):
        super().__init__(message or self.kind)
        self.message = message or self.kind


class Unauthenticated(OrderDeskError):
    kind = "Unauthenticated"


class Forbidden(OrderDeskError):
    kind = "Forbidden"


class ProductNotFound(OrderDeskError):
    kind = "ProductNotFound"

    def __init__(self, product_id):
        super().__init__(f"Product not found: {product_id}")
        self.product_id = product_id


class InsufficientStock(OrderDeskError):
    kind = "InsufficientStock"

    def __init__(self, product_id, available=None, requested=None):
        message = f"Insufficient stock for product: {product_id}"
        if available is not None:
            message = f"{message}. Available: {available}, requested: {requested}"
        super().__init__(message)
        self.product_id = product_id
        self.available = available
        self.requested = requested


class OrderNumberCollision(OrderDeskError):
    """Raised when a generated order number is already taken. Retryable."""

    kind = "OrderNumberCollision"

    def __init__(self, order_number):
        super().__init__(f"Order number already in use: {order_number}")
        self.order_number = order_number


class InvalidTransition(OrderDeskError):
    kind = "InvalidTransition"

    def __init__(self, current, target):
        super().__init__(f"Cannot transition from {current} to {target}")
        self.current = current
        self.target = target


class InternalError(OrderDeskError):
    """Generic failure. The message never carries internal detail."""

    kind = "Internal"

    def __init__(self):
        super().__init__("Internal server error")
