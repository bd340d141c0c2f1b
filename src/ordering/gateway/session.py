"""Session gateway — orders from signed-in customers.

The bearer token is checked with the identity collaborator; customers and
admins may order, any other role is refused before the request is read.
"""

import structlog

from inventory.reservation import OrderLineRequest
from ordering.gateway.caller import SessionCaller
from ordering.identity import get_identity
from ordering.order.placement import OrderRequest, create_order
from shared.errors import Forbidden, Unauthenticated

logger = structlog.get_logger(__name__)

ROLE_USER = "USER"
ROLE_ADMIN = "ADMIN"
ORDERING_ROLES = {ROLE_USER, ROLE_ADMIN}


def authenticate_session(authorization: str | None) -> SessionCaller:
    """Resolve an ``Authorization: Bearer <token>`` header to a caller."""
    if not authorization:
        raise Unauthenticated("Authentication required")

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise Unauthenticated("Authentication required")

    user = get_identity().verify_token(token.strip())
    if user is None:
        raise Unauthenticated("Invalid or expired token")
    return SessionCaller(user_id=user.user_id, role=user.role)


def require_role(caller: SessionCaller, allowed_roles) -> SessionCaller:
    if caller.role not in allowed_roles:
        logger.warning("Role not permitted", user_id=caller.user_id, role=caller.role)
        raise Forbidden("Insufficient permissions")
    return caller


def require_admin(caller: SessionCaller) -> SessionCaller:
    return require_role(caller, {ROLE_ADMIN})


def place_session_order(
    caller: SessionCaller,
    lines: list[OrderLineRequest],
    shipping_address: dict,
    payment_method: str | None = None,
    contact: dict | None = None,
    notes: str | None = None,
):
    require_role(caller, ORDERING_ROLES)
    request = OrderRequest(
        caller=caller,
        lines=lines,
        shipping_address=shipping_address,
        customer_id=caller.user_id,
        contact=contact or {},
        payment_method=payment_method,
        notes=notes,
    )
    return create_order(request)
