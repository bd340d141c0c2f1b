"""Partner gateway — orders from external integrators holding an API key.

The key is checked before anything else, so a rejected partner never reaches
the catalogue. The order is owned by the explicit ``user_id`` when given,
otherwise by a guest customer resolved from ``customer_email``.
"""

from inventory.reservation import OrderLineRequest
from ordering.customer.customer import GUEST_NAME
from ordering.gateway.caller import PartnerCaller
from ordering.order.placement import OrderRequest, create_order
from ordering.partner.authentication import authenticate_api_key


def place_partner_order(
    api_key: str | None,
    lines: list[OrderLineRequest],
    shipping_address: dict,
    user_id: str | None = None,
    customer_email: str | None = None,
    customer_name: str | None = None,
    customer_phone: str | None = None,
    payment_method: str | None = None,
    notes: str | None = None,
):
    key = authenticate_api_key(api_key)

    contact = {
        "name": customer_name or GUEST_NAME,
        "email": customer_email or "",
        "phone": customer_phone or "",
    }
    request = OrderRequest(
        caller=PartnerCaller(api_key_id=str(key.id)),
        lines=lines,
        shipping_address=shipping_address,
        customer_id=user_id,
        contact=contact,
        payment_method=payment_method,
        notes=notes,
    )
    return create_order(request)
