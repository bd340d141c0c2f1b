"""FastAPI routes for the Ordering domain — order intake, lookup and admin."""

from fastapi import APIRouter, Header
from fastapi.responses import JSONResponse
from protean.utils.globals import current_domain

from inventory.reservation import OrderLineRequest
from ordering.api.schemas import (
    AdvanceTrackingRequest,
    ApiKeyResponse,
    ApiKeyStatusResponse,
    CreateOrderRequest,
    IssueApiKeyRequest,
    PartnerOrderRequest,
    PaymentStatusResponse,
    RecordPaymentStatusRequest,
    SetApiKeyActiveRequest,
    TrackingStatusResponse,
)
from ordering.gateway.partner import place_partner_order
from ordering.gateway.session import authenticate_session, place_session_order, require_admin
from ordering.order.payment import RecordPaymentStatus
from ordering.order.queries import get_order_by_number, list_orders_for_customer, order_view
from ordering.partner.management import IssueApiKey, SetApiKeyActive
from ordering.tracking.advancement import AdvanceTracking, find_tracking


def _line_requests(items) -> list[OrderLineRequest]:
    return [
        OrderLineRequest(
            product_id=item.product_id,
            quantity=item.quantity,
            size=item.size,
            color=item.color,
        )
        for item in items
    ]


# ---------------------------------------------------------------------------
# Order Router (session-authenticated customers and admins)
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201)
async def create_order(body: CreateOrderRequest, authorization: str | None = Header(default=None)) -> JSONResponse:
    caller = authenticate_session(authorization)
    order = place_session_order(
        caller,
        lines=_line_requests(body.items),
        shipping_address=body.shipping_address.model_dump(),
        payment_method=body.payment_method,
        contact=body.contact.model_dump() if body.contact else None,
        notes=body.notes,
    )
    return JSONResponse(status_code=201, content={"order": order_view(order, find_tracking(order.id))})


@order_router.get("/mine")
async def my_orders(authorization: str | None = Header(default=None)) -> JSONResponse:
    caller = authenticate_session(authorization)
    return JSONResponse(content={"orders": list_orders_for_customer(caller.user_id)})


@order_router.get("/track/{order_number}")
async def track_order(order_number: str) -> JSONResponse:
    return JSONResponse(content={"order": get_order_by_number(order_number)})


@order_router.put("/{order_id}/tracking", response_model=TrackingStatusResponse)
async def advance_tracking(
    order_id: str,
    body: AdvanceTrackingRequest,
    authorization: str | None = Header(default=None),
) -> TrackingStatusResponse:
    require_admin(authenticate_session(authorization))
    command = AdvanceTracking(order_id=order_id, target_status=body.status)
    status = current_domain.process(command, asynchronous=False)
    return TrackingStatusResponse(order_id=order_id, status=status)


@order_router.put("/{order_id}/payment-status", response_model=PaymentStatusResponse)
async def record_payment_status(
    order_id: str,
    body: RecordPaymentStatusRequest,
    authorization: str | None = Header(default=None),
) -> PaymentStatusResponse:
    require_admin(authenticate_session(authorization))
    command = RecordPaymentStatus(order_id=order_id, payment_status=body.payment_status)
    payment_status = current_domain.process(command, asynchronous=False)
    return PaymentStatusResponse(order_id=order_id, payment_status=payment_status)


# ---------------------------------------------------------------------------
# Partner Router (API-key-authenticated integrators)
# ---------------------------------------------------------------------------
partner_router = APIRouter(prefix="/v1", tags=["partner"])


@partner_router.post("/orders", status_code=201)
async def create_partner_order(
    body: PartnerOrderRequest,
    x_api_key: str | None = Header(default=None),
) -> JSONResponse:
    order = place_partner_order(
        x_api_key,
        lines=_line_requests(body.items),
        shipping_address=body.shipping_address.model_dump() if body.shipping_address else {},
        user_id=body.user_id,
        customer_email=body.customer_email,
        customer_name=body.customer_name,
        customer_phone=body.customer_phone,
        payment_method=body.payment_method,
        notes=body.notes,
    )
    view = order_view(order)
    return JSONResponse(
        status_code=201,
        content={
            "success": True,
            "order": {
                "id": view["id"],
                "order_number": view["order_number"],
                "total": view["total"],
                "status": view["status"],
                "payment_status": view["payment_status"],
                "created_at": view["created_at"],
                "items": view["items"],
            },
        },
    )


# ---------------------------------------------------------------------------
# Admin Router (API key management)
# ---------------------------------------------------------------------------
admin_router = APIRouter(prefix="/admin", tags=["admin"])


@admin_router.post("/api-keys", status_code=201, response_model=ApiKeyResponse)
async def issue_api_key(body: IssueApiKeyRequest, authorization: str | None = Header(default=None)) -> ApiKeyResponse:
    require_admin(authenticate_session(authorization))
    result = current_domain.process(IssueApiKey(name=body.name, description=body.description), asynchronous=False)
    return ApiKeyResponse(id=result["id"], key=result["key"], name=body.name, is_active=True)


@admin_router.put("/api-keys/{api_key_id}/active", response_model=ApiKeyStatusResponse)
async def set_api_key_active(
    api_key_id: str,
    body: SetApiKeyActiveRequest,
    authorization: str | None = Header(default=None),
) -> ApiKeyStatusResponse:
    require_admin(authenticate_session(authorization))
    is_active = current_domain.process(
        SetApiKeyActive(api_key_id=api_key_id, is_active=body.is_active),
        asynchronous=False,
    )
    return ApiKeyStatusResponse(id=api_key_id, is_active=is_active)
