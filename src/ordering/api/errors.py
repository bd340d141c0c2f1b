"""HTTP translation of domain errors.

Every error body is ``{"error": <kind>, "message": <text>}``. Internal
failures carry a generic message only; the detail goes to the logs.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.integrations.fastapi import register_exception_handlers as register_protean_handlers

from shared.errors import (
    Forbidden,
    InsufficientStock,
    InternalError,
    InvalidTransition,
    OrderDeskError,
    ProductNotFound,
    Unauthenticated,
)

logger = structlog.get_logger(__name__)

ERROR_STATUS_CODES = {
    Unauthenticated: 401,
    Forbidden: 403,
    ProductNotFound: 404,
    InsufficientStock: 409,
    InvalidTransition: 409,
    InternalError: 500,
}


def _validation_message(exc: ValidationError) -> str:
    messages = getattr(exc, "messages", None)
    if isinstance(messages, dict):
        parts = []
        for field_name, field_messages in messages.items():
            if isinstance(field_messages, list):
                text = "; ".join(str(m) for m in field_messages)
            else:
                text = str(field_messages)
            parts.append(f"{field_name}: {text}")
        if parts:
            return ", ".join(parts)
    return str(exc)


async def order_desk_error_handler(request: Request, exc: OrderDeskError) -> JSONResponse:
    status_code = ERROR_STATUS_CODES.get(type(exc), 500)
    if status_code >= 500:
        return JSONResponse(status_code=500, content={"error": "Internal", "message": "Internal server error"})
    return JSONResponse(status_code=status_code, content={"error": exc.kind, "message": exc.message})


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"error": "ValidationFailed", "message": _validation_message(exc)},
    )


async def not_found_handler(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": "NotFound", "message": str(exc) or "Not found"})


def register_exception_handlers(app: FastAPI) -> None:
    """Install Protean's defaults, then the order desk mapping on top."""
    register_protean_handlers(app)
    app.add_exception_handler(OrderDeskError, order_desk_error_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(ObjectNotFoundError, not_found_handler)
