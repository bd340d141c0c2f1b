"""Ordering domain API package."""

from ordering.api.routes import admin_router, order_router, partner_router

__all__ = ["admin_router", "order_router", "partner_router"]
