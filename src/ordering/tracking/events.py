"""Tracking domain events."""

from protean.fields import DateTime, Identifier, Integer, String

from ordering.domain import ordering


@ordering.event(part_of="OrderTracking")
class TrackingStarted:
    __version__ = 1

    tracking_id = Identifier(required=True)
    order_id = Identifier(required=True)
    estimated_delivery = DateTime(required=True)
    started_at = DateTime(required=True)


@ordering.event(part_of="OrderTracking")
class TrackingAdvanced:
    """The order moved to a new fulfillment status and a step was appended."""

    __version__ = 1

    tracking_id = Identifier(required=True)
    order_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    current_step = Integer(required=True)
    step = String(required=True)
    advanced_at = DateTime(required=True)
