"""Tracking advancement — command and handler.

The tracking record and the order's mirrored status change in the same unit
of work, so a reader never sees them disagree.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order
from ordering.tracking.tracking import OrderTracking

logger = structlog.get_logger(__name__)


@ordering.command(part_of="OrderTracking")
class AdvanceTracking:
    order_id = Identifier(required=True)
    target_status = String(required=True, max_length=20)


def find_tracking(order_id: str) -> OrderTracking | None:
    records = current_domain.repository_for(OrderTracking)._dao.query.filter(order_id=str(order_id)).all().items
    return records[0] if records else None


@ordering.command_handler(part_of=OrderTracking)
class AdvanceTrackingHandler:
    @handle(AdvanceTracking)
    def advance_tracking(self, command):
        order_repo = current_domain.repository_for(Order)
        order = order_repo.get(command.order_id)

        tracking = find_tracking(command.order_id)
        if tracking is None:
            raise ObjectNotFoundError(f"No tracking record for order {command.order_id}")
        tracking.advance(command.target_status)
        order.mirror_tracking_status(tracking.status)

        current_domain.repository_for(OrderTracking).add(tracking)
        order_repo.add(order)

        logger.info(
            "Tracking advanced",
            order_id=str(order.id),
            order_number=order.order_number,
            status=tracking.status,
            current_step=tracking.current_step,
        )
        return tracking.status
