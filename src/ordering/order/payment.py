"""Order payment status — command and handler.

The payment collaborator reports PENDING, PAID or FAILED; the order records
it without touching its total or its tracking.
"""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order


@ordering.command(part_of="Order")
class RecordPaymentStatus:
    order_id = Identifier(required=True)
    payment_status = String(required=True, max_length=20)


@ordering.command_handler(part_of=Order)
class RecordPaymentStatusHandler:
    @handle(RecordPaymentStatus)
    def record_payment_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.record_payment_status(command.payment_status)
        repo.add(order)
        return order.payment_status
