"""Guest customer resolution — find-or-create by email, idempotent."""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import String
from protean.utils.globals import current_domain

from ordering.customer.customer import Customer, normalise_email
from ordering.domain import ordering

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Customer")
class ResolveCustomer:
    """Return the customer for an email, creating a guest record on first sight."""

    email = String(required=True, max_length=254)
    name = String(max_length=150)
    phone = String(max_length=20)


def find_customer_by_email(email: str) -> Customer | None:
    records = current_domain.repository_for(Customer)._dao.query.filter(email=normalise_email(email)).all().items
    return records[0] if records else None


@ordering.command_handler(part_of=Customer)
class ResolveCustomerHandler:
    @handle(ResolveCustomer)
    def resolve_customer(self, command):
        existing = find_customer_by_email(command.email)
        if existing is not None:
            return str(existing.id)

        customer = Customer.guest(command.email, name=command.name, phone=command.phone)
        try:
            current_domain.repository_for(Customer).add(customer)
        except ValidationError as exc:
            # Another order created this guest between the lookup and the add
            if "email" not in exc.messages:
                raise
            existing = find_customer_by_email(command.email)
            if existing is None:
                raise
            return str(existing.id)
        logger.info("Guest customer created", customer_id=str(customer.id))
        return str(customer.id)
