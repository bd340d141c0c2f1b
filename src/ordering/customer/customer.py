"""Customer aggregate — the owner an order is recorded against.

Registered users arrive with an identifier from the identity collaborator.
Partner orders without one are owned by a guest customer keyed by email.
"""

from datetime import UTC, datetime

from protean.fields import Boolean, DateTime, String

from ordering.domain import ordering

GUEST_NAME = "Guest"


@ordering.aggregate
class Customer:
    email = String(required=True, max_length=254, unique=True)
    name = String(max_length=150, default=GUEST_NAME)
    phone = String(max_length=20)
    is_verified = Boolean(default=False)
    created_at = DateTime()

    @classmethod
    def guest(cls, email: str, name: str | None = None, phone: str | None = None):
        return cls(
            email=normalise_email(email),
            name=name or GUEST_NAME,
            phone=phone,
            is_verified=False,
            created_at=datetime.now(UTC),
        )


def normalise_email(email: str) -> str:
    return email.strip().lower()
