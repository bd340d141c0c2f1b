"""ApiKey aggregate — credentials for partner order ingestion."""

import secrets
from datetime import UTC, datetime

from protean.fields import Boolean, DateTime, String, Text

from ordering.domain import ordering

KEY_BYTES = 32


def generate_key() -> str:
    """64 lowercase hex characters."""
    return secrets.token_hex(KEY_BYTES)


@ordering.aggregate
class ApiKey:
    key = String(required=True, max_length=64, unique=True)
    name = String(required=True, max_length=100)
    description = Text()
    is_active = Boolean(default=True)
    last_used_at = DateTime()
    created_at = DateTime()

    @classmethod
    def issue(cls, name: str, description: str | None = None):
        return cls(
            key=generate_key(),
            name=name,
            description=description,
            is_active=True,
            created_at=datetime.now(UTC),
        )

    def activate(self) -> None:
        self.is_active = True

    def deactivate(self) -> None:
        self.is_active = False

    def touch(self) -> None:
        self.last_used_at = datetime.now(UTC)
