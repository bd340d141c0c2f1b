"""Partner authentication — resolve an ``X-API-Key`` header to an active key.

Recording ``last_used_at`` is audit data: it runs as its own command after
the key is accepted, and a failure to record it is logged and does not block
the order.
"""

import structlog
from protean.utils.globals import current_domain

from ordering.partner.api_key import ApiKey
from ordering.partner.management import RecordApiKeyUse
from shared.errors import Unauthenticated

logger = structlog.get_logger(__name__)


def find_api_key(key: str) -> ApiKey | None:
    records = current_domain.repository_for(ApiKey)._dao.query.filter(key=key).all().items
    return records[0] if records else None


def authenticate_api_key(key: str | None) -> ApiKey:
    if not key:
        raise Unauthenticated("API key is required")

    api_key = find_api_key(key)
    if api_key is None or not api_key.is_active:
        logger.warning("Partner request rejected", reason="unknown or inactive API key")
        raise Unauthenticated("Invalid or inactive API key")

    try:
        current_domain.process(RecordApiKeyUse(api_key_id=str(api_key.id)), asynchronous=False)
    except Exception:
        logger.exception("Failed to record API key use", api_key_id=str(api_key.id))

    return api_key
