"""Ordering bounded context — order intake, tracking and partner access.

Hosts the Order and OrderTracking aggregates, guest customers and partner API
keys. Stock lives in the relational catalogue store; placing an order is a
saga that reserves stock there and then persists the order here.
"""

import structlog
from protean.domain import Domain

ordering = Domain(name="ordering")

logger = structlog.get_logger(__name__)
