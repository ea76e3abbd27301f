"""Ordering bounded context: order creation, tracking and status changes.

Holds the Order aggregate and its line items. Persistence goes through the
domain's configured provider (in-memory by default, see ``domain.toml``).
"""

from protean.domain import Domain

ordering = Domain(name="ordering")
