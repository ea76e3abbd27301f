"""Order store factory: pluggable persistence for Order aggregates.

Uses the in-memory store by default. Set ORDER_STORE_URL to an SQLAlchemy
database URL (e.g. ``sqlite:///orders.db`` or ``postgresql://...``) to
persist orders relationally.
"""

_store_instance = None


def get_order_store():
    """Return the configured order store (singleton)."""
    global _store_instance
    if _store_instance is None:
        from ordering.config import get_settings

        url = get_settings().order_store_url
        if url == "memory":
            from ordering.order.store import InMemoryOrderStore

            _store_instance = InMemoryOrderStore()
        else:
            from ordering.order.sql_store import SqlOrderStore

            _store_instance = SqlOrderStore(url)
    return _store_instance


def set_order_store(store) -> None:
    """Override the active order store (useful for tests)."""
    global _store_instance
    _store_instance = store


def reset_order_store() -> None:
    """Reset the order store singleton (useful for testing)."""
    global _store_instance
    _store_instance = None
