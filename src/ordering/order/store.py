"""Order store port and its Protean-backed adapter.

The lifecycle manager only talks to ``OrderStore``. Reads hand out copies,
so nothing outside the store can change a persisted order except through
``put`` or ``update``. ``update`` is the read-modify-write path: it holds a
per-order lock for the whole cycle, so two updates on the same order never
interleave and readers only ever see whole versions.
"""

import threading
from abc import ABC, abstractmethod
from collections.abc import Callable
from contextlib import contextmanager

import structlog
from protean.exceptions import ExpectedVersionError

from ordering.domain import ordering
from ordering.order.exceptions import ObjectNotFoundError, StorageError
from ordering.order.order import Order

logger = structlog.get_logger(__name__)

OrderMutation = Callable[[Order], Order | None]

# Everything but the identity can be overwritten by a later put
_WRITABLE_FIELDS = (
    "customer_email",
    "items",
    "delivery_address",
    "total_amount",
    "status",
    "created_at",
    "updated_at",
)

# Version conflicts tolerated before an update gives up
_MAX_UPDATE_ATTEMPTS = 5


class OrderStore(ABC):
    """Abstract keyed storage for Order aggregates."""

    @abstractmethod
    def put(self, order: Order) -> None:
        """Insert the order, or overwrite the stored version with the same id."""
        ...

    @abstractmethod
    def get(self, order_id: str) -> Order:
        """Return the stored order.

        Raises:
            ObjectNotFoundError: if no order has this id.
        """
        ...

    @abstractmethod
    def list(self) -> list[Order]:
        """Return all orders in insertion order."""
        ...

    @abstractmethod
    def update(self, order_id: str, mutate: OrderMutation) -> Order:
        """Atomically apply ``mutate`` to the stored order and persist the result.

        ``mutate`` receives a private copy. It may change it in place (and
        return None) or return a replacement.

        Raises:
            ObjectNotFoundError: if no order has this id.
        """
        ...

    def exists(self, order_id: str) -> bool:
        try:
            self.get(order_id)
        except ObjectNotFoundError:
            return False
        return True


class KeyedLocks:
    """Re-entrant lock per key, kept only while a thread holds or waits for it.

    Usage::

        with key_locks(order_id):
            ...
    """

    def __init__(self):
        self._guard = threading.Lock()
        # key -> [lock, number of threads holding or waiting]
        self._entries: dict[str, list] = {}

    @contextmanager
    def __call__(self, key: str):
        with self._guard:
            entry = self._entries.setdefault(key, [threading.RLock(), 0])
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._entries[key]

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)


def _overwrite(stored: Order, order: Order) -> Order:
    if order is not stored:
        for name in _WRITABLE_FIELDS:
            setattr(stored, name, getattr(order, name))
    return stored


class InMemoryOrderStore(OrderStore):
    """Store backed by the ordering domain's repository.

    With the default configuration the repository sits on Protean's memory
    provider. Every write is checked against the aggregate version read
    at the start of the cycle, so a writer holding a stale copy (another
    store instance sharing the provider, say) never silently overwrites a
    newer version.
    """

    def __init__(self, domain=None):
        self._domain = domain or ordering
        self._key_locks = KeyedLocks()

    @contextmanager
    def _repository(self):
        # Callers may run on any thread; each needs its own domain context
        with self._domain.domain_context():
            yield self._domain.repository_for(Order)

    def put(self, order: Order) -> None:
        with self._key_locks(order.order_id), self._repository() as repo:
            stored = repo.get_or_none(order.order_id)
            if stored is None:
                repo.add(order.clone())
            else:
                repo.add(_overwrite(stored, order))

    def get(self, order_id: str) -> Order:
        with self._repository() as repo:
            return repo.get(order_id)

    def list(self) -> list[Order]:
        with self._repository() as repo:
            return repo._dao.query.limit(None).all().items

    def exists(self, order_id: str) -> bool:
        with self._repository() as repo:
            return repo.get_or_none(order_id) is not None

    def update(self, order_id: str, mutate: OrderMutation) -> Order:
        with self._key_locks(order_id), self._repository() as repo:
            for _ in range(_MAX_UPDATE_ATTEMPTS):
                current = repo.get(order_id)
                result = mutate(current)
                updated = _overwrite(current, current if result is None else result)
                try:
                    repo.add(updated)
                except ExpectedVersionError:
                    logger.warning("order_version_conflict", order_id=order_id)
                    continue
                return updated.clone()
        raise StorageError(f"Order {order_id} kept changing; update abandoned")

    def reset(self) -> None:
        with self._repository() as repo:
            repo._dao.delete_all()
