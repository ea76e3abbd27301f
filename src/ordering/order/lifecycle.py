"""Order lifecycle manager: creation, lookup and status transitions.

Each mutating operation follows the same order of events:

1. validate the input (nothing has been written yet),
2. persist the change through the ``OrderStore`` (failures propagate),
3. tell the customer through the ``NotificationGateway``.

Step 3 is best effort. It runs only after the store has accepted the
change, outside of any store lock, and on a worker thread that the manager
waits on for a bounded time. Whatever happens there (an exception, a failed
result, a hung remote) is logged and absorbed: the caller always gets the
order as it was stored.
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

import structlog

from notifications.gateway.port import NotificationFailure, NotificationGateway, NotificationResult
from ordering.order.exceptions import ObjectNotFoundError, StorageError
from ordering.order.order import Order, OrderStatus, generate_order_id
from ordering.order.store import OrderStore

logger = structlog.get_logger(__name__)

DEFAULT_NOTIFICATION_TIMEOUT = 5.0
DEFAULT_NOTIFICATION_WORKERS = 4

# Re-draws allowed when a generated id is already taken
_MAX_ID_ATTEMPTS = 5


@dataclass(frozen=True)
class NotificationOutcome:
    """What happened to a single notification attempt."""

    delivered: bool
    reason: str | None = None
    result: NotificationResult | None = None


class NotificationDispatcher:
    """Runs gateway calls on a worker pool with a hard wait limit.

    Never raises. A call that outlives ``timeout`` is abandoned: if it is
    still queued it is withdrawn, otherwise it keeps running on its worker
    but nobody waits for it any more.
    """

    def __init__(
        self,
        gateway: NotificationGateway,
        timeout: float = DEFAULT_NOTIFICATION_TIMEOUT,
        max_workers: int = DEFAULT_NOTIFICATION_WORKERS,
    ) -> None:
        if timeout <= 0:
            raise ValueError("Notification timeout must be positive")
        self.gateway = gateway
        self.timeout = timeout
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="notifications")

    def confirm(self, order: Order) -> NotificationOutcome:
        return self._dispatch("confirm", order, self.gateway.confirm, order)

    def status_changed(self, order: Order, new_status: OrderStatus) -> NotificationOutcome:
        return self._dispatch("status_changed", order, self.gateway.status_changed, order, new_status)

    def _dispatch(self, notification, order, call, *args) -> NotificationOutcome:
        log = logger.bind(notification=notification, order_id=order.order_id)

        try:
            future = self._executor.submit(call, *args)
            result = future.result(timeout=self.timeout)
            if not isinstance(result, NotificationResult):
                raise NotificationFailure(f"Gateway answered with {type(result).__name__}, not a NotificationResult")
        except TimeoutError:
            # Only a call still waiting for a worker can be withdrawn
            future.cancel()
            log.warning("notification_timed_out", timeout=self.timeout)
            return NotificationOutcome(delivered=False, reason=f"Timed out after {self.timeout}s")
        except Exception as exc:
            log.error("notification_failed", error=str(exc), error_type=type(exc).__name__)
            return NotificationOutcome(delivered=False, reason=str(exc))

        if not result.success:
            log.error("notification_failed", error=result.failure_reason)
            return NotificationOutcome(delivered=False, reason=result.failure_reason, result=result)

        log.info("notification_sent", notification_id=result.notification_id)
        return NotificationOutcome(delivered=True, result=result)

    def shutdown(self, wait: bool = False) -> None:
        self._executor.shutdown(wait=wait)


class OrderLifecycleManager:
    """Owns order identity, totals and status changes.

    Depends only on the ``OrderStore`` and ``NotificationGateway`` ports.
    """

    def __init__(
        self,
        store: OrderStore,
        gateway: NotificationGateway,
        notification_timeout: float = DEFAULT_NOTIFICATION_TIMEOUT,
        notification_workers: int = DEFAULT_NOTIFICATION_WORKERS,
    ) -> None:
        self.store = store
        self.notifier = NotificationDispatcher(
            gateway,
            timeout=notification_timeout,
            max_workers=notification_workers,
        )

    # -------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------
    def create(self, customer_email, items, delivery_address=None) -> Order:
        """Create, persist and announce a new PENDING order.

        Raises:
            ValidationError: blank email, no items, or an invalid item.
            StorageError: the order could not be persisted. No notification
                is sent in that case.
        """
        order = Order.create(
            customer_email=customer_email,
            items=items,
            delivery_address=delivery_address,
        )
        order = self._with_unused_id(order)

        self.store.put(order)
        logger.info(
            "order_created",
            order_id=order.order_id,
            customer_email=order.customer_email,
            item_count=len(order.items),
            total_amount=str(order.total_amount),
        )

        self.notifier.confirm(order.clone())
        return order

    def update_status(self, order_id: str, new_status) -> Order | None:
        """Move an order to ``new_status``.

        Returns the updated order, or None if no order has this id (nothing
        is created in that case).

        Raises:
            ValidationError: ``new_status`` is not a known status.
            StorageError: the change could not be persisted.
        """
        target = OrderStatus.parse(new_status)
        previous: dict[str, str] = {}

        def apply_transition(order: Order) -> Order:
            previous["status"] = order.status
            return order.transition_to(target)

        try:
            order = self.store.update(order_id, apply_transition)
        except ObjectNotFoundError:
            logger.warning("order_not_found", order_id=order_id, operation="update_status")
            return None

        logger.info(
            "order_status_updated",
            order_id=order_id,
            from_status=previous["status"],
            to_status=target.value,
        )

        self.notifier.status_changed(order.clone(), target)
        return order

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def get_by_id(self, order_id: str) -> Order | None:
        try:
            return self.store.get(order_id)
        except ObjectNotFoundError:
            logger.warning("order_not_found", order_id=order_id)
            return None

    def list(self):
        return self.store.list()

    def shutdown(self) -> None:
        self.notifier.shutdown()

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    def _with_unused_id(self, order: Order) -> Order:
        for _ in range(_MAX_ID_ATTEMPTS):
            if not self.store.exists(order.order_id):
                return order
            logger.warning("order_id_collision", order_id=order.order_id)
            order = Order.from_dict({**order.to_dict(), "order_id": generate_order_id()})
        raise StorageError("Could not allocate an unused order id")


def build_manager() -> OrderLifecycleManager:
    """Assemble a manager from the configured store, gateway and settings."""
    from notifications.gateway import get_gateway
    from ordering.config import get_settings
    from ordering.order import get_order_store

    settings = get_settings()
    return OrderLifecycleManager(
        store=get_order_store(),
        gateway=get_gateway(),
        notification_timeout=settings.notifications_timeout,
        notification_workers=settings.notification_workers,
    )
