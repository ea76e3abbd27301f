"""Order aggregate: the unit of consistency for the ordering domain.

An Order is created once, from a customer email and a non-empty list of
line items, and afterwards only its status moves. Everything else
(identity, items, delivery address, total) is fixed at creation time:
the total is derived exactly once, with Decimal arithmetic, and never
recomputed.

Status transitions are unrestricted today. The decision still goes through
``can_transition`` so that a transition rule set can be introduced in one
place.
"""

import copy
from datetime import UTC, datetime, timedelta
from decimal import Decimal
from enum import Enum
from uuid import uuid4

from protean import invariant
from protean.fields import DateTime, Identifier, Integer, List, String, ValueObject
from protean.fields import Decimal as DecimalField

from ordering.domain import ordering
from ordering.order.exceptions import ValidationError

ORDER_ID_PREFIX = "ORD-"


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "PENDING"  # Every order starts here
    CONFIRMED = "CONFIRMED"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"

    @classmethod
    def parse(cls, value):
        """Accept an ``OrderStatus``, its value or its name (case-insensitive)."""
        if isinstance(value, cls):
            return value
        try:
            return cls[str(value).strip().upper()]
        except KeyError:
            allowed = ", ".join(s.value for s in cls)
            raise ValidationError({"status": [f"Unknown status {value!r}. Expected one of: {allowed}"]}) from None


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    """Single decision point for status transitions.

    Every transition is permitted, including moving back out of a terminal
    status such as DELIVERED or CANCELLED.
    """
    return True


def generate_order_id() -> str:
    """Return a short, human-readable order identifier, e.g. ``ORD-1A2B3C4D``."""
    return ORDER_ID_PREFIX + uuid4().hex[:8].upper()


def _now() -> datetime:
    return datetime.now(UTC)


def _face_value(price):
    # Floats go through str() so that 9.99 means Decimal("9.99")
    if isinstance(price, float):
        return Decimal(str(price))
    return price


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@ordering.value_object(part_of="Order")
class OrderItem:
    """A line item: which product, how many, at what unit price.

    Immutable and compared by value. ``unit_price`` is always held as a
    ``Decimal``.
    """

    product_id = String(required=True, max_length=255)
    quantity = Integer(required=True, min_value=1)
    unit_price = DecimalField(required=True)

    @invariant.post
    def product_id_must_not_be_blank(self):
        if not self.product_id.strip():
            raise ValidationError({"product_id": ["Product ID is required"]})

    @invariant.post
    def price_must_be_positive(self):
        if self.unit_price <= 0:
            raise ValidationError({"unit_price": ["Price must be positive"]})

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity

    @classmethod
    def from_dict(cls, data):
        if isinstance(data, cls):
            return data
        try:
            return cls(
                product_id=data["product_id"],
                quantity=data["quantity"],
                unit_price=_face_value(data["unit_price"]),
            )
        except (KeyError, TypeError):
            raise ValidationError(
                {"items": ["Each item needs product_id, quantity and unit_price"]}
            ) from None


def calculate_total(items) -> Decimal:
    """Sum of quantity x unit_price over all items, exact to the cent and beyond."""
    return sum((item.line_total for item in items), Decimal("0"))


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    order_id = Identifier(identifier=True, default=generate_order_id)
    customer_email = String(required=True, max_length=320)
    items = List(content_type=ValueObject(OrderItem), required=True)
    delivery_address = String(max_length=1000, sanitize=False)
    total_amount = DecimalField(required=True)
    status = String(
        choices=OrderStatus,
        default=OrderStatus.PENDING.value,
    )
    created_at = DateTime(required=True)
    updated_at = DateTime(required=True)

    @invariant.post
    def must_have_at_least_one_item(self):
        if not self.items:
            raise ValidationError({"items": ["At least one item is required"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, customer_email, items, delivery_address=None, order_id=None):
        """Create a new PENDING order.

        Args:
            customer_email: Recipient of order notifications. Required.
            items: Non-empty sequence of ``OrderItem`` or dicts with
                product_id, quantity and unit_price.
            delivery_address: Optional free-form address.
            order_id: Pre-generated identifier; a fresh one is drawn if omitted.

        Raises:
            ValidationError: on a blank email, no items, or an invalid item.
        """
        if not isinstance(customer_email, str) or not customer_email.strip():
            raise ValidationError({"customer_email": ["Customer email is required"]})
        if not items:
            raise ValidationError({"items": ["At least one item is required"]})

        order_items = [OrderItem.from_dict(item) for item in items]

        now = _now()
        return cls(
            order_id=order_id or generate_order_id(),
            customer_email=customer_email.strip(),
            items=order_items,
            total_amount=calculate_total(order_items),
            delivery_address=delivery_address,
            status=OrderStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )

    # -------------------------------------------------------------------
    # Lifecycle transitions
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        current = OrderStatus(self.status)
        if not can_transition(current, target_status):
            raise ValidationError(
                {"status": [f"Cannot transition from {current.value} to {target_status.value}"]}
            )

    def transition_to(self, new_status):
        """Move the order to ``new_status`` and advance ``updated_at``.

        ``updated_at`` always moves strictly forward, even when the clock
        has not ticked since the previous change.
        """
        target = OrderStatus.parse(new_status)
        self._assert_can_transition(target)

        now = _now()
        if now <= self.updated_at:
            now = self.updated_at + timedelta(microseconds=1)

        self.status = target.value
        self.updated_at = now
        return self

    def clone(self):
        return copy.deepcopy(self)

    # -------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------
    def to_dict(self) -> dict:
        data = super().to_dict()
        data.pop("_version", None)
        # Fixed-width timestamps keep their text form sortable
        data["created_at"] = self.created_at.isoformat(timespec="microseconds")
        data["updated_at"] = self.updated_at.isoformat(timespec="microseconds")
        return data

    @classmethod
    def from_dict(cls, data: dict):
        return cls(
            order_id=data["order_id"],
            customer_email=data["customer_email"],
            items=[OrderItem.from_dict(item) for item in data["items"]],
            delivery_address=data.get("delivery_address"),
            total_amount=Decimal(str(data["total_amount"])),
            status=OrderStatus.parse(data["status"]).value,
            created_at=datetime.fromisoformat(data["created_at"]),
            updated_at=datetime.fromisoformat(data["updated_at"]),
        )
