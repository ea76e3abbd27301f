"""Relational order store built on SQLAlchemy Core.

Layout: one ``orders`` row per order and its line items in ``order_items``,
ordered by ``position``. Money and timestamps are stored as text (Decimal
strings and ISO-8601 with offset) so that a round trip through any backend,
SQLite included, gives back exactly the values that were written.
Orders are listed by the autoincrement ``seq`` key, i.e. in insertion order.
"""

from contextlib import contextmanager
from datetime import datetime
from decimal import Decimal

import structlog
from sqlalchemy import (
    Column,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    create_engine,
    delete,
    insert,
    select,
    update,
)
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

from ordering.order.exceptions import ObjectNotFoundError, StorageError
from ordering.order.order import Order, OrderItem
from ordering.order.store import KeyedLocks, OrderMutation, OrderStore

logger = structlog.get_logger(__name__)

metadata = MetaData()

orders_table = Table(
    "orders",
    metadata,
    # Surrogate key; its ascending order is the insertion order
    Column("seq", Integer, primary_key=True, autoincrement=True),
    Column("order_id", String(32), nullable=False, unique=True),
    Column("customer_email", String(320), nullable=False),
    Column("delivery_address", String(1000)),
    Column("total_amount", String(64), nullable=False),
    Column("status", String(20), nullable=False),
    Column("created_at", String(40), nullable=False),
    Column("updated_at", String(40), nullable=False),
)

order_items_table = Table(
    "order_items",
    metadata,
    Column("order_id", String(32), ForeignKey("orders.order_id"), primary_key=True),
    Column("position", Integer, primary_key=True),
    Column("product_id", String(255), nullable=False),
    Column("quantity", Integer, nullable=False),
    Column("unit_price", String(64), nullable=False),
)


def build_engine(url: str):
    """Create an engine; in-memory SQLite shares a single connection across threads."""
    if url in ("sqlite://", "sqlite:///:memory:"):
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(url)


@contextmanager
def _storage_errors(operation: str, **context):
    try:
        yield
    except SQLAlchemyError as exc:
        logger.error("order_store_failed", operation=operation, error=str(exc), **context)
        raise StorageError(f"Order store {operation} failed: {exc}") from exc


def _order_row(order: Order) -> dict:
    return {
        "order_id": order.order_id,
        "customer_email": order.customer_email,
        "delivery_address": order.delivery_address,
        "total_amount": str(order.total_amount),
        "status": order.status,
        "created_at": order.created_at.isoformat(timespec="microseconds"),
        "updated_at": order.updated_at.isoformat(timespec="microseconds"),
    }


def _item_rows(order: Order) -> list[dict]:
    return [
        {
            "order_id": order.order_id,
            "position": position,
            "product_id": item.product_id,
            "quantity": item.quantity,
            "unit_price": str(item.unit_price),
        }
        for position, item in enumerate(order.items)
    ]


def _hydrate(row, item_rows) -> Order:
    return Order(
        order_id=row.order_id,
        customer_email=row.customer_email,
        items=[
            OrderItem(
                product_id=item.product_id,
                quantity=item.quantity,
                unit_price=Decimal(item.unit_price),
            )
            for item in item_rows
        ],
        delivery_address=row.delivery_address,
        total_amount=Decimal(row.total_amount),
        status=row.status,
        created_at=datetime.fromisoformat(row.created_at),
        updated_at=datetime.fromisoformat(row.updated_at),
    )


class SqlOrderStore(OrderStore):
    """Order store backed by any SQLAlchemy-supported database."""

    def __init__(self, engine_or_url):
        self._engine = build_engine(engine_or_url) if isinstance(engine_or_url, str) else engine_or_url
        self._key_locks = KeyedLocks()
        with _storage_errors("setup"):
            metadata.create_all(self._engine)

    @property
    def engine(self):
        return self._engine

    # -------------------------------------------------------------------
    # Connection-level helpers
    # -------------------------------------------------------------------
    def _write(self, conn, order: Order) -> None:
        result = conn.execute(
            update(orders_table).where(orders_table.c.order_id == order.order_id).values(**_order_row(order))
        )
        if result.rowcount == 0:
            conn.execute(insert(orders_table).values(**_order_row(order)))
        conn.execute(delete(order_items_table).where(order_items_table.c.order_id == order.order_id))
        conn.execute(insert(order_items_table), _item_rows(order))

    def _read(self, conn, order_id: str) -> Order:
        row = conn.execute(select(orders_table).where(orders_table.c.order_id == order_id)).first()
        if row is None:
            raise ObjectNotFoundError({"_entity": f"Order {order_id} not found"})
        items = conn.execute(
            select(order_items_table)
            .where(order_items_table.c.order_id == order_id)
            .order_by(order_items_table.c.position)
        ).all()
        return _hydrate(row, items)

    # -------------------------------------------------------------------
    # OrderStore
    # -------------------------------------------------------------------
    def put(self, order: Order) -> None:
        with self._key_locks(order.order_id), _storage_errors("put", order_id=order.order_id):
            with self._engine.begin() as conn:
                self._write(conn, order)

    def get(self, order_id: str) -> Order:
        with _storage_errors("get", order_id=order_id):
            with self._engine.connect() as conn:
                return self._read(conn, order_id)

    def list(self):
        with _storage_errors("list"):
            with self._engine.connect() as conn:
                rows = conn.execute(
                    select(orders_table).order_by(orders_table.c.seq)
                ).all()
                item_rows = conn.execute(
                    select(order_items_table).order_by(order_items_table.c.order_id, order_items_table.c.position)
                ).all()

        items_by_order: dict[str, list] = {}
        for item in item_rows:
            items_by_order.setdefault(item.order_id, []).append(item)
        return [_hydrate(row, items_by_order.get(row.order_id, [])) for row in rows]

    def update(self, order_id: str, mutate: OrderMutation) -> Order:
        with self._key_locks(order_id), _storage_errors("update", order_id=order_id):
            with self._engine.begin() as conn:
                current = self._read(conn, order_id)
                result = mutate(current)
                updated = current if result is None else result
                self._write(conn, updated)
        return updated

    def dispose(self) -> None:
        self._engine.dispose()
