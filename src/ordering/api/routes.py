"""FastAPI routes for the Orders API."""

from fastapi import APIRouter, Depends, HTTPException, Request

from ordering.api.schemas import CreateOrderRequest, OrderResponse, UpdateOrderStatusRequest
from ordering.order.exceptions import StorageError, ValidationError
from ordering.order.lifecycle import OrderLifecycleManager

order_router = APIRouter(prefix="/orders", tags=["orders"])


def get_manager(request: Request) -> OrderLifecycleManager:
    """Resolve the lifecycle manager installed on the application."""
    return request.app.state.order_manager


def _storage_unavailable(exc: StorageError) -> HTTPException:
    return HTTPException(status_code=503, detail=str(exc))


@order_router.post("", status_code=201, response_model=OrderResponse)
def create_order(
    body: CreateOrderRequest,
    manager: OrderLifecycleManager = Depends(get_manager),
) -> OrderResponse:
    """Create an order and send the confirmation notification."""
    try:
        order = manager.create(
            customer_email=body.customer_email,
            items=[item.model_dump() for item in body.items],
            delivery_address=body.delivery_address,
        )
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=exc.messages) from exc
    except StorageError as exc:
        raise _storage_unavailable(exc) from exc
    return OrderResponse.from_order(order)


@order_router.get("", response_model=list[OrderResponse])
def list_orders(manager: OrderLifecycleManager = Depends(get_manager)) -> list[OrderResponse]:
    try:
        orders = manager.list()
    except StorageError as exc:
        raise _storage_unavailable(exc) from exc
    return [OrderResponse.from_order(order) for order in orders]


@order_router.get("/{order_id}", response_model=OrderResponse)
def get_order(order_id: str, manager: OrderLifecycleManager = Depends(get_manager)) -> OrderResponse:
    try:
        order = manager.get_by_id(order_id)
    except StorageError as exc:
        raise _storage_unavailable(exc) from exc
    if order is None:
        raise HTTPException(status_code=404, detail=f"Order {order_id} not found")
    return OrderResponse.from_order(order)


@order_router.put("/{order_id}/status", response_model=OrderResponse)
def update_order_status(
    order_id: str,
    body: UpdateOrderStatusRequest,
    manager: OrderLifecycleManager = Depends(get_manager),
) -> OrderResponse:
    """Change the order status and send the status update notification."""
    try:
        order = manager.update_status(order_id, body.status)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=exc.messages) from exc
    except StorageError as exc:
        raise _storage_unavailable(exc) from exc
    if order is None:
        raise HTTPException(status_code=404, detail=f"Order {order_id} not found")
    return OrderResponse.from_order(order)
