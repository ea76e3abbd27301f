"""Pydantic request/response schemas for the Orders API.

These are external contracts (anti-corruption layer), separate from the
Order aggregate. Money travels as decimal strings so that totals survive
JSON unchanged.
"""

from decimal import Decimal

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class OrderItemSchema(BaseModel):
    product_id: str = Field(min_length=1)
    quantity: int = Field(gt=0)
    unit_price: Decimal = Field(gt=0)


class CreateOrderRequest(BaseModel):
    customer_email: str = Field(min_length=1)
    items: list[OrderItemSchema]
    delivery_address: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "customer_email": "jane@example.com",
                    "items": [
                        {"product_id": "P1", "quantity": 2, "unit_price": "9.99"},
                        {"product_id": "P2", "quantity": 1, "unit_price": "5.00"},
                    ],
                    "delivery_address": "123 Main St, Springfield",
                }
            ]
        }
    }


class UpdateOrderStatusRequest(BaseModel):
    status: str = Field(min_length=1)

    model_config = {"json_schema_extra": {"examples": [{"status": "SHIPPED"}]}}


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class OrderItemResponse(BaseModel):
    product_id: str
    quantity: int
    unit_price: str


class OrderResponse(BaseModel):
    order_id: str
    customer_email: str
    items: list[OrderItemResponse]
    delivery_address: str | None = None
    total_amount: str
    status: str
    created_at: str
    updated_at: str

    @classmethod
    def from_order(cls, order):
        return cls(**order.to_dict())
