"""Tests for the OrderItem value object."""

from decimal import Decimal

import pytest
from ordering.order.exceptions import ValidationError
from protean.exceptions import IncorrectUsageError
from ordering.order.order import OrderItem


class TestOrderItem:
    def test_price_is_converted_to_decimal(self):
        item = OrderItem(product_id="P1", quantity=1, unit_price="9.99")
        assert item.unit_price == Decimal("9.99")
        assert isinstance(item.unit_price, Decimal)

    def test_equality_by_value(self):
        a = OrderItem(product_id="P1", quantity=2, unit_price="9.99")
        b = OrderItem(product_id="P1", quantity=2, unit_price=Decimal("9.99"))
        assert a == b
        assert hash(a) == hash(b)

    def test_is_immutable(self):
        item = OrderItem(product_id="P1", quantity=1, unit_price="1.00")
        with pytest.raises(IncorrectUsageError):
            item.quantity = 5

    def test_line_total(self):
        item = OrderItem(product_id="P1", quantity=3, unit_price="0.10")
        assert item.line_total == Decimal("0.30")

    def test_from_dict(self):
        item = OrderItem.from_dict({"product_id": "P1", "quantity": 2, "unit_price": "3.50"})
        assert item == OrderItem(product_id="P1", quantity=2, unit_price=Decimal("3.50"))

    def test_to_dict(self):
        item = OrderItem(product_id="P1", quantity=2, unit_price="3.50")
        assert item.to_dict() == {"product_id": "P1", "quantity": 2, "unit_price": "3.50"}


class TestOrderItemValidation:
    @pytest.mark.parametrize("product_id", ["", "   ", None])
    def test_product_id_required(self, product_id):
        with pytest.raises(ValidationError) as exc_info:
            OrderItem(product_id=product_id, quantity=1, unit_price="1.00")
        assert "product_id" in exc_info.value.messages

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_quantity_must_be_positive(self, quantity):
        with pytest.raises(ValidationError) as exc_info:
            OrderItem(product_id="P1", quantity=quantity, unit_price="1.00")
        assert "quantity" in exc_info.value.messages

    @pytest.mark.parametrize("quantity", [1.5, "two"])
    def test_quantity_must_be_an_integer(self, quantity):
        with pytest.raises(ValidationError) as exc_info:
            OrderItem(product_id="P1", quantity=quantity, unit_price="1.00")
        assert "quantity" in exc_info.value.messages

    @pytest.mark.parametrize("price", ["0", "-1.00", 0])
    def test_price_must_be_positive(self, price):
        with pytest.raises(ValidationError) as exc_info:
            OrderItem(product_id="P1", quantity=1, unit_price=price)
        assert "unit_price" in exc_info.value.messages

    @pytest.mark.parametrize("price", ["abc", None, "NaN", "Infinity"])
    def test_price_must_be_a_finite_amount(self, price):
        with pytest.raises(ValidationError) as exc_info:
            OrderItem(product_id="P1", quantity=1, unit_price=price)
        assert "unit_price" in exc_info.value.messages

    def test_all_errors_reported_together(self):
        with pytest.raises(ValidationError) as exc_info:
            OrderItem(product_id="", quantity=0, unit_price="abc")
        assert set(exc_info.value.messages) == {"product_id", "quantity", "unit_price"}
