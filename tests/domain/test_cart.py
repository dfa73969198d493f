"""
Tests for the checkout input value objects.

Covers CartLine, CustomerAttributes, OrderOptions and FlatTaxRule
validation and normalization.
"""

from decimal import Decimal

import pytest

from checkout_kernel.domain.cart import CartLine, CustomerAttributes, OrderOptions, OrderType
from checkout_kernel.domain.tax_lookup import FlatTaxRule


class TestCartLine:

    def test_normalizes_category(self):
        line = CartLine("cigar", 1, Decimal("10.00"), "  Tobacco ")
        assert line.category == "tobacco"

    def test_primary_flat_tax_id(self):
        assert CartLine("a", 1, Decimal("1"), flat_tax_ids=(5, 7)).primary_flat_tax_id == 5
        assert CartLine("a", 1, Decimal("1")).primary_flat_tax_id is None

    def test_flat_tax_ids_coerced_to_tuple(self):
        line = CartLine("a", 1, Decimal("1"), flat_tax_ids=[5])
        assert line.flat_tax_ids == (5,)

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_non_positive_quantity_rejected(self, quantity):
        with pytest.raises(ValueError):
            CartLine("a", quantity, Decimal("1"))

    def test_fractional_quantity_rejected(self):
        with pytest.raises(TypeError):
            CartLine("a", 1.5, Decimal("1"))

    def test_negative_price_rejected(self):
        with pytest.raises(ValueError):
            CartLine("a", 1, Decimal("-0.01"))

    def test_float_price_rejected(self):
        with pytest.raises(TypeError):
            CartLine("a", 1, 33.5)

    def test_zero_price_allowed(self):
        assert CartLine("sample", 1, Decimal("0")).unit_price == Decimal("0")

    def test_from_dict_camel_case(self):
        line = CartLine.from_dict(
            {
                "productId": "testtob",
                "quantity": 2,
                "unitPrice": "33.50",
                "category": "tobacco",
                "flatTaxIds": [5],
                "name": "Test Cigar Box",
            }
        )
        assert line == CartLine(
            "testtob", 2, Decimal("33.50"), "tobacco", (5,), "Test Cigar Box"
        )

    def test_from_dict_snake_case(self):
        line = CartLine.from_dict(
            {"product_id": 42, "quantity": 1, "unit_price": Decimal("4.25")}
        )
        assert line.product_id == "42"
        assert line.flat_tax_ids == ()
        assert line.category == ""


class TestOrderOptions:

    def test_defaults(self):
        options = OrderOptions()
        assert options.order_type is OrderType.PICKUP
        assert options.delivery_fee == Decimal("0")
        assert options.redeem_points == 0

    def test_order_type_from_string(self):
        options = OrderOptions(order_type="delivery", delivery_fee=Decimal("5.00"))
        assert options.order_type is OrderType.DELIVERY
        assert options.delivery_fee == Decimal("5.00")

    def test_pickup_forces_zero_fee(self):
        assert OrderOptions(delivery_fee=Decimal("5.00")).delivery_fee == Decimal("0")

    def test_negative_fee_rejected(self):
        with pytest.raises(ValueError):
            OrderOptions(order_type=OrderType.DELIVERY, delivery_fee=Decimal("-1"))

    def test_negative_points_rejected(self):
        with pytest.raises(ValueError):
            OrderOptions(redeem_points=-1)

    def test_bool_points_rejected(self):
        with pytest.raises(TypeError):
            OrderOptions(redeem_points=True)

    def test_unknown_order_type(self):
        with pytest.raises(ValueError):
            OrderOptions(order_type="drone")


class TestCustomerAttributes:

    def test_defaults(self):
        customer = CustomerAttributes(has_flat_tax=True)
        assert customer.customer_tier == 1
        assert customer.customer_id is None

    @pytest.mark.parametrize("flag", ["false", "true", 0, 1, None])
    def test_flat_tax_flag_must_be_bool(self, flag):
        with pytest.raises(TypeError, match="has_flat_tax"):
            CustomerAttributes(has_flat_tax=flag)

    @pytest.mark.parametrize("tier", [Decimal("2.5"), "2", True])
    def test_tier_must_be_int(self, tier):
        with pytest.raises(TypeError, match="customer_tier"):
            CustomerAttributes(has_flat_tax=False, customer_tier=tier)

    def test_fractional_redeem_points_rejected(self):
        with pytest.raises(TypeError, match="redeem_points"):
            OrderOptions(redeem_points=Decimal("150.9"))


class TestFlatTaxRule:

    def test_amount_parsed(self):
        rule = FlatTaxRule(id=5, label="Cook County", amount="18.00")
        assert rule.amount == Decimal("18.00")
        assert rule.is_active

    def test_negative_amount_rejected(self):
        with pytest.raises(ValueError):
            FlatTaxRule(id=5, label="Cook County", amount=Decimal("-1"))
