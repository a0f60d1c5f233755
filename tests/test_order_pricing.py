"""
Order pricing: line snapshots, custom price fallback and order totals.
"""
from decimal import Decimal

import pytest

from glowiva.core.errors import NotFoundError, ValidationError
from glowiva.core.money import parse_positive, percentage
from glowiva.schemas.order import OrderCreate, OrderItemCreate
from glowiva.services.orders import new_order, order_total, price_order_lines, resolve_sale_price


class TestCustomPrice:

    @pytest.mark.parametrize("raw", [None, "", "   ", "abc", 0, "0", -5, "-1.5", "nan", "inf", True])
    def test_invalid_custom_price_falls_back_to_selling_price(self, product, raw):
        assert resolve_sale_price(raw, product) == Decimal("100.00")

    @pytest.mark.parametrize("raw, expected", [(120, "120"), ("85.50", "85.50"), (0.5, "0.5")])
    def test_positive_custom_price_wins(self, product, raw, expected):
        assert resolve_sale_price(raw, product) == Decimal(expected)

    def test_parse_positive_rejects_booleans(self):
        assert parse_positive(False) is None

    def test_custom_price_at_the_cap_is_rejected(self, product):
        with pytest.raises(ValidationError):
            resolve_sale_price("100000000", product)


class TestPriceOrderLines:

    def test_snapshots_price_and_cost(self, db, make_product):
        serum = make_product(name="Serum", cost="60.00", selling="100.00")
        toner = make_product(name="Toner", cost="10.00", selling="25.00")

        priced = price_order_lines(db, [
            OrderItemCreate(product_id=serum.id, quantity=2),
            OrderItemCreate(product_id=toner.id, quantity=3, custom_price="20"),
        ])

        assert priced.subtotal == Decimal("260.00")
        assert priced.total_cost == Decimal("150.00")
        assert [line.price_at_time for line in priced.lines] == [Decimal("100.00"), Decimal("20.00")]
        assert [line.cost_at_time for line in priced.lines] == [Decimal("60.00"), Decimal("10.00")]

    def test_custom_price_line_scenario(self, db, make_product):
        product = make_product(name="Mask", cost="40.00", selling="55.00")

        priced = price_order_lines(db, [OrderItemCreate(product_id=product.id, quantity=2, custom_price=60)])

        assert priced.subtotal == Decimal("120.00")
        assert priced.total_cost == Decimal("80.00")
        assert priced.subtotal - priced.total_cost == Decimal("40.00")

    def test_unknown_product_raises_not_found(self, db):
        with pytest.raises(NotFoundError) as exc:
            price_order_lines(db, [OrderItemCreate(product_id=999, quantity=1)])
        assert "999" in exc.value.message

    def test_stock_is_not_decremented(self, db, product):
        price_order_lines(db, [OrderItemCreate(product_id=product.id, quantity=5)])
        assert product.stock == 20

    def test_later_product_edits_do_not_change_stored_order(self, db, product):
        order = new_order(db, OrderCreate(
            customer_name="Chioma",
            customer_phone="0801",
            items=[OrderItemCreate(product_id=product.id, quantity=1)],
        ), created_by_id=None)
        db.add(order)
        db.commit()

        product.selling_price = Decimal("500.00")
        product.cost_price = Decimal("400.00")
        db.commit()
        db.refresh(order)

        assert order.items[0].price_at_time == Decimal("100.00")
        assert order.items[0].cost_at_time == Decimal("60.00")
        assert order.total == Decimal("100.00")


class TestOrderTotals:

    def test_total_is_subtotal_minus_discount_plus_tax_and_shipping(self):
        assert order_total("100.00", tax="7.50", shipping="5", discount="12.5") == Decimal("100.00")

    def test_order_entry_flow_has_no_adjustments(self, db, product):
        order = new_order(db, OrderCreate(
            customer_name="Chioma",
            customer_phone="0801",
            items=[OrderItemCreate(product_id=product.id, quantity=3)],
        ), created_by_id=None)

        assert order.subtotal == Decimal("300.00")
        assert order.total == order.subtotal
        assert order.total_cost == Decimal("180.00")
        assert order.order_number.startswith("GLW")

    def test_margin_on_zero_revenue_is_zero(self):
        assert percentage(Decimal("10"), Decimal("0")) == Decimal("0.00")
