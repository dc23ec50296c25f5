"""Tests for the Cart aggregate structure and its totals."""

import pytest
from ordering.cart.cart import Cart, CartItem, CartTotals, cart_id_for, recompute_totals
from protean.exceptions import ValidationError


class TestCartCreation:
    def test_create_empty_cart(self):
        cart = Cart.create(owner_id="cust-001")
        assert cart.owner_id == "cust-001"
        assert cart.items == []
        assert cart.total_item_count == 0
        assert cart.total_amount == 0.0
        assert cart.created_at is not None
        assert cart.is_empty

    def test_identity_is_derived_from_owner(self):
        assert Cart.create(owner_id="cust-001").id == cart_id_for("cust-001")
        assert Cart.create(owner_id="cust-001").id == Cart.create(owner_id="cust-001").id
        assert cart_id_for("cust-001") != cart_id_for("cust-002")

    def test_owner_is_required(self):
        with pytest.raises(ValidationError):
            Cart(total_item_count=0, total_amount=0.0)


class TestCartItemEntity:
    def test_quantity_must_be_positive(self):
        with pytest.raises(ValidationError):
            CartItem(product_id="P1", quantity=0, unit_price=10.0, name="Thing")

    def test_price_cannot_be_negative(self):
        with pytest.raises(ValidationError):
            CartItem(product_id="P1", quantity=1, unit_price=-1.0, name="Thing")

    def test_line_total(self):
        item = CartItem(product_id="P1", quantity=3, unit_price=33.33, name="Thing")
        assert item.line_total == pytest.approx(99.99)


class TestRecomputeTotals:
    def test_empty(self):
        assert recompute_totals([]) == CartTotals(item_count=0, amount=0.0)

    def test_sums_quantity_and_amount(self):
        items = [
            CartItem(product_id="P1", quantity=2, unit_price=500.0, name="Brass Diya"),
            CartItem(product_id="P2", quantity=3, unit_price=19.99, name="Card"),
        ]
        totals = recompute_totals(items)
        assert totals.item_count == 5
        assert totals.amount == pytest.approx(1059.97)

    def test_amount_is_rounded_to_paise(self):
        items = [CartItem(product_id="P1", quantity=3, unit_price=0.1, name="Sticker")]
        assert recompute_totals(items).amount == 0.3

    def test_is_pure(self):
        items = [CartItem(product_id="P1", quantity=2, unit_price=10.0, name="Pen")]
        recompute_totals(items)
        assert items[0].quantity == 2
        assert recompute_totals(items) == recompute_totals(items)


class TestCartInvariants:
    def test_totals_always_match_items(self):
        cart = Cart.create(owner_id="cust-001")
        for product_id, quantity, price in [("P1", 2, 500.0), ("P2", 1, 999.0), ("P1", 4, 480.0)]:
            cart.set_item(product_id, quantity, price, product_id)
            expected = recompute_totals(cart.items)
            assert cart.total_item_count == expected.item_count
            assert cart.total_amount == pytest.approx(expected.amount)

        cart.remove_item("P2")
        assert cart.total_item_count == 4
        assert cart.total_amount == pytest.approx(1920.0)

