"""Application tests for shopper address corrections on placed orders."""

import pytest
from ordering.address_book.address import SavedAddress
from ordering.order.administration import OverrideOrderStatus
from ordering.order.modification import UpdateOrderAddress
from ordering.order.order import Order
from protean import current_domain
from shared.errors import InvalidTransition, OrderNotFound


def _update(order_id, owner_id="cust-001", **fields):
    current_domain.process(
        UpdateOrderAddress(order_id=order_id, owner_id=owner_id, **fields),
        asynchronous=False,
    )


class TestUpdateOrderAddressCommand:
    def test_partial_update(self, paid_order):
        order_id = paid_order()
        _update(order_id, pincode="560034", landmark="Behind the bakery")

        address = current_domain.repository_for(Order).get(order_id).address
        assert address.pincode == "560034"
        assert address.landmark == "Behind the bakery"
        assert address.line1 == "12 MG Road"
        assert address.full_name == "Asha Rao"

    def test_update_does_not_touch_saved_address(self, paid_order):
        order_id = paid_order()
        _update(order_id, pincode="560034")

        saved = current_domain.repository_for(SavedAddress).for_owner("cust-001")
        assert saved[0].pincode == "560001"

    def test_update_after_shipping_rejected(self, paid_order):
        order_id = paid_order()
        current_domain.process(
            OverrideOrderStatus(order_id=order_id, admin_id="admin-1", status="SHIPPED"),
            asynchronous=False,
        )

        with pytest.raises(InvalidTransition):
            _update(order_id, pincode="560034")

        assert current_domain.repository_for(Order).get(order_id).address.pincode == "560001"

    def test_update_cancelled_order_rejected(self, paid_order):
        from ordering.order.cancellation import CancelOrder

        order_id = paid_order()
        current_domain.process(CancelOrder(order_id=order_id, owner_id="cust-001"), asynchronous=False)

        with pytest.raises(InvalidTransition):
            _update(order_id, city="Mysuru")

    def test_update_other_owners_order(self, paid_order):
        order_id = paid_order(owner_id="cust-001")

        with pytest.raises(OrderNotFound):
            _update(order_id, owner_id="cust-002", city="Mysuru")
