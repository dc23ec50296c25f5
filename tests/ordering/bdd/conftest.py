"""Shared BDD fixtures and step definitions for the Ordering domain."""

import json

import pytest
from ordering.cart.cart import Cart
from ordering.cart.items import SetCartItem
from ordering.checkout.checkout import CompleteCheckout, InitiateCheckout
from ordering.order.administration import OverrideOrderStatus
from ordering.order.order import Order
from protean import current_domain
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then
from shared.errors import StorefrontError


# ---------------------------------------------------------------------------
# Scalar fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def owner_id():
    return "cust-001"


@pytest.fixture()
def outcome():
    """Container for the result or error of the last When step."""
    return {"result": None, "error": None}


@pytest.fixture()
def attempt(outcome):
    """Run a When action, keeping its result or the domain error it raised."""

    def _attempt(fn):
        try:
            outcome["result"] = fn()
        except (StorefrontError, ValidationError) as exc:
            outcome["error"] = exc

    return _attempt


def load_order(order_id) -> Order:
    return current_domain.repository_for(Order).get(order_id)


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("the catalog is stocked")
def _(catalog):
    pass


@given(parsers.cfparse('the shopper has {qty:d} of "{product_id}" in the cart'))
def _(catalog, owner_id, qty, product_id):
    current_domain.process(
        SetCartItem(owner_id=owner_id, product_id=product_id, quantity=qty),
        asynchronous=False,
    )


@given("the shopper has started checkout", target_fixture="intent")
def _(gateway, owner_id):
    return current_domain.process(InitiateCheckout(owner_id=owner_id), asynchronous=False)


@given("the shopper has a confirmed order", target_fixture="order_id")
def _(catalog, gateway, address, owner_id):
    current_domain.process(SetCartItem(owner_id=owner_id, product_id="P1", quantity=2), asynchronous=False)
    intent = current_domain.process(InitiateCheckout(owner_id=owner_id), asynchronous=False)
    return current_domain.process(
        CompleteCheckout(
            owner_id=owner_id,
            remote_order_ref=intent.id,
            remote_payment_ref="pay_bdd",
            remote_signature=gateway.sign(intent.id, "pay_bdd"),
            address=json.dumps(address),
        ),
        asynchronous=False,
    )


@given(parsers.cfparse('an administrator has set the order status to "{status}"'))
def _(order_id, status):
    current_domain.process(
        OverrideOrderStatus(order_id=order_id, admin_id="admin-1", status=status),
        asynchronous=False,
    )


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the request fails with "{kind}"'))
def _(outcome, kind):
    assert outcome["error"] is not None, "expected the step to fail"
    assert getattr(outcome["error"], "kind", type(outcome["error"]).__name__) == kind


@then(parsers.cfparse("the cart holds {count:d} items worth {amount:g}"))
def _(owner_id, count, amount):
    cart = current_domain.repository_for(Cart).for_owner(owner_id)
    assert cart.total_item_count == count
    assert cart.total_amount == pytest.approx(amount)


@then("the cart is empty")
def _(owner_id):
    assert current_domain.repository_for(Cart).for_owner(owner_id).is_empty


@then(parsers.cfparse("the shopper has {count:d} orders"))
def _(owner_id, count):
    assert len(current_domain.repository_for(Order).for_owner(owner_id)) == count


@then(parsers.cfparse('the order status is "{status}"'))
def _(order_id, status):
    assert load_order(order_id).status == status
