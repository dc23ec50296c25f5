"""BDD tests for the checkout flow."""

import json

import pytest
from ordering.checkout.checkout import CompleteCheckout, InitiateCheckout
from ordering.order.order import Order
from protean import current_domain
from pytest_bdd import given, parsers, scenarios, then, when

scenarios("features/checkout.feature")


def _callback(owner_id, intent, address, signature):
    return current_domain.process(
        CompleteCheckout(
            owner_id=owner_id,
            remote_order_ref=intent.id,
            remote_payment_ref="pay_bdd",
            remote_signature=signature,
            address=json.dumps(address),
        ),
        asynchronous=False,
    )


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("the payment provider is down")
def _(gateway):
    gateway.configure(should_succeed=False)


@given("the shopper has returned from the provider with a valid signature")
def _(gateway, owner_id, intent, address):
    _callback(owner_id, intent, address, gateway.sign(intent.id, "pay_bdd"))


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when("the shopper starts checkout")
def _(attempt, gateway, owner_id):
    attempt(lambda: current_domain.process(InitiateCheckout(owner_id=owner_id), asynchronous=False))


@when("the shopper returns from the provider with a valid signature")
def _(attempt, gateway, owner_id, intent, address):
    attempt(lambda: _callback(owner_id, intent, address, gateway.sign(intent.id, "pay_bdd")))


@when("the shopper returns from the provider with a forged signature")
def _(attempt, gateway, owner_id, intent, address):
    attempt(lambda: _callback(owner_id, intent, address, gateway.sign(intent.id, "pay_other")))


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("a paid order worth {amount:g} is placed"))
def _(outcome, amount):
    assert outcome["error"] is None
    order = current_domain.repository_for(Order).get(outcome["result"])
    assert order.status == "CONFIRMED"
    assert order.payment_status == "PAID"
    assert order.amount == pytest.approx(amount)


@then(parsers.cfparse("the provider is asked for {amount:d} {currency} paise"))
def _(outcome, gateway, amount, currency):
    assert outcome["result"].amount == amount
    assert gateway.calls[-1]["amount"] == amount
    assert gateway.calls[-1]["currency"] == currency
