"""Checkout: turns a shopper's cart into an order.

Online payment is a two step flow with nothing stored in between:

    START → INTENT_CREATED → AWAITING_CALLBACK → VERIFIED → ORDER_CREATED

1. ``InitiateCheckout`` registers the cart total with the payment provider
   and hands the intent to the client. No cart or order is touched.
2. The client pays with the provider and calls back with the provider's
   order id, payment id and signature.
3. ``CompleteCheckout`` verifies the signature, then, inside the shopper's
   atomic section, refuses payments already used for an order, re-reads the
   cart, saves the address, places a paid order and empties the cart.

Any failure returns the flow to START with nothing persisted. The empty
cart check makes a repeated callback fail with EmptyCart instead of creating
a second order. A callback replayed after the cart was refilled fails with
InvalidPaymentDetails because its payment already belongs to an order.

The completing commands are dispatched with ``ordering.shared.atomic.dispatch``
so that the cart read, the order write and the cart clear commit together
while the shopper's lock is held.

``PlaceCashOnDeliveryOrder`` skips the provider and places an order whose
payment is still pending, through the same path.
"""

import json
from enum import Enum

import structlog
from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from ordering.address_book.book import upsert_from_checkout
from ordering.cart.cart import Cart
from ordering.domain import ordering
from ordering.order.order import CURRENCY, Order, PaymentMethod, PaymentReference
from payments.gateway import get_gateway
from payments.gateway.port import RemoteIntent, to_minor_units
from shared.errors import EmptyCart, InvalidPaymentDetails, SignatureMismatch

logger = structlog.get_logger(__name__)


class CheckoutStage(Enum):
    START = "START"
    INTENT_CREATED = "INTENT_CREATED"
    AWAITING_CALLBACK = "AWAITING_CALLBACK"
    VERIFIED = "VERIFIED"
    ORDER_CREATED = "ORDER_CREATED"


_CALLBACK_FIELDS = ("remote_order_ref", "remote_payment_ref", "remote_signature")


def receipt_ref_for(cart) -> str:
    return f"order_rcpt_{cart.id}"


@ordering.command(part_of="Order")
class InitiateCheckout:
    owner_id = Identifier(required=True)


@ordering.command(part_of="Order")
class CompleteCheckout:
    owner_id = Identifier(required=True)
    remote_order_ref = String(max_length=255)
    remote_payment_ref = String(max_length=255)
    remote_signature = String(max_length=255)
    address = Text()  # JSON: address fields as entered by the shopper


@ordering.command(part_of="Order")
class PlaceCashOnDeliveryOrder:
    owner_id = Identifier(required=True)
    address = Text()  # JSON: address fields as entered by the shopper


@ordering.command_handler(part_of=Order)
class CheckoutHandler:
    @handle(InitiateCheckout)
    def initiate_checkout(self, command) -> RemoteIntent:
        cart = current_domain.repository_for(Cart).for_owner(command.owner_id)
        if cart is None or cart.is_empty:
            raise EmptyCart("Cart is empty")

        amount = to_minor_units(cart.total_amount)
        intent = get_gateway().create_intent(
            amount_minor_units=amount,
            currency=CURRENCY,
            receipt_ref=receipt_ref_for(cart),
        )

        logger.info(
            "checkout.intent_created",
            stage=CheckoutStage.INTENT_CREATED.value,
            next_stage=CheckoutStage.AWAITING_CALLBACK.value,
            owner_id=str(command.owner_id),
            remote_order_ref=intent.id,
            amount=intent.amount,
            currency=intent.currency,
        )
        return intent

    @handle(CompleteCheckout)
    def complete_checkout(self, command):
        missing = [field for field in _CALLBACK_FIELDS if not getattr(command, field)]
        if missing:
            raise InvalidPaymentDetails("Missing payment details", missing=missing)

        verified = get_gateway().verify_signature(
            command.remote_order_ref,
            command.remote_payment_ref,
            command.remote_signature,
        )
        if not verified:
            logger.error(
                "checkout.signature_mismatch",
                stage=CheckoutStage.START.value,
                owner_id=str(command.owner_id),
                remote_order_ref=command.remote_order_ref,
                remote_payment_ref=command.remote_payment_ref,
            )
            raise SignatureMismatch("Payment signature verification failed")

        logger.info(
            "checkout.payment_verified",
            stage=CheckoutStage.VERIFIED.value,
            owner_id=str(command.owner_id),
            remote_order_ref=command.remote_order_ref,
        )

        payment = PaymentReference(
            provider=get_gateway().provider or PaymentMethod.RAZORPAY.value,
            remote_order_ref=command.remote_order_ref,
            remote_payment_ref=command.remote_payment_ref,
            remote_signature=command.remote_signature,
        )
        order = _place_order(command.owner_id, command.address, PaymentMethod.RAZORPAY, payment)
        return str(order.id)

    @handle(PlaceCashOnDeliveryOrder)
    def place_cash_on_delivery_order(self, command):
        order = _place_order(command.owner_id, command.address, PaymentMethod.COD)
        return str(order.id)


def _place_order(owner_id, address_json, payment_method, payment=None):
    address_data = json.loads(address_json) if isinstance(address_json, str) and address_json else address_json

    cart_repo = current_domain.repository_for(Cart)
    cart = cart_repo.for_owner(owner_id)
    if cart is None or cart.is_empty:
        logger.warning(
            "checkout.empty_cart",
            owner_id=str(owner_id),
            payment_method=payment_method.value,
            remote_payment_ref=payment.remote_payment_ref if payment else None,
        )
        raise EmptyCart("Cart is empty")

    order_repo = current_domain.repository_for(Order)
    if payment is not None:
        earlier = order_repo.paid_with(payment.remote_order_ref, payment.remote_payment_ref)
        if earlier is not None:
            logger.error(
                "checkout.payment_reused",
                owner_id=str(owner_id),
                remote_order_ref=payment.remote_order_ref,
                remote_payment_ref=payment.remote_payment_ref,
                existing_order_id=str(earlier.id),
            )
            raise InvalidPaymentDetails(
                "Payment has already been used for an order",
                remote_payment_ref=payment.remote_payment_ref,
            )

    address = upsert_from_checkout(owner_id, address_data)
    order = Order.place(owner_id, cart, address, payment_method, payment)
    order_repo.add(order)

    cart.clear(reason="checkout")
    cart_repo.add(cart)

    logger.info(
        "checkout.order_created",
        stage=CheckoutStage.ORDER_CREATED.value,
        owner_id=str(owner_id),
        order_id=str(order.id),
        amount=order.amount,
        payment_method=order.payment_method,
        payment_status=order.payment_status,
    )
    return order
