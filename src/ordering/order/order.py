"""Order aggregate (CQRS): an immutable record of what was bought, plus its lifecycle.

Items, amount and currency are fixed when the order is placed. Two
independent state machines then track the order:

    status:         PENDING → CONFIRMED → SHIPPED → DELIVERED
                    PENDING/CONFIRMED → CANCELLED
    payment_status: PENDING → PAID | FAILED,  PAID → REFUNDED

Shoppers may only cancel or correct the address while the order has not
shipped. Administrators can set either status to any known value; those
overrides are recorded with the admin's id and whether they followed the
lifecycle.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, ValueObject

from ordering.domain import ordering
from ordering.order.events import (
    OrderAddressUpdated,
    OrderCancelled,
    OrderPaymentStatusOverridden,
    OrderPlaced,
    OrderStatusOverridden,
)
from shared.errors import InvalidTransition

CURRENCY = "INR"


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


class PaymentStatus(Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"


class PaymentMethod(Enum):
    RAZORPAY = "RAZORPAY"
    COD = "COD"


class Actor(Enum):
    CUSTOMER = "Customer"
    ADMIN = "Admin"


# State machine transition maps
_STATUS_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}

_PAYMENT_TRANSITIONS = {
    PaymentStatus.PENDING: {PaymentStatus.PAID, PaymentStatus.FAILED},
    PaymentStatus.PAID: {PaymentStatus.REFUNDED},
    PaymentStatus.FAILED: set(),
    PaymentStatus.REFUNDED: set(),
}

# States in which the shopper may still cancel or edit the address
_SHOPPER_EDITABLE_STATES = {OrderStatus.PENDING, OrderStatus.CONFIRMED}


def _parse(enum_cls, value, field_name):
    try:
        return enum_cls(str(value).strip().upper())
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError({field_name: [f"Unknown value {value!r}. Expected one of: {allowed}"]}) from None


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@ordering.value_object(part_of="Order")
class OrderAddress:
    """Delivery address captured by value when the order was placed.

    Later edits to the shopper's saved addresses never reach this snapshot.
    """

    full_name = String(required=True, max_length=255)
    phone = String(required=True, max_length=20)
    pincode = String(required=True, max_length=10)
    line1 = String(required=True, max_length=255)
    line2 = String(max_length=255)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    landmark = String(max_length=255)


ADDRESS_FIELDS = ("full_name", "phone", "pincode", "line1", "line2", "city", "state", "landmark")


@ordering.value_object(part_of="Order")
class PaymentReference:
    """Provider references proving the payment was verified."""

    provider = String(required=True, max_length=50)
    remote_order_ref = String(required=True, max_length=255)
    remote_payment_ref = String(required=True, max_length=255)
    remote_signature = String(required=True, max_length=255)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderItem:
    """A copy of a cart line at the moment of purchase."""

    product_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    image = String(max_length=1024)
    unit_price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    owner_id = Identifier(required=True)
    items = HasMany(OrderItem)
    amount = Float(required=True, min_value=0.0)
    currency = String(max_length=3, default=CURRENCY)
    payment_method = String(choices=PaymentMethod, default=PaymentMethod.RAZORPAY.value)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    address = ValueObject(OrderAddress)
    payment = ValueObject(PaymentReference)
    cancelled_by = String(max_length=20)
    cancelled_at = DateTime()
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, owner_id, cart, address, payment_method, payment=None):
        """Materialize an order from a cart.

        Lines are copied by value, the amount is the cart's total at this
        moment. A verified payment reference marks the order as paid.
        """
        if not cart.items:
            raise ValidationError({"items": ["An order must contain at least one item"]})

        now = datetime.now(UTC)
        payment_status = PaymentStatus.PAID if payment is not None else PaymentStatus.PENDING

        order = cls(
            owner_id=owner_id,
            items=[
                OrderItem(
                    product_id=item.product_id,
                    name=item.name,
                    image=item.image,
                    unit_price=item.unit_price,
                    quantity=item.quantity,
                )
                for item in cart.items
            ],
            amount=cart.total_amount,
            currency=CURRENCY,
            payment_method=PaymentMethod(payment_method).value,
            status=OrderStatus.CONFIRMED.value,
            payment_status=payment_status.value,
            address=address,
            payment=payment,
            created_at=now,
            updated_at=now,
        )

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                owner_id=str(owner_id),
                amount=order.amount,
                currency=order.currency,
                item_count=cart.total_item_count,
                status=order.status,
                payment_status=order.payment_status,
                payment_method=order.payment_method,
                remote_order_ref=payment.remote_order_ref if payment else None,
                remote_payment_ref=payment.remote_payment_ref if payment else None,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Lifecycle helpers
    # -------------------------------------------------------------------
    @property
    def shopper_can_edit(self) -> bool:
        return OrderStatus(self.status) in _SHOPPER_EDITABLE_STATES

    def _assert_shopper_can_edit(self, action):
        current = OrderStatus(self.status)
        if current not in _SHOPPER_EDITABLE_STATES:
            raise InvalidTransition(
                f"Cannot {action} an order in {current.value} state. "
                f"Allowed only from: {', '.join(sorted(s.value for s in _SHOPPER_EDITABLE_STATES))}",
                status=current.value,
            )

    # -------------------------------------------------------------------
    # Shopper actions
    # -------------------------------------------------------------------
    def cancel(self, cancelled_by=Actor.CUSTOMER.value):
        """Cancel the order. Payment status is left as it is."""
        self._assert_shopper_can_edit("cancel")

        previous_status = self.status
        now = datetime.now(UTC)
        self.status = OrderStatus.CANCELLED.value
        self.cancelled_by = cancelled_by
        self.cancelled_at = now
        self.updated_at = now

        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                owner_id=str(self.owner_id),
                previous_status=previous_status,
                cancelled_by=cancelled_by,
                cancelled_at=now,
            )
        )

    def update_address(self, **changes):
        """Merge the given fields into the address snapshot.

        Fields passed as None keep their current value.
        """
        self._assert_shopper_can_edit("change the address of")

        unknown = set(changes) - set(ADDRESS_FIELDS)
        if unknown:
            raise ValidationError({"address": [f"Unknown address fields: {', '.join(sorted(unknown))}"]})

        current = self.address.to_dict() if self.address else {}
        changed = {field: value for field, value in changes.items() if value is not None}
        merged = {field: current.get(field) for field in ADDRESS_FIELDS}
        merged.update(changed)

        self.address = OrderAddress(**merged)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            OrderAddressUpdated(
                order_id=str(self.id),
                owner_id=str(self.owner_id),
                changed_fields=json.dumps(sorted(changed)),
                address=json.dumps(merged),
            )
        )

    # -------------------------------------------------------------------
    # Administrative overrides (unguarded)
    # -------------------------------------------------------------------
    def override_status(self, new_status, admin_id):
        """Set the status to any known value. Returns the previous status."""
        target = _parse(OrderStatus, new_status, "status")
        previous = OrderStatus(self.status)
        now = datetime.now(UTC)

        self.status = target.value
        self.updated_at = now
        if target == OrderStatus.CANCELLED and previous != OrderStatus.CANCELLED:
            self.cancelled_by = Actor.ADMIN.value
            self.cancelled_at = now

        self.raise_(
            OrderStatusOverridden(
                order_id=str(self.id),
                admin_id=str(admin_id),
                previous_status=previous.value,
                new_status=target.value,
                follows_lifecycle=target in _STATUS_TRANSITIONS[previous],
                overridden_at=now,
            )
        )
        return previous.value

    def override_payment_status(self, new_payment_status, admin_id):
        """Set the payment status to any known value. Returns the previous payment status."""
        target = _parse(PaymentStatus, new_payment_status, "payment_status")
        previous = PaymentStatus(self.payment_status)
        now = datetime.now(UTC)

        self.payment_status = target.value
        self.updated_at = now

        self.raise_(
            OrderPaymentStatusOverridden(
                order_id=str(self.id),
                admin_id=str(admin_id),
                previous_payment_status=previous.value,
                new_payment_status=target.value,
                follows_lifecycle=target in _PAYMENT_TRANSITIONS[previous],
                overridden_at=now,
            )
        )
        return previous.value
