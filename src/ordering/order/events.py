"""Domain events for the Order aggregate.

Shopper-initiated and admin-initiated changes raise different events, so the
event store doubles as the audit trail of who moved an order and how.
"""

from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String, Text

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderPlaced:
    """A cart was converted into an order."""

    __version__ = 1

    order_id = Identifier(required=True)
    owner_id = Identifier(required=True)
    amount = Float(required=True)
    currency = String(required=True, max_length=3)
    item_count = Integer(required=True)
    status = String(required=True, max_length=20)
    payment_status = String(required=True, max_length=20)
    payment_method = String(required=True, max_length=20)
    remote_order_ref = String(max_length=255)
    remote_payment_ref = String(max_length=255)
    placed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderCancelled:
    """The shopper cancelled the order before it shipped."""

    __version__ = 1

    order_id = Identifier(required=True)
    owner_id = Identifier(required=True)
    previous_status = String(required=True, max_length=20)
    cancelled_by = String(required=True, max_length=20)
    cancelled_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderAddressUpdated:
    """The shopper corrected the delivery address."""

    __version__ = 1

    order_id = Identifier(required=True)
    owner_id = Identifier(required=True)
    changed_fields = Text(required=True)  # JSON list of field names
    address = Text(required=True)  # JSON snapshot after the change


@ordering.event(part_of="Order")
class OrderStatusOverridden:
    """An administrator set the order status directly."""

    __version__ = 1

    order_id = Identifier(required=True)
    admin_id = Identifier(required=True)
    previous_status = String(required=True, max_length=20)
    new_status = String(required=True, max_length=20)
    follows_lifecycle = Boolean(default=False)
    overridden_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderPaymentStatusOverridden:
    """An administrator set the payment status directly."""

    __version__ = 1

    order_id = Identifier(required=True)
    admin_id = Identifier(required=True)
    previous_payment_status = String(required=True, max_length=20)
    new_payment_status = String(required=True, max_length=20)
    follows_lifecycle = Boolean(default=False)
    overridden_at = DateTime(required=True)
