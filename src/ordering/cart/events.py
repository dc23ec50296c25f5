"""Domain events for the Cart aggregate."""

from protean.fields import Float, Identifier, Integer, String

from ordering.domain import ordering


@ordering.event(part_of="Cart")
class CartItemSet:
    """A product line was added or its quantity changed, with a fresh price snapshot."""

    __version__ = 1

    cart_id = Identifier(required=True)
    owner_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    unit_price = Float(required=True)
    total_item_count = Integer(required=True)
    total_amount = Float(required=True)


@ordering.event(part_of="Cart")
class CartItemRemoved:
    """A product line was removed from the cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    owner_id = Identifier(required=True)
    product_id = Identifier(required=True)
    total_item_count = Integer(required=True)
    total_amount = Float(required=True)


@ordering.event(part_of="Cart")
class CartCleared:
    """All lines were removed because the cart became an order."""

    __version__ = 1

    cart_id = Identifier(required=True)
    owner_id = Identifier(required=True)
    reason = String(max_length=50)
