"""Repository for the Cart aggregate."""

from ordering.cart.cart import Cart
from ordering.domain import ordering


@ordering.repository(part_of=Cart)
class CartRepository:
    def for_owner(self, owner_id) -> Cart | None:
        """Find the owner's cart, if one was ever opened."""
        carts = self._dao.query.filter(owner_id=str(owner_id)).all().items
        return carts[0] if carts else None

    def get_or_create(self, owner_id) -> Cart:
        """Return the owner's cart, creating and persisting an empty one when absent."""
        cart = self.for_owner(owner_id)
        if cart is None:
            cart = Cart.create(owner_id=owner_id)
            self.add(cart)
        return cart
