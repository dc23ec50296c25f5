"""Cart item management: commands and handler.

Mutations are dispatched inside ``atomically(owner_id)`` so that concurrent
requests for the same shopper are applied one after another. Catalog checks
happen before anything is changed, so a rejected request leaves the cart
exactly as it was.
"""

import structlog
from protean import handle
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from catalogue.reader import get_catalog
from ordering.cart.cart import Cart
from ordering.domain import ordering
from shared.errors import InsufficientStock, ProductNotFound

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Cart")
class OpenCart:
    """Return the shopper's cart, creating an empty one on first access."""

    owner_id = Identifier(required=True)


@ordering.command(part_of="Cart")
class SetCartItem:
    """Set a product's quantity. Zero or negative quantities remove the line."""

    owner_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)


@ordering.command(part_of="Cart")
class RemoveCartItem:
    owner_id = Identifier(required=True)
    product_id = Identifier(required=True)


@ordering.command_handler(part_of=Cart)
class ManageCartItemsHandler:
    @handle(OpenCart)
    def open_cart(self, command):
        cart = current_domain.repository_for(Cart).get_or_create(command.owner_id)
        return str(cart.id)

    @handle(SetCartItem)
    def set_cart_item(self, command):
        if command.quantity < 1:
            return self._remove(command.owner_id, command.product_id)

        product = get_catalog().get_product(str(command.product_id))
        if product is None or not product.is_active:
            raise ProductNotFound(
                f"Product {command.product_id} not found",
                product_id=str(command.product_id),
            )
        if command.quantity > product.stock:
            logger.info(
                "cart.insufficient_stock",
                owner_id=str(command.owner_id),
                product_id=str(command.product_id),
                requested=command.quantity,
                available=product.stock,
            )
            raise InsufficientStock(
                f"Only {product.stock} left in stock",
                product_id=str(command.product_id),
                available=product.stock,
            )

        repo = current_domain.repository_for(Cart)
        cart = repo.get_or_create(command.owner_id)
        cart.set_item(
            product_id=command.product_id,
            quantity=command.quantity,
            unit_price=product.effective_price,
            name=product.name,
            image=product.primary_image_url,
        )
        repo.add(cart)

        logger.debug(
            "cart.item_set",
            owner_id=str(command.owner_id),
            product_id=str(command.product_id),
            quantity=command.quantity,
            total_amount=cart.total_amount,
        )
        return str(cart.id)

    @handle(RemoveCartItem)
    def remove_cart_item(self, command):
        return self._remove(command.owner_id, command.product_id)

    def _remove(self, owner_id, product_id):
        repo = current_domain.repository_for(Cart)
        cart = repo.get_or_create(owner_id)
        cart.remove_item(product_id)
        repo.add(cart)
        return str(cart.id)
