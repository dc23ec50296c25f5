"""Live product references for cart lines.

A cart line always keeps its own snapshot. When a cart is displayed, each
line is also given a reference to the product as the catalog knows it right
now: the full view when the product still exists, just its id otherwise.
"""

from dataclasses import dataclass

from catalogue.reader import CatalogReader


@dataclass(frozen=True)
class ProductSnapshotRef:
    product_id: str
    name: str
    price: float
    image: str | None
    is_active: bool
    kind: str = "snapshot"


@dataclass(frozen=True)
class ProductIdRef:
    product_id: str
    kind: str = "id"


ProductRef = ProductSnapshotRef | ProductIdRef


def resolve_product_ref(catalog: CatalogReader, product_id) -> ProductRef:
    product = catalog.get_product(str(product_id))
    if product is None:
        return ProductIdRef(product_id=str(product_id))
    return ProductSnapshotRef(
        product_id=str(product_id),
        name=product.name,
        price=product.effective_price,
        image=product.primary_image_url,
        is_active=product.is_active,
    )


def resolve_cart_refs(catalog: CatalogReader, cart) -> dict[str, ProductRef]:
    """Resolve every line of the cart once, keyed by product id."""
    return {str(item.product_id): resolve_product_ref(catalog, item.product_id) for item in cart.items}
