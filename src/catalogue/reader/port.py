"""Catalog reader port.

The storefront never owns product data. Carts only need a read-only view of
a product's current price, stock and presentation fields at the moment an
item is added or the cart is displayed.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class CatalogProduct:
    product_id: str
    name: str
    price: float
    stock: int
    is_active: bool = True
    sale_price: float | None = None
    primary_image_url: str | None = None

    @property
    def effective_price(self) -> float:
        """Sale price when one is set, otherwise the list price."""
        return self.sale_price if self.sale_price is not None else self.price

    @classmethod
    def from_dict(cls, data: dict) -> "CatalogProduct":
        images = data.get("images") or []
        primary_image_url = data.get("primary_image_url")
        if primary_image_url is None and images:
            first = images[0]
            primary_image_url = first.get("url") if isinstance(first, dict) else first

        sale_price = data.get("sale_price")
        return cls(
            product_id=str(data.get("product_id") or data["id"]),
            name=data["name"],
            price=float(data["price"]),
            stock=int(data.get("stock", 0)),
            is_active=bool(data.get("is_active", True)),
            sale_price=float(sale_price) if sale_price is not None else None,
            primary_image_url=primary_image_url,
        )


class CatalogReader(ABC):
    """Abstract read-only catalog interface."""

    @abstractmethod
    def get_product(self, product_id: str) -> CatalogProduct | None:
        """Return the product, or None when the catalog does not know it.

        Raises CatalogUnavailable when the catalog cannot be consulted.
        """
        ...
