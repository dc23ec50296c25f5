"""In-process catalog used in development and tests."""

import json
from pathlib import Path

from catalogue.reader.port import CatalogProduct, CatalogReader


class InMemoryCatalog(CatalogReader):
    def __init__(self, products: list[CatalogProduct] | None = None) -> None:
        self._products: dict[str, CatalogProduct] = {}
        for product in products or []:
            self.put(product)

    def put(self, product: CatalogProduct) -> None:
        self._products[str(product.product_id)] = product

    def remove(self, product_id: str) -> None:
        self._products.pop(str(product_id), None)

    def get_product(self, product_id: str) -> CatalogProduct | None:
        return self._products.get(str(product_id))

    @classmethod
    def from_file(cls, path: str | Path) -> "InMemoryCatalog":
        """Load a JSON list of product dicts."""
        with open(path, encoding="utf-8") as seed:
            records = json.load(seed)
        return cls([CatalogProduct.from_dict(record) for record in records])
