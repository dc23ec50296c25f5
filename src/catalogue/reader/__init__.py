"""Catalog reader factory.

Provides get_catalog() / set_catalog() to swap implementations:
- InMemoryCatalog when CATALOGUE_BASE_URL is unset, optionally seeded from
  the JSON file named by CATALOGUE_SEED_FILE
- HttpCatalogReader pointed at CATALOGUE_BASE_URL otherwise
"""

import os

from catalogue.reader.http_adapter import HttpCatalogReader
from catalogue.reader.memory_adapter import InMemoryCatalog
from catalogue.reader.port import CatalogProduct, CatalogReader

__all__ = [
    "CatalogProduct",
    "CatalogReader",
    "get_catalog",
    "reset_catalog",
    "set_catalog",
]

_current_catalog: CatalogReader | None = None


def _catalog_from_env() -> CatalogReader:
    base_url = os.getenv("CATALOGUE_BASE_URL")
    if base_url:
        return HttpCatalogReader(base_url, timeout=float(os.getenv("CATALOGUE_TIMEOUT", "5")))

    seed_file = os.getenv("CATALOGUE_SEED_FILE")
    if seed_file:
        return InMemoryCatalog.from_file(seed_file)
    return InMemoryCatalog()


def get_catalog() -> CatalogReader:
    global _current_catalog
    if _current_catalog is None:
        _current_catalog = _catalog_from_env()
    return _current_catalog


def set_catalog(catalog: CatalogReader) -> None:
    """Override the active catalog reader (useful for tests)."""
    global _current_catalog
    _current_catalog = catalog


def reset_catalog() -> None:
    global _current_catalog
    _current_catalog = None
