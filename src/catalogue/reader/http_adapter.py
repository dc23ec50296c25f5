"""Catalog reader backed by the catalogue service's HTTP API.

``GET {base_url}/products/{id}`` returns the product JSON, 404 when unknown.
"""

import httpx
import structlog

from catalogue.reader.port import CatalogProduct, CatalogReader
from shared.errors import CatalogUnavailable

logger = structlog.get_logger(__name__)


class HttpCatalogReader(CatalogReader):
    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._client = httpx.Client(
            base_url=base_url,
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def get_product(self, product_id: str) -> CatalogProduct | None:
        try:
            response = self._client.get(f"/products/{product_id}")
        except httpx.HTTPError as exc:
            logger.error("catalogue.unreachable", product_id=product_id, error=str(exc))
            raise CatalogUnavailable("Catalogue could not be reached") from exc

        if response.status_code == 404:
            return None
        if response.is_error:
            logger.error("catalogue.lookup_failed", product_id=product_id, status=response.status_code)
            raise CatalogUnavailable(
                f"Catalogue lookup failed with status {response.status_code}",
                product_id=product_id,
            )

        return CatalogProduct.from_dict(response.json())
