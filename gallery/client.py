"""
Product API Client — Integração com o catálogo remoto (dummyjson).

Endpoints consumidos:
    GET {base}/products        -> {products: [...], total, skip, limit}
    GET {base}/products/{id}   -> produto

Configuração via settings:
    GALLERY = {
        "API_BASE_URL": "https://dummyjson.com",
        "API_TIMEOUT": 10,
        "API_PAGE_LIMIT": None,
    }

Os métodos públicos get_products() e get_product() nunca propagam falhas:
retornam lista vazia ou um placeholder sem título, e registram o erro no log.
"""

from __future__ import annotations

import json
import logging
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.parse import urlencode
from urllib.request import Request, urlopen

from rest_framework.exceptions import ValidationError as DRFValidationError

from gallery.conf import get_gallery_setting
from gallery.exceptions import CatalogApiError
from gallery.protocols import ProductPage, RemoteProduct
from gallery.serializers import ProductPageSerializer, RemoteProductSerializer

logger = logging.getLogger(__name__)


class ProductApiClient:
    """
    Client HTTP do catálogo remoto.

    Args:
        base_url: URL base da API (default: GALLERY["API_BASE_URL"])
        timeout: Timeout em segundos (default: GALLERY["API_TIMEOUT"])
        page_limit: Valor de ?limit= em GET /products (None = default do servidor)

    Example:
        client = ProductApiClient()
        products = client.get_products()
        product = client.get_product(1)
        if not product.is_found:
            ...
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: int | None = None,
        page_limit: int | None = None,
    ):
        self.base_url = (base_url or get_gallery_setting("API_BASE_URL")).rstrip("/")
        self.timeout = timeout or get_gallery_setting("API_TIMEOUT")
        self.page_limit = page_limit if page_limit is not None else get_gallery_setting("API_PAGE_LIMIT")

    def get_products(self) -> list[RemoteProduct]:
        """Lista produtos remotos. Retorna [] em qualquer falha."""
        try:
            page = self.get_product_page(limit=self.page_limit)
        except CatalogApiError as e:
            logger.error(f"Failed to fetch products from API: [{e.code}] {e.message}")
            return []
        except Exception:
            logger.exception("Unexpected error fetching products from API")
            return []

        logger.info(f"Fetched {len(page.products)} products from API (total={page.total})")
        return page.products

    def get_product(self, product_id: int) -> RemoteProduct:
        """
        Busca um produto remoto pelo id.

        Em qualquer falha retorna RemoteProduct(id=product_id) com title=None.
        Quem chama deve tratar título ausente como "não encontrado".
        """
        try:
            data = self._request(f"/products/{product_id}")
            serializer = RemoteProductSerializer(data=data)
            self._validate(serializer)
            return serializer.to_record()
        except CatalogApiError as e:
            logger.error(f"Failed to fetch product {product_id} from API: [{e.code}] {e.message}")
        except Exception:
            logger.exception(f"Unexpected error fetching product {product_id} from API")
        return RemoteProduct(id=product_id)

    def get_product_page(self, limit: int | None = None, skip: int | None = None) -> ProductPage:
        """
        Busca uma página de produtos com os metadados de paginação.

        Raises:
            CatalogApiError: Se a requisição ou o payload falharem
        """
        params = {}
        if limit is not None:
            params["limit"] = limit
        if skip is not None:
            params["skip"] = skip

        data = self._request("/products", params)
        serializer = ProductPageSerializer(data=data)
        self._validate(serializer)
        return serializer.to_page()

    def _validate(self, serializer) -> None:
        try:
            serializer.is_valid(raise_exception=True)
        except DRFValidationError as e:
            raise CatalogApiError(
                code="invalid_payload",
                message="API returned an unexpected payload",
                context={"errors": e.detail},
            ) from e

    def _request(self, path: str, params: dict | None = None) -> Any:
        """GET na API e decodifica o JSON."""
        url = f"{self.base_url}{path}"
        if params:
            url = f"{url}?{urlencode(params)}"

        request = Request(url, headers={"Accept": "application/json"}, method="GET")

        try:
            with urlopen(request, timeout=self.timeout) as response:
                body = response.read()
                logger.debug(f"GET {url} (status={response.status})")
        except HTTPError as e:
            raise CatalogApiError(
                code="http_error",
                message=f"HTTP {e.code}: {e.reason}",
                context={"url": url, "status": e.code},
            ) from e
        except URLError as e:
            raise CatalogApiError(
                code="network_error",
                message=str(e.reason),
                context={"url": url},
            ) from e
        except TimeoutError as e:
            raise CatalogApiError(
                code="network_error",
                message="timed out",
                context={"url": url},
            ) from e

        try:
            return json.loads(body.decode("utf-8"))
        except ValueError as e:
            raise CatalogApiError(
                code="invalid_payload",
                message=f"Invalid JSON: {e}",
                context={"url": url},
            ) from e
