"""
Gallery Protocols — Registros remotos e interface do client de catálogo.

Os dataclasses aqui representam o payload da API remota antes de ser
persistido. Expõem a mesma superfície de leitura que o model Product
(main_image_url, price_display, image_urls), para que os templates
renderizem dados ao vivo da API sem salvá-los.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Protocol, runtime_checkable


@dataclass
class RemoteProduct:
    """Produto como retornado pela API remota."""

    id: int
    title: str | None = None  # None = não encontrado
    description: str = ""
    price: Decimal = Decimal("0")
    category_name: str = ""
    thumbnail: str = ""
    image_urls: list[str] = field(default_factory=list)

    @property
    def is_found(self) -> bool:
        return bool(self.title)

    @property
    def main_image_url(self) -> str:
        for url in self.image_urls:
            if url:
                return url
        return self.thumbnail

    @property
    def price_display(self) -> str:
        return f"${self.price:.2f}"


@dataclass
class ProductPage:
    """Envelope de GET /products."""

    products: list[RemoteProduct]
    total: int = 0
    skip: int = 0
    limit: int = 0


@runtime_checkable
class CatalogBackend(Protocol):
    """
    Protocol para clients de catálogo.

    Implementações nunca propagam falhas de rede:
    - get_products() retorna [] em caso de erro
    - get_product() retorna RemoteProduct(id=product_id) sem título
    """

    def get_products(self) -> list[RemoteProduct]:
        """Lista os produtos remotos."""
        ...

    def get_product(self, product_id: int) -> RemoteProduct:
        """Busca um produto remoto pelo id."""
        ...
