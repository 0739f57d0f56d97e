"""
ProductSyncService — Reconcilia registros remotos com o catálogo local.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from django.db import transaction

from gallery.conf import get_catalog_client
from gallery.models import Category, Product, ProductImage
from gallery.protocols import CatalogBackend, RemoteProduct


logger = logging.getLogger(__name__)


@dataclass
class SyncFailure:
    """Produto que falhou durante o sync (o lote continua)."""

    remote_id: int
    title: str | None
    error: str


@dataclass
class SyncResult:
    """Resumo de uma execução de sync."""

    fetched: int = 0
    categories_created: int = 0
    created: int = 0
    updated: int = 0
    images_written: int = 0
    skipped: int = 0  # registros sem título
    products: list[Product] = field(default_factory=list)
    failed: list[SyncFailure] = field(default_factory=list)

    @property
    def synced(self) -> int:
        return self.created + self.updated


class ProductSyncService:
    """
    Serviço de sincronização do catálogo.

    Pipeline (sync_records):
    1. Cria categorias ainda inexistentes (nomes distintos, não vazios)
    2. Para cada registro: resolve a FK de categoria e faz upsert do produto,
       casando pelo título em minúsculas e preservando o id do banco
    3. Substitui as imagens do produto (delete + insert), a primeira URL
       marcada como principal e a miniatura anexada se não estiver na lista

    Falhas por produto são logadas e puladas. Falhas no sync de categorias ou
    na orquestração são logadas e propagadas.

    Args:
        client: Implementação de CatalogBackend (default: get_catalog_client())
    """

    def __init__(self, client: CatalogBackend | None = None):
        self.client = client or get_catalog_client()

    def sync_all(self) -> SyncResult:
        """Busca todos os produtos na API e sincroniza com o banco."""
        try:
            records = self.client.get_products()
            if not records:
                logger.warning("API did not return any product data")
                return SyncResult()

            logger.info(f"Retrieved {len(records)} products from API")
            result = self.sync_records(records)
            logger.info(
                f"Product synchronization completed: {result.created} created, "
                f"{result.updated} updated, {len(result.failed)} failed"
            )
            return result
        except Exception:
            logger.exception("Error occurred during product synchronization")
            raise

    def sync_product(self, product_id: int) -> SyncResult:
        """
        Busca um produto na API e sincroniza com o banco.

        Um registro sem título é tratado como "não encontrado".
        """
        try:
            record = self.client.get_product(product_id)
            if record is None or not record.title:
                logger.warning(f"API did not return product data for ID {product_id}")
                return SyncResult()

            result = self.sync_records([record])
            logger.info(f"Product {product_id} synchronization completed")
            return result
        except Exception:
            logger.exception(f"Error occurred while synchronizing product {product_id}")
            raise

    def sync_records(self, records: list[RemoteProduct]) -> SyncResult:
        """Aplica uma lista de registros remotos ao catálogo local."""
        result = SyncResult(fetched=len(records))

        # Sem título = "não encontrado"; nunca vira linha no banco
        titled = []
        for record in records:
            if record.title:
                titled.append(record)
            else:
                logger.warning(f"Skipping product {record.id} without title")
                result.skipped += 1

        result.categories_created = self._sync_categories(titled)
        self._sync_products(titled, result)
        return result

    def _sync_categories(self, records: list[RemoteProduct]) -> int:
        # dict preserva a ordem de chegada
        names = list(dict.fromkeys(r.category_name for r in records if r.category_name))
        if not names:
            return 0

        existing = set(Category.objects.filter(name__in=names).values_list("name", flat=True))
        new_names = [name for name in names if name not in existing]
        if not new_names:
            return 0

        Category.objects.bulk_create([Category(name=name) for name in new_names])
        logger.info(f"Added {len(new_names)} new categories")
        return len(new_names)

    def _sync_products(self, records: list[RemoteProduct], result: SyncResult) -> None:
        category_ids: dict[str, int] = {}
        for category in Category.objects.order_by("id"):
            category_ids.setdefault(category.name, category.id)

        # Primeiro id vence quando há títulos duplicados no banco
        by_title: dict[str, Product] = {}
        for product in Product.objects.order_by("id"):
            by_title.setdefault((product.title or "").lower(), product)

        for record in records:
            try:
                with transaction.atomic():
                    product, created = self._upsert_product(record, category_ids, by_title)
                    result.images_written += self._sync_images(product, record.image_urls, record.thumbnail)
            except Exception as e:
                logger.exception(f"Error occurred while synchronizing product {record.id}")
                result.failed.append(SyncFailure(remote_id=record.id, title=record.title, error=str(e)))
                continue

            if created:
                result.created += 1
                key = (product.title or "").lower()
                if key:
                    by_title.setdefault(key, product)
            else:
                result.updated += 1
            result.products.append(product)

    def _upsert_product(
        self,
        record: RemoteProduct,
        category_ids: dict[str, int],
        by_title: dict[str, Product],
    ) -> tuple[Product, bool]:
        category_id = category_ids.get(record.category_name) if record.category_name else None
        title_key = (record.title or "").lower()

        fields = {
            "title": record.title or "",
            "description": record.description or "",
            "price": record.price,
            "category_name": record.category_name or "",
            "category_id": category_id,
            "thumbnail": record.thumbnail or "",
        }

        product = by_title.get(title_key) if title_key else None
        if product is not None:
            for name, value in fields.items():
                setattr(product, name, value)
            product.save()
            logger.info(f"Updated existing product: {product.title} (API ID: {record.id}, DB ID: {product.pk})")
            return product, False

        product = Product.objects.create(**fields)
        logger.info(f"Added new product: {product.title} (API ID: {record.id}, DB ID: {product.pk})")
        return product, True

    def _sync_images(self, product: Product, image_urls: list[str] | None, thumbnail: str | None) -> int:
        """Substitui as imagens do produto. Retorna quantas foram inseridas."""
        image_urls = image_urls or []
        if not image_urls and not thumbnail:
            return 0

        ProductImage.objects.filter(product_id=product.pk).delete()

        new_images = []
        for url in image_urls:
            if url:
                new_images.append(ProductImage(product=product, image_url=url, is_main=not new_images))

        if thumbnail and thumbnail not in image_urls:
            new_images.append(ProductImage(product=product, image_url=thumbnail, is_main=not new_images))

        if new_images:
            ProductImage.objects.bulk_create(new_images)
            logger.info(f"Added {len(new_images)} images for product {product.pk}")
        return len(new_images)
