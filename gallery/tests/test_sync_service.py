"""
Tests for ProductSyncService.

Covers:
- Category upsert (dedup, existing rows)
- Product upsert by case-insensitive title
- Image replacement (main flag, thumbnail append)
- Failure policy (per-product skip, category/orchestration re-raise)
- Idempotence
"""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import patch

from django.db import DatabaseError
from django.test import TestCase

from gallery.models import Category, Product, ProductImage
from gallery.services import ProductSyncService
from gallery.tests.fakes import FakeCatalogClient, make_record, sample_records


class SyncCategoriesTests(TestCase):
    def setUp(self) -> None:
        self.service = ProductSyncService(FakeCatalogClient())

    def test_creates_distinct_categories(self) -> None:
        """Two distinct category names -> exactly those two categories."""
        result = self.service.sync_records(sample_records())

        names = sorted(Category.objects.values_list("name", flat=True))
        self.assertEqual(names, ["laptops", "smartphones"])
        self.assertEqual(result.categories_created, 2)

    def test_does_not_duplicate_existing_category(self) -> None:
        Category.objects.create(name="smartphones")

        result = self.service.sync_records(sample_records())

        self.assertEqual(Category.objects.filter(name="smartphones").count(), 1)
        self.assertEqual(Category.objects.count(), 2)
        self.assertEqual(result.categories_created, 1)

    def test_ignores_empty_category_names(self) -> None:
        self.service.sync_records([make_record(1, "No category", category="")])

        self.assertEqual(Category.objects.count(), 0)
        product = Product.objects.get(title="No category")
        self.assertIsNone(product.category_id)
        self.assertEqual(product.category_name, "")

    def test_maps_category_foreign_key(self) -> None:
        self.service.sync_records(sample_records())

        laptops = Category.objects.get(name="laptops")
        product = Product.objects.get(title="MacBook Pro")
        self.assertEqual(product.category_id, laptops.id)
        self.assertEqual(product.category_name, "laptops")
        self.assertEqual(laptops.products.count(), 1)


class SyncProductsTests(TestCase):
    def setUp(self) -> None:
        self.service = ProductSyncService(FakeCatalogClient())

    def test_inserts_new_products(self) -> None:
        result = self.service.sync_records(sample_records())

        self.assertEqual(Product.objects.count(), 3)
        self.assertEqual(result.created, 3)
        self.assertEqual(result.updated, 0)

        product = Product.objects.get(title="iPhone 9")
        self.assertEqual(product.description, "An apple mobile which is nothing like apple")
        self.assertEqual(product.price, Decimal("549.00"))
        self.assertEqual(product.thumbnail, "https://cdn.dummyjson.com/product-images/1/thumbnail.jpg")

    def test_updates_existing_product_by_case_insensitive_title(self) -> None:
        """Matching title (any case) updates in place and keeps the id."""
        existing = Product.objects.create(title="iPhone 9", description="old", price=Decimal("1.00"))

        result = self.service.sync_records(
            [make_record(1, "IPHONE 9", category="smartphones", price="549.00", description="new")]
        )

        self.assertEqual(Product.objects.count(), 1)
        existing.refresh_from_db()
        self.assertEqual(existing.title, "IPHONE 9")
        self.assertEqual(existing.description, "new")
        self.assertEqual(existing.price, Decimal("549.00"))
        self.assertEqual(existing.category_name, "smartphones")
        self.assertEqual(result.updated, 1)
        self.assertEqual(result.products[0].pk, existing.pk)

    def test_first_stored_row_wins_for_duplicate_titles(self) -> None:
        first = Product.objects.create(title="Duplicate")
        second = Product.objects.create(title="duplicate")

        self.service.sync_records([make_record(1, "Duplicate", description="synced")])

        first.refresh_from_db()
        second.refresh_from_db()
        self.assertEqual(first.description, "synced")
        self.assertEqual(second.description, "")

    def test_duplicate_titles_in_one_batch_share_a_row(self) -> None:
        result = self.service.sync_records(
            [
                make_record(1, "Same", description="first"),
                make_record(2, "same", description="second"),
            ]
        )

        self.assertEqual(Product.objects.count(), 1)
        self.assertEqual(Product.objects.get().description, "second")
        self.assertEqual(result.created, 1)
        self.assertEqual(result.updated, 1)


class SyncImagesTests(TestCase):
    def setUp(self) -> None:
        self.service = ProductSyncService(FakeCatalogClient())

    def test_first_image_is_the_only_main_image(self) -> None:
        self.service.sync_records(sample_records())

        product = Product.objects.get(title="iPhone 9")
        main_images = product.images.filter(is_main=True)
        self.assertEqual(main_images.count(), 1)
        self.assertEqual(main_images.get().image_url, "https://cdn.dummyjson.com/product-images/1/1.jpg")

    def test_thumbnail_not_in_list_is_appended(self) -> None:
        self.service.sync_records(sample_records())

        product = Product.objects.get(title="iPhone 9")
        urls = list(product.images.order_by("id").values_list("image_url", "is_main"))
        self.assertEqual(len(urls), 4)
        self.assertEqual(urls[-1], ("https://cdn.dummyjson.com/product-images/1/thumbnail.jpg", False))

    def test_thumbnail_already_in_list_is_not_duplicated(self) -> None:
        self.service.sync_records(sample_records())

        product = Product.objects.get(title="MacBook Pro")
        self.assertEqual(product.images.count(), 2)
        self.assertEqual(
            product.images.filter(image_url="https://cdn.dummyjson.com/product-images/6/thumbnail.png").count(),
            1,
        )

    def test_thumbnail_is_main_when_no_other_images(self) -> None:
        self.service.sync_records([make_record(1, "Thumb only", thumbnail="https://img/thumb.jpg")])

        image = ProductImage.objects.get()
        self.assertEqual(image.image_url, "https://img/thumb.jpg")
        self.assertTrue(image.is_main)

    def test_empty_urls_are_skipped(self) -> None:
        self.service.sync_records([make_record(1, "Gaps", images=["", "https://img/a.jpg"])])

        image = ProductImage.objects.get()
        self.assertEqual(image.image_url, "https://img/a.jpg")
        self.assertTrue(image.is_main)

    def test_images_are_replaced_not_merged(self) -> None:
        product = Product.objects.create(title="Replace me")
        ProductImage.objects.create(product=product, image_url="https://img/old.jpg", is_main=True)

        result = self.service.sync_records([make_record(1, "Replace me", images=["https://img/new.jpg"])])

        urls = list(product.images.values_list("image_url", flat=True))
        self.assertEqual(urls, ["https://img/new.jpg"])
        self.assertEqual(result.images_written, 1)

    def test_record_without_images_keeps_stored_images(self) -> None:
        product = Product.objects.create(title="Keep images")
        ProductImage.objects.create(product=product, image_url="https://img/keep.jpg", is_main=True)

        self.service.sync_records([make_record(1, "Keep images")])

        self.assertEqual(product.images.count(), 1)


class SyncFailurePolicyTests(TestCase):
    def test_failing_product_is_skipped_and_rolled_back(self) -> None:
        service = ProductSyncService(FakeCatalogClient())
        records = [
            make_record(1, "Broken", images=["https://img/1.jpg"]),
            make_record(2, "Fine", images=["https://img/2.jpg"]),
        ]

        with patch.object(ProductSyncService, "_sync_images", side_effect=[RuntimeError("boom"), 1]):
            with self.assertLogs("gallery.services.sync", level="ERROR"):
                result = service.sync_records(records)

        self.assertEqual(list(Product.objects.values_list("title", flat=True)), ["Fine"])
        self.assertEqual(result.created, 1)
        self.assertEqual(len(result.failed), 1)
        self.assertEqual(result.failed[0].remote_id, 1)
        self.assertEqual(result.failed[0].error, "boom")

    def test_category_failure_is_reraised(self) -> None:
        service = ProductSyncService(FakeCatalogClient(sample_records()))

        with patch.object(ProductSyncService, "_sync_categories", side_effect=DatabaseError("db down")):
            with self.assertLogs("gallery.services.sync", level="ERROR"):
                with self.assertRaises(DatabaseError):
                    service.sync_all()

        self.assertEqual(Product.objects.count(), 0)


class SyncAllTests(TestCase):
    def test_sync_all_fetches_and_persists(self) -> None:
        client = FakeCatalogClient(sample_records())

        result = ProductSyncService(client).sync_all()

        self.assertEqual(client.get_products_calls, 1)
        self.assertEqual(result.fetched, 3)
        self.assertEqual(result.synced, 3)
        self.assertEqual(Product.objects.count(), 3)

    def test_sync_all_with_empty_api_does_nothing(self) -> None:
        with self.assertLogs("gallery.services.sync", level="WARNING"):
            result = ProductSyncService(FakeCatalogClient()).sync_all()

        self.assertEqual(result.fetched, 0)
        self.assertEqual(Product.objects.count(), 0)

    def test_resync_is_idempotent(self) -> None:
        """Re-running with unchanged data keeps counts and the main-image invariant."""
        service = ProductSyncService(FakeCatalogClient(sample_records()))
        service.sync_all()
        ids = set(Product.objects.values_list("id", flat=True))
        image_count = ProductImage.objects.count()

        result = service.sync_all()

        self.assertEqual(Category.objects.count(), 2)
        self.assertEqual(set(Product.objects.values_list("id", flat=True)), ids)
        self.assertEqual(ProductImage.objects.count(), image_count)
        self.assertEqual(result.updated, 3)
        self.assertEqual(result.created, 0)
        for product in Product.objects.all():
            self.assertEqual(product.images.filter(is_main=True).count(), 1)

    def test_untitled_records_are_skipped_on_every_resync(self) -> None:
        """Records without title are never stored, so re-syncs do not grow the table."""
        client = FakeCatalogClient(
            [
                make_record(1, "Titled", category="misc"),
                make_record(2, None, category="ghost", images=["https://img/ghost.jpg"]),
            ]
        )
        service = ProductSyncService(client)

        for _ in range(3):
            with self.assertLogs("gallery.services.sync", level="WARNING"):
                result = service.sync_all()

            self.assertEqual(list(Product.objects.values_list("title", flat=True)), ["Titled"])
            self.assertEqual(result.skipped, 1)

        self.assertEqual(ProductImage.objects.count(), 0)
        self.assertFalse(Category.objects.filter(name="ghost").exists())


class SyncProductTests(TestCase):
    def test_sync_product_persists_single_record(self) -> None:
        client = FakeCatalogClient(sample_records())

        result = ProductSyncService(client).sync_product(6)

        self.assertEqual(client.get_product_calls, [6])
        self.assertEqual(result.created, 1)
        self.assertEqual(Product.objects.get().title, "MacBook Pro")
        self.assertEqual(Category.objects.get().name, "laptops")

    def test_sync_product_without_title_is_not_found(self) -> None:
        with self.assertLogs("gallery.services.sync", level="WARNING"):
            result = ProductSyncService(FakeCatalogClient()).sync_product(10000)

        self.assertEqual(result.products, [])
        self.assertEqual(Product.objects.count(), 0)
