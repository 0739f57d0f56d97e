"""
Django Gallery — Catálogo de produtos sincronizado com uma API externa.

Uso básico:
    from gallery.models import Category, Product, ProductImage
    from gallery.services import ProductSyncService
    from gallery.client import ProductApiClient

Sincronização manual:
    python manage.py sync_products
    python manage.py sync_products --id 7
"""

__title__ = "Django Gallery"
__version__ = "0.1.0"
__author__ = "Django Gallery Contributors"
