"""
Gallery Models — Catálogo local.

Re-exports de todos os modelos:
    from gallery.models import Category, Product, ProductImage
"""

from .category import Category  # noqa: F401
from .product import Product, ProductImage  # noqa: F401
