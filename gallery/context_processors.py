"""
Context processors da Galeria.
"""

from __future__ import annotations

import logging

from django.db import DatabaseError
from django.http import HttpRequest

logger = logging.getLogger(__name__)


def catalog_summary(request: HttpRequest) -> dict:
    """
    Adiciona contagem de produtos e categorias armazenados ao contexto.

    Só executa nas páginas da galeria. Falhas do banco não quebram a página:
    as views já caem para os dados ao vivo da API nesse caso.
    """
    if not request.path.startswith("/Product/"):
        return {}

    from gallery.models import Category, Product

    try:
        product_count = Product.objects.count()
        category_count = Category.objects.count()
    except DatabaseError:
        logger.exception("Database error while counting catalog")
        return {}

    return {
        "gallery_product_count": product_count,
        "gallery_category_count": category_count,
        "gallery_has_products": product_count > 0,
    }
