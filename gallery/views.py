"""
Gallery Views — Páginas da galeria de produtos.

Rotas (ver gallery/urls.py):
    GET  /Product/Index                 - Lista de produtos
    GET  /Product/Details/{id}          - Detalhes de um produto
    POST /Product/SyncProducts          - Sincroniza todos os produtos
    GET  /Product/FetchProducts         - Sincroniza todos os produtos
    POST /Product/FetchProductFromApi   - Sincroniza um produto (campo "id")

Os produtos são criados sob demanda: a lista sincroniza quando o banco está
vazio e os detalhes sincronizam o id pedido quando ele não está no banco.
Se o banco falhar, as páginas mostram os dados ao vivo da API sem salvar.
"""

from __future__ import annotations

import logging

from django.contrib import messages
from django.http import Http404, HttpRequest, HttpResponse
from django.shortcuts import redirect, render
from django.views.decorators.http import require_GET, require_POST

from gallery.conf import get_catalog_client
from gallery.models import Product
from gallery.protocols import CatalogBackend, RemoteProduct
from gallery.services import ProductSyncService


logger = logging.getLogger(__name__)


def _stored_products(category: str = "") -> list[Product]:
    qs = Product.objects.select_related("category").prefetch_related("images")
    if category:
        qs = qs.filter(category_name=category)
    return list(qs)


def _stored_product(pk: int) -> Product | None:
    return (
        Product.objects.select_related("category")
        .prefetch_related("images")
        .filter(pk=pk)
        .first()
    )


def _stored_categories() -> list[str]:
    names = Product.objects.exclude(category_name="").values_list("category_name", flat=True)
    return sorted(set(names))


def _sync_and_reload(client: CatalogBackend, product_id: int) -> Product | None:
    """Sincroniza um produto da API e relê o registro armazenado."""
    result = ProductSyncService(client).sync_product(product_id)
    if not result.products:
        return None
    return _stored_product(result.products[0].pk)


def _render_index(
    request: HttpRequest,
    products: list,
    *,
    categories: list[str],
    category: str,
    source: str,
) -> HttpResponse:
    return render(
        request,
        "gallery/product_list.html",
        {
            "products": products,
            "categories": categories,
            "active_category": category,
            "source": source,
        },
    )


@require_GET
def product_index(request: HttpRequest) -> HttpResponse:
    """
    Lista os produtos.

    Banco com dados -> mostra o banco. Banco vazio -> sincroniza e relê.
    Falha do banco ou sync sem resultado -> dados ao vivo da API.
    """
    category = request.GET.get("category", "").strip()
    client = get_catalog_client()

    try:
        if not Product.objects.exists():
            logger.info("Product store is empty, synchronizing from API")
            ProductSyncService(client).sync_all()

        if Product.objects.exists():
            return _render_index(
                request,
                _stored_products(category),
                categories=_stored_categories(),
                category=category,
                source="store",
            )
    except Exception as e:
        logger.exception("Database error when retrieving products")
        messages.warning(request, f"Unable to read from database, showing data directly from API: {e}")

    try:
        records = client.get_products()
    except Exception as e:
        logger.exception("Unexpected error in product index")
        messages.error(request, f"An error occurred: {e}")
        return _render_index(request, [], categories=[], category=category, source="api")

    if not records:
        messages.error(request, "API returned empty data")

    categories = sorted({r.category_name for r in records if r.category_name})
    if category:
        records = [r for r in records if r.category_name == category]
    return _render_index(request, records, categories=categories, category=category, source="api")


@require_GET
def product_details(request: HttpRequest, id: int) -> HttpResponse:
    """
    Detalhes de um produto.

    Busca no banco; se não existir, sincroniza o id pela API e relê.
    Se ainda assim não houver registro, mostra os dados ao vivo da API.
    Registro remoto sem título -> 404.
    """
    logger.info(f"Attempting to retrieve product with ID {id}")
    if id <= 0:
        raise Http404("Invalid product id")

    client = get_catalog_client()
    product: Product | RemoteProduct | None = None
    source = "store"

    try:
        product = _stored_product(id)
        if product is None:
            logger.info(f"Product with ID {id} not found in database, will fetch from API")
            product = _sync_and_reload(client, id)
    except Exception as e:
        logger.exception(f"Database error when retrieving product {id}")
        messages.warning(request, f"Unable to read from database, showing data directly from API: {e}")
        product = None

    if product is None:
        try:
            record = client.get_product(id)
        except Exception as e:
            logger.exception(f"Error occurred while retrieving product details for ID {id}")
            messages.error(request, f"Error occurred while retrieving product details: {e}")
            return render(
                request,
                "gallery/product_detail.html",
                {"product": RemoteProduct(id=id), "source": "error"},
            )

        if not record.is_found:
            logger.warning(f"Product with ID {id} not found")
            raise Http404(f"Product {id} not found")
        product, source = record, "api"

    logger.info(f"Product found: {product.title}, Price: {product.price}, Category: {product.category_name}")
    return render(request, "gallery/product_detail.html", {"product": product, "source": source})


@require_POST
def sync_products(request: HttpRequest) -> HttpResponse:
    """Sincroniza todos os produtos; se o banco falhar, testa a API ao vivo."""
    logger.info("Starting synchronization of all products")
    client = get_catalog_client()

    try:
        result = ProductSyncService(client).sync_all()
    except Exception as e:
        logger.error(f"Error saving to database: {e}")
        messages.error(request, f"Unable to save to database, will get data directly from API: {e}")

        records = client.get_products()
        if records:
            messages.info(request, "Successfully retrieved data from API, but not saved to database")
        else:
            messages.error(request, "API returned empty data")
        return redirect("gallery:product-index")

    if result.fetched == 0:
        messages.error(request, "API returned empty data")
    else:
        messages.success(request, "Products successfully synchronized to database")
    if result.failed:
        messages.warning(request, f"{len(result.failed)} products could not be synchronized")
    return redirect("gallery:product-index")


@require_GET
def fetch_products(request: HttpRequest) -> HttpResponse:
    logger.info("Starting fetch and synchronization of all products")
    try:
        ProductSyncService(get_catalog_client()).sync_all()
    except Exception as e:
        logger.error(f"Error occurred while fetching products: {e}")
        messages.error(request, f"Error occurred while fetching products: {e}")
    else:
        messages.success(request, "Products successfully fetched and saved")
    return redirect("gallery:product-index")


@require_POST
def fetch_product_from_api(request: HttpRequest) -> HttpResponse:
    """Sincroniza o produto do campo "id" e redireciona para os detalhes."""
    try:
        product_id = int(request.POST.get("id", ""))
    except ValueError:
        product_id = 0
    if product_id <= 0:
        messages.error(request, "Invalid product id")
        return redirect("gallery:product-index")

    logger.info(f"Fetching product {product_id} from API")
    try:
        result = ProductSyncService(get_catalog_client()).sync_product(product_id)
    except Exception as e:
        logger.error(f"Error occurred while fetching product {product_id}: {e}")
        messages.error(request, f"Error occurred while fetching product {product_id}: {e}")
        return redirect("gallery:product-index")

    if not result.products:
        messages.error(request, f"Product {product_id} not found in API")
        return redirect("gallery:product-index")

    product = result.products[0]
    messages.success(request, f"Product \"{product.title}\" fetched and saved")
    return redirect("gallery:product-details", id=product.pk)
