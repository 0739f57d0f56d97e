from __future__ import annotations

from django.urls import path
from django.views.generic import RedirectView

from . import views

app_name = "gallery"

urlpatterns = [
    path("", RedirectView.as_view(pattern_name="gallery:product-index"), name="home"),
    path("Product/", RedirectView.as_view(pattern_name="gallery:product-index")),
    path("Product/Index", views.product_index, name="product-index"),
    path("Product/Details/<int:id>", views.product_details, name="product-details"),
    path("Product/SyncProducts", views.sync_products, name="sync-products"),
    path("Product/FetchProducts", views.fetch_products, name="fetch-products"),
    path("Product/FetchProductFromApi", views.fetch_product_from_api, name="fetch-product-from-api"),
]
