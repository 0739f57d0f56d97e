"""
Admin da Galeria.
"""

from django.contrib import admin
from django.db.models import Count
from unfold.admin import ModelAdmin, TabularInline

from .models import Category, Product, ProductImage


class ProductImageInline(TabularInline):
    model = ProductImage
    extra = 0
    fields = ("image_url", "is_main")


@admin.register(Category)
class CategoryAdmin(ModelAdmin):
    list_display = ("name", "product_count")
    search_fields = ("name",)
    ordering = ("name",)

    def get_queryset(self, request):
        return super().get_queryset(request).annotate(product_total=Count("products"))

    def product_count(self, obj):
        return obj.product_total

    product_count.short_description = "Products"
    product_count.admin_order_field = "product_total"


@admin.register(Product)
class ProductAdmin(ModelAdmin):
    list_display = ("title", "category_name", "price_display", "image_count")
    list_filter = ("category",)
    search_fields = ("title", "description", "category_name")
    ordering = ("id",)
    inlines = [ProductImageInline]

    fieldsets = (
        (None, {"fields": ("title", "description")}),
        ("Pricing", {"fields": ("price",)}),
        ("Category", {"fields": ("category", "category_name")}),
        ("Media", {"fields": ("thumbnail",)}),
    )

    def get_queryset(self, request):
        return super().get_queryset(request).prefetch_related("images")

    def price_display(self, obj):
        return obj.price_display

    price_display.short_description = "Price"

    def image_count(self, obj):
        return len(obj.images.all())

    image_count.short_description = "Images"
