from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP

from rest_framework import serializers

from gallery.protocols import ProductPage, RemoteProduct


class RemoteProductSerializer(serializers.Serializer):
    """
    Valida um produto do payload remoto.

    Só os campos consumidos pela galeria são declarados; o resto do payload
    (reviews, dimensions, meta, etc) é ignorado.
    """

    id = serializers.IntegerField()
    title = serializers.CharField(required=False, allow_blank=True, allow_null=True, default=None)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True, default="")
    price = serializers.FloatField(required=False, allow_null=True, default=0)
    category = serializers.CharField(required=False, allow_blank=True, allow_null=True, default="")
    thumbnail = serializers.CharField(required=False, allow_blank=True, allow_null=True, default="")
    images = serializers.ListField(
        child=serializers.CharField(allow_blank=True),
        required=False,
        allow_null=True,
        default=list,
    )

    def to_record(self) -> RemoteProduct:
        return build_remote_product(self.validated_data)


class ProductPageSerializer(serializers.Serializer):
    """Valida o envelope {products, total, skip, limit}."""

    products = RemoteProductSerializer(many=True, required=False, allow_null=True, default=list)
    total = serializers.IntegerField(required=False, default=0)
    skip = serializers.IntegerField(required=False, default=0)
    limit = serializers.IntegerField(required=False, default=0)

    def to_page(self) -> ProductPage:
        data = self.validated_data
        return ProductPage(
            products=[build_remote_product(item) for item in data.get("products") or []],
            total=data.get("total") or 0,
            skip=data.get("skip") or 0,
            limit=data.get("limit") or 0,
        )


def build_remote_product(data: dict) -> RemoteProduct:
    """Converte validated_data de RemoteProductSerializer em RemoteProduct."""
    price = data.get("price") or 0
    return RemoteProduct(
        id=data["id"],
        title=data.get("title") or None,
        description=data.get("description") or "",
        price=Decimal(str(price)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP),
        category_name=data.get("category") or "",
        thumbnail=data.get("thumbnail") or "",
        image_urls=list(data.get("images") or []),
    )
