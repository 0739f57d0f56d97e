from __future__ import annotations

from django.db import models
from django.utils.translation import gettext_lazy as _


class Product(models.Model):
    """
    Produto armazenado localmente.

    Casado com os registros remotos pelo título (case-insensitive), não pelo
    id remoto. O id é sempre atribuído pelo banco.

    category_name é denormalizado: guarda o texto recebido da API mesmo
    quando a FK category é nula.
    """

    title = models.CharField(_("título"), max_length=255, blank=True, default="", db_index=True)
    description = models.TextField(_("descrição"), blank=True, default="")
    price = models.DecimalField(_("preço"), max_digits=12, decimal_places=2, default=0)

    category_name = models.CharField(_("nome da categoria"), max_length=128, blank=True, default="")
    category = models.ForeignKey(
        "gallery.Category",
        on_delete=models.SET_NULL,
        related_name="products",
        null=True,
        blank=True,
        verbose_name=_("categoria"),
    )

    thumbnail = models.CharField(_("miniatura"), max_length=500, blank=True, default="")

    class Meta:
        app_label = "gallery"
        verbose_name = _("produto")
        verbose_name_plural = _("produtos")
        ordering = ("id",)

    def __str__(self) -> str:
        return self.title or f"#{self.pk}"

    @property
    def image_urls(self) -> list[str]:
        """URLs das imagens armazenadas, imagem principal primeiro."""
        images = sorted(self.images.all(), key=lambda image: (not image.is_main, image.pk))
        return [image.image_url for image in images if image.image_url]

    @property
    def main_image_url(self) -> str:
        """URL da imagem principal, com fallback para a miniatura."""
        for image in self.images.all():
            if image.is_main and image.image_url:
                return image.image_url
        return self.thumbnail

    @property
    def price_display(self) -> str:
        return f"${self.price:.2f}"


class ProductImage(models.Model):
    """
    Imagem de um produto.

    O conjunto de imagens é substituído por inteiro a cada sync. No máximo
    uma imagem por produto tem is_main=True.
    """

    product = models.ForeignKey(
        Product,
        on_delete=models.CASCADE,
        related_name="images",
        verbose_name=_("produto"),
    )
    image_url = models.CharField(_("URL da imagem"), max_length=500)
    is_main = models.BooleanField(_("principal"), default=False)

    class Meta:
        app_label = "gallery"
        verbose_name = _("imagem do produto")
        verbose_name_plural = _("imagens do produto")
        ordering = ("product", "-is_main", "id")

    def __str__(self) -> str:
        flag = " (main)" if self.is_main else ""
        return f"{self.product_id}: {self.image_url}{flag}"
