from __future__ import annotations

from django.db import models
from django.utils.translation import gettext_lazy as _


class Category(models.Model):
    """
    Categoria de produto, criada a partir do campo "category" da API remota.

    O nome é único por convenção (o sync nunca cria duplicatas), mas não
    existe constraint no banco.
    """

    name = models.CharField(_("nome"), max_length=128, db_index=True)

    class Meta:
        app_label = "gallery"
        verbose_name = _("categoria")
        verbose_name_plural = _("categorias")
        ordering = ("name", "id")

    def __str__(self) -> str:
        return self.name
