import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Category",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("name", models.CharField(db_index=True, max_length=128, verbose_name="nome")),
            ],
            options={
                "verbose_name": "categoria",
                "verbose_name_plural": "categorias",
                "ordering": ("name", "id"),
            },
        ),
        migrations.CreateModel(
            name="Product",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "title",
                    models.CharField(
                        blank=True,
                        db_index=True,
                        default="",
                        max_length=255,
                        verbose_name="título",
                    ),
                ),
                ("description", models.TextField(blank=True, default="", verbose_name="descrição")),
                (
                    "price",
                    models.DecimalField(
                        decimal_places=2,
                        default=0,
                        max_digits=12,
                        verbose_name="preço",
                    ),
                ),
                (
                    "category_name",
                    models.CharField(
                        blank=True,
                        default="",
                        max_length=128,
                        verbose_name="nome da categoria",
                    ),
                ),
                (
                    "category",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="products",
                        to="gallery.category",
                        verbose_name="categoria",
                    ),
                ),
                (
                    "thumbnail",
                    models.CharField(blank=True, default="", max_length=500, verbose_name="miniatura"),
                ),
            ],
            options={
                "verbose_name": "produto",
                "verbose_name_plural": "produtos",
                "ordering": ("id",),
            },
        ),
        migrations.CreateModel(
            name="ProductImage",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("image_url", models.CharField(max_length=500, verbose_name="URL da imagem")),
                ("is_main", models.BooleanField(default=False, verbose_name="principal")),
                (
                    "product",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="images",
                        to="gallery.product",
                        verbose_name="produto",
                    ),
                ),
            ],
            options={
                "verbose_name": "imagem do produto",
                "verbose_name_plural": "imagens do produto",
                "ordering": ("product", "-is_main", "id"),
            },
        ),
    ]
