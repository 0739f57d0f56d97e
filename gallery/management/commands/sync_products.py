"""
Management command para sincronizar o catálogo com a API remota.

Uso:
    python manage.py sync_products
    python manage.py sync_products --id 7
    python manage.py sync_products --dry-run

Recomendação: Agendar via cron para manter o catálogo atualizado.
"""

from django.core.management.base import BaseCommand, CommandError

from gallery.conf import get_catalog_client
from gallery.services import ProductSyncService


class Command(BaseCommand):
    help = "Sincroniza produtos da API remota para o banco local"

    def add_arguments(self, parser):
        parser.add_argument(
            "--id",
            type=int,
            dest="product_id",
            default=None,
            help="Sincroniza apenas o produto remoto com este id",
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Busca e mostra os produtos sem salvar no banco",
        )

    def handle(self, *args, **options):
        product_id = options["product_id"]
        dry_run = options["dry_run"]
        client = get_catalog_client()

        if dry_run:
            if product_id is not None:
                record = client.get_product(product_id)
                records = [record] if record.is_found else []
            else:
                records = client.get_products()

            self.stdout.write(
                self.style.WARNING(f"[DRY RUN] Seriam sincronizados {len(records)} produtos:")
            )
            for record in records:
                category = record.category_name or "-"
                self.stdout.write(f"  - [{record.id}] {record.title} ({category}) {record.price_display}")
            return

        service = ProductSyncService(client)
        try:
            if product_id is not None:
                result = service.sync_product(product_id)
            else:
                result = service.sync_all()
        except Exception as e:
            raise CommandError(f"Falha na sincronização: {e}") from e

        if result.fetched == 0:
            self.stdout.write(self.style.WARNING("API não retornou produtos"))
            return

        self.stdout.write(f"Categorias criadas: {result.categories_created}")
        self.stdout.write(f"Produtos criados: {result.created}")
        self.stdout.write(f"Produtos atualizados: {result.updated}")
        self.stdout.write(f"Imagens gravadas: {result.images_written}")
        if result.skipped:
            self.stdout.write(self.style.WARNING(f"Produtos sem título ignorados: {result.skipped}"))
        for failure in result.failed:
            self.stdout.write(
                self.style.ERROR(f"  Falhou: [{failure.remote_id}] {failure.title}: {failure.error}")
            )

        self.stdout.write(
            self.style.SUCCESS(f"Total sincronizado: {result.synced} produtos")
        )
