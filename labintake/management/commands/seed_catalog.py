from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from labintake.catalog_seed import CATALOG
from labintake.models import CatalogEntry


class Command(BaseCommand):
    help = 'Insert the initial test catalog. Existing tests (same name) are left untouched.'

    @transaction.atomic
    def handle(self, *args, **options):
        inserted = 0
        for test_name, category, price in CATALOG:
            if CatalogEntry.objects.filter(test_name=test_name).exists():
                continue
            # save() 负责生成 search_name，所以不用 bulk_create
            CatalogEntry(test_name=test_name, category=category, price=Decimal(price)).save()
            inserted += 1

        self.stdout.write(self.style.SUCCESS(
            f"Test catalog seeded: {inserted} new, {len(CATALOG) - inserted} already present"
        ))
