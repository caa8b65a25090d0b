"""
Model 层的小约束：search_name 推导、Category.from_hint、删除保护、seed_catalog。
"""
from decimal import Decimal
from io import StringIO

import pytest
from django.core.management import call_command
from django.db.models import ProtectedError

from labintake.catalog_seed import CATALOG
from labintake.models import TIME_SLOTS, CatalogEntry, Category, Order
from tests.conftest import CatalogEntryFactory, OrderItemFactory


@pytest.mark.django_db
class TestCatalogEntry:

    def test_search_name_derived_on_create(self):
        entry = CatalogEntryFactory(test_name='Lipid Panel (Cholesterol)')
        assert entry.search_name == 'lipid panel cholesterol'

    def test_search_name_recomputed_on_rename(self):
        entry = CatalogEntryFactory(test_name='Old Name')
        entry.test_name = 'Vitamin B12 & Folate'
        entry.save()
        entry.refresh_from_db()
        assert entry.search_name == 'vitamin b12 folate'

    def test_search_name_follows_partial_update(self):
        entry = CatalogEntryFactory(test_name='Old Name')
        entry.test_name = 'ESR/Sed Rate'
        entry.save(update_fields=['test_name'])
        entry.refresh_from_db()
        assert entry.search_name == 'esr sed rate'

    def test_referenced_entry_cannot_be_deleted(self):
        item = OrderItemFactory()
        with pytest.raises(ProtectedError):
            item.test.delete()

    def test_deleting_order_removes_items(self):
        item = OrderItemFactory()
        item.order.delete()
        assert not Order.objects.exists()
        assert CatalogEntry.objects.filter(pk=item.test_id).exists()


class TestCategoryFromHint:

    @pytest.mark.parametrize('hint', [
        'drug_testing',
        'drug-testing',
        'Drug Testing',
        '  DRUG TESTING ',
    ])
    def test_accepted_forms(self, hint):
        assert Category.from_hint(hint) == Category.DRUG_TESTING

    def test_label_with_ampersand(self):
        assert Category.from_hint('Medical Testing & Panels') == Category.MEDICAL_TESTING_AND_PANELS

    @pytest.mark.parametrize('hint', [None, '', 'Dental', 'drug'])
    def test_unknown(self, hint):
        assert Category.from_hint(hint) is None


class TestTimeSlots:

    def test_slots(self):
        assert len(TIME_SLOTS) == 24
        assert TIME_SLOTS[0] == '09:00'
        assert TIME_SLOTS[-1] == '16:40'


@pytest.mark.django_db
class TestSeedCatalog:

    def test_seeds_every_test(self):
        call_command('seed_catalog', stdout=StringIO())
        assert CatalogEntry.objects.count() == len(CATALOG) == 48
        hcg = CatalogEntry.objects.get(test_name='HCG')
        assert hcg.price == Decimal('40.00')
        assert hcg.search_name == 'hcg'

    def test_rerun_is_harmless(self):
        call_command('seed_catalog', stdout=StringIO())
        CatalogEntry.objects.filter(test_name='HCG').update(price=Decimal('45.00'))

        out = StringIO()
        call_command('seed_catalog', stdout=out)

        assert CatalogEntry.objects.count() == 48
        assert CatalogEntry.objects.get(test_name='HCG').price == Decimal('45.00')
        assert '0 new' in out.getvalue()


class TestSettings:

    def test_no_unused_rest_framework_defaults(self, settings):
        # 只用 serializer 做校验，不走 DRF 的 view / renderer
        assert 'rest_framework' in settings.INSTALLED_APPS
        assert not hasattr(settings, 'REST_FRAMEWORK')
