"""
Shared fixtures for all tests.

factory-boy factories live here so both unit/ and integration/ can import them.
"""
import pytest
from datetime import date
from decimal import Decimal
from django.test import Client

import factory
from labintake.models import CatalogEntry, Order, OrderItem, Staff, WebhookLog


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------

class StaffFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Staff

    name = 'Nurse Joy'
    email = factory.Sequence(lambda n: f'staff{n}@example.com')
    role = 'staff'


class CatalogEntryFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = CatalogEntry

    test_name = factory.Sequence(lambda n: f'Test Panel {n}')
    category = 'medical_testing_and_panels'
    price = Decimal('49.00')
    is_active = True


class OrderFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Order

    external_id = factory.Sequence(lambda n: f'entry-{n}')
    order_number = factory.Sequence(lambda n: f'ORD-20250101-{n:05d}')
    patient_name = 'Jane Doe'
    date_of_order = date(2025, 1, 1)
    form_slug = 'lab-booking'
    total_amount = Decimal('0.00')
    status = 'pending'


class OrderItemFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = OrderItem

    order = factory.SubFactory(OrderFactory)
    test = factory.SubFactory(CatalogEntryFactory)
    test_name = factory.SelfAttribute('test.test_name')
    category = factory.SelfAttribute('test.category')
    price_at_order = factory.SelfAttribute('test.price')


class WebhookLogFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = WebhookLog

    source = 'metform'
    payload = factory.LazyFunction(lambda: {'entry_id': '1', 'entries': {}})
    status = 'received'


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

WEBHOOK_SECRET = 'test-webhook-secret'


@pytest.fixture
def api_client():
    """Django test client for integration tests."""
    return Client()


@pytest.fixture
def catalog(db):
    """A small catalog covering every resolver stage."""
    entries = {
        'a1c': CatalogEntryFactory(test_name='Hemoglobin A1c', price=Decimal('29.00')),
        'lipid': CatalogEntryFactory(test_name='Lipid Panel (Cholesterol)', price=Decimal('29.00')),
        'thyroid': CatalogEntryFactory(test_name='Thyroid Panel', price=Decimal('99.00')),
        'drug': CatalogEntryFactory(
            test_name='Comprehensive Drug Screen', category='drug_testing', price=Decimal('140.00'),
        ),
        'hpylori': CatalogEntryFactory(
            test_name='H. pylori', category='gastrointestinal_testing', price=Decimal('75.00'),
        ),
    }
    return entries


@pytest.fixture
def metform_payload():
    """Typical Metform delivery: form fields nested under entries."""
    return {
        'form_id': '1234',
        'form_name': 'Lab Test Booking',
        'entry_id': '5678',
        'entries': {
            'mf-patient-name': 'Jane Doe',
            'mf-patient-dob': '1985-03-20',
            'mf-patient-phone': '555-0100',
            'mf-select-date': '2025-02-10',
            'mf-available-slots': '09:20',
            'mf-tests-selection': 'Hemoglobin A1c, lipid-panel-cholesterol-$29',
        },
        'webhook_secret': WEBHOOK_SECRET,
    }
