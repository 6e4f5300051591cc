from datetime import date
from itertools import count

import pytest
from rest_framework.test import APIClient

from cancellations.models import Cancellation
from customers.models import Customer


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def make_customer(db):
    seq = count(1)

    def _make(**overrides):
        n = next(seq)
        fields = {
            "name": f"Customer {n}",
            "email": f"customer{n}@example.com",
            "segment": "Solo Agent",
            "subscription_start_date": date(2025, 1, 1),
            "source_campaign": "Paid Ads - Meta",
        }
        fields.update(overrides)
        return Customer.objects.create(**fields)

    return _make


@pytest.fixture
def make_cancellation(db, make_customer):
    def _make(customer=None, **overrides):
        fields = {
            "cancellation_date": date(2025, 1, 31),
            "primary_reason": "Pricing objection",
            "closer_name": "Ava Liang",
        }
        fields.update(overrides)
        return Cancellation.objects.create(customer=customer or make_customer(), **fields)

    return _make
