"""
Shared fixtures: a service over a throwaway SQLite file and a clock the
tests can move forward.
"""
from datetime import date, datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from billing.api.deps import get_service
from billing.db.engine import get_engine
from billing.db.storage import KeyValueStore
from billing.main import app
from billing.models.customers import CustomerIn
from billing.models.invoices import InvoiceDraft, InvoiceItem
from billing.service import BillingService


class FakeClock:
    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def tick(self, seconds: int = 60) -> datetime:
        self.now += timedelta(seconds=seconds)
        return self.now


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def db_url(tmp_path):
    return f"sqlite:///{tmp_path / 'billing.sqlite'}"


@pytest.fixture
def storage(db_url):
    return KeyValueStore(get_engine(db_url))


@pytest.fixture
def service(storage, clock):
    return BillingService(storage, clock=clock)


@pytest.fixture
def client(service):
    app.dependency_overrides[get_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def acme(service):
    return service.customers.create(CustomerIn(name="Acme", phone="555-1111"))


def make_draft(customer_id: str, **overrides) -> InvoiceDraft:
    fields = {
        "customer_id": customer_id,
        "invoice_date": date(2024, 3, 15),
        "due_date": date(2024, 4, 14),
        "tax_rate": 0.1,
    }
    fields.update(overrides)
    return InvoiceDraft(**fields)


def widget(quantity: float = 3, unit_price: float = 10) -> InvoiceItem:
    return InvoiceItem(description="Widget", quantity=quantity, unit_price=unit_price)
