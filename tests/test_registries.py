import re
from datetime import date

import pytest

from billing.errors import (
    CustomerHasInvoicesError,
    CustomerNotFoundError,
    InvoiceNotFoundError,
    ReferentialIntegrityError,
)
from billing.models.customers import CustomerIn
from billing.models.invoices import InvoiceItem, InvoiceStatus, InvoiceUpdate
from billing.models.settings import AppSettings

from conftest import make_draft, widget


class TestCustomerRegistry:
    def test_create_assigns_id_and_timestamps(self, service, clock):
        customer = service.customers.create(
            CustomerIn(name="Acme", phone="555-1111", email="billing@acme.com")
        )

        assert customer.id
        assert customer.created_at == clock.now
        assert customer.updated_at == clock.now
        assert customer.whatsapp == "555-1111"
        assert service.customers.lookup(customer.id) == customer

    def test_ids_are_unique(self, service):
        ids = {
            service.customers.create(CustomerIn(name=f"C{n}", phone="555")).id
            for n in range(50)
        }
        assert len(ids) == 50

    def test_update_refreshes_updated_at_only(self, service, acme, clock):
        clock.tick()
        changed = acme.model_copy(update={"name": "Acme Ltd", "created_at": clock.now})

        updated = service.customers.update(changed)

        assert updated.name == "Acme Ltd"
        assert updated.created_at == acme.created_at
        assert updated.updated_at == clock.now
        assert service.customers.lookup(acme.id).name == "Acme Ltd"

    def test_update_of_missing_customer_is_a_no_op(self, service, acme):
        ghost = acme.model_copy(update={"id": "missing", "name": "Ghost"})

        assert service.customers.update(ghost) is None
        assert service.customers.all() == [acme]

    def test_delete(self, service, acme):
        service.customers.delete(acme.id)

        assert service.customers.lookup(acme.id) is None

    def test_delete_unknown_id_is_a_no_op(self, service, acme):
        service.customers.delete("missing")

        assert service.customers.all() == [acme]

    def test_delete_referenced_customer_is_rejected(self, service, acme):
        invoice = service.invoices.create(make_draft(acme.id), [widget()])
        customers_before = service.customers.all()
        invoices_before = service.invoices.all()

        with pytest.raises(CustomerHasInvoicesError) as excinfo:
            service.customers.delete(acme.id)

        assert isinstance(excinfo.value, ReferentialIntegrityError)
        assert service.customers.all() == customers_before
        assert service.invoices.all() == invoices_before

        # Once the invoice is gone the customer can go too
        service.invoices.delete(invoice.id)
        service.customers.delete(acme.id)
        assert service.customers.all() == []

    def test_search(self, service):
        service.customers.create(CustomerIn(name="Acme", phone="555-1111"))
        service.customers.create(
            CustomerIn(name="Globex", phone="777-2222", email="Sales@Globex.com")
        )

        assert [c.name for c in service.customers.search("acm")] == ["Acme"]
        assert [c.name for c in service.customers.search("777")] == ["Globex"]
        assert [c.name for c in service.customers.search("sales@")] == ["Globex"]
        assert len(service.customers.search("")) == 2
        assert len(service.customers.search(None)) == 2

    def test_search_orders_by_name(self, service):
        service.customers.create(CustomerIn(name="Zeta", phone="111"))
        service.customers.create(CustomerIn(name="alpha", phone="222"))
        service.customers.create(CustomerIn(name="Mid", phone="333"))

        assert [c.name for c in service.customers.search("")] == ["alpha", "Mid", "Zeta"]


class TestInvoiceRegistry:
    def test_end_to_end_scenario(self, service, acme):
        invoice = service.invoices.create(
            make_draft(acme.id, tax_rate=0.1),
            [InvoiceItem(description="Widget", quantity=3, unit_price=10)],
        )

        assert invoice.sub_total == pytest.approx(30)
        assert invoice.tax_amount == pytest.approx(3)
        assert invoice.total_amount == pytest.approx(33)
        assert invoice.status == InvoiceStatus.DRAFT
        assert re.fullmatch(r"INV-\d{4}-0001", invoice.id)
        assert invoice.customer_name == "Acme"
        assert service.settings.current.next_invoice_number == 2

    def test_id_uses_year_at_creation(self, service, acme):
        invoice = service.invoices.create(make_draft(acme.id), [widget()])

        assert invoice.id == "INV-2024-0001"

    def test_create_ignores_caller_status(self, service, acme):
        invoice = service.invoices.create(
            make_draft(acme.id, status=InvoiceStatus.PAID), [widget()]
        )

        assert invoice.status == InvoiceStatus.DRAFT

    def test_create_uses_default_tax_rate(self, service, acme):
        service.settings.save(
            AppSettings(invoice_prefix="INV-", next_invoice_number=1, default_tax_rate=0.05)
        )

        invoice = service.invoices.create(make_draft(acme.id, tax_rate=None), [widget()])

        assert invoice.tax_rate == 0.05
        assert invoice.tax_amount == pytest.approx(1.5)

    def test_create_for_missing_customer_changes_nothing(self, service, acme):
        with pytest.raises(CustomerNotFoundError):
            service.invoices.create(make_draft("missing"), [widget()])

        assert service.invoices.all() == []
        assert service.settings.current.next_invoice_number == 1

    def test_counter_strictly_increases_and_is_never_reused(self, service, acme):
        first = service.invoices.create(make_draft(acme.id), [widget()])
        second = service.invoices.create(make_draft(acme.id), [widget()])
        assert service.settings.current.next_invoice_number == 3

        service.invoices.delete(second.id)
        service.invoices.delete(first.id)
        assert service.settings.current.next_invoice_number == 3

        third = service.invoices.create(make_draft(acme.id), [widget()])
        assert third.id == "INV-2024-0003"
        assert service.settings.current.next_invoice_number == 4

    def test_update_and_delete_do_not_advance_counter(self, service, acme):
        invoice = service.invoices.create(make_draft(acme.id), [widget()])
        service.invoices.update(
            InvoiceUpdate(id=invoice.id, **make_draft(acme.id).model_dump()), [widget(1)]
        )
        service.invoices.delete(invoice.id)

        assert service.settings.current.next_invoice_number == 2

    def test_customer_name_is_a_snapshot(self, service, acme):
        invoice = service.invoices.create(make_draft(acme.id), [widget()])
        service.customers.update(acme.model_copy(update={"name": "Acme Renamed"}))

        assert service.invoices.lookup(invoice.id).customer_name == "Acme"

    def test_update(self, service, acme, clock):
        invoice = service.invoices.create(make_draft(acme.id), [widget()])
        clock.tick(3600)

        fields = InvoiceUpdate(
            id=invoice.id,
            **make_draft(acme.id, tax_rate=0.2, notes="Net 30").model_dump(),
        )
        fields.status = InvoiceStatus.SENT
        updated = service.invoices.update(fields, [widget(2, 50)])

        assert updated.id == invoice.id
        assert updated.created_at == invoice.created_at
        assert updated.updated_at == clock.now
        assert updated.updated_at != invoice.updated_at
        assert updated.sub_total == pytest.approx(100)
        assert updated.tax_amount == pytest.approx(20)
        assert updated.total_amount == pytest.approx(120)
        assert updated.status == InvoiceStatus.SENT
        assert updated.notes == "Net 30"
        assert service.invoices.all() == [updated]

    def test_update_refreshes_customer_snapshot(self, service, acme):
        invoice = service.invoices.create(make_draft(acme.id), [widget()])
        renamed = service.customers.update(acme.model_copy(update={"name": "Acme Ltd"}))

        updated = service.invoices.update(
            InvoiceUpdate(id=invoice.id, **make_draft(renamed.id).model_dump()), [widget()]
        )

        assert updated.customer_name == "Acme Ltd"

    def test_update_keeps_status_and_tax_rate_when_not_given(self, service, acme):
        invoice = service.invoices.create(make_draft(acme.id, tax_rate=0.1), [widget()])

        updated = service.invoices.update(
            InvoiceUpdate(id=invoice.id, **make_draft(acme.id, tax_rate=None).model_dump()),
            [widget()],
        )

        assert updated.status == InvoiceStatus.DRAFT
        assert updated.tax_rate == 0.1

    @pytest.mark.parametrize(
        "start, target",
        [
            (InvoiceStatus.PAID, InvoiceStatus.DRAFT),
            (InvoiceStatus.OVERDUE, InvoiceStatus.SENT),
            (InvoiceStatus.DRAFT, InvoiceStatus.PAID),
        ],
    )
    def test_any_status_transition_is_allowed(self, service, acme, start, target):
        invoice = service.invoices.create(make_draft(acme.id), [widget()])
        for status in (start, target):
            invoice = service.invoices.update(
                InvoiceUpdate(id=invoice.id, **make_draft(acme.id, status=status).model_dump()),
                [widget()],
            )
            assert invoice.status == status

    def test_update_missing_invoice(self, service, acme):
        with pytest.raises(InvoiceNotFoundError):
            service.invoices.update(
                InvoiceUpdate(id="INV-2024-9999", **make_draft(acme.id).model_dump()),
                [widget()],
            )

    def test_update_against_missing_customer(self, service, acme):
        invoice = service.invoices.create(make_draft(acme.id), [widget()])

        with pytest.raises(CustomerNotFoundError):
            service.invoices.update(
                InvoiceUpdate(id=invoice.id, **make_draft("missing").model_dump()),
                [widget(100)],
            )

        assert service.invoices.lookup(invoice.id) == invoice

    def test_delete_unknown_invoice_is_a_no_op(self, service, acme):
        invoice = service.invoices.create(make_draft(acme.id), [widget()])

        service.invoices.delete("nope")

        assert service.invoices.all() == [invoice]

    def test_delete_does_not_touch_customer(self, service, acme):
        invoice = service.invoices.create(make_draft(acme.id), [widget()])

        service.invoices.delete(invoice.id)

        assert service.customers.lookup(acme.id) == acme

    def test_items_keep_entry_order(self, service, acme):
        items = [
            InvoiceItem(description="B", quantity=1, unit_price=1),
            InvoiceItem(description="A", quantity=1, unit_price=2),
            InvoiceItem(description="C", quantity=1, unit_price=3),
        ]

        invoice = service.invoices.create(make_draft(acme.id), items)

        assert [item.description for item in invoice.items] == ["B", "A", "C"]

    def test_search(self, service, acme):
        globex = service.customers.create(CustomerIn(name="Globex", phone="777"))
        first = service.invoices.create(make_draft(acme.id), [widget()])
        second = service.invoices.create(make_draft(globex.id), [widget()])
        service.invoices.update(
            InvoiceUpdate(
                id=second.id,
                **make_draft(globex.id, status=InvoiceStatus.PAID).model_dump(),
            ),
            [widget()],
        )

        assert [inv.id for inv in service.invoices.search("globex")] == [second.id]
        assert [inv.id for inv in service.invoices.search("paid")] == [second.id]
        assert [inv.id for inv in service.invoices.search("0001")] == [first.id]
        assert len(service.invoices.search(" ")) == 2

    def test_search_orders_newest_invoice_date_first(self, service, acme):
        def on(day):
            draft = make_draft(acme.id, invoice_date=day, due_date=date(2024, 12, 31))
            return service.invoices.create(draft, [widget()])

        older = on(date(2024, 1, 5))
        newest = on(date(2024, 6, 1))
        middle = on(date(2024, 3, 9))

        expected = [newest.id, middle.id, older.id]
        assert [inv.id for inv in service.invoices.search("")] == expected
        assert [inv.id for inv in service.invoices.search("acme")] == expected


class TestSettingsStore:
    def test_preview_does_not_advance(self, service):
        assert service.settings.next_invoice_id(date(2024, 6, 1)) == "INV-2024-0001"
        assert service.settings.current.next_invoice_number == 1

    def test_custom_prefix_and_counter(self, service, acme):
        service.settings.save(
            AppSettings(invoice_prefix="BILL/", next_invoice_number=42, default_tax_rate=0)
        )

        invoice = service.invoices.create(make_draft(acme.id), [widget()])

        assert invoice.id == "BILL/2024-0042"
        assert service.settings.current.next_invoice_number == 43
