# billing/registry/invoices.py

import logging
import threading
from datetime import datetime
from typing import Callable, Iterable, List, Optional, Tuple

from billing.core.totals import compute_totals
from billing.errors import CustomerNotFoundError, InvoiceNotFoundError
from billing.models.base import utcnow
from billing.models.customers import Customer
from billing.models.invoices import (
    Invoice,
    InvoiceDraft,
    InvoiceItem,
    InvoiceStatus,
    InvoiceUpdate,
)
from billing.registry.customers import CustomerRegistry
from billing.registry.settings import SettingsStore

logger = logging.getLogger(__name__)


class InvoiceRegistry:
    """
    In-memory invoice list. Creation and update derive the amounts through
    the totals engine; creation also takes the next number from settings.

    ``customer_name`` is copied from the customer when the invoice is
    written and is not kept in sync if the customer is renamed later.

    Mutations run under ``lock``, which should be the one the settings
    store uses: taking a number, storing the invoice and advancing the
    counter happen as one step.
    """

    def __init__(
        self,
        customers: CustomerRegistry,
        settings: SettingsStore,
        invoices: Optional[Iterable[Invoice]] = None,
        on_change: Optional[Callable[[], None]] = None,
        clock: Callable[[], datetime] = utcnow,
        lock: Optional[threading.RLock] = None,
    ):
        self._customers = customers
        self._settings = settings
        self._invoices: List[Invoice] = list(invoices or [])
        self._on_change = on_change
        self._clock = clock
        self._lock = lock or threading.RLock()

    def all(self) -> List[Invoice]:
        return list(self._invoices)

    def lookup(self, invoice_id: str) -> Optional[Invoice]:
        found = self._find(invoice_id)
        return found[1] if found else None

    def search(self, term: Optional[str]) -> List[Invoice]:
        """
        Match id, customer name or status (case-insensitive), newest invoice
        date first.
        """
        needle = (term or "").strip().lower()
        found = [
            inv
            for inv in self._invoices
            if not needle
            or needle in inv.id.lower()
            or needle in inv.customer_name.lower()
            or needle in inv.status.value.lower()
        ]
        return sorted(found, key=lambda inv: inv.invoice_date, reverse=True)

    def references_customer(self, customer_id: str) -> bool:
        return any(inv.customer_id == customer_id for inv in self._invoices)

    def create(self, fields: InvoiceDraft, items: List[InvoiceItem]) -> Invoice:
        with self._lock:
            return self._create(fields, items)

    def update(self, fields: InvoiceUpdate, items: List[InvoiceItem]) -> Invoice:
        with self._lock:
            return self._update(fields, items)

    def delete(self, invoice_id: str) -> None:
        with self._lock:
            remaining = [inv for inv in self._invoices if inv.id != invoice_id]
            if len(remaining) == len(self._invoices):
                return
            self._invoices = remaining
            logger.info("Invoice %s deleted", invoice_id)
            self._notify()

    def _create(self, fields: InvoiceDraft, items: List[InvoiceItem]) -> Invoice:
        customer = self._resolve_customer(fields.customer_id)

        tax_rate = fields.tax_rate
        if tax_rate is None:
            tax_rate = self._settings.current.default_tax_rate
        totals = compute_totals(items, tax_rate)
        now = self._clock()

        invoice = Invoice(
            id=self._settings.next_invoice_id(now.astimezone().date()),
            customer_id=customer.id,
            customer_name=customer.name,
            invoice_date=fields.invoice_date,
            due_date=fields.due_date,
            items=[item.model_copy() for item in items],
            sub_total=totals.sub_total,
            tax_rate=tax_rate,
            tax_amount=totals.tax_amount,
            total_amount=totals.total_amount,
            notes=fields.notes,
            status=InvoiceStatus.DRAFT,
            created_at=now,
            updated_at=now,
        )
        self._invoices.append(invoice)
        # Only a stored invoice consumes a number
        self._settings.advance_counter()

        logger.info(
            "Invoice %s created for customer %s, total %.2f",
            invoice.id,
            customer.id,
            invoice.total_amount,
        )
        self._notify()
        return invoice

    def _update(self, fields: InvoiceUpdate, items: List[InvoiceItem]) -> Invoice:
        customer = self._resolve_customer(fields.customer_id)

        found = self._find(fields.id)
        if found is None:
            logger.warning("Invoice %s not found, update rejected", fields.id)
            raise InvoiceNotFoundError(fields.id)
        index, original = found

        tax_rate = fields.tax_rate
        if tax_rate is None:
            tax_rate = original.tax_rate
        totals = compute_totals(items, tax_rate)

        invoice = Invoice(
            id=original.id,
            customer_id=customer.id,
            customer_name=customer.name,
            invoice_date=fields.invoice_date,
            due_date=fields.due_date,
            items=[item.model_copy() for item in items],
            sub_total=totals.sub_total,
            tax_rate=tax_rate,
            tax_amount=totals.tax_amount,
            total_amount=totals.total_amount,
            notes=fields.notes,
            status=fields.status or original.status,
            created_at=original.created_at,
            updated_at=self._clock(),
        )
        self._invoices[index] = invoice

        logger.info("Invoice %s updated, status %s", invoice.id, invoice.status.value)
        self._notify()
        return invoice

    def _find(self, invoice_id: str) -> Optional[Tuple[int, Invoice]]:
        for index, invoice in enumerate(self._invoices):
            if invoice.id == invoice_id:
                return index, invoice
        return None

    def _resolve_customer(self, customer_id: str) -> Customer:
        customer = self._customers.lookup(customer_id)
        if customer is None:
            logger.warning("Customer %s not found for invoice", customer_id)
            raise CustomerNotFoundError(customer_id)
        return customer

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change()
