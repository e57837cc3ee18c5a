# billing/registry/customers.py

import logging
import threading
from datetime import datetime
from typing import Callable, Iterable, List, Optional

from billing.errors import CustomerHasInvoicesError
from billing.models.base import new_id, utcnow
from billing.models.customers import Customer, CustomerIn

logger = logging.getLogger(__name__)


class CustomerRegistry:
    """
    In-memory customer list.

    ``is_referenced`` tells whether any invoice points at a customer id;
    such customers cannot be deleted. Mutations run under ``lock``.
    """

    def __init__(
        self,
        customers: Optional[Iterable[Customer]] = None,
        is_referenced: Optional[Callable[[str], bool]] = None,
        on_change: Optional[Callable[[], None]] = None,
        clock: Callable[[], datetime] = utcnow,
        lock: Optional[threading.RLock] = None,
    ):
        self._customers: List[Customer] = list(customers or [])
        self._is_referenced = is_referenced or (lambda customer_id: False)
        self._on_change = on_change
        self._clock = clock
        self._lock = lock or threading.RLock()

    def all(self) -> List[Customer]:
        return list(self._customers)

    def lookup(self, customer_id: str) -> Optional[Customer]:
        for customer in self._customers:
            if customer.id == customer_id:
                return customer
        return None

    def search(self, term: Optional[str]) -> List[Customer]:
        """Match name or email (case-insensitive) or phone, sorted by name."""
        term = (term or "").strip()
        needle = term.lower()
        found = [
            c
            for c in self._customers
            if not term
            or needle in c.name.lower()
            or term in c.phone
            or (c.email is not None and needle in c.email.lower())
        ]
        return sorted(found, key=lambda c: c.name.lower())

    def create(self, data: CustomerIn) -> Customer:
        with self._lock:
            customer_id = new_id()
            while self.lookup(customer_id) is not None:
                customer_id = new_id()

            now = self._clock()
            customer = Customer(
                id=customer_id,
                created_at=now,
                updated_at=now,
                **data.model_dump(),
            )
            self._customers.append(customer)
            logger.info("Customer %s (%s) added", customer.id, customer.name)
            self._notify()
            return customer

    def update(self, customer: Customer) -> Optional[Customer]:
        """
        Replace the stored record with the same id. An unknown id is
        ignored and None returned.
        """
        with self._lock:
            for index, existing in enumerate(self._customers):
                if existing.id != customer.id:
                    continue
                updated = customer.model_copy(
                    update={
                        "created_at": existing.created_at,
                        "updated_at": self._clock(),
                    }
                )
                self._customers[index] = updated
                logger.info("Customer %s updated", updated.id)
                self._notify()
                return updated

        logger.debug("Customer %s not found, update ignored", customer.id)
        return None

    def delete(self, customer_id: str) -> None:
        with self._lock:
            if self._is_referenced(customer_id):
                logger.warning(
                    "Customer %s has invoices and cannot be deleted", customer_id
                )
                raise CustomerHasInvoicesError(customer_id)

            remaining = [c for c in self._customers if c.id != customer_id]
            if len(remaining) == len(self._customers):
                return
            self._customers = remaining
            logger.info("Customer %s deleted", customer_id)
            self._notify()

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change()
