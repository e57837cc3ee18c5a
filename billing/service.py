# billing/service.py

import logging
import threading
from datetime import datetime
from typing import Callable, List, Type, TypeVar

from pydantic import BaseModel, ValidationError

from billing.constants import STORAGE_KEYS
from billing.db.storage import KeyValueStore
from billing.models.base import utcnow
from billing.models.customers import Customer
from billing.models.invoices import Invoice
from billing.models.settings import DEFAULT_SETTINGS, AppSettings
from billing.registry.customers import CustomerRegistry
from billing.registry.invoices import InvoiceRegistry
from billing.registry.settings import SettingsStore

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class BillingService:
    """
    Loads the persisted documents, owns the registries and the settings,
    and writes each document back whenever it changes.

    The registries and the settings share one lock; requests may arrive on
    several worker threads.
    """

    def __init__(
        self,
        storage: KeyValueStore,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.storage = storage
        self.lock = threading.RLock()

        self.settings = SettingsStore(
            self._load_settings(), on_change=self._save_settings, lock=self.lock
        )
        self.customers = CustomerRegistry(
            self._load_list(STORAGE_KEYS["customers"], Customer),
            is_referenced=self._customer_has_invoices,
            on_change=self._save_customers,
            clock=clock,
            lock=self.lock,
        )
        self.invoices = InvoiceRegistry(
            self.customers,
            self.settings,
            self._load_list(STORAGE_KEYS["invoices"], Invoice),
            on_change=self._save_invoices,
            clock=clock,
            lock=self.lock,
        )

    def _customer_has_invoices(self, customer_id: str) -> bool:
        return self.invoices.references_customer(customer_id)

    # ---- Loading ----

    def _load_list(self, key: str, model: Type[M]) -> List[M]:
        raw = self.storage.load(key, [])
        if not isinstance(raw, list):
            logger.error("Stored %s is not a list, starting empty", key)
            return []

        records = []
        for position, record in enumerate(raw):
            try:
                records.append(model.model_validate(record))
            except ValidationError as e:
                # Skip only the broken record, the rest stay usable
                logger.error("Skipping invalid record %s in %s: %s", position, key, e)
        return records

    def _load_settings(self) -> AppSettings:
        raw = self.storage.load(STORAGE_KEYS["settings"], None)
        if raw is None:
            return DEFAULT_SETTINGS
        try:
            return AppSettings.model_validate(raw)
        except ValidationError as e:
            logger.error("Stored settings are invalid, using defaults: %s", e)
            return DEFAULT_SETTINGS

    # ---- Saving ----

    def _save_customers(self) -> None:
        self.storage.save(
            STORAGE_KEYS["customers"],
            [c.model_dump(mode="json", by_alias=True) for c in self.customers.all()],
        )

    def _save_invoices(self) -> None:
        self.storage.save(
            STORAGE_KEYS["invoices"],
            [inv.model_dump(mode="json", by_alias=True) for inv in self.invoices.all()],
        )

    def _save_settings(self) -> None:
        self.storage.save(
            STORAGE_KEYS["settings"],
            self.settings.current.model_dump(mode="json", by_alias=True),
        )
