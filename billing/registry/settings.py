# billing/registry/settings.py

import logging
import threading
from datetime import date
from typing import Callable, Optional

from billing.core.numbering import advance_counter, next_invoice_id
from billing.models.settings import DEFAULT_SETTINGS, AppSettings

logger = logging.getLogger(__name__)


class SettingsStore:
    """
    Holds the current AppSettings. The value itself is immutable; every
    change swaps in a new one and notifies ``on_change``.

    ``lock`` is shared with the registries so that taking a number and
    storing the invoice happen as one step.
    """

    def __init__(
        self,
        settings: AppSettings = DEFAULT_SETTINGS,
        on_change: Optional[Callable[[], None]] = None,
        lock: Optional[threading.RLock] = None,
    ):
        self._settings = settings
        self._on_change = on_change
        self._lock = lock or threading.RLock()

    @property
    def current(self) -> AppSettings:
        return self._settings

    def save(self, settings: AppSettings) -> AppSettings:
        with self._lock:
            self._settings = settings
            logger.info(
                "Settings saved: prefix=%r next_invoice_number=%s default_tax_rate=%s",
                settings.invoice_prefix,
                settings.next_invoice_number,
                settings.default_tax_rate,
            )
            self._notify()
        return settings

    def advance_counter(self) -> AppSettings:
        with self._lock:
            self._settings = advance_counter(self._settings)
            self._notify()
            return self._settings

    def next_invoice_id(self, today: Optional[date] = None) -> str:
        return next_invoice_id(self._settings, today)

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change()
