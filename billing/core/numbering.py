# billing/core/numbering.py

from datetime import date
from typing import Optional

from billing.models.settings import AppSettings


def format_invoice_id(prefix: str, year: int, sequence: int) -> str:
    # Pads to 4 digits, longer sequences are kept whole
    return f"{prefix}{year}-{sequence:04d}"


def next_invoice_id(settings: AppSettings, today: Optional[date] = None) -> str:
    """
    Id the next created invoice will get, e.g. INV-2024-0007.

    The year comes from the wall clock at generation time; it is not part
    of the settings.
    """
    if today is None:
        today = date.today()
    return format_invoice_id(
        settings.invoice_prefix, today.year, settings.next_invoice_number
    )


def advance_counter(settings: AppSettings) -> AppSettings:
    return settings.model_copy(
        update={"next_invoice_number": settings.next_invoice_number + 1}
    )
