# billing/core/totals.py
"""
Invoice totals.

Amounts are plain floats; rounding to 2 decimals is left to whatever
displays them.
"""

import math
from typing import Iterable, NamedTuple

from billing.models.invoices import InvoiceItem

# Item fields that can be edited, keyed by both their Python and wire names
EDITABLE_FIELDS = {
    "description": "description",
    "quantity": "quantity",
    "unit_price": "unit_price",
    "unitPrice": "unit_price",
}


class Totals(NamedTuple):
    sub_total: float
    tax_amount: float
    total_amount: float


def compute_totals(items: Iterable[InvoiceItem], tax_rate: float) -> Totals:
    """
    Sum the line totals and apply the tax rate (a fraction in [0, 1]).
    """
    sub_total = sum((item.total for item in items), 0.0)
    tax_amount = sub_total * tax_rate
    return Totals(sub_total, tax_amount, sub_total + tax_amount)


def coerce_amount(value) -> float:
    """
    Permissive numeric input: anything that does not parse to a finite
    number counts as 0.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        try:
            number = float(str(value).strip())
        except ValueError:
            return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


def recompute_item_total(item: InvoiceItem, field: str, value) -> InvoiceItem:
    """
    Return a copy of ``item`` with ``field`` changed and its total
    recomputed as quantity * unit_price.
    """
    try:
        name = EDITABLE_FIELDS[field]
    except KeyError:
        raise ValueError(f"Unknown item field {field!r}")

    data = item.model_dump()
    if name == "description":
        data[name] = "" if value is None else str(value)
    else:
        data[name] = coerce_amount(value)

    # Rebuilding the model re-derives total
    return InvoiceItem(**data)
