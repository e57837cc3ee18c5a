# billing/core/reports.py

from datetime import date
from typing import List, Optional

from billing.models.invoices import (
    Invoice,
    InvoiceStatus,
    SalesOverview,
    StatusSummary,
)

RECENT_INVOICES = 5


def _summary(invoices: List[Invoice]) -> StatusSummary:
    return StatusSummary(
        count=len(invoices),
        amount=sum((inv.total_amount for inv in invoices), 0.0),
    )


def sales_overview(
    invoices: List[Invoice], today: Optional[date] = None
) -> SalesOverview:
    """
    Revenue figures for the dashboard. Months are bucketed by invoice date.
    """
    if today is None:
        today = date.today()

    this_month_start = today.replace(day=1)
    if this_month_start.month == 1:
        last_month_start = date(this_month_start.year - 1, 12, 1)
    else:
        last_month_start = this_month_start.replace(month=this_month_start.month - 1)

    total_revenue = sum((inv.total_amount for inv in invoices), 0.0)
    this_month_revenue = sum(
        (inv.total_amount for inv in invoices if inv.invoice_date >= this_month_start),
        0.0,
    )
    last_month_revenue = sum(
        (
            inv.total_amount
            for inv in invoices
            if last_month_start <= inv.invoice_date < this_month_start
        ),
        0.0,
    )

    # Growth against last month, 0 when there is nothing to compare with
    if last_month_revenue > 0:
        revenue_growth = (this_month_revenue - last_month_revenue) / last_month_revenue * 100
    else:
        revenue_growth = 0.0

    paid = [inv for inv in invoices if inv.status == InvoiceStatus.PAID]
    pending = [
        inv
        for inv in invoices
        if inv.status in (InvoiceStatus.DRAFT, InvoiceStatus.SENT)
    ]
    overdue = [inv for inv in invoices if inv.status == InvoiceStatus.OVERDUE]

    recent = sorted(invoices, key=lambda inv: inv.created_at, reverse=True)

    return SalesOverview(
        total_revenue=total_revenue,
        this_month_revenue=this_month_revenue,
        last_month_revenue=last_month_revenue,
        revenue_growth=revenue_growth,
        invoice_count=len(invoices),
        average_invoice_value=total_revenue / len(invoices) if invoices else 0.0,
        paid=_summary(paid),
        pending=_summary(pending),
        overdue=_summary(overdue),
        recent_invoices=recent[:RECENT_INVOICES],
    )
