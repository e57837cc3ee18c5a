# billing/models/invoices.py

from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from pydantic import Field, field_validator, model_validator

from billing.models.base import CamelModel, new_id


class InvoiceStatus(str, Enum):
    DRAFT = "Draft"
    SENT = "Sent"
    PAID = "Paid"
    OVERDUE = "Overdue"


class InvoiceItem(CamelModel):
    id: str = Field(default_factory=new_id)
    description: str = ""
    quantity: float = 1.0
    unit_price: float = 0.0
    total: float = 0.0

    @model_validator(mode="after")
    def _derive_total(self) -> "InvoiceItem":
        # total is never taken from the caller
        self.total = self.quantity * self.unit_price
        return self


class InvoiceItemIn(CamelModel):
    id: Optional[str] = None
    description: str
    quantity: float = Field(gt=0)
    unit_price: float = Field(ge=0)

    @field_validator("description")
    @classmethod
    def _description_required(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("All items must have a description.")
        return value

    def to_item(self) -> InvoiceItem:
        return InvoiceItem(
            id=self.id or new_id(),
            description=self.description,
            quantity=self.quantity,
            unit_price=self.unit_price,
        )


class InvoiceDraft(CamelModel):
    """
    Invoice header fields as entered by the user. Derived amounts, the id
    (on create) and the customer name snapshot are filled in by the registry.
    """

    customer_id: str = Field(min_length=1)
    invoice_date: date
    due_date: date
    # None means "use the default tax rate from settings" on create and
    # "keep the stored rate" on update
    tax_rate: Optional[float] = Field(default=None, ge=0, le=1)
    notes: Optional[str] = None
    # Ignored on create, new invoices always start as Draft
    status: Optional[InvoiceStatus] = None

    @model_validator(mode="after")
    def _due_after_invoice_date(self) -> "InvoiceDraft":
        if self.due_date < self.invoice_date:
            raise ValueError("Due date cannot be before invoice date.")
        return self


class InvoiceUpdate(InvoiceDraft):
    id: str


class InvoiceIn(InvoiceDraft):
    """Request body for creating or editing an invoice."""

    items: List[InvoiceItemIn] = Field(min_length=1)

    def line_items(self) -> List[InvoiceItem]:
        return [item.to_item() for item in self.items]


class Invoice(CamelModel):
    id: str
    customer_id: str
    customer_name: str
    invoice_date: date
    due_date: date
    items: List[InvoiceItem]
    sub_total: float
    tax_rate: float
    tax_amount: float
    total_amount: float
    notes: Optional[str] = None
    status: InvoiceStatus = InvoiceStatus.DRAFT
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class StatusSummary(CamelModel):
    count: int
    amount: float


class SalesOverview(CamelModel):
    total_revenue: float
    this_month_revenue: float
    last_month_revenue: float
    revenue_growth: float
    invoice_count: int
    average_invoice_value: float
    paid: StatusSummary
    pending: StatusSummary
    overdue: StatusSummary
    recent_invoices: List[Invoice]


class ShareLinkOut(CamelModel):
    invoice_id: str
    phone: str
    url: str
