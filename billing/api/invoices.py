# billing/api/invoices.py

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from billing.api.deps import get_service
from billing.errors import CustomerNotFoundError, InvoiceNotFoundError
from billing.export.pdf import render_invoice_pdf
from billing.export.share import build_whatsapp_link, sanitize_phone
from billing.models.customers import Customer
from billing.models.invoices import (
    Invoice,
    InvoiceIn,
    InvoiceUpdate,
    ShareLinkOut,
)
from billing.service import BillingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/invoices", tags=["invoices"])


def _get_invoice_and_customer(service: BillingService, invoice_id: str):
    invoice = service.invoices.lookup(invoice_id)
    customer: Optional[Customer] = None
    if invoice is not None:
        customer = service.customers.lookup(invoice.customer_id)
    if invoice is None or customer is None:
        raise HTTPException(
            status_code=404,
            detail="Invoice or associated customer not found.",
        )
    return invoice, customer


@router.get("/", response_model=List[Invoice])
def list_invoices(
    q: Optional[str] = Query(
        default=None,
        description="Search by invoice ID, customer name or status",
    ),
    service: BillingService = Depends(get_service),
) -> List[Invoice]:
    return service.invoices.search(q)


@router.post("/", response_model=Invoice, status_code=status.HTTP_201_CREATED)
def create_invoice(
    body: InvoiceIn,
    service: BillingService = Depends(get_service),
) -> Invoice:
    """
    Create a Draft invoice. The id comes from the settings counter; any
    status in the body is ignored.
    """
    try:
        return service.invoices.create(body, body.line_items())
    except CustomerNotFoundError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/{invoice_id}", response_model=Invoice)
def get_invoice(
    invoice_id: str,
    service: BillingService = Depends(get_service),
) -> Invoice:
    """
    Look up a single invoice by its id.
    """
    invoice = service.invoices.lookup(invoice_id)
    if invoice is None:
        raise HTTPException(status_code=404, detail="Invoice not found")
    return invoice


@router.put("/{invoice_id}", response_model=Invoice)
def update_invoice(
    invoice_id: str,
    body: InvoiceIn,
    service: BillingService = Depends(get_service),
) -> Invoice:
    fields = InvoiceUpdate(id=invoice_id, **body.model_dump(exclude={"items"}))
    try:
        return service.invoices.update(fields, body.line_items())
    except CustomerNotFoundError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except InvoiceNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{invoice_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_invoice(
    invoice_id: str,
    service: BillingService = Depends(get_service),
) -> Response:
    service.invoices.delete(invoice_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{invoice_id}/pdf")
def export_invoice_pdf(
    invoice_id: str,
    service: BillingService = Depends(get_service),
) -> Response:
    invoice, customer = _get_invoice_and_customer(service, invoice_id)

    try:
        content = render_invoice_pdf(invoice, customer)
    except Exception:
        logger.exception("Error generating PDF for invoice %s", invoice.id)
        raise HTTPException(
            status_code=500,
            detail="An error occurred while generating the PDF.",
        )

    return Response(
        content=content,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="Invoice-{invoice.id}.pdf"'
        },
    )


@router.get("/{invoice_id}/share", response_model=ShareLinkOut)
def share_invoice(
    invoice_id: str,
    service: BillingService = Depends(get_service),
) -> ShareLinkOut:
    """
    Build a WhatsApp link with a prefilled message for the invoice's customer.
    """
    invoice, customer = _get_invoice_and_customer(service, invoice_id)

    try:
        url = build_whatsapp_link(customer, invoice)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return ShareLinkOut(
        invoice_id=invoice.id,
        phone=sanitize_phone(customer.whatsapp or customer.phone),
        url=url,
    )
