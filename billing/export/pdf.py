# billing/export/pdf.py
"""
Render an invoice to an A4 PDF with reportlab.
"""

import io
from xml.sax.saxutils import escape
from pathlib import Path
from typing import Union

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from billing.constants import APP_NAME
from billing.models.customers import Customer
from billing.models.invoices import Invoice


def _money(amount: float) -> str:
    # Standard PDF fonts have no rupee glyph
    return f"{amount:,.2f}"


def render_invoice_pdf(invoice: Invoice, customer: Customer) -> bytes:
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=A4,
                            rightMargin=1.5*cm, leftMargin=1.5*cm,
                            topMargin=1.5*cm, bottomMargin=1.5*cm,
                            title=f"Invoice {invoice.id}")

    elements = []
    styles = getSampleStyleSheet()

    title_style = ParagraphStyle(
        'InvoiceTitle',
        parent=styles['Heading1'],
        fontSize=18,
        textColor=colors.HexColor('#1d4ed8'),
        spaceAfter=6,
    )
    right_style = ParagraphStyle('Right', parent=styles['Normal'], alignment=TA_RIGHT)
    footer_style = ParagraphStyle(
        'Footer',
        parent=styles['Normal'],
        alignment=TA_CENTER,
        textColor=colors.grey,
    )

    # Header
    header = Table(
        [[Paragraph(APP_NAME, title_style),
          Paragraph(f"<b>INVOICE</b><br/>{escape(invoice.id)}", right_style)]],
        colWidths=[9*cm, 9*cm],
    )
    header.setStyle(TableStyle([('VALIGN', (0, 0), (-1, -1), 'TOP')]))
    elements.append(header)
    elements.append(Spacer(1, 0.5*cm))

    # Bill to / dates
    bill_to = [f"<b>{escape(customer.name)}</b>", escape(customer.address or "N/A"), escape(customer.phone)]
    if customer.email:
        bill_to.append(escape(customer.email))
    info_data = [
        ['BILL TO', 'DETAILS'],
        [Paragraph("<br/>".join(bill_to), styles['Normal']),
         Paragraph(
             f"Invoice Date: {invoice.invoice_date.isoformat()}<br/>"
             f"Due Date: {invoice.due_date.isoformat()}<br/>"
             f"Status: {invoice.status.value}",
             styles['Normal'])],
    ]
    info_table = Table(info_data, colWidths=[9*cm, 9*cm])
    info_table.setStyle(TableStyle([
        ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
        ('TEXTCOLOR', (0, 0), (-1, 0), colors.grey),
        ('VALIGN', (0, 0), (-1, -1), 'TOP'),
    ]))
    elements.append(info_table)
    elements.append(Spacer(1, 0.5*cm))

    # Items
    table_data = [['#', 'Description', 'Qty', 'Unit Price', 'Total']]
    for index, item in enumerate(invoice.items, start=1):
        table_data.append([
            str(index),
            Paragraph(escape(item.description), styles['Normal']),
            f"{item.quantity:g}",
            _money(item.unit_price),
            _money(item.total),
        ])
    table = Table(table_data, colWidths=[1*cm, 8*cm, 2*cm, 3.5*cm, 3.5*cm])
    table.setStyle(TableStyle([
        ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#f3f4f6')),
        ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
        ('ALIGN', (2, 0), (-1, -1), 'RIGHT'),
        ('LINEBELOW', (0, 0), (-1, -1), 0.5, colors.lightgrey),
        ('VALIGN', (0, 0), (-1, -1), 'TOP'),
    ]))
    elements.append(table)
    elements.append(Spacer(1, 0.5*cm))

    # Totals
    totals_data = [
        ['Subtotal:', _money(invoice.sub_total)],
        [f"Tax ({invoice.tax_rate * 100:.0f}%):", _money(invoice.tax_amount)],
        ['Total:', _money(invoice.total_amount)],
    ]
    totals_table = Table(totals_data, colWidths=[4*cm, 3.5*cm], hAlign='RIGHT')
    totals_table.setStyle(TableStyle([
        ('ALIGN', (0, 0), (-1, -1), 'RIGHT'),
        ('FONTNAME', (0, -1), (-1, -1), 'Helvetica-Bold'),
        ('LINEABOVE', (0, -1), (-1, -1), 1, colors.black),
    ]))
    elements.append(totals_table)

    if invoice.notes:
        elements.append(Spacer(1, 0.5*cm))
        elements.append(Paragraph("<b>Notes:</b>", styles['Normal']))
        elements.append(Paragraph(escape(invoice.notes).replace("\n", "<br/>"), styles['Normal']))

    elements.append(Spacer(1, 1*cm))
    elements.append(Paragraph("Thank you for your business!", footer_style))

    doc.build(elements)
    buffer.seek(0)
    return buffer.getvalue()


def export_invoice_pdf(
    invoice: Invoice, customer: Customer, filename: Union[str, Path]
) -> Path:
    """Write the invoice to ``<filename>.pdf`` and return the path."""
    path = Path(f"{filename}.pdf")
    path.write_bytes(render_invoice_pdf(invoice, customer))
    return path
