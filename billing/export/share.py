# billing/export/share.py

import re
from urllib.parse import quote

from billing.constants import APP_NAME, CURRENCY_SYMBOL
from billing.models.customers import Customer
from billing.models.invoices import Invoice

WHATSAPP_URL = "https://wa.me/{phone}?text={text}"

# Everything that is not a digit, except a leading "+"
_NON_DIGITS = re.compile(r"(?!^\+)\D")


def sanitize_phone(phone: str) -> str:
    return _NON_DIGITS.sub("", phone)


def build_share_message(customer: Customer, invoice: Invoice) -> str:
    return (
        f"Hello {customer.name},\n\n"
        f"Here is your invoice {invoice.id} for "
        f"{CURRENCY_SYMBOL}{invoice.total_amount:.2f}.\n\n"
        f"Thank you!\n{APP_NAME}"
    )


def build_whatsapp_link(customer: Customer, invoice: Invoice) -> str:
    """
    wa.me link that opens a chat with the customer, prefilled with the
    invoice message. Uses the WhatsApp number, falling back to the phone.
    """
    target = customer.whatsapp or customer.phone
    if not target:
        raise ValueError("Customer phone/WhatsApp number not available.")
    # Same safe set as JavaScript's encodeURIComponent
    text = quote(build_share_message(customer, invoice), safe="-_.!~*'()")
    return WHATSAPP_URL.format(phone=sanitize_phone(target), text=text)
