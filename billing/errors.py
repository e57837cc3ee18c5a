# billing/errors.py
"""
Errors raised by the billing core.

Field-level validation errors are pydantic ``ValidationError``s raised by the
input models before anything reaches a registry.
"""


class BillingError(Exception):
    """Base class for billing errors surfaced to the user."""


class ReferentialIntegrityError(BillingError):
    pass


class CustomerHasInvoicesError(ReferentialIntegrityError):
    def __init__(self, customer_id: str):
        super().__init__("Cannot delete customer with existing invoices.")
        self.customer_id = customer_id


class CustomerNotFoundError(ReferentialIntegrityError):
    def __init__(self, customer_id: str):
        super().__init__("Customer not found for invoice.")
        self.customer_id = customer_id


class EntityNotFoundError(BillingError):
    pass


class InvoiceNotFoundError(EntityNotFoundError):
    def __init__(self, invoice_id: str):
        super().__init__("Original invoice not found for update.")
        self.invoice_id = invoice_id
