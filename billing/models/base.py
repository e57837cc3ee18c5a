# billing/models/base.py

import uuid
from datetime import datetime, timezone

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


def new_id() -> str:
    """Opaque random id for customers and line items."""
    return uuid.uuid4().hex[:9]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CamelModel(BaseModel):
    """
    Records are snake_case in Python and camelCase on the wire and in the
    persisted documents (customerId, subTotal, nextInvoiceNumber, ...).
    """

    class Config:
        alias_generator = to_camel
        populate_by_name = True
