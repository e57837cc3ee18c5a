# billing/models/customers.py

import re
from datetime import datetime
from typing import Optional

from pydantic import EmailStr, field_validator, model_validator

from billing.models.base import CamelModel

PHONE_RE = re.compile(r"^\+?[0-9\s\-()]+$")


class Customer(CamelModel):
    id: str
    name: str
    phone: str
    whatsapp: Optional[str] = None
    email: Optional[EmailStr] = None
    address: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CustomerIn(CamelModel):
    """
    Customer form data. WhatsApp falls back to the phone number when left blank.
    """

    name: str
    phone: str
    whatsapp: Optional[str] = None
    email: Optional[EmailStr] = None
    address: Optional[str] = None

    @field_validator("whatsapp", "email", "address", mode="before")
    @classmethod
    def _blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("name", "phone")
    @classmethod
    def _required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("This field is required.")
        return value

    @field_validator("phone", "whatsapp")
    @classmethod
    def _phone_format(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not PHONE_RE.match(value):
            raise ValueError("Invalid phone number")
        return value

    @model_validator(mode="after")
    def _default_whatsapp(self) -> "CustomerIn":
        if not self.whatsapp:
            self.whatsapp = self.phone
        return self
