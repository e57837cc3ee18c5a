# billing/models/settings.py

from pydantic import Field, field_validator

from billing.models.base import CamelModel


class AppSettings(CamelModel):
    invoice_prefix: str
    next_invoice_number: int = Field(ge=1)
    # Fraction, e.g. 0.05 for 5%
    default_tax_rate: float = Field(ge=0, le=1)

    class Config:
        frozen = True

    @field_validator("invoice_prefix")
    @classmethod
    def _prefix_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Invoice prefix cannot be empty.")
        return value


DEFAULT_SETTINGS = AppSettings(
    invoice_prefix="INV-",
    next_invoice_number=1,
    default_tax_rate=0.0,
)
