# billing/api/settings.py

from fastapi import APIRouter, Depends

from billing.api.deps import get_service
from billing.models.settings import AppSettings
from billing.service import BillingService

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("/", response_model=AppSettings)
def get_settings(service: BillingService = Depends(get_service)) -> AppSettings:
    return service.settings.current


@router.put("/", response_model=AppSettings)
def save_settings(
    settings: AppSettings,
    service: BillingService = Depends(get_service),
) -> AppSettings:
    return service.settings.save(settings)


@router.get("/next-invoice-id")
def preview_next_invoice_id(service: BillingService = Depends(get_service)):
    """
    Id the next created invoice will get. Does not advance the counter.
    """
    return {"invoiceId": service.settings.next_invoice_id()}
