# billing/api/dashboard.py

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from billing.api.deps import get_service
from billing.core.reports import sales_overview
from billing.models.invoices import SalesOverview
from billing.service import BillingService

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/", response_model=SalesOverview)
def get_sales_overview(
    as_of: Optional[date] = Query(
        default=None,
        description="ISO date (YYYY-MM-DD); defaults to server 'today'",
    ),
    service: BillingService = Depends(get_service),
) -> SalesOverview:
    """
    Revenue totals, status breakdown and the most recent invoices.
    """
    return sales_overview(service.invoices.all(), today=as_of)
