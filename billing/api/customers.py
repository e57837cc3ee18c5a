# billing/api/customers.py

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from billing.api.deps import get_service
from billing.errors import CustomerHasInvoicesError
from billing.models.customers import Customer, CustomerIn
from billing.service import BillingService

router = APIRouter(prefix="/customers", tags=["customers"])


@router.get("/", response_model=List[Customer])
def list_customers(
    q: Optional[str] = Query(
        default=None,
        description="Search by name, phone or email",
    ),
    service: BillingService = Depends(get_service),
) -> List[Customer]:
    """
    Return all customers, optionally filtered by a search term.
    """
    return service.customers.search(q)


@router.post("/", response_model=Customer, status_code=status.HTTP_201_CREATED)
def create_customer(
    data: CustomerIn,
    service: BillingService = Depends(get_service),
) -> Customer:
    return service.customers.create(data)


@router.get("/{customer_id}", response_model=Customer)
def get_customer(
    customer_id: str,
    service: BillingService = Depends(get_service),
) -> Customer:
    """
    Return a single customer by ID.
    """
    customer = service.customers.lookup(customer_id)
    if customer is None:
        raise HTTPException(status_code=404, detail="Customer not found")
    return customer


@router.put("/{customer_id}", response_model=Customer)
def update_customer(
    customer_id: str,
    data: CustomerIn,
    service: BillingService = Depends(get_service),
) -> Customer:
    existing = service.customers.lookup(customer_id)
    if existing is None:
        raise HTTPException(status_code=404, detail="Customer not found")

    customer = existing.model_copy(update=data.model_dump())
    updated = service.customers.update(customer)
    if updated is None:
        raise HTTPException(status_code=404, detail="Customer not found")
    return updated


@router.delete("/{customer_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_customer(
    customer_id: str,
    service: BillingService = Depends(get_service),
) -> Response:
    try:
        service.customers.delete(customer_id)
    except CustomerHasInvoicesError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
