from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from acctbill.core.auth import get_current_company
from acctbill.core.database import get_db
from acctbill.models.customer import Customer
from acctbill.repositories.customer_repository import CustomerRepository
from acctbill.schemas.customer import CustomerCreate, CustomerResponse, CustomerUpdate

router = APIRouter()


@router.get("/", response_model=list[CustomerResponse], summary="List customers")
async def list_customers(
    response: Response,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=1000),
    order_by: str | None = Query(default=None),
    db: Session = Depends(get_db),
    company_id: UUID = Depends(get_current_company),
) -> list[Customer]:
    """List all customers with pagination."""
    repo = CustomerRepository(db)
    response.headers["X-Total-Count"] = str(repo.count(company_id))
    return repo.get_all(company_id, skip=skip, limit=limit, order_by=order_by)


@router.post("/", response_model=CustomerResponse, status_code=201, summary="Create customer")
async def create_customer(
    data: CustomerCreate,
    db: Session = Depends(get_db),
    company_id: UUID = Depends(get_current_company),
) -> Customer:
    return CustomerRepository(db).create(data, company_id)


@router.get(
    "/{customer_id}",
    response_model=CustomerResponse,
    summary="Get customer",
    responses={404: {"description": "Customer not found"}},
)
async def get_customer(
    customer_id: UUID,
    db: Session = Depends(get_db),
    company_id: UUID = Depends(get_current_company),
) -> Customer:
    customer = CustomerRepository(db).get_by_id(customer_id, company_id)
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")
    return customer


@router.put(
    "/{customer_id}",
    response_model=CustomerResponse,
    summary="Update customer",
    responses={404: {"description": "Customer not found"}},
)
async def update_customer(
    customer_id: UUID,
    data: CustomerUpdate,
    db: Session = Depends(get_db),
    company_id: UUID = Depends(get_current_company),
) -> Customer:
    customer = CustomerRepository(db).update(customer_id, data, company_id)
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")
    return customer


@router.delete(
    "/{customer_id}",
    status_code=204,
    summary="Delete customer",
    responses={404: {"description": "Customer not found"}},
)
async def delete_customer(
    customer_id: UUID,
    db: Session = Depends(get_db),
    company_id: UUID = Depends(get_current_company),
) -> None:
    if not CustomerRepository(db).delete(customer_id, company_id):
        raise HTTPException(status_code=404, detail="Customer not found")
