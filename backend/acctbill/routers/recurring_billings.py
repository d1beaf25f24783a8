from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from acctbill.core.auth import get_current_company
from acctbill.core.database import get_db
from acctbill.models.recurring_billing import RecurringBilling
from acctbill.repositories.recurring_billing_repository import RecurringBillingRepository
from acctbill.schemas.recurring_billing import (
    RecurringBillingCreate,
    RecurringBillingResponse,
    RecurringBillingUpdate,
)
from acctbill.services.recurring_billing_service import RecurringBillingService

router = APIRouter()


@router.get(
    "/",
    response_model=list[RecurringBillingResponse],
    summary="List recurring billings",
)
async def list_recurring_billings(
    response: Response,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=1000),
    is_active: bool | None = None,
    customer_id: UUID | None = None,
    order_by: str | None = Query(default=None),
    db: Session = Depends(get_db),
    company_id: UUID = Depends(get_current_company),
) -> list[RecurringBilling]:
    """List recurring billing definitions with optional filters."""
    repo = RecurringBillingRepository(db)
    response.headers["X-Total-Count"] = str(repo.count(company_id))
    return repo.get_all(
        company_id,
        skip=skip,
        limit=limit,
        is_active=is_active,
        customer_id=customer_id,
        order_by=order_by,
    )


@router.post(
    "/",
    response_model=RecurringBillingResponse,
    status_code=201,
    summary="Create recurring billing",
    responses={
        400: {"description": "Referenced customer or payment account not found"},
        422: {"description": "Validation error"},
    },
)
async def create_recurring_billing(
    data: RecurringBillingCreate,
    db: Session = Depends(get_db),
    company_id: UUID = Depends(get_current_company),
) -> RecurringBilling:
    """Create a recurring billing definition; its first run is scheduled immediately."""
    service = RecurringBillingService(db)
    try:
        return service.create(data, company_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


@router.get(
    "/{recurring_billing_id}",
    response_model=RecurringBillingResponse,
    summary="Get recurring billing",
    responses={404: {"description": "Recurring billing not found"}},
)
async def get_recurring_billing(
    recurring_billing_id: UUID,
    db: Session = Depends(get_db),
    company_id: UUID = Depends(get_current_company),
) -> RecurringBilling:
    repo = RecurringBillingRepository(db)
    recurring = repo.get_by_id(recurring_billing_id, company_id)
    if not recurring:
        raise HTTPException(status_code=404, detail="Recurring billing not found")
    return recurring


@router.put(
    "/{recurring_billing_id}",
    response_model=RecurringBillingResponse,
    summary="Update recurring billing",
    responses={
        400: {"description": "Invalid schedule or reference"},
        404: {"description": "Recurring billing not found"},
    },
)
async def update_recurring_billing(
    recurring_billing_id: UUID,
    data: RecurringBillingUpdate,
    db: Session = Depends(get_db),
    company_id: UUID = Depends(get_current_company),
) -> RecurringBilling:
    """Update a definition. Schedule changes recompute the next run."""
    service = RecurringBillingService(db)
    try:
        return service.update(recurring_billing_id, data, company_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


@router.delete(
    "/{recurring_billing_id}",
    status_code=204,
    summary="Deactivate recurring billing",
    responses={404: {"description": "Recurring billing not found"}},
)
async def delete_recurring_billing(
    recurring_billing_id: UUID,
    db: Session = Depends(get_db),
    company_id: UUID = Depends(get_current_company),
) -> None:
    """Stop a definition from firing. Generated billing requests are kept."""
    service = RecurringBillingService(db)
    if not service.deactivate(recurring_billing_id, company_id):
        raise HTTPException(status_code=404, detail="Recurring billing not found")
