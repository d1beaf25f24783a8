from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from acctbill.core.auth import get_current_company
from acctbill.core.database import get_db
from acctbill.models.billing_request import BillingRequest, BillingStatus
from acctbill.repositories.billing_request_repository import BillingRequestRepository
from acctbill.schemas.billing_request import (
    BillingNotifyRequest,
    BillingNotifyResponse,
    BillingRequestCreate,
    BillingRequestResponse,
    BillingRequestUpdate,
    LastCostResponse,
    PaymentConfirmation,
)
from acctbill.services.billing_notification_service import DispatchStatus
from acctbill.services.billing_request_service import BillingRequestService

router = APIRouter()


@router.get(
    "/",
    response_model=list[BillingRequestResponse],
    summary="List billing requests",
)
async def list_billing_requests(
    response: Response,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=1000),
    status: BillingStatus | None = None,
    customer_id: UUID | None = None,
    recurring_billing_id: UUID | None = None,
    order_by: str | None = Query(default=None),
    db: Session = Depends(get_db),
    company_id: UUID = Depends(get_current_company),
) -> list[BillingRequest]:
    repo = BillingRequestRepository(db)
    response.headers["X-Total-Count"] = str(repo.count(company_id))
    return repo.get_all(
        company_id,
        skip=skip,
        limit=limit,
        status=status,
        customer_id=customer_id,
        recurring_billing_id=recurring_billing_id,
        order_by=order_by,
    )


@router.post(
    "/",
    response_model=BillingRequestResponse,
    status_code=201,
    summary="Create billing request",
    responses={400: {"description": "Referenced customer or payment account not found"}},
)
async def create_billing_request(
    data: BillingRequestCreate,
    db: Session = Depends(get_db),
    company_id: UUID = Depends(get_current_company),
) -> BillingRequest:
    """Create an ad hoc billing request in draft status."""
    service = BillingRequestService(db)
    try:
        return service.create(data, company_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


@router.get(
    "/last_cost",
    response_model=LastCostResponse | None,
    summary="Get the customer's most recent cost vendor",
)
async def get_last_cost(
    customer_id: UUID,
    db: Session = Depends(get_db),
    company_id: UUID = Depends(get_current_company),
) -> BillingRequest | None:
    """Pre-fill cost fields from the customer's latest billing request with a vendor."""
    return BillingRequestRepository(db).get_last_cost(company_id, customer_id)


@router.get(
    "/{billing_request_id}",
    response_model=BillingRequestResponse,
    summary="Get billing request",
    responses={404: {"description": "Billing request not found"}},
)
async def get_billing_request(
    billing_request_id: UUID,
    db: Session = Depends(get_db),
    company_id: UUID = Depends(get_current_company),
) -> BillingRequest:
    repo = BillingRequestRepository(db)
    billing = repo.get_by_id(billing_request_id, company_id)
    if not billing:
        raise HTTPException(status_code=404, detail="Billing request not found")
    return billing


@router.put(
    "/{billing_request_id}",
    response_model=BillingRequestResponse,
    summary="Update billing request",
    responses={
        400: {"description": "Billing request is paid"},
        404: {"description": "Billing request not found"},
    },
)
async def update_billing_request(
    billing_request_id: UUID,
    data: BillingRequestUpdate,
    db: Session = Depends(get_db),
    company_id: UUID = Depends(get_current_company),
) -> BillingRequest:
    service = BillingRequestService(db)
    try:
        return service.update(billing_request_id, data, company_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


@router.delete(
    "/{billing_request_id}",
    status_code=204,
    summary="Delete draft billing request",
    responses={
        400: {"description": "Only drafts can be deleted"},
        404: {"description": "Billing request not found"},
    },
)
async def delete_billing_request(
    billing_request_id: UUID,
    db: Session = Depends(get_db),
    company_id: UUID = Depends(get_current_company),
) -> None:
    service = BillingRequestService(db)
    try:
        service.delete(billing_request_id, company_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


@router.post(
    "/{billing_request_id}/notify",
    response_model=BillingNotifyResponse,
    summary="Send billing notice over LINE",
    responses={
        400: {"description": "No LINE recipient, LINE not configured or unknown template"},
        404: {"description": "Billing request not found"},
        502: {"description": "LINE rejected the message"},
    },
)
def notify_billing_request(
    billing_request_id: UUID,
    data: BillingNotifyRequest | None = None,
    db: Session = Depends(get_db),
    company_id: UUID = Depends(get_current_company),
) -> BillingNotifyResponse:
    """Push the billing notice to the customer's LINE group or user."""
    service = BillingRequestService(db)
    custom_message = data.custom_message if data else None
    template_id = data.template_id if data else None
    try:
        result = service.notify(billing_request_id, company_id, custom_message, template_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    if result.status == DispatchStatus.FAILED:
        raise HTTPException(status_code=502, detail=f"LINE push failed: {result.reason}")
    return BillingNotifyResponse(
        status=result.status.value,
        line_message_id=result.line_message_id,
    )


@router.post(
    "/{billing_request_id}/confirm_payment",
    response_model=BillingRequestResponse,
    summary="Confirm payment",
    responses={
        400: {"description": "Already paid or unknown payment account"},
        404: {"description": "Billing request not found"},
    },
)
def confirm_payment(
    billing_request_id: UUID,
    data: PaymentConfirmation,
    db: Session = Depends(get_db),
    company_id: UUID = Depends(get_current_company),
) -> BillingRequest:
    """Mark a billing request as paid and optionally notify the customer."""
    service = BillingRequestService(db)
    try:
        return service.confirm_payment(billing_request_id, data, company_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
