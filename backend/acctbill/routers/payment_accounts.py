from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from acctbill.core.auth import get_current_company
from acctbill.core.database import get_db
from acctbill.models.payment_account import PaymentAccount
from acctbill.repositories.payment_account_repository import PaymentAccountRepository
from acctbill.schemas.payment_account import (
    PaymentAccountCreate,
    PaymentAccountResponse,
    PaymentAccountUpdate,
)

router = APIRouter()


@router.get("/", response_model=list[PaymentAccountResponse], summary="List payment accounts")
async def list_payment_accounts(
    db: Session = Depends(get_db),
    company_id: UUID = Depends(get_current_company),
) -> list[PaymentAccount]:
    """List active payment accounts, default account first."""
    return PaymentAccountRepository(db).get_active(company_id)


@router.post(
    "/",
    response_model=PaymentAccountResponse,
    status_code=201,
    summary="Create payment account",
)
async def create_payment_account(
    data: PaymentAccountCreate,
    db: Session = Depends(get_db),
    company_id: UUID = Depends(get_current_company),
) -> PaymentAccount:
    return PaymentAccountRepository(db).create(data, company_id)


@router.put(
    "/{account_id}",
    response_model=PaymentAccountResponse,
    summary="Update payment account",
    responses={404: {"description": "Payment account not found"}},
)
async def update_payment_account(
    account_id: UUID,
    data: PaymentAccountUpdate,
    db: Session = Depends(get_db),
    company_id: UUID = Depends(get_current_company),
) -> PaymentAccount:
    account = PaymentAccountRepository(db).update(account_id, data, company_id)
    if not account:
        raise HTTPException(status_code=404, detail="Payment account not found")
    return account


@router.delete(
    "/{account_id}",
    status_code=204,
    summary="Deactivate payment account",
    responses={404: {"description": "Payment account not found"}},
)
async def delete_payment_account(
    account_id: UUID,
    db: Session = Depends(get_db),
    company_id: UUID = Depends(get_current_company),
) -> None:
    if not PaymentAccountRepository(db).deactivate(account_id, company_id):
        raise HTTPException(status_code=404, detail="Payment account not found")
