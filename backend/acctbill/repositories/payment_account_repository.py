from uuid import UUID

from sqlalchemy.orm import Session

from acctbill.models.payment_account import PaymentAccount
from acctbill.schemas.payment_account import PaymentAccountCreate, PaymentAccountUpdate


class PaymentAccountRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_active(self, company_id: UUID) -> list[PaymentAccount]:
        return (
            self.db.query(PaymentAccount)
            .filter(
                PaymentAccount.company_id == company_id,
                PaymentAccount.is_active == True,  # noqa: E712
            )
            .order_by(PaymentAccount.is_default.desc(), PaymentAccount.created_at.asc())
            .all()
        )

    def get_by_id(
        self, account_id: UUID, company_id: UUID | None = None
    ) -> PaymentAccount | None:
        query = self.db.query(PaymentAccount).filter(PaymentAccount.id == account_id)
        if company_id is not None:
            query = query.filter(PaymentAccount.company_id == company_id)
        return query.first()

    def _clear_default(self, company_id: UUID) -> None:
        self.db.query(PaymentAccount).filter(
            PaymentAccount.company_id == company_id,
            PaymentAccount.is_default == True,  # noqa: E712
        ).update({"is_default": False}, synchronize_session=False)

    def create(self, data: PaymentAccountCreate, company_id: UUID) -> PaymentAccount:
        if data.is_default:
            self._clear_default(company_id)
        account = PaymentAccount(**data.model_dump(), company_id=company_id)
        self.db.add(account)
        self.db.commit()
        self.db.refresh(account)
        return account

    def update(
        self, account_id: UUID, data: PaymentAccountUpdate, company_id: UUID
    ) -> PaymentAccount | None:
        account = self.get_by_id(account_id, company_id)
        if not account:
            return None
        updates = data.model_dump(exclude_unset=True)
        if updates.get("is_default"):
            self._clear_default(company_id)
        for key, value in updates.items():
            setattr(account, key, value)
        self.db.commit()
        self.db.refresh(account)
        return account

    def deactivate(self, account_id: UUID, company_id: UUID) -> bool:
        account = self.get_by_id(account_id, company_id)
        if not account:
            return False
        account.is_active = False  # type: ignore[assignment]
        account.is_default = False  # type: ignore[assignment]
        self.db.commit()
        return True
