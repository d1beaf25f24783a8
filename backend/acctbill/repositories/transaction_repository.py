from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy.orm import Session

from acctbill.models.transaction import Transaction, TransactionType


class TransactionRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, transaction_id: UUID, company_id: UUID | None = None) -> Transaction | None:
        query = self.db.query(Transaction).filter(Transaction.id == transaction_id)
        if company_id is not None:
            query = query.filter(Transaction.company_id == company_id)
        return query.first()

    def create_income(
        self,
        company_id: UUID,
        *,
        transaction_date: date,
        description: str,
        amount: Decimal,
        customer_id: UUID | None = None,
        payment_account_id: UUID | None = None,
        category_code: str | None = None,
        notes: str | None = None,
    ) -> Transaction:
        """Add an income entry. Flushes, does not commit."""
        transaction = Transaction(
            company_id=company_id,
            transaction_date=transaction_date,
            transaction_type=TransactionType.INCOME.value,
            description=description,
            amount=amount,
            customer_id=customer_id,
            payment_account_id=payment_account_id,
            category_code=category_code,
            notes=notes,
        )
        self.db.add(transaction)
        self.db.flush()
        return transaction
