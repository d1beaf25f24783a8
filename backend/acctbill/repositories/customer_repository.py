from uuid import UUID

from sqlalchemy.orm import Session

from acctbill.core.sorting import apply_order_by
from acctbill.models.customer import Customer
from acctbill.schemas.customer import CustomerCreate, CustomerUpdate


class CustomerRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_all(
        self,
        company_id: UUID,
        skip: int = 0,
        limit: int = 100,
        order_by: str | None = None,
    ) -> list[Customer]:
        query = self.db.query(Customer).filter(Customer.company_id == company_id)
        query = apply_order_by(query, Customer, order_by)
        return query.offset(skip).limit(limit).all()

    def count(self, company_id: UUID) -> int:
        return self.db.query(Customer).filter(Customer.company_id == company_id).count()

    def get_by_id(self, customer_id: UUID, company_id: UUID | None = None) -> Customer | None:
        query = self.db.query(Customer).filter(Customer.id == customer_id)
        if company_id is not None:
            query = query.filter(Customer.company_id == company_id)
        return query.first()

    def create(self, data: CustomerCreate, company_id: UUID) -> Customer:
        customer = Customer(**data.model_dump(), company_id=company_id)
        self.db.add(customer)
        self.db.commit()
        self.db.refresh(customer)
        return customer

    def update(self, customer_id: UUID, data: CustomerUpdate, company_id: UUID) -> Customer | None:
        customer = self.get_by_id(customer_id, company_id)
        if not customer:
            return None
        for key, value in data.model_dump(exclude_unset=True).items():
            setattr(customer, key, value)
        self.db.commit()
        self.db.refresh(customer)
        return customer

    def delete(self, customer_id: UUID, company_id: UUID) -> bool:
        customer = self.get_by_id(customer_id, company_id)
        if not customer:
            return False
        self.db.delete(customer)
        self.db.commit()
        return True
