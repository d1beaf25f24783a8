from acctbill.schemas.billing_request import (
    BillingRequestCreate,
    BillingRequestResponse,
    BillingRequestUpdate,
)
from acctbill.schemas.customer import CustomerCreate, CustomerResponse, CustomerUpdate
from acctbill.schemas.recurring_billing import (
    RecurringBillingCreate,
    RecurringBillingResponse,
    RecurringBillingUpdate,
)
from acctbill.schemas.sweep import SweepSummary

__all__ = [
    "BillingRequestCreate",
    "BillingRequestResponse",
    "BillingRequestUpdate",
    "CustomerCreate",
    "CustomerResponse",
    "CustomerUpdate",
    "RecurringBillingCreate",
    "RecurringBillingResponse",
    "RecurringBillingUpdate",
    "SweepSummary",
]
