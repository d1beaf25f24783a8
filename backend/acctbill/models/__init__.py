from acctbill.models.billing_number_sequence import BillingNumberSequence
from acctbill.models.billing_request import BillingRequest, BillingStatus
from acctbill.models.company import Company
from acctbill.models.customer import Customer
from acctbill.models.line_message import (
    LineMessage,
    LineMessageStatus,
    RecipientType,
    TriggerType,
)
from acctbill.models.line_settings import LineSettings
from acctbill.models.line_template import LineTemplate
from acctbill.models.payment_account import PaymentAccount
from acctbill.models.recurring_billing import RecurringBilling, ScheduleType
from acctbill.models.transaction import Transaction, TransactionType

__all__ = [
    "BillingNumberSequence",
    "BillingRequest",
    "BillingStatus",
    "Company",
    "Customer",
    "LineMessage",
    "LineMessageStatus",
    "LineSettings",
    "LineTemplate",
    "PaymentAccount",
    "RecipientType",
    "RecurringBilling",
    "ScheduleType",
    "Transaction",
    "TransactionType",
    "TriggerType",
]
