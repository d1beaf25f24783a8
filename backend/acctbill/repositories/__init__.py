from acctbill.repositories.billing_request_repository import BillingRequestRepository
from acctbill.repositories.customer_repository import CustomerRepository
from acctbill.repositories.line_message_repository import LineMessageRepository
from acctbill.repositories.line_settings_repository import LineSettingsRepository
from acctbill.repositories.line_template_repository import LineTemplateRepository
from acctbill.repositories.payment_account_repository import PaymentAccountRepository
from acctbill.repositories.recurring_billing_repository import RecurringBillingRepository
from acctbill.repositories.transaction_repository import TransactionRepository

__all__ = [
    "BillingRequestRepository",
    "CustomerRepository",
    "LineMessageRepository",
    "LineSettingsRepository",
    "LineTemplateRepository",
    "PaymentAccountRepository",
    "RecurringBillingRepository",
    "TransactionRepository",
]
