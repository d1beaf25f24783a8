"""Rendering of LINE message templates for billing notifications."""

import re
from datetime import date
from decimal import Decimal

from acctbill.models.payment_account import PaymentAccount

UNSET_ACCOUNT_INFO = "（未設定）"

# Chinese placeholder names used by message templates, mapped to variable keys
PLACEHOLDER_ALIASES = {
    "客戶名稱": "customer_name",
    "請款項目": "title",
    "金額": "amount",
    "到期日": "due_date",
    "匯款帳戶": "account_info",
    "請款單號": "billing_number",
    "請款月份": "billing_month",
}

_PLACEHOLDER_RE = re.compile(r"\{\{\s*([^{}\s]+)\s*\}\}|\{([^{}\s]+)\}")

DEFAULT_BILLING_TEMPLATE = """親愛的 {{customer_name}}，您好：

您的 {{billing_month}} 月份服務費用已產生。

📋 請款單號：{{billing_number}}
💰 金額：NT$ {{amount}} 元
📅 付款期限：{{due_date}}

匯款資訊：
{{account_info}}

如有疑問，請與我們聯繫。"""

PAYMENT_RECEIVED_TEMPLATE = """親愛的 {{customer_name}}，您好：

已收到您的款項 NT$ {{amount}} 元，感謝您的付款！

📋 請款單號：{{billing_number}}
📅 收款日期：{{paid_date}}"""


def format_amount(value: Decimal | int | float | None) -> str:
    """Format an amount with thousands separators, dropping a zero fraction."""
    if value is None:
        return "0"
    amount = Decimal(str(value))
    if amount == amount.to_integral_value():
        return f"{int(amount):,}"
    return f"{amount:,.2f}"


def format_date(value: date | None) -> str:
    """Format a date the way zh-TW locales print it (2025/2/15)."""
    if value is None:
        return ""
    return f"{value.year}/{value.month}/{value.day}"


def format_account_info(account: PaymentAccount | None) -> str:
    if account is None:
        return UNSET_ACCOUNT_INFO
    bank_line = " ".join(part for part in (account.bank_name, account.branch_name) if part)
    return f"{bank_line}\n帳號：{account.account_number}\n戶名：{account.account_name}"


def render_template(template: str, variables: dict[str, str]) -> str:
    """Substitute ``{name}`` and ``{{name}}`` placeholders.

    Chinese placeholder names resolve through ``PLACEHOLDER_ALIASES``. Any
    placeholder without a value is replaced with an empty string.
    """

    def _replace(match: re.Match[str]) -> str:
        name = match.group(1) or match.group(2)
        key = PLACEHOLDER_ALIASES.get(name, name)
        return variables.get(key) or ""

    return _PLACEHOLDER_RE.sub(_replace, template)


def extract_placeholders(template: str) -> list[str]:
    """Placeholder names used in a template, in order of first appearance."""
    names: list[str] = []
    for match in _PLACEHOLDER_RE.finditer(template):
        name = match.group(1) or match.group(2)
        if name not in names:
            names.append(name)
    return names
