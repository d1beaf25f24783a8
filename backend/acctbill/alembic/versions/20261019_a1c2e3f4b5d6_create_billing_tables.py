"""Create billing tables and the LINE message log.

Revision ID: a1c2e3f4b5d6
Revises:
Create Date: 2026-10-19
"""

import sqlalchemy as sa
from alembic import op

revision = "a1c2e3f4b5d6"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:  # type: ignore[type-arg]
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    ]


def _company_fk() -> sa.ForeignKeyConstraint:
    return sa.ForeignKeyConstraint(["company_id"], ["companies.id"], ondelete="RESTRICT")


def upgrade() -> None:
    op.create_table(
        "companies",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("tax_id", sa.String(length=8), nullable=True),
        sa.Column("timezone", sa.String(length=50), nullable=False, server_default="Asia/Taipei"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "customers",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("company_id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("tax_id", sa.String(length=8), nullable=True),
        sa.Column("line_user_id", sa.String(length=64), nullable=True),
        sa.Column("line_group_id", sa.String(length=64), nullable=True),
        sa.Column("line_group_name", sa.String(length=255), nullable=True),
        *_timestamps(),
        _company_fk(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_customers_company_id", "customers", ["company_id"])

    op.create_table(
        "payment_accounts",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("company_id", sa.String(length=36), nullable=False),
        sa.Column("bank_code", sa.String(length=10), nullable=False),
        sa.Column("bank_name", sa.String(length=255), nullable=False),
        sa.Column("branch_name", sa.String(length=255), nullable=True),
        sa.Column("account_number", sa.String(length=50), nullable=False),
        sa.Column("account_name", sa.String(length=255), nullable=False),
        sa.Column("is_default", sa.Boolean(), nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="1"),
        *_timestamps(),
        _company_fk(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_payment_accounts_company_id", "payment_accounts", ["company_id"])
    op.create_index("ix_payment_accounts_is_active", "payment_accounts", ["is_active"])

    op.create_table(
        "line_settings",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("company_id", sa.String(length=36), nullable=False),
        sa.Column("channel_access_token", sa.String(length=512), nullable=True),
        sa.Column("channel_secret", sa.String(length=255), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="1"),
        *_timestamps(),
        _company_fk(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("company_id"),
    )

    op.create_table(
        "recurring_billings",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("company_id", sa.String(length=36), nullable=False),
        sa.Column("customer_id", sa.String(length=36), nullable=True),
        sa.Column("customer_name", sa.String(length=255), nullable=False),
        sa.Column("customer_line_group_id", sa.String(length=64), nullable=True),
        sa.Column("customer_line_group_name", sa.String(length=255), nullable=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("tax_amount", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("cost_amount", sa.Numeric(12, 2), nullable=True),
        sa.Column("cost_vendor_id", sa.String(length=36), nullable=True),
        sa.Column("cost_vendor_name", sa.String(length=255), nullable=True),
        sa.Column("payment_account_id", sa.String(length=36), nullable=True),
        sa.Column("schedule_type", sa.String(length=20), nullable=False, server_default="monthly"),
        sa.Column("schedule_day", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("schedule_month", sa.Integer(), nullable=True),
        sa.Column("days_before_due", sa.Integer(), nullable=False, server_default="14"),
        sa.Column("auto_send", sa.Boolean(), nullable=False, server_default="0"),
        sa.Column("message_template", sa.Text(), nullable=True),
        sa.Column("next_run_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("last_run_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("run_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="1"),
        *_timestamps(),
        _company_fk(),
        sa.ForeignKeyConstraint(["customer_id"], ["customers.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(
            ["payment_account_id"], ["payment_accounts.id"], ondelete="SET NULL"
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_recurring_billings_company_id", "recurring_billings", ["company_id"])
    op.create_index(
        "ix_recurring_billings_active_next_run",
        "recurring_billings",
        ["is_active", "next_run_at"],
    )

    op.create_table(
        "billing_requests",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("company_id", sa.String(length=36), nullable=False),
        sa.Column("billing_number", sa.String(length=50), nullable=False),
        sa.Column("customer_id", sa.String(length=36), nullable=True),
        sa.Column("customer_name", sa.String(length=255), nullable=False),
        sa.Column("customer_email", sa.String(length=255), nullable=True),
        sa.Column("customer_line_id", sa.String(length=64), nullable=True),
        sa.Column("customer_line_group_id", sa.String(length=64), nullable=True),
        sa.Column("customer_line_group_name", sa.String(length=255), nullable=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("billing_month", sa.String(length=7), nullable=True),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("tax_amount", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("total_amount", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("cost_amount", sa.Numeric(12, 2), nullable=True),
        sa.Column("cost_vendor_id", sa.String(length=36), nullable=True),
        sa.Column("cost_vendor_name", sa.String(length=255), nullable=True),
        sa.Column("payment_account_id", sa.String(length=36), nullable=True),
        sa.Column("due_date", sa.Date(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="draft"),
        sa.Column("paid_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("paid_amount", sa.Numeric(12, 2), nullable=True),
        sa.Column("payment_method", sa.String(length=50), nullable=True),
        sa.Column("payment_note", sa.Text(), nullable=True),
        sa.Column("notification_sent_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("recurring_billing_id", sa.String(length=36), nullable=True),
        sa.Column("billing_period", sa.String(length=10), nullable=True),
        *_timestamps(),
        _company_fk(),
        sa.ForeignKeyConstraint(["customer_id"], ["customers.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(
            ["payment_account_id"], ["payment_accounts.id"], ondelete="SET NULL"
        ),
        sa.ForeignKeyConstraint(
            ["recurring_billing_id"], ["recurring_billings.id"], ondelete="SET NULL"
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("company_id", "billing_number", name="uq_billing_requests_number"),
        sa.UniqueConstraint(
            "recurring_billing_id",
            "billing_period",
            name="uq_billing_requests_recurring_period",
        ),
    )
    op.create_index("ix_billing_requests_company_id", "billing_requests", ["company_id"])
    op.create_index("ix_billing_requests_billing_number", "billing_requests", ["billing_number"])
    op.create_index("ix_billing_requests_status", "billing_requests", ["status"])
    op.create_index(
        "ix_billing_requests_recurring_billing_id", "billing_requests", ["recurring_billing_id"]
    )

    op.create_table(
        "billing_number_sequences",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("company_id", sa.String(length=36), nullable=False),
        sa.Column("period", sa.String(length=6), nullable=False),
        sa.Column("last_value", sa.Integer(), nullable=False, server_default="0"),
        _company_fk(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("company_id", "period", name="uq_billing_number_sequences_period"),
    )

    op.create_table(
        "line_messages",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("company_id", sa.String(length=36), nullable=False),
        sa.Column("billing_request_id", sa.String(length=36), nullable=True),
        sa.Column("recipient_type", sa.String(length=20), nullable=False),
        sa.Column("recipient_id", sa.String(length=64), nullable=False),
        sa.Column("recipient_name", sa.String(length=255), nullable=True),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("error_message", sa.String(length=1000), nullable=True),
        sa.Column("trigger_type", sa.String(length=20), nullable=False, server_default="auto"),
        sa.Column("sent_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        _company_fk(),
        sa.ForeignKeyConstraint(
            ["billing_request_id"], ["billing_requests.id"], ondelete="SET NULL"
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_line_messages_company_id", "line_messages", ["company_id"])
    op.create_index("ix_line_messages_billing_request_id", "line_messages", ["billing_request_id"])
    op.create_index("ix_line_messages_status", "line_messages", ["status"])


def downgrade() -> None:
    op.drop_index("ix_line_messages_status", table_name="line_messages")
    op.drop_index("ix_line_messages_billing_request_id", table_name="line_messages")
    op.drop_index("ix_line_messages_company_id", table_name="line_messages")
    op.drop_table("line_messages")
    op.drop_table("billing_number_sequences")
    op.drop_index("ix_billing_requests_recurring_billing_id", table_name="billing_requests")
    op.drop_index("ix_billing_requests_status", table_name="billing_requests")
    op.drop_index("ix_billing_requests_billing_number", table_name="billing_requests")
    op.drop_index("ix_billing_requests_company_id", table_name="billing_requests")
    op.drop_table("billing_requests")
    op.drop_index("ix_recurring_billings_active_next_run", table_name="recurring_billings")
    op.drop_index("ix_recurring_billings_company_id", table_name="recurring_billings")
    op.drop_table("recurring_billings")
    op.drop_table("line_settings")
    op.drop_index("ix_payment_accounts_is_active", table_name="payment_accounts")
    op.drop_index("ix_payment_accounts_company_id", table_name="payment_accounts")
    op.drop_table("payment_accounts")
    op.drop_index("ix_customers_company_id", table_name="customers")
    op.drop_table("customers")
    op.drop_table("companies")
