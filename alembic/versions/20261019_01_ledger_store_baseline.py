"""Ledger store baseline: client profiles and append-only transactions

Revision ID: 20261019_01
Revises: None
Create Date: 2026-10-19
"""
# pylint: disable=no-member,invalid-name,wrong-import-order

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "20261019_01"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""

    op.execute("CREATE EXTENSION IF NOT EXISTS pgcrypto")

    op.create_table(
        "profiles",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("name", sa.Text(), nullable=True),
        sa.Column("total_deposited_usd", sa.Numeric(), nullable=False, server_default=sa.text("0")),
        sa.Column("email", sa.Text(), nullable=True),
        sa.Column("phone_number", sa.Text(), nullable=True),
    )

    op.create_table(
        "transactions",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column(
            "profile_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("profiles.id", name="fk_transactions_profile_id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("transaction_type", sa.Text(), nullable=False),
        sa.Column("asset", sa.Text(), nullable=False),
        sa.Column("transaction_value_usd", sa.Numeric(), nullable=False),
        sa.Column("asset_quantity", sa.Numeric(), nullable=True),
        sa.Column("price_per_asset_usd", sa.Numeric(), nullable=True),
        sa.CheckConstraint(
            "transaction_type IN ('DEPOSIT', 'WITHDRAW', 'BUY', 'SELL')",
            name="ck_transactions_transaction_type",
        ),
        sa.CheckConstraint("transaction_value_usd > 0", name="ck_transactions_value_positive"),
    )
    op.create_index("ix_transactions_created_at", "transactions", ["created_at", "id"])
    op.create_index("ix_transactions_profile_id", "transactions", ["profile_id"])
    op.create_index("ix_transactions_asset", "transactions", ["asset"])


def downgrade() -> None:
    """Downgrade schema."""

    op.drop_index("ix_transactions_asset", table_name="transactions")
    op.drop_index("ix_transactions_profile_id", table_name="transactions")
    op.drop_index("ix_transactions_created_at", table_name="transactions")
    op.drop_table("transactions")
    op.drop_table("profiles")
