"""create wallets and wallet_operations

Revision ID: 3f2a9c1d7b10
Revises: 
Create Date: 2026-10-17 09:00:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "3f2a9c1d7b10"
down_revision = None
branch_labels = None
depends_on = None

operation_type = sa.Enum("DEPOSIT", "WITHDRAW", name="operation_type", create_constraint=True)


def upgrade() -> None:
    op.create_table(
        "wallets",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("balance", sa.BigInteger(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("balance >= 0", name="ck_wallets_balance_non_negative"),
    )

    op.create_table(
        "wallet_operations",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("wallet_id", sa.Uuid(), sa.ForeignKey("wallets.id"), nullable=False),
        sa.Column("operation", operation_type, nullable=False),
        sa.Column("amount", sa.BigInteger(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("amount > 0", name="ck_wallet_operations_amount_positive"),
    )
    op.create_index("ix_wallet_operations_wallet_id", "wallet_operations", ["wallet_id"])


def downgrade() -> None:
    op.drop_index("ix_wallet_operations_wallet_id", table_name="wallet_operations")
    op.drop_table("wallet_operations")
    op.drop_table("wallets")
    operation_type.drop(op.get_bind(), checkfirst=True)
