"""initial_tables

Revision ID: a1c3e5f70b21
Revises:
Create Date: 2026-10-18 09:12:44.301522

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "a1c3e5f70b21"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "holdings",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("ticker", sa.String(20), nullable=False),
        sa.Column("lot_number", sa.Integer(), nullable=False),
        sa.Column("acquisition_date", sa.Date(), nullable=False),
        sa.Column("capital_gain_impact", sa.String(20), nullable=True),
        sa.Column("total_shares", sa.Numeric(20, 6), nullable=False),
        sa.Column("adjusted_cost_basis_per_share", sa.Numeric(20, 6), nullable=False),
        sa.Column("cost_basis_method", sa.String(20), nullable=False, server_default="LOT_BASED"),
        sa.Column("weighted_average_cost_per_share", sa.Numeric(20, 6), nullable=True),
        sa.Column("weighted_average_updated_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_holdings")),
    )
    op.create_index(op.f("ix_holdings_ticker"), "holdings", ["ticker"])

    op.create_table(
        "transactions",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("entry_date", sa.Date(), nullable=False),
        sa.Column("activity_type", sa.String(64), nullable=False),
        sa.Column("ticker", sa.String(20), nullable=False),
        sa.Column("lot_number", sa.Integer(), nullable=True),
        sa.Column("num_shares", sa.Numeric(20, 6), nullable=True),
        sa.Column("share_price", sa.Numeric(20, 6), nullable=True),
        sa.Column("cash_value", sa.Numeric(20, 4), nullable=True),
        sa.Column("import_source", sa.String(50), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_transactions")),
    )
    op.create_index(op.f("ix_transactions_entry_date"), "transactions", ["entry_date"])
    op.create_index(op.f("ix_transactions_activity_type"), "transactions", ["activity_type"])

    op.create_table(
        "exchange_rates",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("usd_to_dkk", sa.Numeric(12, 6), nullable=False),
        sa.Column("source", sa.String(20), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_exchange_rates")),
        sa.UniqueConstraint("date", name=op.f("uq_exchange_rates_date")),
    )


def downgrade() -> None:
    op.drop_table("exchange_rates")
    op.drop_index(op.f("ix_transactions_activity_type"), table_name="transactions")
    op.drop_index(op.f("ix_transactions_entry_date"), table_name="transactions")
    op.drop_table("transactions")
    op.drop_index(op.f("ix_holdings_ticker"), table_name="holdings")
    op.drop_table("holdings")
