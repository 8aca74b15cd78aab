"""create bills and items

Revision ID: 3f1c2b7a9d10
Revises:
Create Date: 2026-10-19
"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

revision: str = "3f1c2b7a9d10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "bills",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("customer_name", sa.Text, nullable=False),
        sa.Column("date", sa.Date, nullable=False),
        sa.Column("total_amount", sa.BigInteger, nullable=False, server_default="0"),  # paise
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_bills_date", "bills", ["date"])

    op.create_table(
        "items",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("bill_id", sa.Integer, sa.ForeignKey("bills.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("quantity", sa.Integer, nullable=False, server_default="1"),
        sa.Column("price", sa.BigInteger, nullable=False),  # paise
    )
    op.create_index("ix_items_bill_id", "items", ["bill_id"])


def downgrade() -> None:
    op.drop_index("ix_items_bill_id", table_name="items")
    op.drop_table("items")
    op.drop_index("ix_bills_date", table_name="bills")
    op.drop_table("bills")
