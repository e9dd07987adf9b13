"""Create drivers, orders, withdrawals and products tables

Revision ID: 001
Revises: None
Create Date: 2025-01-15 00:00:00.000000+00:00

What:  Initial schema for the delivery backend.
How:   Money columns are NUMERIC(12, 2); withdrawal amounts are constrained
       positive; withdrawal transaction ids are unique.

Rollback: downgrade() drops every table (destructive).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "drivers",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(50), nullable=False),
        sa.Column("vehicle_number", sa.String(50), nullable=True),
        sa.Column("is_online", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("latitude", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column("longitude", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )

    op.create_table(
        "orders",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_email", sa.String(255), nullable=False),
        sa.Column("items", sa.JSON(), nullable=False),
        sa.Column("total_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("address", sa.JSON(), nullable=False),
        sa.Column("payment_method", sa.String(50), nullable=True),
        sa.Column(
            "status",
            sa.String(30),
            nullable=False,
            server_default=sa.text("'Placed'"),
        ),
        sa.Column("driver_id", sa.Uuid(), nullable=True),
        sa.Column("driver_name", sa.String(255), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_orders_user_email", "orders", ["user_email"])
    # Serves the driver board and the delivered-orders scan behind earnings
    op.create_index("idx_orders_driver_status", "orders", ["driver_id", "status"])
    op.create_index("idx_orders_created_at", "orders", [sa.text("created_at DESC")])

    op.create_table(
        "withdrawals",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("driver_id", sa.Uuid(), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("upi_id", sa.String(255), nullable=True),
        sa.Column(
            "status",
            sa.String(20),
            nullable=False,
            server_default=sa.text("'Paid'"),
        ),
        sa.Column("transaction_id", sa.String(64), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("transaction_id"),
        sa.CheckConstraint("amount > 0", name="ck_withdrawals_amount_positive"),
    )
    op.create_index("idx_withdrawals_driver_status", "withdrawals", ["driver_id", "status"])

    op.create_table(
        "products",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=sa.text("''")),
        sa.Column("price", sa.Numeric(12, 2), nullable=False),
        sa.Column("category", sa.String(100), nullable=True),
        sa.Column("image_url", sa.String(1024), nullable=True),
        sa.Column(
            "delivery_time",
            sa.String(50),
            nullable=False,
            server_default=sa.text("'30-45 min'"),
        ),
        sa.Column("rating", sa.Float(), nullable=False, server_default=sa.text("4.5")),
        sa.Column("is_bestseller", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    """WARNING: destructive. Drops orders and the withdrawal ledger."""
    op.drop_table("products")
    op.drop_index("idx_withdrawals_driver_status", table_name="withdrawals")
    op.drop_table("withdrawals")
    op.drop_index("idx_orders_created_at", table_name="orders")
    op.drop_index("idx_orders_driver_status", table_name="orders")
    op.drop_index("ix_orders_user_email", table_name="orders")
    op.drop_table("orders")
    op.drop_table("drivers")
