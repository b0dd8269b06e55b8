"""create_stock_tables

Revision ID: 5c1e2a9f7b3d
Revises:
Create Date: 2026-10-19 09:12:44.381205
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '5c1e2a9f7b3d'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _inventory_columns(quantity_type, threshold_column, threshold_default):
    return [
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("unit", sa.String(), nullable=False),
        sa.Column("quantity", quantity_type, nullable=False, server_default="0"),
        sa.Column(threshold_column, quantity_type, nullable=False, server_default=str(threshold_default)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def _inventory_checks(table, threshold_column):
    return [
        sa.CheckConstraint("quantity >= 0", name=f"ck_{table}_quantity_non_negative"),
        sa.CheckConstraint(f"{threshold_column} >= 0", name=f"ck_{table}_threshold_non_negative"),
    ]


def _create_inventory_table(table, quantity_type, threshold_column, threshold_default, *extra):
    op.create_table(
        table,
        *_inventory_columns(quantity_type, threshold_column, threshold_default),
        *extra,
        *_inventory_checks(table, threshold_column),
    )
    op.create_index(f"ix_{table}_id", table, ["id"])
    op.create_index(f"ix_{table}_user_id", table, ["user_id"])


INVENTORY_TABLES = (
    "stocks",
    "stock_feed",
    "stock_seeds",
    "stock_fertilizer",
    "stock_equipment",
    "stock_harvest",
    "stock_tools",
)

HISTORY_FKS = {
    "stock_id": "stocks",
    "stock_feed_id": "stock_feed",
    "stock_seeds_id": "stock_seeds",
    "stock_fertilizer_id": "stock_fertilizer",
    "stock_equipment_id": "stock_equipment",
    "stock_harvest_id": "stock_harvest",
    "stock_tools_id": "stock_tools",
}


def upgrade() -> None:
    """Upgrade schema."""

    # USERS
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("username", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("phone_number", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    # INVENTORY
    _create_inventory_table(
        "stocks", sa.Float(), "low_stock_threshold", 10,
        sa.Column("category", sa.String(), nullable=False),
        sa.Column("is_natural", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("location", sa.String(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("expiry_date", sa.Date(), nullable=True),
        sa.Column("supplier", sa.String(), nullable=True),
        sa.Column("price", sa.Float(), nullable=True),
        sa.Column("quality_status", sa.String(), nullable=True),
        sa.Column("batch_number", sa.String(), nullable=True),
    )

    _create_inventory_table(
        "stock_feed", sa.Float(), "min_quantity_alert", 100,
        sa.Column("animal_type", sa.String(), nullable=False),
        sa.Column("daily_consumption_rate", sa.Float(), nullable=False, server_default="0"),
        sa.Column("price", sa.Float(), nullable=False, server_default="0"),
        sa.Column("expiry_date", sa.Date(), nullable=True),
        sa.Column("supplier", sa.String(), nullable=True),
    )

    _create_inventory_table(
        "stock_seeds", sa.Float(), "min_quantity_alert", 50,
        sa.Column("crop_type", sa.String(), nullable=False),
        sa.Column("variety", sa.String(), nullable=True),
        sa.Column("germination", sa.Float(), nullable=True),
        sa.Column("price", sa.Float(), nullable=False, server_default="0"),
        sa.Column("expiry_date", sa.Date(), nullable=True),
        sa.Column("supplier", sa.String(), nullable=True),
    )

    _create_inventory_table(
        "stock_fertilizer", sa.Float(), "min_quantity_alert", 100,
        sa.Column("fertilizer_type", sa.String(), nullable=False),
        sa.Column("npk_ratio", sa.String(), nullable=True),
        sa.Column("application_rate", sa.Float(), nullable=True),
        sa.Column("price", sa.Float(), nullable=False, server_default="0"),
        sa.Column("expiry_date", sa.Date(), nullable=True),
        sa.Column("supplier", sa.String(), nullable=True),
    )

    _create_inventory_table(
        "stock_equipment", sa.Integer(), "min_quantity_alert", 0,
        sa.Column("equipment_type", sa.String(), nullable=False),
        sa.Column("status", sa.String(), nullable=False, server_default="operational"),
        sa.Column("serial_number", sa.String(), nullable=True),
        sa.Column("manufacturer", sa.String(), nullable=True),
        sa.Column("location", sa.String(), nullable=True),
    )

    _create_inventory_table(
        "stock_harvest", sa.Float(), "min_quantity_alert", 0,
        sa.Column("quality", sa.String(), nullable=False, server_default="standard"),
        sa.Column("harvest_date", sa.Date(), nullable=False),
        sa.Column("storage_location", sa.String(), nullable=True),
        sa.Column("batch_number", sa.String(), nullable=True),
        sa.Column("moisture", sa.Float(), nullable=True),
        sa.Column("price", sa.Float(), nullable=True),
    )

    _create_inventory_table(
        "stock_tools", sa.Integer(), "min_quantity_alert", 2,
        sa.Column("category", sa.String(), nullable=False),
        sa.Column("status", sa.String(), nullable=False, server_default="available"),
        sa.Column("condition", sa.String(), nullable=False, server_default="good"),
        sa.Column("brand", sa.String(), nullable=True),
        sa.Column("storage_location", sa.String(), nullable=True),
    )

    # LEDGER
    op.create_table(
        "stock_history",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("item_kind", sa.String(), nullable=False),
        *[
            sa.Column(column, sa.Integer(), sa.ForeignKey(f"{table}.id", ondelete="CASCADE"), nullable=True)
            for column, table in HISTORY_FKS.items()
        ],
        sa.Column("reason", sa.String(), nullable=False),
        sa.Column("quantity", sa.Float(), nullable=False),
        sa.Column("previous_quantity", sa.Float(), nullable=False),
        sa.Column("new_quantity", sa.Float(), nullable=False),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            "reason IN ('add', 'remove', 'expired', 'damaged')",
            name="ck_stock_history_reason_valid",
        ),
        sa.CheckConstraint("quantity > 0", name="ck_stock_history_quantity_positive"),
        sa.CheckConstraint("new_quantity >= 0", name="ck_stock_history_new_quantity_non_negative"),
    )
    op.create_index("ix_stock_history_id", "stock_history", ["id"])
    op.create_index("ix_stock_history_kind_created", "stock_history", ["item_kind", "created_at"])
    for column in HISTORY_FKS:
        op.create_index(f"ix_stock_history_{column}", "stock_history", [column])

    # NOTIFICATIONS
    op.create_table(
        "stock_notifications",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("type", sa.String(), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("priority", sa.String(), nullable=False, server_default="medium"),
        sa.Column("status", sa.String(), nullable=False, server_default="pending"),
        sa.Column("item_kind", sa.String(), nullable=True),
        sa.Column("item_id", sa.Integer(), nullable=True),
        sa.Column("read_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("priority IN ('low', 'medium', 'high')", name="ck_notification_priority_valid"),
        sa.CheckConstraint("status IN ('pending', 'read')", name="ck_notification_status_valid"),
    )
    op.create_index("ix_stock_notifications_id", "stock_notifications", ["id"])
    op.create_index("ix_stock_notifications_user_id", "stock_notifications", ["user_id"])
    op.create_index("ix_stock_notifications_user_status", "stock_notifications", ["user_id", "status"])


def downgrade() -> None:
    """Downgrade schema."""

    op.drop_table("stock_notifications")
    op.drop_table("stock_history")
    for table in reversed(INVENTORY_TABLES):
        op.drop_table(table)
    op.drop_table("users")
