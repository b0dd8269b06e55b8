# app/models/stock_history.py

from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, DateTime, Float, ForeignKey, Index, Integer, String, Text

from app.database import Base


def _utcnow():
    return datetime.now(timezone.utc)


class StockHistory(Base):
    """Append-only ledger of quantity adjustments.

    ``quantity`` is the magnitude the caller asked for. When a removal is
    clamped at zero, ``previous_quantity - new_quantity`` is smaller than
    ``quantity``; both are kept so the difference stays visible.
    """

    __tablename__ = "stock_history"

    id = Column(Integer, primary_key=True, index=True)
    item_kind = Column(String, nullable=False)

    # Exactly one of these is set, matching item_kind
    stock_id = Column(Integer, ForeignKey("stocks.id", ondelete="CASCADE"), nullable=True, index=True)
    stock_feed_id = Column(Integer, ForeignKey("stock_feed.id", ondelete="CASCADE"), nullable=True, index=True)
    stock_seeds_id = Column(Integer, ForeignKey("stock_seeds.id", ondelete="CASCADE"), nullable=True, index=True)
    stock_fertilizer_id = Column(Integer, ForeignKey("stock_fertilizer.id", ondelete="CASCADE"), nullable=True, index=True)
    stock_equipment_id = Column(Integer, ForeignKey("stock_equipment.id", ondelete="CASCADE"), nullable=True, index=True)
    stock_harvest_id = Column(Integer, ForeignKey("stock_harvest.id", ondelete="CASCADE"), nullable=True, index=True)
    stock_tools_id = Column(Integer, ForeignKey("stock_tools.id", ondelete="CASCADE"), nullable=True, index=True)

    reason = Column(String, nullable=False)
    quantity = Column(Float, nullable=False)
    previous_quantity = Column(Float, nullable=False)
    new_quantity = Column(Float, nullable=False)
    note = Column(Text, nullable=True)

    # Set in Python for sub-second ordering of rapid adjustments
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint(
            "reason IN ('add', 'remove', 'expired', 'damaged')",
            name="ck_stock_history_reason_valid",
        ),
        CheckConstraint("quantity > 0", name="ck_stock_history_quantity_positive"),
        CheckConstraint("new_quantity >= 0", name="ck_stock_history_new_quantity_non_negative"),
        Index("ix_stock_history_kind_created", "item_kind", "created_at"),
    )
