# app/models/stock_notification.py

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.sql import func

from app.database import Base


class StockNotification(Base):
    __tablename__ = "stock_notifications"

    id = Column(Integer, primary_key=True, index=True)

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    type = Column(String, nullable=False, default="low_stock")
    title = Column(String, nullable=False)
    message = Column(Text, nullable=False)
    priority = Column(String, nullable=False, default="medium")
    status = Column(String, nullable=False, default="pending")

    # Not a foreign key: alerts outlive the item they were raised for
    item_kind = Column(String, nullable=True)
    item_id = Column(Integer, nullable=True)

    read_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        CheckConstraint("priority IN ('low', 'medium', 'high')", name="ck_notification_priority_valid"),
        CheckConstraint("status IN ('pending', 'read')", name="ck_notification_status_valid"),
        Index("ix_stock_notifications_user_status", "user_id", "status"),
    )
