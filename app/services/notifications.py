# app/services/notifications.py

import logging
from datetime import date, datetime, timedelta, timezone

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import NotFoundError, StorageError
from app.models.stock_notification import StockNotification
from app.services.inventory_kinds import KINDS

logger = logging.getLogger("app.notifications")

EXPIRY_WINDOW_DAYS = 30


def notify_low_stock(db: Session, kind, item) -> StockNotification:
    """Queue a low-stock alert for ``item``. The caller commits."""
    notification = StockNotification(
        user_id=item.user_id,
        type="low_stock",
        title=f"Low Stock Alert - {item.name}",
        message=(
            f"{kind.label} {item.name} is running low on stock "
            f"({item.quantity:g} {item.unit} remaining)"
        ),
        priority="high" if item.quantity == 0 else "medium",
        status="pending",
        item_kind=kind.slug,
        item_id=item.id,
    )
    db.add(notification)

    logger.info(f"Low stock alert queued for {kind.slug} #{item.id} (user {item.user_id})")
    return notification


def list_notifications(
    db: Session,
    user_id: int,
    status: str | None = None,
    limit: int = 20,
    offset: int = 0,
):
    query = db.query(StockNotification).filter(StockNotification.user_id == user_id)

    if status:
        query = query.filter(StockNotification.status == status)

    total = query.count()
    notifications = (
        query
        .order_by(StockNotification.created_at.desc(), StockNotification.id.desc())
        .limit(limit)
        .offset(offset)
        .all()
    )
    return total, notifications


def unread_count(db: Session, user_id: int) -> int:
    return (
        db.query(StockNotification)
        .filter(
            StockNotification.user_id == user_id,
            StockNotification.status == "pending",
        )
        .count()
    )


def get_notification(db: Session, user_id: int, notification_id: int) -> StockNotification:
    notification = (
        db.query(StockNotification)
        .filter(
            StockNotification.id == notification_id,
            StockNotification.user_id == user_id,
        )
        .first()
    )

    if not notification:
        raise NotFoundError("Notification not found")

    return notification


def mark_read(db: Session, user_id: int, notification_id: int) -> StockNotification:
    notification = get_notification(db, user_id, notification_id)

    if notification.status != "read":
        notification.status = "read"
        notification.read_at = datetime.now(timezone.utc)
        db.commit()
        db.refresh(notification)

    return notification


def mark_all_read(db: Session, user_id: int) -> int:
    updated = (
        db.query(StockNotification)
        .filter(
            StockNotification.user_id == user_id,
            StockNotification.status == "pending",
        )
        .update(
            {"status": "read", "read_at": datetime.now(timezone.utc)},
            synchronize_session=False,
        )
    )
    db.commit()
    return updated


def delete_notification(db: Session, user_id: int, notification_id: int) -> None:
    notification = get_notification(db, user_id, notification_id)

    try:
        db.delete(notification)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception(f"Unable to delete notification #{notification_id}")
        raise StorageError("Error deleting notification", error=exc.__class__.__name__) from exc


# ---------------- EXPIRY ----------------

def expiring_items(
    db: Session,
    user_id: int,
    days: int = EXPIRY_WINDOW_DAYS,
    today: date | None = None,
):
    """
    Items of every dated kind whose expiry date falls between today and
    ``days`` from now, soonest first, as ``(kind, item)`` pairs.

    Items that have already expired are not included.
    """
    today = today or date.today()
    horizon = today + timedelta(days=days)

    found = []
    for kind in KINDS.values():
        if not kind.expires:
            continue

        model = kind.model
        items = (
            db.query(model)
            .filter(
                model.user_id == user_id,
                model.expiry_date.isnot(None),
                model.expiry_date.between(today, horizon),
            )
            .all()
        )
        found.extend((kind, item) for item in items)

    found.sort(key=lambda pair: (pair[1].expiry_date, pair[0].slug, pair[1].id))
    return found


def _pending_expiry_alerts(db: Session, user_id: int):
    rows = (
        db.query(StockNotification.item_kind, StockNotification.item_id)
        .filter(
            StockNotification.user_id == user_id,
            StockNotification.type == "expiry",
            StockNotification.status == "pending",
        )
        .all()
    )
    return {(row.item_kind, row.item_id) for row in rows}


def notify_expiring(
    db: Session,
    user_id: int,
    days: int = EXPIRY_WINDOW_DAYS,
    today: date | None = None,
) -> list[StockNotification]:
    """
    Raise an expiry alert for each item expiring within ``days``.

    An item that still has an unread expiry alert is not alerted again.
    """
    today = today or date.today()
    already_alerted = _pending_expiry_alerts(db, user_id)

    created = []
    for kind, item in expiring_items(db, user_id, days=days, today=today):
        if (kind.slug, item.id) in already_alerted:
            continue

        days_left = (item.expiry_date - today).days
        when = "today" if days_left == 0 else f"in {days_left} day{'s' if days_left != 1 else ''}"

        notification = StockNotification(
            user_id=user_id,
            type="expiry",
            title=f"Expiry Alert - {item.name}",
            message=f"{kind.label} {item.name} expires {when} ({item.expiry_date.isoformat()})",
            priority="high",
            status="pending",
            item_kind=kind.slug,
            item_id=item.id,
        )
        db.add(notification)
        created.append(notification)

    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception(f"Unable to record expiry alerts for user {user_id}")
        raise StorageError("Error creating expiry alerts", error=exc.__class__.__name__) from exc

    logger.info(f"{len(created)} expiry alert(s) raised for user {user_id}")
    return created
