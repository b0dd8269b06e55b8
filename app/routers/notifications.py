# app/routers/notifications.py

from typing import Literal

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.core.auth import get_current_user
from app.schemas.notification import (
    ExpiryCheckResponse,
    NotificationListResponse,
    NotificationResponse,
    UnreadCountResponse,
)
from app.services import notifications

router = APIRouter(
    prefix="/notifications",
    tags=["Notifications"],
)


@router.get("", response_model=NotificationListResponse)
def list_notifications(
    status: Literal["pending", "read"] | None = Query(None),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    total, items = notifications.list_notifications(
        db,
        current_user.id,
        status=status,
        limit=limit,
        offset=offset,
    )

    return {
        "total": total,
        "limit": limit,
        "offset": offset,
        "notifications": items,
    }


@router.get("/unread-count", response_model=UnreadCountResponse)
def unread_count(
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    return {"count": notifications.unread_count(db, current_user.id)}


@router.patch("/read-all")
def mark_all_read(
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    updated = notifications.mark_all_read(db, current_user.id)
    return {"message": "All notifications marked as read", "updated": updated}


@router.patch("/{notification_id}/read", response_model=NotificationResponse)
def mark_read(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    return notifications.mark_read(db, current_user.id, notification_id)


@router.post("/check-expiry", response_model=ExpiryCheckResponse)
def check_expiry(
    days: int = Query(notifications.EXPIRY_WINDOW_DAYS, ge=1, le=365),
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    created = notifications.notify_expiring(db, current_user.id, days=days)
    return {"created": len(created), "notifications": created}


@router.get("/{notification_id}", response_model=NotificationResponse)
def get_notification(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    return notifications.get_notification(db, current_user.id, notification_id)


@router.delete("/{notification_id}")
def delete_notification(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    notifications.delete_notification(db, current_user.id, notification_id)
    return {"message": "Notification deleted successfully"}
