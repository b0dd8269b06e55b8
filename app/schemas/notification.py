# schemas/notification.py

from pydantic import BaseModel
from datetime import datetime
from typing import List


class NotificationResponse(BaseModel):
    id: int
    type: str
    title: str
    message: str
    priority: str
    status: str
    item_kind: str | None
    item_id: int | None
    read_at: datetime | None
    created_at: datetime

    class Config:
        from_attributes = True


class NotificationListResponse(BaseModel):
    total: int
    limit: int
    offset: int
    notifications: List[NotificationResponse]


class UnreadCountResponse(BaseModel):
    count: int


class ExpiryCheckResponse(BaseModel):
    created: int
    notifications: List[NotificationResponse]
