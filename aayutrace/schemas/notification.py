from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime


class NotificationResponse(BaseModel):
    id: int
    user_id: int
    product_id: Optional[int]
    type: str
    title: str
    message: str
    is_read: bool
    scheduled_for: Optional[datetime]
    created_at: datetime

    class Config:
        from_attributes = True


class NotificationFeedResponse(BaseModel):
    notifications: List[NotificationResponse]
    unread_count: int


class NotificationReadResponse(BaseModel):
    notification: NotificationResponse
    unread_count: int


class NotificationDeleteResponse(BaseModel):
    id: int
    unread_count: int


class NotificationReadAllResponse(BaseModel):
    updated: int
    unread_count: int


class NotificationSettingsResponse(BaseModel):
    user_id: int
    expiry_reminder_days: int
    warranty_reminder_days: int
    email_notifications: bool
    push_notifications: bool
    daily_digest: bool

    class Config:
        from_attributes = True


class NotificationSettingsUpdate(BaseModel):
    expiry_reminder_days: Optional[int] = Field(None, ge=1, le=365)
    warranty_reminder_days: Optional[int] = Field(None, ge=1, le=3650)
    email_notifications: Optional[bool] = None
    push_notifications: Optional[bool] = None
    daily_digest: Optional[bool] = None
