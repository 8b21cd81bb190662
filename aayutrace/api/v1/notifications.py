from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional

from aayutrace.core.database import get_db
from aayutrace.core.dependencies import get_current_user
from aayutrace.models.user import User
from aayutrace.schemas.notification import (
    NotificationResponse,
    NotificationFeedResponse,
    NotificationReadResponse,
    NotificationReadAllResponse,
    NotificationDeleteResponse,
    NotificationSettingsResponse,
    NotificationSettingsUpdate,
)
from aayutrace.services.notification_service import NotificationService

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("", response_model=NotificationFeedResponse)
def get_feed(
    limit: Optional[int] = Query(None, ge=1, le=200),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Notifications récentes, plus récentes en premier

    `unread_count` porte sur la fenêtre renvoyée.
    """
    return NotificationService(db).fetch_recent(current_user.id, limit).to_dict()


@router.get("/settings", response_model=NotificationSettingsResponse)
def get_notification_settings(
    current_user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    return NotificationService(db).get_or_create_settings(current_user.id)


@router.put("/settings", response_model=NotificationSettingsResponse)
def update_notification_settings(
    request: NotificationSettingsUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Les nouveaux délais s'appliquent au prochain enregistrement de chaque produit"""
    return NotificationService(db).update_settings(
        current_user.id, request.model_dump(exclude_unset=True)
    )


@router.post("/test", response_model=NotificationResponse, status_code=status.HTTP_201_CREATED)
def generate_test_notification(
    current_user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    return NotificationService(db).generate_test(current_user.id)


@router.put("/read-all", response_model=NotificationReadAllResponse)
def mark_all_notifications_read(
    current_user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    updated, feed = NotificationService(db).read_all_in_feed(current_user.id)
    return {"updated": updated, "unread_count": feed.unread_count}


@router.put("/{notification_id}/read", response_model=NotificationReadResponse)
def mark_notification_read(
    notification_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Renvoie la notification et le compteur non-lu ajusté"""
    notification, feed = NotificationService(db).read_in_feed(
        current_user.id, notification_id
    )
    return {"notification": notification, "unread_count": feed.unread_count}


@router.delete("/{notification_id}", response_model=NotificationDeleteResponse)
def delete_notification(
    notification_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    feed = NotificationService(db).delete_from_feed(current_user.id, notification_id)
    return {"id": notification_id, "unread_count": feed.unread_count}
