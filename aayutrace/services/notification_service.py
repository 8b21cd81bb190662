from typing import List, Dict, Any, Iterable, Optional, Tuple
from sqlalchemy.orm import Session
import logging

from aayutrace.middleware.transaction_handler import transactional
from aayutrace.models.notification import Notification, NotificationSettings
from aayutrace.core.config import settings
from aayutrace.schemas.notification import NotificationResponse
from aayutrace.utils.exceptions import StaleReferenceError

logger = logging.getLogger(__name__)

TEST_NOTIFICATION_TITLE = "Test Notification"
TEST_NOTIFICATION_MESSAGE = "This is a test notification to verify the system is working."


class NotificationFeed:
    """
    Vue locale des notifications récentes d'un utilisateur

    - `replace` applique un nouveau fetch (idempotent, dédoublonné par id,
      plus récent en premier) et recalcule le compteur non-lu
    - les mutations locales ajustent le compteur d'au plus 1, jamais sous 0
    - le compteur ne porte que sur la fenêtre chargée
    """

    def __init__(self, notifications: Iterable[Any] = ()):
        self._items: List[NotificationResponse] = []
        self._unread_count = 0
        self.replace(notifications)

    @property
    def items(self) -> List[NotificationResponse]:
        return list(self._items)

    @property
    def unread_count(self) -> int:
        return self._unread_count

    def replace(self, notifications: Iterable[Any]) -> None:
        by_id = {}
        for notification in notifications:
            snapshot = NotificationResponse.model_validate(notification)
            by_id[snapshot.id] = snapshot

        self._items = sorted(
            by_id.values(), key=lambda n: (n.created_at, n.id), reverse=True
        )
        self._unread_count = sum(1 for n in self._items if not n.is_read)

    def _find(self, notification_id: int) -> Optional[NotificationResponse]:
        for notification in self._items:
            if notification.id == notification_id:
                return notification
        return None

    def mark_read(self, notification_id: int) -> bool:
        notification = self._find(notification_id)
        if notification is None or notification.is_read:
            return False

        notification.is_read = True
        self._unread_count = max(0, self._unread_count - 1)
        return True

    def mark_all_read(self) -> int:
        changed = 0
        for notification in self._items:
            if not notification.is_read:
                notification.is_read = True
                changed += 1
        self._unread_count = 0
        return changed

    def remove(self, notification_id: int) -> bool:
        notification = self._find(notification_id)
        if notification is None:
            return False

        self._items.remove(notification)
        if not notification.is_read:
            self._unread_count = max(0, self._unread_count - 1)
        return True

    def signature(self) -> tuple:
        """Empreinte (id, is_read) pour détecter un changement entre deux fetchs"""
        return tuple((n.id, n.is_read) for n in self._items)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "notifications": [n.model_dump(mode="json") for n in self._items],
            "unread_count": self._unread_count,
        }


class NotificationService:
    """
    Notifications in-app et préférences de rappel

    Toutes les requêtes sont filtrées par user_id : un utilisateur ne voit
    et ne modifie que ses propres notifications.
    """

    def __init__(self, db: Session):
        self.db = db

    def fetch_recent(self, user_id: int, limit: Optional[int] = None) -> NotificationFeed:
        limit = limit or settings.NOTIFICATION_FEED_LIMIT

        notifications = (
            self.db.query(Notification)
            .filter(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc(), Notification.id.desc())
            .limit(limit)
            .all()
        )
        return NotificationFeed(notifications)

    def get_notification(self, user_id: int, notification_id: int) -> Notification:
        notification = (
            self.db.query(Notification)
            .filter(
                Notification.id == notification_id,
                Notification.user_id == user_id,
            )
            .first()
        )
        if not notification:
            raise StaleReferenceError("notification", notification_id)
        return notification

    @transactional
    def mark_as_read(self, user_id: int, notification_id: int) -> Notification:
        """Idempotent : marquer deux fois ne change rien"""
        notification = self.get_notification(user_id, notification_id)
        if not notification.is_read:
            notification.is_read = True
        return notification

    @transactional
    def mark_all_as_read(self, user_id: int) -> int:
        updated = (
            self.db.query(Notification)
            .filter(Notification.user_id == user_id, Notification.is_read == False)
            .update({"is_read": True}, synchronize_session=False)
        )
        logger.info(f"Marked {updated} notification(s) as read for user {user_id}")
        return updated

    @transactional
    def delete_notification(self, user_id: int, notification_id: int) -> None:
        notification = self.get_notification(user_id, notification_id)
        self.db.delete(notification)

    def read_in_feed(
        self, user_id: int, notification_id: int
    ) -> Tuple[Notification, NotificationFeed]:
        """
        Marque une notification comme lue et ajuste le flux récent

        Le compteur ne bouge que si la notification était non lue et
        présente dans la fenêtre chargée.
        """
        feed = self.fetch_recent(user_id)
        notification = self.mark_as_read(user_id, notification_id)
        feed.mark_read(notification_id)
        return notification, feed

    def read_all_in_feed(self, user_id: int) -> Tuple[int, NotificationFeed]:
        feed = self.fetch_recent(user_id)
        updated = self.mark_all_as_read(user_id)
        feed.mark_all_read()
        return updated, feed

    def delete_from_feed(self, user_id: int, notification_id: int) -> NotificationFeed:
        feed = self.fetch_recent(user_id)
        self.delete_notification(user_id, notification_id)
        feed.remove(notification_id)
        return feed

    @transactional
    def create_notification(
        self,
        user_id: int,
        title: str,
        message: str,
        notification_type: str = "info",
        product_id: Optional[int] = None,
    ) -> Notification:
        notification = Notification(
            user_id=user_id,
            product_id=product_id,
            type=notification_type,
            title=title,
            message=message,
            is_read=False,
        )
        self.db.add(notification)
        self.db.flush()
        self.db.refresh(notification)
        return notification

    def generate_test(self, user_id: int) -> Notification:
        notification = self.create_notification(
            user_id=user_id,
            title=TEST_NOTIFICATION_TITLE,
            message=TEST_NOTIFICATION_MESSAGE,
            notification_type="info",
        )
        logger.info(f"Test notification {notification.id} created for user {user_id}")
        return notification

    @transactional
    def get_or_create_settings(self, user_id: int) -> NotificationSettings:
        user_settings = (
            self.db.query(NotificationSettings)
            .filter(NotificationSettings.user_id == user_id)
            .first()
        )
        if user_settings:
            return user_settings

        user_settings = NotificationSettings(
            user_id=user_id,
            expiry_reminder_days=settings.DEFAULT_EXPIRY_REMINDER_DAYS,
            warranty_reminder_days=settings.DEFAULT_WARRANTY_REMINDER_DAYS,
        )
        self.db.add(user_settings)
        self.db.flush()
        return user_settings

    def update_settings(self, user_id: int, data: Dict[str, Any]) -> NotificationSettings:
        user_settings = self.get_or_create_settings(user_id)

        for key, value in data.items():
            if value is not None:
                setattr(user_settings, key, value)

        self.db.commit()
        self.db.refresh(user_settings)
        logger.info(f"Notification settings updated for user {user_id}")
        return user_settings
