from datetime import date
import logging

from aayutrace.core.config import settings
from aayutrace.core.database import SessionLocal
from aayutrace.models.notification import NotificationSettings
from aayutrace.models.user import User
from aayutrace.services.analytics_service import AnalyticsService
from aayutrace.services.email_service import EmailService
from aayutrace.services.notification_service import NotificationService
from aayutrace.services.reminder_service import ReminderService

logger = logging.getLogger(__name__)


def dispatch_due_reminders(today: date = None):
    logger.info("Starting reminder dispatch task...")

    db = SessionLocal()
    try:
        stats = ReminderService(db).dispatch_due(today or date.today())

        logger.info(
            f"Reminder dispatch completed. "
            f"Notifications={stats['notifications_created']}, "
            f"Emails={stats['emails_sent']}"
        )
        return stats

    except Exception as e:
        logger.error(f"Error during reminder dispatch: {e}", exc_info=True)
        raise
    finally:
        db.close()


def send_daily_digests(today: date = None):
    """
    Résumé quotidien : notifications non lues + dates des prochains jours

    Envoyé uniquement aux utilisateurs ayant activé daily_digest.
    """
    logger.info("Starting daily digest email task...")
    today = today or date.today()

    db = SessionLocal()
    try:
        users = (
            db.query(User)
            .join(NotificationSettings, NotificationSettings.user_id == User.id)
            .filter(NotificationSettings.daily_digest == True)
            .all()
        )

        notification_service = NotificationService(db)
        analytics_service = AnalyticsService(db)
        email_service = EmailService()

        sent_count = 0
        failed_count = 0

        for user in users:
            feed = notification_service.fetch_recent(user.id)
            unread_titles = [n.title for n in feed.items if not n.is_read]

            upcoming_lines = [
                f"{entry['product_name']}: {entry['type']} {entry['label'].lower()}"
                for entry in analytics_service.get_timeline(user, today=today)
                if 0 <= entry["days_remaining"] <= settings.WARNING_THRESHOLD_DAYS
            ]

            if email_service.send_daily_digest_email(
                user.email, unread_titles, upcoming_lines
            ):
                sent_count += 1
            else:
                failed_count += 1

        logger.info(
            f"Daily digests completed: {sent_count} sent, {failed_count} failed"
        )
        return {"sent": sent_count, "failed": failed_count}

    except Exception as e:
        logger.error(f"Error during daily digest task: {e}", exc_info=True)
        raise
    finally:
        db.close()
