from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from sqlalchemy.orm import Session
from typing import List, Optional, Dict
import logging

from aayutrace.middleware.transaction_handler import transactional
from aayutrace.models.reminder import Reminder, REMINDER_TYPES
from aayutrace.models.product import Product
from aayutrace.models.notification import Notification
from aayutrace.services.email_service import EmailService
from aayutrace.services.notification_service import NotificationService
from aayutrace.utils.date_helpers import classify_date, describe_days, EXPIRED

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlannedReminder:
    reminder_type: str
    reminder_date: date
    days_before: int


def plan_reminders(
    expiry_date: Optional[date],
    warranty_date: Optional[date],
    expiry_lead_days: int,
    warranty_lead_days: int,
) -> List[PlannedReminder]:
    """
    Calcule les rappels attendus pour un produit

    Un rappel par date suivie présente : reminder_date = date - lead_days.
    Aucune date -> aucun rappel.
    """
    planned = []

    if expiry_date is not None:
        planned.append(
            PlannedReminder(
                reminder_type="expiry",
                reminder_date=expiry_date - timedelta(days=expiry_lead_days),
                days_before=expiry_lead_days,
            )
        )

    if warranty_date is not None:
        planned.append(
            PlannedReminder(
                reminder_type="warranty",
                reminder_date=warranty_date - timedelta(days=warranty_lead_days),
                days_before=warranty_lead_days,
            )
        )

    return planned


class ReminderService:
    """
    Gestion des rappels programmés

    - Upsert par (product_id, reminder_type) : réenregistrer un produit
      ne crée jamais de doublon
    - Promotion des rappels échus en notifications (tâche planifiée)
    """

    def __init__(self, db: Session):
        self.db = db

    @transactional
    def schedule_for_product(
        self, product: Product, expiry_lead_days: int, warranty_lead_days: int
    ) -> List[Reminder]:
        """
        Synchronise les rappels d'un produit avec ses dates actuelles

        - date présente, pas de rappel  -> création
        - date présente, rappel existant -> mise à jour (is_sent remis à False
          si la date de rappel change)
        - date retirée                  -> suppression du rappel
        Un produit consommé ne reçoit aucun nouveau rappel.
        """
        existing = {
            reminder.reminder_type: reminder
            for reminder in self.db.query(Reminder)
            .filter(Reminder.product_id == product.id)
            .all()
        }

        if product.is_consumed:
            return list(existing.values())

        planned = {
            plan.reminder_type: plan
            for plan in plan_reminders(
                product.expiry_date,
                product.warranty_date,
                expiry_lead_days,
                warranty_lead_days,
            )
        }

        result = []
        for reminder_type in REMINDER_TYPES:
            plan = planned.get(reminder_type)
            reminder = existing.get(reminder_type)

            if plan is None:
                if reminder is not None:
                    self.db.delete(reminder)
                    logger.debug(
                        f"Removed {reminder_type} reminder for product {product.id}"
                    )
                continue

            if reminder is None:
                reminder = Reminder(
                    user_id=product.user_id,
                    product_id=product.id,
                    reminder_type=reminder_type,
                    reminder_date=plan.reminder_date,
                    days_before=plan.days_before,
                    is_sent=False,
                )
                self.db.add(reminder)
            else:
                if reminder.reminder_date != plan.reminder_date:
                    reminder.reminder_date = plan.reminder_date
                    reminder.is_sent = False
                reminder.days_before = plan.days_before

            result.append(reminder)

        self.db.flush()
        logger.info(f"Scheduled {len(result)} reminder(s) for product {product.id}")
        return result

    def get_product_reminders(self, product_id: int) -> List[Reminder]:
        return (
            self.db.query(Reminder)
            .filter(Reminder.product_id == product_id)
            .order_by(Reminder.reminder_date)
            .all()
        )

    def get_due_reminders(self, today: date) -> List[Reminder]:
        return (
            self.db.query(Reminder)
            .filter(Reminder.is_sent == False, Reminder.reminder_date <= today)
            .order_by(Reminder.reminder_date)
            .all()
        )

    def dispatch_due(self, today: Optional[date] = None) -> Dict[str, int]:
        """
        Transforme les rappels échus en notifications

        Les emails sont envoyés après le commit, en best-effort,
        uniquement aux utilisateurs qui les ont activés.
        """
        today = today or date.today()

        created = self._promote_due_reminders(today)

        emailed = 0
        if created:
            notification_service = NotificationService(self.db)
            email_service = EmailService()

            for notification in created:
                user_settings = notification_service.get_or_create_settings(
                    notification.user_id
                )
                if not user_settings.email_notifications:
                    continue
                if email_service.send_reminder_email(
                    notification.user.email, notification.title, notification.message
                ):
                    emailed += 1

        stats = {"notifications_created": len(created), "emails_sent": emailed}
        logger.info(f"Reminder dispatch completed. Stats: {stats}")
        return stats

    @transactional
    def _promote_due_reminders(self, today: date) -> List[Notification]:
        created = []

        for reminder in self.get_due_reminders(today):
            product = reminder.product

            # Produit consommé : le rappel n'a plus d'objet
            if product.is_consumed:
                reminder.is_sent = True
                continue

            tracked_date = (
                product.expiry_date
                if reminder.reminder_type == "expiry"
                else product.warranty_date
            )
            if tracked_date is None:
                self.db.delete(reminder)
                continue

            notification = Notification(
                user_id=reminder.user_id,
                product_id=product.id,
                type=reminder.reminder_type,
                title=self._build_title(reminder.reminder_type, tracked_date, today),
                message=self._build_message(
                    product, reminder.reminder_type, tracked_date, today
                ),
                is_read=False,
                scheduled_for=datetime.combine(reminder.reminder_date, time.min),
            )
            self.db.add(notification)
            reminder.is_sent = True
            created.append(notification)

        self.db.flush()
        return created

    def _build_title(self, reminder_type: str, tracked_date: date, today: date) -> str:
        status = classify_date(tracked_date, today)
        if reminder_type == "expiry":
            return "Product expired" if status.status == EXPIRED else "Product expiring soon"
        return "Warranty expired" if status.status == EXPIRED else "Warranty ending soon"

    def _build_message(
        self, product: Product, reminder_type: str, tracked_date: date, today: date
    ) -> str:
        status = classify_date(tracked_date, today)
        verb = "expires" if reminder_type == "expiry" else "warranty ends"
        if status.status == EXPIRED:
            verb = "expired" if reminder_type == "expiry" else "warranty ended"

        name = f"{product.name} ({product.brand})" if product.brand else product.name
        return (
            f"{name} {verb} on {tracked_date.strftime('%b %d, %Y')} "
            f"({describe_days(status.days_remaining)})"
        )
