"""Tests des tâches planifiées"""

from datetime import date, timedelta

from aayutrace.models.notification import Notification, NotificationSettings
from aayutrace.services.reminder_service import ReminderService
from aayutrace.tasks import dispatch_due_reminders, send_daily_digests, get_scheduler_status


def test_dispatch_task_promotes_due_reminders(db, test_product, test_user):
    ReminderService(db).schedule_for_product(test_product, 7, 30)

    stats = dispatch_due_reminders(date.today())

    assert stats["notifications_created"] == 1
    assert stats["emails_sent"] == 0
    db.expire_all()
    assert db.query(Notification).filter(Notification.user_id == test_user.id).count() == 1

    assert dispatch_due_reminders(date.today())["notifications_created"] == 0


def test_daily_digest_only_for_opted_in_users(db, test_user, test_user2, make_product):
    make_product(name="Cheese", expiry_date=date.today() + timedelta(days=2))
    db.add(NotificationSettings(user_id=test_user.id, daily_digest=True))
    db.add(NotificationSettings(user_id=test_user2.id, daily_digest=False))
    db.commit()

    stats = send_daily_digests(date.today())

    # SMTP non configuré en test : l'envoi échoue sans lever
    assert stats == {"sent": 0, "failed": 1}


def test_scheduler_disabled_in_tests(client):
    assert get_scheduler_status() == {"running": False, "jobs": []}
    assert client.get("/health").json()["scheduler"]["running"] is False
