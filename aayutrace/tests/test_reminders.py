"""Tests de la génération et de la diffusion des rappels"""

from datetime import date, timedelta

from aayutrace.models.notification import Notification
from aayutrace.models.reminder import Reminder
from aayutrace.services.reminder_service import ReminderService, plan_reminders


def _reminders(db, product_id):
    return (
        db.query(Reminder)
        .filter(Reminder.product_id == product_id)
        .order_by(Reminder.reminder_type)
        .all()
    )


def test_plan_reminders_no_dates():
    assert plan_reminders(None, None, 7, 30) == []


def test_plan_reminders_both_dates():
    expiry = date(2026, 5, 10)
    warranty = date(2027, 5, 10)
    planned = plan_reminders(expiry, warranty, 7, 30)

    assert [p.reminder_type for p in planned] == ["expiry", "warranty"]
    assert planned[0].reminder_date == date(2026, 5, 3)
    assert planned[1].reminder_date == date(2027, 4, 10)
    assert planned[1].days_before == 30


def test_reminder_created_in_the_past(db, make_product):
    """Produit qui périme dans 5 jours, délai 7 jours : rappel à J-2"""
    today = date.today()
    product = make_product(expiry_date=today + timedelta(days=5))

    ReminderService(db).schedule_for_product(product, 7, 30)

    reminders = _reminders(db, product.id)
    assert len(reminders) == 1
    assert reminders[0].reminder_type == "expiry"
    assert reminders[0].reminder_date == today - timedelta(days=2)
    assert reminders[0].is_sent is False


def test_reschedule_is_idempotent(db, make_product):
    product = make_product(
        expiry_date=date.today() + timedelta(days=20),
        warranty_date=date.today() + timedelta(days=400),
    )
    service = ReminderService(db)

    service.schedule_for_product(product, 7, 30)
    service.schedule_for_product(product, 7, 30)
    service.schedule_for_product(product, 7, 30)

    assert db.query(Reminder).filter(Reminder.product_id == product.id).count() == 2


def test_reschedule_updates_date_and_resets_sent(db, make_product):
    product = make_product(expiry_date=date.today() + timedelta(days=20))
    service = ReminderService(db)
    service.schedule_for_product(product, 7, 30)

    reminder = _reminders(db, product.id)[0]
    reminder.is_sent = True
    db.commit()

    product.expiry_date = date.today() + timedelta(days=40)
    db.commit()
    service.schedule_for_product(product, 7, 30)

    reminder = _reminders(db, product.id)[0]
    assert reminder.reminder_date == date.today() + timedelta(days=33)
    assert reminder.is_sent is False


def test_new_lead_time_applies_on_next_save(db, make_product):
    product = make_product(expiry_date=date.today() + timedelta(days=20))
    service = ReminderService(db)
    service.schedule_for_product(product, 7, 30)
    service.schedule_for_product(product, 3, 30)

    reminder = _reminders(db, product.id)[0]
    assert reminder.days_before == 3
    assert reminder.reminder_date == date.today() + timedelta(days=17)


def test_cleared_date_removes_reminder(db, make_product):
    product = make_product(
        expiry_date=date.today() + timedelta(days=20),
        warranty_date=date.today() + timedelta(days=200),
    )
    service = ReminderService(db)
    service.schedule_for_product(product, 7, 30)

    product.warranty_date = None
    db.commit()
    service.schedule_for_product(product, 7, 30)

    reminders = _reminders(db, product.id)
    assert [r.reminder_type for r in reminders] == ["expiry"]


def test_consumed_product_gets_no_new_reminder(db, make_product):
    product = make_product(
        expiry_date=date.today() + timedelta(days=20), is_consumed=True
    )

    ReminderService(db).schedule_for_product(product, 7, 30)

    assert _reminders(db, product.id) == []


def test_deleting_product_cascades_reminders(db, make_product):
    product = make_product(expiry_date=date.today() + timedelta(days=20))
    ReminderService(db).schedule_for_product(product, 7, 30)
    product_id = product.id

    db.delete(product)
    db.commit()

    assert db.query(Reminder).filter(Reminder.product_id == product_id).count() == 0


def test_dispatch_due_creates_notifications(db, make_product, test_user):
    today = date.today()
    due = make_product(name="Bread", expiry_date=today + timedelta(days=2))
    later = make_product(name="Rice", expiry_date=today + timedelta(days=60))
    service = ReminderService(db)
    service.schedule_for_product(due, 7, 30)
    service.schedule_for_product(later, 7, 30)

    stats = service.dispatch_due(today)

    assert stats["notifications_created"] == 1
    assert stats["emails_sent"] == 0

    notifications = db.query(Notification).filter(Notification.user_id == test_user.id).all()
    assert len(notifications) == 1
    assert notifications[0].type == "expiry"
    assert notifications[0].product_id == due.id
    assert "Bread" in notifications[0].message
    assert notifications[0].title == "Product expiring soon"

    assert _reminders(db, due.id)[0].is_sent is True
    assert _reminders(db, later.id)[0].is_sent is False


def test_dispatch_due_is_not_repeated(db, make_product):
    product = make_product(expiry_date=date.today() + timedelta(days=1))
    service = ReminderService(db)
    service.schedule_for_product(product, 7, 30)

    service.dispatch_due(date.today())
    stats = service.dispatch_due(date.today())

    assert stats["notifications_created"] == 0
    assert db.query(Notification).count() == 1


def test_dispatch_skips_consumed_products(db, make_product):
    product = make_product(expiry_date=date.today() + timedelta(days=1))
    service = ReminderService(db)
    service.schedule_for_product(product, 7, 30)

    product.is_consumed = True
    db.commit()

    stats = service.dispatch_due(date.today())

    assert stats["notifications_created"] == 0
    assert db.query(Notification).count() == 0


def test_dispatch_expired_title(db, make_product):
    product = make_product(expiry_date=date.today() - timedelta(days=3))
    service = ReminderService(db)
    service.schedule_for_product(product, 7, 30)

    service.dispatch_due(date.today())

    notification = db.query(Notification).first()
    assert notification.title == "Product expired"
    assert "3 days ago" in notification.message
