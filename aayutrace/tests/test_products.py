"""Tests des produits : CRUD, filtres, actions groupées, rappels"""

from datetime import date, timedelta
from sqlalchemy.exc import OperationalError

from aayutrace.models.product import Product
from aayutrace.models.reminder import Reminder
from aayutrace.models.notification import Notification
from aayutrace.services.reminder_service import ReminderService


def _iso(days):
    return (date.today() + timedelta(days=days)).isoformat()


def test_create_product_schedules_reminder(client, db, auth_headers):
    response = client.post(
        "/api/v1/products",
        headers=auth_headers,
        json={"name": "Yogurt", "expiry_date": _iso(5), "price": "3.20"},
    )

    assert response.status_code == 201
    data = response.json()
    assert data["warnings"] == []
    assert data["product"]["expiry_status"]["status"] == "warning"
    assert data["product"]["expiry_status"]["days_remaining"] == 5
    assert data["product"]["warranty_status"] is None
    assert data["product"]["price"] == 3.2

    reminders = db.query(Reminder).filter(Reminder.product_id == data["product"]["id"]).all()
    assert len(reminders) == 1
    assert reminders[0].reminder_date == date.today() - timedelta(days=2)


def test_create_product_uses_user_lead_times(client, db, auth_headers):
    client.put(
        "/api/v1/notifications/settings",
        headers=auth_headers,
        json={"warranty_reminder_days": 60},
    )

    response = client.post(
        "/api/v1/products",
        headers=auth_headers,
        json={"name": "Phone", "warranty_date": _iso(365)},
    )

    product_id = response.json()["product"]["id"]
    reminder = db.query(Reminder).filter(Reminder.product_id == product_id).one()
    assert reminder.reminder_type == "warranty"
    assert reminder.days_before == 60


def test_create_product_validation(client, auth_headers):
    assert client.post("/api/v1/products", headers=auth_headers, json={"name": "  "}).status_code == 422
    assert client.post("/api/v1/products", headers=auth_headers, json={"brand": "X"}).status_code == 422
    assert (
        client.post(
            "/api/v1/products", headers=auth_headers, json={"name": "Milk", "price": -1}
        ).status_code
        == 422
    )
    assert (
        client.post(
            "/api/v1/products",
            headers=auth_headers,
            json={"name": "Milk", "expiry_date": "not-a-date"},
        ).status_code
        == 422
    )


def test_expiry_before_purchase_rejected(client, auth_headers):
    response = client.post(
        "/api/v1/products",
        headers=auth_headers,
        json={"name": "Milk", "purchase_date": _iso(0), "expiry_date": _iso(-3)},
    )
    assert response.status_code == 422


def test_create_with_unknown_category(client, auth_headers):
    response = client.post(
        "/api/v1/products",
        headers=auth_headers,
        json={"name": "Milk", "category_id": 9999},
    )
    assert response.status_code == 404
    assert response.json()["entity"] == "category"


def test_reminder_failure_is_a_warning(client, db, auth_headers, monkeypatch):
    def broken(self, *args, **kwargs):
        raise OperationalError("INSERT INTO reminders", {}, Exception("database is locked"))

    monkeypatch.setattr(ReminderService, "schedule_for_product", broken)

    response = client.post(
        "/api/v1/products",
        headers=auth_headers,
        json={"name": "Cheese", "expiry_date": _iso(10)},
    )

    assert response.status_code == 201
    data = response.json()
    assert len(data["warnings"]) == 1
    assert db.query(Product).filter(Product.id == data["product"]["id"]).count() == 1


def test_reminder_date_out_of_range_is_a_warning(client, db, auth_headers):
    response = client.post(
        "/api/v1/products",
        headers=auth_headers,
        json={"name": "Antique", "expiry_date": "0001-01-03"},
    )

    assert response.status_code == 201
    data = response.json()
    assert data["product"]["name"] == "Antique"
    assert len(data["warnings"]) == 1
    assert db.query(Reminder).filter(Reminder.product_id == data["product"]["id"]).count() == 0


def test_planner_error_does_not_fail_update(client, auth_headers, test_product, monkeypatch):
    def broken(*args, **kwargs):
        raise RuntimeError("planner unavailable")

    monkeypatch.setattr("aayutrace.services.reminder_service.plan_reminders", broken)

    response = client.put(
        f"/api/v1/products/{test_product.id}",
        headers=auth_headers,
        json={"name": "Greek yogurt"},
    )

    assert response.status_code == 200
    assert response.json()["product"]["name"] == "Greek yogurt"
    assert len(response.json()["warnings"]) == 1


def test_update_product_reschedules_without_duplicates(client, db, auth_headers, test_product):
    for days in (5, 5, 12):
        response = client.put(
            f"/api/v1/products/{test_product.id}",
            headers=auth_headers,
            json={"expiry_date": _iso(days)},
        )
        assert response.status_code == 200

    reminders = db.query(Reminder).filter(Reminder.product_id == test_product.id).all()
    assert len(reminders) == 1
    assert reminders[0].reminder_date == date.today() + timedelta(days=5)


def test_update_deleted_product_is_stale(client, auth_headers, test_product):
    product_id = test_product.id
    client.delete(f"/api/v1/products/{product_id}", headers=auth_headers)

    response = client.put(
        f"/api/v1/products/{product_id}",
        headers=auth_headers,
        json={"name": "Renamed"},
    )

    assert response.status_code == 404
    assert response.json()["error"] == "stale_reference"


def test_delete_product_keeps_notifications(client, db, auth_headers, test_product, test_user):
    ReminderService(db).schedule_for_product(test_product, 7, 30)
    db.add(
        Notification(
            user_id=test_user.id,
            product_id=test_product.id,
            type="expiry",
            title="Product expiring soon",
            message="Yogurt expires soon",
        )
    )
    db.commit()
    product_id = test_product.id

    response = client.delete(f"/api/v1/products/{product_id}", headers=auth_headers)

    assert response.status_code == 204
    db.expire_all()
    assert db.query(Reminder).filter(Reminder.product_id == product_id).count() == 0
    notification = db.query(Notification).one()
    assert notification.product_id is None


def test_products_are_private(client, auth_headers_user2, test_product):
    response = client.get(f"/api/v1/products/{test_product.id}", headers=auth_headers_user2)
    assert response.status_code == 404

    response = client.get("/api/v1/products", headers=auth_headers_user2)
    assert response.json() == []


def test_list_filters(client, auth_headers, make_product):
    make_product(name="Fresh milk", expiry_date=date.today() + timedelta(days=3))
    make_product(name="Old bread", expiry_date=date.today() - timedelta(days=2))
    make_product(name="Eaten apple", is_consumed=True)
    make_product(name="Drill", brand="Bosch", warranty_date=date.today() + timedelta(days=500))

    def names(**params):
        response = client.get("/api/v1/products", headers=auth_headers, params=params)
        assert response.status_code == 200
        return sorted(p["name"] for p in response.json())

    assert names() == ["Drill", "Eaten apple", "Fresh milk", "Old bread"]
    assert names(status="consumed") == ["Eaten apple"]
    assert names(status="active") == ["Drill", "Fresh milk", "Old bread"]
    assert names(status="expired") == ["Old bread"]
    assert names(status="expiring_soon") == ["Fresh milk"]
    assert names(search="bosch") == ["Drill"]


def test_list_rejects_unknown_status(client, auth_headers):
    response = client.get(
        "/api/v1/products", headers=auth_headers, params={"status": "rotten"}
    )
    assert response.status_code == 422


def test_bulk_consume_and_delete(client, db, auth_headers, make_product, test_user2):
    first = make_product(name="A")
    second = make_product(name="B")
    foreign = make_product(name="C", user_id=test_user2.id)
    ids = [first.id, second.id, foreign.id]

    response = client.post(
        "/api/v1/products/bulk-consume", headers=auth_headers, json={"product_ids": ids}
    )
    assert response.json() == {"affected": 2}

    response = client.post(
        "/api/v1/products/bulk-delete", headers=auth_headers, json={"product_ids": ids}
    )
    assert response.json() == {"affected": 2}

    db.expire_all()
    assert db.query(Product).count() == 1


def test_mark_consumed_keeps_existing_reminders(client, db, auth_headers, test_product):
    client.put(
        f"/api/v1/products/{test_product.id}",
        headers=auth_headers,
        json={"expiry_date": _iso(20)},
    )

    response = client.put(
        f"/api/v1/products/{test_product.id}",
        headers=auth_headers,
        json={"is_consumed": True, "expiry_date": _iso(30)},
    )

    assert response.status_code == 200
    reminder = db.query(Reminder).filter(Reminder.product_id == test_product.id).one()
    assert reminder.reminder_date == date.today() + timedelta(days=13)


def test_product_reminders_endpoint(client, auth_headers, test_product):
    client.put(
        f"/api/v1/products/{test_product.id}",
        headers=auth_headers,
        json={"warranty_date": _iso(100)},
    )

    response = client.get(
        f"/api/v1/products/{test_product.id}/reminders", headers=auth_headers
    )

    assert response.status_code == 200
    assert sorted(r["reminder_type"] for r in response.json()) == ["expiry", "warranty"]


def test_share_requires_family(client, auth_headers):
    response = client.post(
        "/api/v1/products",
        headers=auth_headers,
        json={"name": "Rice", "share_with_family": True},
    )
    assert response.status_code == 400
