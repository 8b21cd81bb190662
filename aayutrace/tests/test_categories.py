"""Tests des catégories"""

from aayutrace.models.category import Category
from aayutrace.services.category_service import CategoryService, DEFAULT_CATEGORIES


def test_default_categories_seeded(client, db, auth_headers):
    response = client.get("/api/v1/categories", headers=auth_headers)

    assert response.status_code == 200
    names = {c["name"] for c in response.json()}
    assert {c["name"] for c in DEFAULT_CATEGORIES} <= names


def test_seeding_is_idempotent(db):
    service = CategoryService(db)
    service.ensure_default_categories()
    assert service.ensure_default_categories() == 0
    assert db.query(Category).filter(Category.user_id.is_(None)).count() == len(DEFAULT_CATEGORIES)


def test_create_and_update_category(client, auth_headers):
    response = client.post(
        "/api/v1/categories",
        headers=auth_headers,
        json={"name": "Garden", "icon": "🌱", "color": "#16a34a"},
    )
    assert response.status_code == 201
    category_id = response.json()["id"]

    response = client.put(
        f"/api/v1/categories/{category_id}",
        headers=auth_headers,
        json={"color": "#15803d"},
    )
    assert response.status_code == 200
    assert response.json()["name"] == "Garden"
    assert response.json()["color"] == "#15803d"


def test_invalid_color_rejected(client, auth_headers):
    response = client.post(
        "/api/v1/categories", headers=auth_headers, json={"name": "Tools", "color": "blue"}
    )
    assert response.status_code == 422


def test_delete_category_in_use_is_refused(client, auth_headers, test_category, make_product):
    make_product(name="Beans", category_id=test_category.id)

    response = client.delete(f"/api/v1/categories/{test_category.id}", headers=auth_headers)

    assert response.status_code == 409
    data = response.json()
    assert data["error"] == "category_in_use"
    assert data["product_count"] == 1


def test_delete_unused_category(client, db, auth_headers, test_category):
    category_id = test_category.id

    response = client.delete(f"/api/v1/categories/{category_id}", headers=auth_headers)

    assert response.status_code == 204
    db.expire_all()
    assert db.query(Category).filter(Category.id == category_id).count() == 0


def test_default_category_is_read_only(client, db, auth_headers):
    client.get("/api/v1/categories", headers=auth_headers)
    default = db.query(Category).filter(Category.user_id.is_(None)).first()

    response = client.delete(f"/api/v1/categories/{default.id}", headers=auth_headers)

    assert response.status_code == 400


def test_other_users_category_hidden(client, auth_headers_user2, test_category):
    response = client.put(
        f"/api/v1/categories/{test_category.id}",
        headers=auth_headers_user2,
        json={"name": "Mine"},
    )
    assert response.status_code == 404
