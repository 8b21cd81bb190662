"""Tests des listes de courses"""

from datetime import date, timedelta


def _create_list(client, headers, name="Weekend"):
    response = client.post("/api/v1/shopping-lists", headers=headers, json={"name": name})
    assert response.status_code == 201
    return response.json()


def test_create_shopping_list(client, auth_headers):
    data = _create_list(client, auth_headers)

    assert data["generated_by"] == "manual"
    assert data["items"] == []
    assert data["estimated_total"] == 0.0


def test_blank_list_name_rejected(client, auth_headers):
    response = client.post("/api/v1/shopping-lists", headers=auth_headers, json={"name": "   "})
    assert response.status_code == 422


def test_items_and_estimated_total(client, auth_headers):
    list_id = _create_list(client, auth_headers)["id"]

    eggs = client.post(
        f"/api/v1/shopping-lists/{list_id}/items",
        headers=auth_headers,
        json={"product_name": "Eggs", "quantity": 2, "estimated_price": "3.50"},
    )
    assert eggs.status_code == 201
    client.post(
        f"/api/v1/shopping-lists/{list_id}/items",
        headers=auth_headers,
        json={"product_name": "Bread", "estimated_price": "2.00", "priority": "high"},
    )

    data = client.get(f"/api/v1/shopping-lists/{list_id}", headers=auth_headers).json()
    assert len(data["items"]) == 2
    assert data["estimated_total"] == 9.0

    response = client.post(
        f"/api/v1/shopping-lists/{list_id}/items/{eggs.json()['id']}/toggle",
        headers=auth_headers,
    )
    assert response.json()["is_completed"] is True

    data = client.get(f"/api/v1/shopping-lists/{list_id}", headers=auth_headers).json()
    assert data["estimated_total"] == 2.0


def test_update_and_delete_item(client, auth_headers):
    list_id = _create_list(client, auth_headers)["id"]
    item = client.post(
        f"/api/v1/shopping-lists/{list_id}/items",
        headers=auth_headers,
        json={"product_name": "Soap"},
    ).json()

    response = client.put(
        f"/api/v1/shopping-lists/{list_id}/items/{item['id']}",
        headers=auth_headers,
        json={"quantity": 4, "notes": "Lavender"},
    )
    assert response.status_code == 200
    assert response.json()["quantity"] == 4
    assert response.json()["product_name"] == "Soap"

    response = client.delete(
        f"/api/v1/shopping-lists/{list_id}/items/{item['id']}", headers=auth_headers
    )
    assert response.status_code == 204

    response = client.post(
        f"/api/v1/shopping-lists/{list_id}/items/{item['id']}/toggle",
        headers=auth_headers,
    )
    assert response.status_code == 404


def test_complete_list(client, auth_headers):
    list_id = _create_list(client, auth_headers)["id"]
    for name in ("Tea", "Rice"):
        client.post(
            f"/api/v1/shopping-lists/{list_id}/items",
            headers=auth_headers,
            json={"product_name": name},
        )

    response = client.post(f"/api/v1/shopping-lists/{list_id}/complete", headers=auth_headers)

    assert response.json() == {"updated_items": 2, "total_items": 2}
    data = client.get(f"/api/v1/shopping-lists/{list_id}", headers=auth_headers).json()
    assert data["is_completed"] is True


def test_shopping_list_ownership(client, auth_headers, auth_headers_user2):
    list_id = _create_list(client, auth_headers)["id"]

    assert client.get(f"/api/v1/shopping-lists/{list_id}", headers=auth_headers_user2).status_code == 404
    assert client.get("/api/v1/shopping-lists", headers=auth_headers_user2).json() == []


def test_generate_restock_merges_duplicates(client, auth_headers, make_product):
    past = date.today() - timedelta(days=4)
    make_product(name="Milk", brand="Amul", is_consumed=True, price=1.5)
    make_product(name="milk", brand="AMUL", expiry_date=past, price=1.5)
    make_product(name="Butter", expiry_date=past)
    make_product(name="Fresh juice", expiry_date=date.today() + timedelta(days=3))

    response = client.post("/api/v1/shopping-lists/generate-restock", headers=auth_headers)

    assert response.status_code == 201
    data = response.json()
    assert data["generated_by"] == "restock"
    assert data["name"] == "Recommended Restock"
    items = {i["product_name"].lower(): i for i in data["items"]}
    assert set(items) == {"milk", "butter"}
    assert items["milk"]["quantity"] == 2
    assert data["estimated_total"] == 3.0


def test_generate_restock_without_candidates(client, auth_headers, make_product):
    make_product(name="Fresh juice", expiry_date=date.today() + timedelta(days=3))

    response = client.post("/api/v1/shopping-lists/generate-restock", headers=auth_headers)

    assert response.status_code == 400
