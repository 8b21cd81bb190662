"""Tests d'authentification"""

from aayutrace.core.security import create_password_reset_token


def test_register_user(client):
    """Test de l'inscription d'un nouvel utilisateur"""
    response = client.post(
        "/api/v1/auth/register",
        json={
            "email": "newuser@example.com",
            "full_name": "New User",
            "password": "securepass123",
        },
    )
    assert response.status_code == 201
    data = response.json()
    assert "access_token" in data
    assert "refresh_token" in data
    assert data["token_type"] == "bearer"


def test_register_duplicate_email(client, test_user):
    """Test d'inscription avec un email déjà utilisé"""
    response = client.post(
        "/api/v1/auth/register",
        json={"email": test_user.email, "password": "securepass123"},
    )
    assert response.status_code == 400


def test_register_short_password(client):
    response = client.post(
        "/api/v1/auth/register",
        json={"email": "short@example.com", "password": "abc"},
    )
    assert response.status_code == 422


def test_login_success(client, test_user):
    """Test de connexion réussie"""
    response = client.post(
        "/api/v1/auth/login",
        json={"email": "test@example.com", "password": "testpass123"},
    )
    assert response.status_code == 200
    data = response.json()
    assert "access_token" in data
    assert "refresh_token" in data


def test_login_wrong_password(client, test_user):
    """Test de connexion avec mauvais mot de passe"""
    response = client.post(
        "/api/v1/auth/login",
        json={"email": "test@example.com", "password": "wrongpassword"},
    )
    assert response.status_code == 401


def test_login_non_existent_user(client):
    """Test de connexion avec utilisateur inexistant"""
    response = client.post(
        "/api/v1/auth/login",
        json={"email": "nonexistent@example.com", "password": "anypassword"},
    )
    assert response.status_code == 401


def test_refresh_token(client, test_user):
    tokens = client.post(
        "/api/v1/auth/login",
        json={"email": "test@example.com", "password": "testpass123"},
    ).json()

    response = client.post(
        "/api/v1/auth/refresh", json={"refresh_token": tokens["refresh_token"]}
    )
    assert response.status_code == 200

    response = client.post(
        "/api/v1/auth/refresh", json={"refresh_token": tokens["access_token"]}
    )
    assert response.status_code == 401


def test_forgot_password_does_not_leak_accounts(client, test_user):
    known = client.post("/api/v1/auth/forgot-password", json={"email": test_user.email})
    unknown = client.post("/api/v1/auth/forgot-password", json={"email": "ghost@example.com"})

    assert known.status_code == unknown.status_code == 200
    assert known.json() == unknown.json()


def test_reset_password(client, test_user):
    token = create_password_reset_token({"sub": str(test_user.id)})

    response = client.post(
        "/api/v1/auth/reset-password",
        json={"token": token, "new_password": "brandnewpass"},
    )
    assert response.status_code == 200

    response = client.post(
        "/api/v1/auth/login",
        json={"email": "test@example.com", "password": "brandnewpass"},
    )
    assert response.status_code == 200


def test_reset_password_rejects_access_token(client, auth_headers):
    access_token = auth_headers["Authorization"].split()[1]

    response = client.post(
        "/api/v1/auth/reset-password",
        json={"token": access_token, "new_password": "brandnewpass"},
    )
    assert response.status_code == 400
