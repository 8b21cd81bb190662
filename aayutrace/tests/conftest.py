"""Configuration et fixtures pytest"""

import os

# Base de test et scheduler coupé, avant tout import de l'application
os.environ["DATABASE_URL"] = "sqlite:///./test.db"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["SMTP_HOST"] = ""

import pytest
from fastapi.testclient import TestClient
from datetime import date, timedelta
from decimal import Decimal

from aayutrace.core.database import Base, engine, SessionLocal, get_db
from aayutrace.main import app
from aayutrace.models.user import User
from aayutrace.models.category import Category
from aayutrace.models.product import Product
from aayutrace.models.notification import Notification
from aayutrace.core.security import get_password_hash, create_access_token


@pytest.fixture(scope="function")
def db():
    """Fixture de base de données pour les tests"""
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db):
    """Fixture du client de test FastAPI"""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def _make_user(db, email, full_name):
    user = User(
        email=email,
        full_name=full_name,
        password_hash=get_password_hash("testpass123"),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def test_user(db):
    return _make_user(db, "test@example.com", "Test User")


@pytest.fixture
def test_user2(db):
    return _make_user(db, "test2@example.com", "Test User 2")


@pytest.fixture
def test_category(db, test_user):
    category = Category(user_id=test_user.id, name="Pantry", icon="🥫", color="#f97316")
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


@pytest.fixture
def make_product(db, test_user):
    """Fabrique de produits persistés (propriétaire : test_user par défaut)"""

    def _make(**kwargs):
        values = {"user_id": test_user.id, "name": "Milk", "is_consumed": False}
        values.update(kwargs)
        if values.get("price") is not None:
            values["price"] = Decimal(str(values["price"]))
        product = Product(**values)
        db.add(product)
        db.commit()
        db.refresh(product)
        return product

    return _make


@pytest.fixture
def test_product(make_product):
    return make_product(
        name="Yogurt",
        brand="Nestle",
        purchase_date=date.today(),
        expiry_date=date.today() + timedelta(days=5),
        price=2.5,
    )


@pytest.fixture
def make_notification(db, test_user):
    def _make(is_read=False, title="Product expiring soon", user=None):
        notification = Notification(
            user_id=(user or test_user).id,
            type="expiry",
            title=title,
            message="Yogurt expires soon",
            is_read=is_read,
        )
        db.add(notification)
        db.commit()
        db.refresh(notification)
        return notification

    return _make


@pytest.fixture
def auth_headers(test_user):
    """Fixture des headers d'authentification"""
    token = create_access_token({"sub": str(test_user.id)})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers_user2(test_user2):
    """Fixture des headers d'authentification pour user2"""
    token = create_access_token({"sub": str(test_user2.id)})
    return {"Authorization": f"Bearer {token}"}
