"""Pytest fixtures for the storefront tests."""

import os

# must be set before app.config is imported anywhere
os.environ.setdefault("ENV", "test")
os.environ.setdefault("DATABASE_URL_OVERRIDE", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret")

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import event
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

import app.models  # noqa: F401
from app.config import settings
from app.database import get_session
from app.models.cart import CartItem
from app.models.category import Category
from app.models.product import Product
from app.models.user import User
from app.notifications import clear_subscribers
from app.utils.hash import hash_password
from app.utils.token import create_access_token


@pytest.fixture
def engine():
    """In-memory SQLite shared by every connection of the test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def fk_session():
    """Separate in-memory database with foreign key enforcement switched on."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        dbapi_connection.execute("PRAGMA foreign_keys=ON")

    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(autouse=True)
def checkout_settings(monkeypatch, tmp_path):
    """Pin the pricing knobs so tests do not depend on a local .env."""
    monkeypatch.setattr(settings, "tax_rate", Decimal("0.12"))
    monkeypatch.setattr(settings, "shipping_flat_rate", Decimal("0.00"))
    monkeypatch.setattr(settings, "free_shipping_threshold", None)
    monkeypatch.setattr(settings, "strict_order_confirmation", False)
    monkeypatch.setattr(settings, "low_stock_threshold", 5)
    monkeypatch.setattr(settings, "invoice_dir", str(tmp_path / "invoices"))
    yield settings
    clear_subscribers()


@pytest.fixture
def client(session):
    from app.main import app

    def _get_session_override():
        yield session

    app.dependency_overrides[get_session] = _get_session_override
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(session):
    def _make_user(email="shopper@example.com", role="client", password="secret123", **kwargs):
        user = User(
            username=email,
            email=email,
            password=hash_password(password),
            role=role,
            **kwargs,
        )
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def user(make_user):
    return make_user()


@pytest.fixture
def admin(make_user):
    return make_user(email="admin@example.com", role="admin")


@pytest.fixture
def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(user)}"}


@pytest.fixture
def admin_headers(admin):
    return {"Authorization": f"Bearer {create_access_token(admin)}"}


@pytest.fixture
def category(session):
    category = Category(name="Gadgets", slug="gadgets")
    session.add(category)
    session.commit()
    session.refresh(category)
    return category


@pytest.fixture
def make_product(session):
    def _make_product(name="Widget", price="10.00", stock=5, is_active=True, category_id=None):
        product = Product(
            name=name,
            price=Decimal(price),
            stock=stock,
            is_active=is_active,
            category_id=category_id,
        )
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    return _make_product


@pytest.fixture
def add_to_cart(session):
    def _add_to_cart(user, product, quantity):
        item = CartItem(user_id=user.id, product_id=product.id, quantity=quantity)
        session.add(item)
        session.commit()
        session.refresh(item)
        return item

    return _add_to_cart
