"""
Pytest configuration and fixtures.

Baza: SQLite w pamieci (StaticPool - jedno polaczenie dla wszystkich sesji).
Redis: Mock - testy API nie potrzebuja prawdziwego serwera.
"""
from decimal import Decimal
from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from app.api.routers.carts import get_cart_session
from app.data.database import Database
from app.data.models.inventory import InventoryModel
from app.data.models.product import ProductModel
from app.main import create_app
from app.services.cart_service import CartService
from app.services.session_service import CartSession, SessionStore

TEST_SESSION_ID = "session-123"


@pytest.fixture
def database():
    db = Database(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    db.connect()
    db.create_all()
    yield db
    db.close()


@pytest.fixture
def db_session(database):
    session = database.session()
    yield session
    session.close()


@pytest.fixture
def cart_service(db_session) -> CartService:
    return CartService(db=db_session, tax_rate=Decimal("0.08"))


@pytest.fixture
def make_product(db_session):
    """Fabryka produktow z opcjonalnym stanem magazynowym."""

    def _make(
        name: str = "Test Lipstick",
        price: str = "29.99",
        quantity: int | None = 100,
        reserved: int = 0,
        image_url: str | None = "https://example.com/lipstick.jpg",
    ) -> ProductModel:
        product = ProductModel(name=name, price=Decimal(price), image_url=image_url)
        if quantity is not None:
            product.inventory = InventoryModel(quantity=quantity, reserved=reserved)
        db_session.add(product)
        db_session.commit()
        return product

    return _make


@pytest.fixture
def session_store():
    store = Mock(spec=SessionStore)
    store.ttl_seconds = 3600
    store.ping.return_value = True
    return store


@pytest.fixture
def cart_session() -> CartSession:
    return CartSession(session_id=TEST_SESSION_ID)


@pytest.fixture
def app(database, session_store, cart_session):
    application = create_app(database=database, session_store=session_store)
    application.dependency_overrides[get_cart_session] = lambda: cart_session
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client
