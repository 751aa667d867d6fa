"""
Pytest fixtures for back-office backend tests.

Provides the test app on an in-memory database, a per-test clean session,
the test client, and small catalog/order fixtures.
"""

from datetime import datetime

import pytest
from backoffice import create_app
from backoffice.config import TestConfig
from backoffice.extensions import db
from backoffice.models import Brand, Order, OrderItem, Product


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app(TestConfig)

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    with app.app_context():
        # Clear all data but keep schema
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        # Cleanup after test
        db.session.rollback()


@pytest.fixture(scope='function')
def client(app, db_session):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def brand(db_session):
    """Create a brand with no products."""
    b = Brand(name="브랜드 A", eng_name="Brand A", slug="brand-a")
    db_session.add(b)
    db_session.commit()
    return b


@pytest.fixture(scope='function')
def other_brand(db_session):
    """Create a second brand."""
    b = Brand(name="브랜드 B", eng_name="Brand B", slug="brand-b")
    db_session.add(b)
    db_session.commit()
    return b


@pytest.fixture(scope='function')
def product(db_session, brand):
    """Create a product with manual stock and no variants."""
    p = Product(
        brand_id=brand.id,
        name="Basic Tee",
        category="tops",
        price=29000,
        stock=5,
        images=["https://cdn.example.com/tee.jpg"],
    )
    db_session.add(p)
    db_session.commit()
    return p


@pytest.fixture(scope='function')
def make_order(db_session):
    """Factory: create an order (optionally with one line item) at a given time."""
    def _make(total, created_at=None, status="pending", product=None, quantity=1, **fields):
        order = Order(
            user_id=fields.pop("user_id", "user-1"),
            total=total,
            status=status,
            payment_method="card",
            shipping_street="세종대로 110",
            shipping_city="서울",
            shipping_state="중구",
            shipping_zip_code="04524",
            shipping_country="KR",
            shipping_phone=fields.pop("shipping_phone", "010-1234-5678"),
            created_at=created_at or datetime(2024, 3, 2, 9, 30),
            **fields,
        )
        if product is not None:
            order.items.append(
                OrderItem(product_id=product.id, quantity=quantity, price_at_time=product.price)
            )
        db_session.add(order)
        db_session.commit()
        return order

    return _make
