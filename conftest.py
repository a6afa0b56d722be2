import datetime
import itertools
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import app.notification.service as _notifications
import app.order.schema as _order_schemas
import app.order.service as _order_services
from app.core.db.base import Base
from app.order.models import OrderStatus
from app.product.models import Product, ProductType
from app.Shared.dependencies import get_db
from app.Shared.helpers import create_token
from app.user.models import User, UserRole
from main import app

# Mid-month so "this month" and "last month" are both easy to reach
NOW = datetime.datetime(2024, 3, 15, 12, 0, 0)

UPI_DETAILS = {"upi_id": "creator@okhdfc"}
BANK_DETAILS = {
    "account_number": "123456789012",
    "ifsc": "HDFC0001234",
    "account_holder_name": "Asha Rao",
    "bank_name": "HDFC Bank",
}


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def sent_emails(monkeypatch):
    """Captures outgoing email instead of talking to SMTP."""
    outbox = []

    def fake_send_email(recipient_email, subject, html_body):
        outbox.append({"to": recipient_email, "subject": subject, "body": html_body})
        return True

    monkeypatch.setattr(_notifications, "send_email", fake_send_email)
    return outbox


# --- Factories ---

@pytest.fixture
def make_user(db):
    counter = itertools.count(1)

    def _make(role=UserRole.creator, email=None, password=None, full_name=None):
        n = next(counter)
        user = User(
            email=email or f"user{n}@example.com",
            username=f"user{n}",
            full_name=full_name or f"User {n}",
            role=role.value,
        )
        if password:
            user.set_password(password)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make


@pytest.fixture
def creator(make_user):
    return make_user(full_name="Asha Rao")


@pytest.fixture
def admin(make_user):
    return make_user(role=UserRole.admin, full_name="Platform Admin")


@pytest.fixture
def make_product(db):
    def _make(creator, price="100.00", type=ProductType.product, duration=None, title="Sketchbook", is_active=True):
        if type == ProductType.membership and duration is None:
            duration = 30
        product = Product(
            creator_id=creator.id,
            title=title,
            price=Decimal(price),
            type=type.value,
            membership_duration=duration,
            is_active=is_active,
        )
        db.add(product)
        db.commit()
        db.refresh(product)
        return product
    return _make


@pytest.fixture
def make_order(db):
    """Checks out through the order service and optionally settles it."""
    def _make(creator, amount=None, product=None, email="fan@example.com",
              status=OrderStatus.completed, created_at=NOW, completed_at=None, customer_id=None):
        if product is None:
            order_type = _order_schemas.OrderTypeEnum.donation
        else:
            order_type = _order_schemas.OrderTypeEnum(product.type)
            amount = amount if amount is not None else product.price
        payload = _order_schemas.OrderCreate(
            creator_id=creator.id,
            product_id=product.id if product else None,
            amount=Decimal(str(amount)),
            customer_email=email,
            customer_name="Fan",
            type=order_type,
        )
        order = _order_services.create_order(db, payload, customer_id=customer_id, now=created_at)
        if status != OrderStatus.pending:
            order = _order_services.update_order_status(db, order.id, status, now=completed_at or created_at)
        return order
    return _make


@pytest.fixture
def auth_headers():
    def _headers(user):
        token = create_token({"sub": str(user.id), "role": user.role}, persona="user")
        return {"Authorization": f"Bearer {token['access_token']}"}
    return _headers
