"""
Test configuration
Fixtures for an in-memory store, fake external services, the app context and API clients
"""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from ..app import create_app
from ..config.settings import Settings
from ..core.context import AppContext
from ..core.database import DocumentStore
from ..core.exceptions import PaymentSessionError
from ..core.security import Role
from ..models.checkout import PaymentSession
from ..services.payment_gateway import validate_amount

CUSTOMER_ID = "customer-1"
OTHER_CUSTOMER_ID = "customer-2"
STAFF_ID = "staff-1"
ADMIN_ID = "admin-1"


class FakeGateway:
    """Stands in for the payment backend; records every requested amount"""

    def __init__(self):
        self.requested_amounts = []
        self.fail_with = None
        self.publishable_key = "pk_test_storefront"

    def create_payment_sheet(self, amount_cents):
        validate_amount(amount_cents)
        self.requested_amounts.append(amount_cents)
        if self.fail_with is not None:
            raise PaymentSessionError(self.fail_with)
        n = len(self.requested_amounts)
        return PaymentSession(
            payment_intent=f"pi_test{n}_secret_abc{n}",
            ephemeral_key=f"ek_test{n}",
            customer="cus_test",
        )

    def get_publishable_key(self):
        return self.publishable_key


class FakeNotifier:
    """Records emails instead of sending them"""

    def __init__(self):
        self.sent = []

    def send_approval_email(self, email, name):
        self.sent.append(("approval", email, name))
        return True

    def send_rejection_email(self, email, name):
        self.sent.append(("rejection", email, name))
        return True

    def send_email(self, to, subject, text, name=None):
        self.sent.append(("email", to, subject))
        return True


@pytest.fixture
def test_settings():
    """Test configuration"""
    return Settings(
        database_url="duckdb://:memory:",
        jwt_secret_key="test-secret-key",
        api_title="Storefront API (Test)",
        api_version="1.0.0-test",
        debug=True,
    )


@pytest.fixture
def store():
    """In-memory document store"""
    db = DocumentStore(":memory:")
    db.init_database()
    yield db
    db.close()


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def context(test_settings, store, gateway, notifier):
    return AppContext(test_settings, store, gateway, notifier)


@pytest.fixture
def app_instance(context):
    return create_app(context)


@pytest.fixture
def client(app_instance):
    """Test client"""
    return TestClient(app_instance)


def _headers(context, uid, role):
    token = context.security.create_jwt_token(uid, role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def customer_headers(context):
    return _headers(context, CUSTOMER_ID, Role.CUSTOMER)


@pytest.fixture
def other_customer_headers(context):
    return _headers(context, OTHER_CUSTOMER_ID, Role.CUSTOMER)


@pytest.fixture
def staff_headers(context):
    return _headers(context, STAFF_ID, Role.STAFF)


@pytest.fixture
def admin_headers(context):
    return _headers(context, ADMIN_ID, Role.ADMIN)


@pytest.fixture
def menu_items(context):
    """Beef Burger RM8.00, Chicken Burger RM4.00 and an unavailable Fish Burger"""
    beef = context.menu.create_item(
        {"name": "Beef Burger", "price": Decimal("8.00"), "category": "burgers"}, ADMIN_ID)
    chicken = context.menu.create_item(
        {"name": "Chicken Burger", "price": Decimal("4.00"), "category": "burgers"}, ADMIN_ID)
    fish = context.menu.create_item(
        {"name": "Fish Burger", "price": Decimal("6.50"), "category": "burgers", "available": False},
        ADMIN_ID)
    return {"beef": beef, "chicken": chicken, "fish": fish}


@pytest.fixture
def filled_cart(context, menu_items):
    """customer-1 holds 2 x Beef Burger and 1 x Chicken Burger (RM20.00)"""
    context.carts.add_item(CUSTOMER_ID, menu_items["beef"].id, 2)
    return context.carts.add_item(CUSTOMER_ID, menu_items["chicken"].id, 1)


@pytest.fixture
def placed_order(context, filled_cart):
    """A committed checkout for customer-1; returns the order"""
    attempt = context.checkout.start_checkout(CUSTOMER_ID)
    return context.checkout.confirm_checkout(CUSTOMER_ID, attempt.id)["order"]


@pytest.fixture
def completed_order(context, placed_order):
    for status in ("preparing", "ready for pickup", "completed"):
        context.orders.advance(placed_order.id, status, STAFF_ID)
    return context.orders.get_order(placed_order.id)
