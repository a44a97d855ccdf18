"""
Pytest fixtures for studio POS backend tests.

Provides test database setup, the seeded catalog, staff accounts and a test client.
"""

from datetime import date

import pytest
from studiopos import create_app
from studiopos.config import TestingConfig
from studiopos.extensions import db
from studiopos.models import Session, AddOn
from studiopos.services.auth_service import create_user
from studiopos.services.catalog_service import SqlCatalog, seed_default_catalog
from studiopos.services.transaction_service import (
    TransactionRequest,
    SessionBookingRequest,
    AddOnRequest,
    PaymentPlan,
)


STAFF_PASSWORD = "Password123"

# Far enough ahead that "today" never collides with it
BOOKING_DAY = date(2030, 1, 15)


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app(TestingConfig)

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


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
def catalog(db_session):
    """Default 7 sessions at 85000 and the add-on list."""
    seed_default_catalog()
    return SqlCatalog()


@pytest.fixture(scope='function')
def sessions(catalog):
    return catalog.list_sessions()


@pytest.fixture(scope='function')
def add_ons(catalog):
    """Add-ons keyed by name."""
    return {a.name: a for a in catalog.list_add_ons()}


@pytest.fixture(scope='function')
def admin_user(db_session):
    return create_user("admin", STAFF_PASSWORD, role="admin")


@pytest.fixture(scope='function')
def staff_user(db_session):
    return create_user("kasir", STAFF_PASSWORD, role="user")


@pytest.fixture(scope='function')
def make_request(catalog):
    """
    Factory for TransactionRequest objects.

    make_request([session, ...], dp=60000, method="cash", cash=100000,
                 add_ons=[(add_on, qty)], day=date(...))
    """
    def _make(
        booked,
        *,
        day=BOOKING_DAY,
        customer_name="Budi",
        payment_type=None,
        dp=None,
        method="qris",
        cash=None,
        add_ons=(),
    ):
        bookings = []
        for item in booked:
            if isinstance(item, tuple):
                session, session_day = item
            else:
                session, session_day = item, day
            session_id = session.id if isinstance(session, Session) else session
            bookings.append(SessionBookingRequest(session_id=session_id, session_date=session_day))

        items = []
        for add_on, qty in add_ons:
            add_on_id = add_on.id if isinstance(add_on, AddOn) else add_on
            items.append(AddOnRequest(add_on_id=add_on_id, quantity=qty))

        if payment_type is None:
            payment_type = "dp" if dp is not None else "full"

        return TransactionRequest(
            customer_name=customer_name,
            phone="08123456789",
            bookings=bookings,
            add_ons=items,
            payment=PaymentPlan(type=payment_type, method=method, dp_amount=dp, cash_tendered=cash),
        )

    return _make


def get_auth_token(client, username: str, password: str) -> str:
    """Helper to get auth token for a user."""
    response = client.post('/api/auth/login', json={
        'username': username,
        'password': password
    })
    if response.status_code == 200:
        return response.json.get('token')
    return None


def auth_headers(token: str) -> dict:
    """Helper to create Authorization headers."""
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture(scope='function')
def admin_headers(client, admin_user):
    return auth_headers(get_auth_token(client, "admin", STAFF_PASSWORD))


@pytest.fixture(scope='function')
def staff_headers(client, staff_user):
    return auth_headers(get_auth_token(client, "kasir", STAFF_PASSWORD))
