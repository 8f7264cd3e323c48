"""
Pytest fixtures for MedStore backend tests.

Provides an in-memory database per test, a FastAPI test client bound to it,
and ready-made stores, users and medicines for the two-store scenarios.
"""
from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from medstore.api.deps import get_db
from medstore.core.security import create_access_token
from medstore.db.base import Base
from medstore.main import app
from medstore.models import Billing, Medicine, Store, User

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(subject=str(user.id))}"}


def future_date(days: int = 365) -> str:
    return (date.today() + timedelta(days=days)).isoformat()


@pytest.fixture(scope='function')
def db_session():
    """Fresh schema for each test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope='function')
def client(db_session):
    """Test client without lifespan, so startup does not touch the real database."""
    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture(scope='function')
def store_a(db_session):
    store = Store(name="Central Pharmacy")
    db_session.add(store)
    db_session.commit()
    return store


@pytest.fixture(scope='function')
def store_b(db_session):
    store = Store(name="Riverside Chemist")
    db_session.add(store)
    db_session.commit()
    return store


@pytest.fixture(scope='function')
def admin_user(db_session):
    user = User(email="admin@medstore.com", password="Adm1n!pass", role="admin")
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture(scope='function')
def clerk_a(db_session, store_a):
    """Store user assigned to store A."""
    user = User(email="clerk.a@medstore.com", password="clerk-a-pass", role="user", store_id=store_a.id)
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture(scope='function')
def clerk_b(db_session, store_b):
    """Store user assigned to store B."""
    user = User(email="clerk.b@medstore.com", password="clerk-b-pass", role="user", store_id=store_b.id)
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture(scope='function')
def admin_headers(admin_user):
    return auth_headers(admin_user)


@pytest.fixture(scope='function')
def clerk_a_headers(clerk_a):
    return auth_headers(clerk_a)


@pytest.fixture(scope='function')
def medicine_a(db_session, store_a):
    medicine = Medicine(
        name="Paracetamol 500mg",
        store_id=store_a.id,
        expiry_date=date.today() + timedelta(days=180),
        stock=10,
        batch_number="PCM-2301",
    )
    db_session.add(medicine)
    db_session.commit()
    return medicine


@pytest.fixture(scope='function')
def medicine_b(db_session, store_b):
    medicine = Medicine(
        name="Amoxicillin 250mg",
        store_id=store_b.id,
        expiry_date=date.today() + timedelta(days=90),
        stock=3,
        batch_number="AMX-0042",
    )
    db_session.add(medicine)
    db_session.commit()
    return medicine


@pytest.fixture(scope='function')
def billing_a(db_session, medicine_a, store_a):
    billing = Billing(
        medicine_id=medicine_a.id,
        store_id=store_a.id,
        frequency="morning",
        name="Ravi Sharma",
        number="9876543210",
    )
    db_session.add(billing)
    db_session.commit()
    return billing
