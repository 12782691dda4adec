"""
Shared pytest fixtures: in-memory SQLite, seeded Razorpay tables, API client.
"""
import os
import tempfile

# Configure settings BEFORE importing application modules
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="txn-history-logs-"))
os.environ.setdefault("DATA_SOURCE", "database")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from txn_history.config import LookupConfig
from txn_history.database import Base, get_db
from txn_history.main import app
from txn_history.models import RazorpayOrder, RazorpayPayment, RazorpayRefund

test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

Base.metadata.create_all(bind=test_engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


def make_payment(**overrides):
    row = {
        "id": "pay_001",
        "amount": 50000,
        "currency": "INR",
        "status": "captured",
        "order_id": "",
        "method": "upi",
        "amount_refunded": 0,
        "refund_status": "",
        "description": "Subscription",
        "email": "a@b.com",
        "contact": "+91 98765 43210",
        "error_description": "",
        "created_at": "01/01/2024 10:00:00",
        "receipt": "rcpt_1",
    }
    row.update(overrides)
    return row


def make_order(**overrides):
    row = {
        "id": "order_001",
        "amount": 50000,
        "amount_paid": 50000,
        "amount_due": 0,
        "currency": "INR",
        "receipt": "rcpt_1",
        "status": "paid",
        "attempts": 1,
        "created_at": "01/01/2024 09:59:00",
        "payment_id": "pay_001",
    }
    row.update(overrides)
    return row


def make_refund(**overrides):
    row = {
        "id": "rfnd_001",
        "amount": 10000,
        "currency": "INR",
        "payment_id": "pay_001",
        "status": "processed",
        "created_at": "05/01/2024 12:00:00",
        "speed_requested": "normal",
        "speed_processed": "normal",
        "receipt": "",
    }
    row.update(overrides)
    return row


@pytest.fixture
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.query(RazorpayPayment).delete()
        session.query(RazorpayOrder).delete()
        session.query(RazorpayRefund).delete()
        session.commit()
        session.close()


@pytest.fixture
def seed(db):
    """Insert payments / orders / refunds given as lists of dicts."""
    def _seed(payments=(), orders=(), refunds=()):
        for row in payments:
            db.add(RazorpayPayment(**row))
        for row in orders:
            db.add(RazorpayOrder(**row))
        for row in refunds:
            db.add(RazorpayRefund(**row))
        db.commit()
    return _seed


@pytest.fixture
def config():
    return LookupConfig()


@pytest.fixture
def client(db):
    yield TestClient(app)
