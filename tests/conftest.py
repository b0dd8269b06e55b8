"""
Pytest configuration and shared fixtures for the stock API tests.

Settings and the engine are built at import time, so the environment is
prepared before anything from ``app`` is imported.
"""
import os
import tempfile
from datetime import datetime, timedelta, timezone

_DB_DIR = tempfile.mkdtemp(prefix="fallah-stock-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'test.db')}"
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from app.core.config import settings
from app.core.rate_limiter import limiter
from app.database import Base, SessionLocal, engine
from app.main import app
from app.models.inventory import Stock, StockTools
from app.models.users import User


@pytest.fixture(autouse=True)
def setup_database():
    """Fresh schema for every test."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def _create_user(db_session, username):
    user = User(username=username, email=f"{username}@farm.test")
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def user(db_session):
    return _create_user(db_session, "amina")


@pytest.fixture
def other_user(db_session):
    return _create_user(db_session, "karim")


def make_token(sub, token_type="access", expires_in=timedelta(minutes=30)):
    """Sign a token the way the accounts service does."""
    claims = {
        "sub": sub,
        "type": token_type,
        "exp": datetime.now(timezone.utc) + expires_in,
    }
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def headers_for(user):
    token = make_token(str(user.id))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers(user):
    return headers_for(user)


@pytest.fixture
def client():
    limiter.enabled = False
    try:
        yield TestClient(app)
    finally:
        limiter.enabled = True


@pytest.fixture
def make_stock(db_session):
    """Factory for generic stock rows owned by a given user."""
    def _make(owner, quantity=50.0, **fields):
        values = {
            "name": "Maize seed",
            "unit": "kg",
            "category": "seeds",
            "low_stock_threshold": 10,
        }
        values.update(fields)
        stock = Stock(user_id=owner.id, quantity=quantity, **values)
        db_session.add(stock)
        db_session.commit()
        db_session.refresh(stock)
        return stock

    return _make


@pytest.fixture
def make_tool(db_session):
    def _make(owner, quantity=5, **fields):
        values = {
            "name": "Pruning shears",
            "unit": "units",
            "category": "pruning_tools",
            "min_quantity_alert": 2,
        }
        values.update(fields)
        tool = StockTools(user_id=owner.id, quantity=quantity, **values)
        db_session.add(tool)
        db_session.commit()
        db_session.refresh(tool)
        return tool

    return _make


@pytest.fixture
def other_auth_headers(other_user):
    return headers_for(other_user)


@pytest.fixture
def sign_token():
    return make_token
