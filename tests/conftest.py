"""
Shared pytest fixtures — in-memory SQLite + FastAPI TestClient.
"""
import uuid

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from creatorpay.database import Base, get_db
from creatorpay.gateway import FakeGateway, reset_gateway, set_gateway
from creatorpay.main import app
from creatorpay.models import CreatorModel

# StaticPool ensures all connections share the same in-memory database
_ENGINE = create_engine(
    "sqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
_Session = sessionmaker(autocommit=False, autoflush=False, bind=_ENGINE)


@pytest.fixture(autouse=True)
def _reset_tables():
    Base.metadata.create_all(bind=_ENGINE)
    yield
    Base.metadata.drop_all(bind=_ENGINE)


@pytest.fixture(autouse=True)
def gateway():
    fake = FakeGateway()
    set_gateway(fake)
    yield fake
    reset_gateway()


@pytest.fixture()
def db():
    session = _Session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(db):
    def _override():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = _override
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def make_creator(db):
    """Insert a creator row directly, bypassing the API."""
    def _make(country="NL", business_type="vat_registered", vat_id="NL123456789B01", **extra):
        creator = CreatorModel(
            id=str(uuid.uuid4()),
            email=extra.pop("email", f"{uuid.uuid4().hex[:8]}@example.com"),
            full_name=extra.pop("full_name", "Test Creator"),
            country=country,
            business_type=business_type,
            vat_id=vat_id,
            invoice_method="auto",
            **extra,
        )
        db.add(creator)
        db.commit()
        db.refresh(creator)
        return creator

    return _make
