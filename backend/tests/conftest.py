import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("REFRESH_SECRET", "test-refresh-secret")

from datetime import datetime
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from servicebook.database import get_db
from servicebook.enums import Role
from servicebook.main import app
from servicebook.models import Base, Company, CompanyService, Service, ServiceCategory, User
from servicebook.redis_client import get_redis
from servicebook.security import create_token, hash_password
from servicebook.services.bookings import BookingService

NOW = datetime(2029, 6, 1, 12, 0)
PASSWORD = "secret-pass"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    yield session
    session.close()


@pytest.fixture
def redis():
    return MagicMock()


@pytest.fixture
def booking_service(db, redis):
    return BookingService(db, redis, clock=lambda: NOW)


@pytest.fixture
def client(engine, redis):
    Session = sessionmaker(bind=engine, autocommit=False, autoflush=False)

    def override_db():
        session = Session()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_db
    app.dependency_overrides[get_redis] = lambda: redis
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ── Factories ────────────────────────────────────────────────────────────

@pytest.fixture
def make_company(db):
    def make(name="Acme Cleaning", slug="acme"):
        company = Company(name=name, slug=slug)
        db.add(company)
        db.commit()
        db.refresh(company)
        return company
    return make


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def make(role=Role.CUSTOMER, company=None, email=None):
        counter["n"] += 1
        user = User(
            email=email or f"{role.value}{counter['n']}@example.com",
            password_hash=hash_password(PASSWORD),
            role=role.value,
            company_id=company.id if company else None,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return make


@pytest.fixture
def make_category(db):
    def make(name="Massage", slug="massage", type="therapy"):
        category = ServiceCategory(name=name, slug=slug, type=type)
        db.add(category)
        db.commit()
        db.refresh(category)
        return category
    return make


@pytest.fixture
def make_service(db):
    def make(name="Deep clean", duration=60, price=50.0, category=None):
        service = Service(
            name=name,
            duration=duration,
            price=price,
            category_id=category.id if category else None,
        )
        db.add(service)
        db.commit()
        db.refresh(service)
        return service
    return make


@pytest.fixture
def make_company_service(db):
    def make(company, service, custom_price=None):
        obj = CompanyService(
            company_id=company.id,
            service_id=service.id,
            custom_price=custom_price,
        )
        db.add(obj)
        db.commit()
        db.refresh(obj)
        return obj
    return make


def auth_headers(user) -> dict:
    token = create_token(user.id, user.role, user.company_id)
    return {"Authorization": f"Bearer {token}"}
