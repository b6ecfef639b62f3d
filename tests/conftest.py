"""
Shared fixtures.

The app runs against an in-memory SQLite database (one shared connection),
with tables dropped and recreated for every test. Settings come from the
environment variables set below, before anything from admin_console is imported.
"""

import os

os.environ["APP_ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ.pop("ADMIN_EMAIL", None)
os.environ.pop("ADMIN_PASSWORD", None)

from decimal import Decimal  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from admin_console.config import Settings  # noqa: E402
from admin_console.database import Base, SessionLocal, engine  # noqa: E402
from admin_console.main import app  # noqa: E402
from admin_console.models import Department, User, RoleName  # noqa: E402
from admin_console.services.seed_service import seed_first_admin  # noqa: E402
from admin_console.utils.security import hash_password  # noqa: E402

API = "/api/v1"
ADMIN_EMAIL = "admin@x.io"
ADMIN_PASSWORD = "secret123"


def pytest_configure(config) -> None:
    config.addinivalue_line("markers", "unit: fast tests with no external services")


# ============================================================================
# Database
# ============================================================================

@pytest.fixture(autouse=True)
def _fresh_schema():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


# ============================================================================
# HTTP
# ============================================================================

@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


def login(client: TestClient, email: str, password: str):
    return client.post(f"{API}/auth/login", json={"email": email, "password": password})


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def token_for(client: TestClient, email: str, password: str) -> dict:
    response = login(client, email, password)
    assert response.status_code == 200, response.text
    return bearer(response.json()["accessToken"])


# ============================================================================
# Records
# ============================================================================

def make_department(db, name: str = "Finance", code: str = "FIN", limit_usd: str = "0") -> Department:
    d = Department(name=name, code=code, limitUsd=Decimal(limit_usd))
    db.add(d)
    db.commit()
    db.refresh(d)
    return d


def make_user(
    db,
    email: str,
    role: RoleName = RoleName.VIEWER,
    password: str = "pass1234",
    department: Department | None = None,
    is_active: bool = True,
    name: str = "Test User",
) -> User:
    u = User(
        name=name,
        email=email,
        passwordHash=hash_password(password),
        role=role,
        department=department,
        isActive=is_active,
    )
    db.add(u)
    db.commit()
    db.refresh(u)
    return u


@pytest.fixture
def admin(db) -> User:
    return seed_first_admin(db, Settings(ADMIN_EMAIL=ADMIN_EMAIL, ADMIN_PASSWORD=ADMIN_PASSWORD))


@pytest.fixture
def admin_headers(client, admin) -> dict:
    return token_for(client, ADMIN_EMAIL, ADMIN_PASSWORD)


@pytest.fixture
def viewer_headers(client, db) -> dict:
    make_user(db, "viewer@x.io", RoleName.VIEWER, password="viewer123")
    return token_for(client, "viewer@x.io", "viewer123")


@pytest.fixture
def officer_headers(client, db) -> dict:
    dept = make_department(db, "Operations", "OPS")
    make_user(db, "officer@x.io", RoleName.OFFICER, password="officer123", department=dept)
    return token_for(client, "officer@x.io", "officer123")
