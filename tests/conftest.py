"""
Shared fixtures: an app per test on a private in-memory SQLite database,
plus admin/employee identities with ready-made bearer headers.
"""
from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from glowiva.core.config import Settings
from glowiva.core.hashing import hash_password
from glowiva.core.jwt import create_access_token
from glowiva.main import create_app
from glowiva.models.admins import Admin
from glowiva.models.employees import Employee
from glowiva.models.products import Product

PASSWORD = "secret123"
ADMIN_PASSWORD = "adminpass123"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        SECRET_KEY="test-secret",
        DATABASE_URL="sqlite://",
        RATE_LIMIT_ENABLED=False,
        UPLOAD_DIR=str(tmp_path / "uploads"),
        MAX_UPLOAD_BYTES=1024,
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db(app):
    session = app.state.session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def admin(db):
    user = Admin(
        username="owner",
        email="owner@glowiva.com",
        password_hash=hash_password(ADMIN_PASSWORD),
        first_name="Ada",
        last_name="Obi",
        role="super_admin",
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def _make_employee(db, username="jane", commission_per_order=50, salary_toggle=True, **overrides):
    data = dict(
        first_name=username.capitalize(),
        last_name="Doe",
        email=f"{username}@glowiva.com",
        username=username,
        password_hash=hash_password(PASSWORD),
        phone="08000000000",
        position="sales_associate",
        department="sales",
        base_salary=Decimal("120000"),
        commission_per_order=Decimal(str(commission_per_order)),
        salary_toggle=salary_toggle,
        hire_date=date(2024, 1, 15),
        is_active=True,
    )
    data.update(overrides)

    employee = Employee(**data)
    db.add(employee)
    db.commit()
    db.refresh(employee)
    return employee


def _make_product(db, name="Vitamin C Serum", cost="60.00", selling="100.00", stock=20, **overrides):
    data = dict(
        name=name,
        category="serum",
        cost_price=Decimal(cost),
        selling_price=Decimal(selling),
        stock=stock,
        min_stock=5,
        sku=f"SKU-{name.replace(' ', '-').upper()}",
    )
    data.update(overrides)

    product = Product(**data)
    db.add(product)
    db.commit()
    db.refresh(product)
    return product


@pytest.fixture
def make_employee(db):
    return lambda **kwargs: _make_employee(db, **kwargs)


@pytest.fixture
def make_product(db):
    return lambda **kwargs: _make_product(db, **kwargs)


@pytest.fixture
def employee(make_employee):
    return make_employee()


@pytest.fixture
def product(make_product):
    return make_product()


def _bearer(settings, user_id, role):
    token = create_access_token({"sub": str(user_id), "role": role}, settings)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(settings, admin):
    return _bearer(settings, admin.id, admin.role)


@pytest.fixture
def employee_headers(settings, employee):
    return _bearer(settings, employee.id, "employee")


@pytest.fixture
def headers_for(settings):
    """Bearer headers for any employee record."""
    return lambda employee: _bearer(settings, employee.id, "employee")
