from __future__ import annotations

from datetime import datetime

import pytest

from fakes import InMemoryDB, make_container


@pytest.fixture
def db():
    return InMemoryDB()


@pytest.fixture
def container(db):
    return make_container(db)


@pytest.fixture
def fixed_now():
    return datetime(2026, 3, 2, 8, 0, 0)


@pytest.fixture
def admin_id(container):
    return container.auth_service.sign_up(
        email="admin@example.com", password="password123", display_name="Site Admin"
    ).principal_id


@pytest.fixture
def site(container, admin_id, fixed_now):
    return container.site_registry.create(
        creator_id=admin_id, name="Tower A", address="1 Dock Rd", cutoff="18:00", now=fixed_now
    )


@pytest.fixture
def worker(container, fixed_now):
    principal = container.auth_service.sign_up(
        email="worker@example.com", password="password123", display_name="Nguyen Van A"
    )
    return container.worker_service.register(
        principal_id=principal.principal_id,
        name="Nguyen Van A",
        company="Acme Scaffolding",
        phone="0901 234 567",
        now=fixed_now,
    )
