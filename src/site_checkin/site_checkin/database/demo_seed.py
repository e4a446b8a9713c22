from __future__ import annotations

import logging
from dataclasses import dataclass

from ..container import Container
from ..core.exceptions import DuplicateAccount

logger = logging.getLogger(__name__)

DEMO_WORKER = {
    "email": "demo-worker@site-checkin.local",
    "password": "password123",
    "name": "Demo Worker",
    "company": "Demo Construction Co.",
    "phone": "(555) 111-2222",
}
DEMO_ADMIN = {
    "email": "demo-admin@site-checkin.local",
    "password": "password123",
    "name": "Demo Admin",
}
DEMO_SITE = {
    "name": "Demo Construction Site",
    "address": "123 Main St, Demo City",
    "cutoff": "18:00:00",
}


@dataclass(frozen=True)
class DemoSeed:
    worker_id: str
    admin_id: str
    site_id: str


def _ensure_principal(container: Container, *, email: str, password: str, name: str) -> str:
    try:
        return container.auth_service.sign_up(email=email, password=password, display_name=name).principal_id
    except DuplicateAccount:
        return container.auth_service.authenticate(email, password).principal_id


def ensure_demo_accounts(container: Container) -> DemoSeed:
    """Create (or reuse) a demo worker, a demo admin and a site the admin owns.

    Everything goes through the services, so the worker's credential is issued
    normally and the site is created together with its admin grant.
    """

    worker_id = _ensure_principal(
        container, email=DEMO_WORKER["email"], password=DEMO_WORKER["password"], name=DEMO_WORKER["name"]
    )
    if not container.workers_repo.get_by_id(worker_id):
        container.worker_service.register(
            principal_id=worker_id,
            name=DEMO_WORKER["name"],
            company=DEMO_WORKER["company"],
            phone=DEMO_WORKER["phone"],
        )

    admin_id = _ensure_principal(
        container, email=DEMO_ADMIN["email"], password=DEMO_ADMIN["password"], name=DEMO_ADMIN["name"]
    )
    existing = [s for s in container.site_registry.list_for(admin_id) if s.name == DEMO_SITE["name"]]
    if existing:
        site = existing[0]
    else:
        site = container.site_registry.create(
            creator_id=admin_id,
            name=DEMO_SITE["name"],
            address=DEMO_SITE["address"],
            cutoff=DEMO_SITE["cutoff"],
        )

    logger.info("Demo seed ready: worker=%s admin=%s site=%s", worker_id, admin_id, site.site_id)
    return DemoSeed(worker_id=worker_id, admin_id=admin_id, site_id=site.site_id)
