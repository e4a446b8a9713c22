from __future__ import annotations

import threading

import pytest

from src.site_checkin.site_checkin.core.exceptions import (
    DuplicateCredential,
    DuplicateWorker,
    InvalidInput,
    UnknownCredential,
    WorkerNotFound,
)
from src.site_checkin.site_checkin.credentials.issuer import CredentialIssuer
from src.site_checkin.site_checkin.workers.service import WorkerService

from fakes import InMemoryWorkers


class RacingWorkers(InMemoryWorkers):
    """Reports a credential collision on the first ``collisions`` inserts."""

    def __init__(self, db, collisions: int):
        super().__init__(db)
        self.collisions = collisions
        self.attempts = 0

    def create(self, **kwargs):
        self.attempts += 1
        if self.attempts <= self.collisions:
            raise DuplicateCredential("Credential already issued")
        return super().create(**kwargs)


def test_register_issues_credential_that_resolves_back(container, fixed_now):
    worker = container.worker_service.register(
        principal_id="p-1", name="Tran B", company="Beta Builders", now=fixed_now
    )

    assert CredentialIssuer.is_well_formed(worker.credential)
    assert container.worker_service.resolve(worker.credential) == worker
    assert worker.created_at == fixed_now


def test_register_twice_is_duplicate_worker(container, worker):
    with pytest.raises(DuplicateWorker):
        container.worker_service.register(principal_id=worker.worker_id, name="Again", company="Acme")


def test_register_requires_name_and_company(container):
    with pytest.raises(InvalidInput):
        container.worker_service.register(principal_id="p-1", name="Tran B", company=" ")
    with pytest.raises(InvalidInput):
        container.worker_service.register(principal_id="p-1", name="", company="Beta Builders")


def test_register_retries_when_store_rejects_credential(db):
    workers = RacingWorkers(db, collisions=2)
    service = WorkerService(workers, CredentialIssuer())

    worker = service.register(principal_id="p-1", name="Tran B", company="Beta Builders")

    assert workers.attempts == 3
    assert db.workers["p-1"] == worker


def test_register_gives_up_when_store_keeps_rejecting(db):
    service = WorkerService(RacingWorkers(db, collisions=10), CredentialIssuer(), max_store_attempts=2)

    with pytest.raises(DuplicateCredential):
        service.register(principal_id="p-1", name="Tran B", company="Beta Builders")

    assert "p-1" not in db.workers


def test_resolve_unknown_credential(container, worker):
    with pytest.raises(UnknownCredential):
        container.worker_service.resolve("SC1-" + "0" * 40)


def test_resolve_blank_credential_is_invalid(container):
    with pytest.raises(InvalidInput):
        container.worker_service.resolve("   ")


def test_resolve_ignores_surrounding_whitespace(container, worker):
    assert container.worker_service.resolve(f"  {worker.credential}\n").worker_id == worker.worker_id


def test_update_contact_changes_only_phone(container, worker):
    updated = container.worker_service.update_contact(principal_id=worker.worker_id, phone=" 0912 000 111 ")

    assert updated.phone == "0912 000 111"
    assert updated.credential == worker.credential
    assert updated.name == worker.name


def test_update_contact_can_clear_phone(container, worker):
    assert container.worker_service.update_contact(principal_id=worker.worker_id, phone="").phone is None


def test_get_and_credential_for_unknown_worker(container):
    with pytest.raises(WorkerNotFound):
        container.worker_service.get("nobody")
    with pytest.raises(WorkerNotFound):
        container.worker_service.credential_for("nobody")


def test_credential_for_returns_stored_credential(container, worker):
    assert container.worker_service.credential_for(worker.worker_id).value == worker.credential


def test_concurrent_registrations_get_distinct_credentials(container, db):
    n = 25
    barrier = threading.Barrier(n)

    def register(i):
        barrier.wait()
        container.worker_service.register(principal_id=f"p-{i}", name=f"Worker {i}", company="Acme")

    threads = [threading.Thread(target=register, args=(i,)) for i in range(n)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    credentials = [w.credential for w in db.workers.values()]
    assert len(credentials) == n
    assert len(set(credentials)) == n
    for i in range(n):
        assert container.worker_service.resolve(db.workers[f"p-{i}"].credential).worker_id == f"p-{i}"


class CountingWorkers(InMemoryWorkers):
    def __init__(self, db):
        super().__init__(db)
        self.lookups = 0

    def get_by_credential(self, credential):
        self.lookups += 1
        return super().get_by_credential(credential)


@pytest.mark.parametrize("value", ["hello", "SC1-xyz", "sc1-" + "0" * 40])
def test_resolve_rejects_malformed_credential_without_lookup(db, value):
    workers = CountingWorkers(db)
    service = WorkerService(workers, CredentialIssuer())

    with pytest.raises(UnknownCredential):
        service.resolve(value)

    assert workers.lookups == 0
