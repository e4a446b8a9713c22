from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import now_utc
from ..common.validators import optional_text, require_non_empty
from ..core.exceptions import DuplicateCredential, DuplicateWorker, InvalidInput, UnknownCredential, WorkerNotFound
from ..credentials.issuer import CredentialIssuer
from ..credentials.model import Credential
from .model import Worker
from .repository import WorkerRepository

logger = logging.getLogger(__name__)


class WorkerService:
    """Use case: worker registration and credential resolution."""

    def __init__(self, workers: WorkerRepository, issuer: CredentialIssuer, *, max_store_attempts: int = 3):
        self._workers = workers
        self._issuer = issuer
        self._max_store_attempts = max(1, int(max_store_attempts))

    def register(
        self,
        *,
        principal_id: str,
        name: str,
        company: str,
        phone: Optional[str] = None,
        now: datetime | None = None,
    ) -> Worker:
        principal_id = require_non_empty(principal_id, "Principal")
        name = require_non_empty(name, "Name")
        company = require_non_empty(company, "Company")
        phone = optional_text(phone)
        created_at = now or now_utc()

        if self._workers.get_by_id(principal_id):
            raise DuplicateWorker("Worker profile already exists")

        # The issuer checks for collisions up front; a collision that slips in
        # between the check and the insert is caught by the unique constraint.
        for attempt in range(1, self._max_store_attempts + 1):
            credential = self._issuer.issue(principal_id, taken=self._workers.credential_exists)
            try:
                worker = self._workers.create(
                    worker_id=principal_id,
                    name=name,
                    company=company,
                    phone=phone,
                    credential=credential.value,
                    created_at=created_at,
                )
            except DuplicateCredential:
                logger.warning("Credential rejected by store for worker %s (attempt %d)", principal_id, attempt)
                continue
            logger.info("Worker %s registered", worker.worker_id)
            return worker

        raise DuplicateCredential("Could not issue a unique credential, please retry")

    def get(self, worker_id: str) -> Worker:
        worker = self._workers.get_by_id(worker_id)
        if not worker:
            raise WorkerNotFound("Worker profile not found")
        return worker

    def credential_for(self, worker_id: str) -> Credential:
        return Credential(self.get(worker_id).credential)

    def resolve(self, credential: str) -> Worker:
        value = (credential or "").strip()
        if not value:
            raise InvalidInput("Credential is required")
        if not CredentialIssuer.is_well_formed(value):
            raise UnknownCredential("Credential is not recognised")
        worker = self._workers.get_by_credential(value)
        if not worker:
            raise UnknownCredential("Credential is not recognised")
        return worker

    def update_contact(self, *, principal_id: str, phone: Optional[str]) -> Worker:
        worker = self.get(principal_id)
        phone = optional_text(phone)
        self._workers.update_phone(worker.worker_id, phone)
        return self.get(worker.worker_id)
