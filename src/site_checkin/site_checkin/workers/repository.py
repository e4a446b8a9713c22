from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from .model import Worker


class WorkerRepository(Protocol):
    """Repository interface for workers.

    The store enforces two unique constraints: one row per worker id and one
    row per credential. ``create`` reports which one was hit.
    """

    def get_by_id(self, worker_id: str) -> Optional[Worker]:
        raise NotImplementedError

    def get_by_credential(self, credential: str) -> Optional[Worker]:
        raise NotImplementedError

    def credential_exists(self, credential: str) -> bool:
        raise NotImplementedError

    def create(
        self,
        *,
        worker_id: str,
        name: str,
        company: str,
        phone: Optional[str],
        credential: str,
        created_at: datetime,
    ) -> Worker:
        """Raises DuplicateWorker or DuplicateCredential on a unique violation."""

        raise NotImplementedError

    def update_phone(self, worker_id: str, phone: Optional[str]) -> bool:
        raise NotImplementedError
