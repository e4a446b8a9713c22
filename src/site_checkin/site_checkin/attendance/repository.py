from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import SignOutMethod
from .model import AttendanceRecord, RosterRow


class AttendanceRepository(Protocol):
    def get_by_id(self, record_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_open(self, *, worker_id: str, site_id: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def insert_open(self, *, worker_id: str, site_id: str, signed_in_at: datetime) -> AttendanceRecord:
        """Single atomic insert. Raises AlreadyOnSite on the open-record constraint."""

        raise NotImplementedError

    def close(self, *, record_id: int, signed_out_at: datetime, method: SignOutMethod) -> bool:
        """Close if still open and not before sign-in. False when nothing changed."""

        raise NotImplementedError

    def close_all_open_before(self, *, site_id: str, cutoff: datetime) -> int:
        raise NotImplementedError

    def list_open_for_site(self, site_id: str) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def roster_for_site(self, site_id: str) -> Sequence[RosterRow]:
        raise NotImplementedError

    def list_for_worker(self, worker_id: str, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_site(self, *, site_id: str, start: datetime, end: datetime) -> Sequence[AttendanceRecord]:
        """Records signed in within [start, end)."""

        raise NotImplementedError
