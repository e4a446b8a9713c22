from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import SignOutMethod


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one stay of a worker at a site.

    Open while ``signed_out_at`` is None. Closed records are never modified.
    """

    record_id: int
    worker_id: str
    site_id: str
    signed_in_at: datetime
    signed_out_at: Optional[datetime] = None
    sign_out_method: Optional[SignOutMethod] = None

    @property
    def is_open(self) -> bool:
        return self.signed_out_at is None


@dataclass(frozen=True)
class RosterRow:
    """Read-model for the on-site roster (joined with the worker profile)."""

    record_id: int
    worker_id: str
    worker_name: str
    company: str
    signed_in_at: datetime
