from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Sequence

from ..common.datetime_utils import now_utc
from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import SignOutMethod
from ..core.exceptions import InvalidInput, InvalidTimestamp, NotAuthorized, NotOpen, RecordNotFound
from ..grants.service import AuthorizationDirectory
from .model import AttendanceRecord, RosterRow
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceLedger:
    """Sign-in/sign-out records per (worker, site).

    The "one open record per pair" rule lives in the store; ``open`` is a
    single insert and never a read-then-write.
    """

    def __init__(self, attendance: AttendanceRepository, directory: AuthorizationDirectory):
        self._attendance = attendance
        self._directory = directory

    def open(self, worker_id: str, site_id: str, at: datetime) -> AttendanceRecord:
        worker_id = require_non_empty(worker_id, "Worker")
        site_id = require_non_empty(site_id, "Site")
        if not isinstance(at, datetime):
            raise InvalidTimestamp("Sign-in time is required")
        at = at.replace(microsecond=0)

        record = self._attendance.insert_open(worker_id=worker_id, site_id=site_id, signed_in_at=at)
        logger.info("Worker %s signed in at site %s (record %s)", worker_id, site_id, record.record_id)
        return record

    def close(self, record_id: int, at: datetime, *, method: SignOutMethod = SignOutMethod.MANUAL) -> AttendanceRecord:
        if isinstance(at, datetime):
            at = at.replace(microsecond=0)
        record = self._attendance.get_by_id(int(record_id))
        if not record:
            raise RecordNotFound("Attendance record not found")
        if not record.is_open:
            raise NotOpen("Attendance record is already closed")
        if not isinstance(at, datetime) or at < record.signed_in_at:
            raise InvalidTimestamp("Sign-out time cannot be before sign-in time")

        if not self._attendance.close(record_id=record.record_id, signed_out_at=at, method=method):
            # Lost a race with another close (manual or the sweep).
            raise NotOpen("Attendance record is already closed")

        logger.info("Record %s closed (%s)", record.record_id, method.value)
        return AttendanceRecord(
            record_id=record.record_id,
            worker_id=record.worker_id,
            site_id=record.site_id,
            signed_in_at=record.signed_in_at,
            signed_out_at=at,
            sign_out_method=method,
        )

    def open_records_for(self, site_id: str) -> Sequence[AttendanceRecord]:
        return self._attendance.list_open_for_site(site_id)

    def close_all_open_before(self, site_id: str, cutoff: datetime) -> int:
        """Close every open record at the site signed in before ``cutoff``.

        Sign-out is set to ``cutoff`` itself. Running it again closes nothing.
        """

        closed = self._attendance.close_all_open_before(site_id=site_id, cutoff=cutoff)
        if closed:
            logger.info("Auto sign-out closed %d record(s) at site %s (cutoff %s)", closed, site_id, cutoff)
        return closed

    def get_open(self, worker_id: str, site_id: str) -> AttendanceRecord | None:
        return self._attendance.get_open(worker_id=worker_id, site_id=site_id)

    # -- authorized views ---------------------------------------------------

    def sign_out(self, *, caller_id: str, record_id: int, now: datetime | None = None) -> AttendanceRecord:
        """Manual sign-out by the record's worker or an admin of its site."""

        record = self._attendance.get_by_id(int(record_id))
        if not record:
            raise RecordNotFound("Attendance record not found")
        if caller_id != record.worker_id and not self._directory.is_admin(caller_id, record.site_id):
            raise NotAuthorized("Access denied")
        return self.close(record.record_id, now or now_utc(), method=SignOutMethod.MANUAL)

    def roster(self, *, caller_id: str, site_id: str) -> Sequence[RosterRow]:
        self._directory.require_admin(caller_id, site_id)
        return self._attendance.roster_for_site(site_id)

    def history_for_worker(self, worker_id: str, *, limit: int = DEFAULT_HISTORY_LIMIT) -> Sequence[AttendanceRecord]:
        return self._attendance.list_for_worker(worker_id, max(1, int(limit)))

    def history_for_site(self, *, caller_id: str, site_id: str, start: date, end: date) -> Sequence[AttendanceRecord]:
        """Records signed in between ``start`` and ``end`` (inclusive dates, UTC)."""

        self._directory.require_admin(caller_id, site_id)
        if end < start:
            raise InvalidInput("End date cannot be before start date")
        return self._attendance.list_for_site(
            site_id=site_id,
            start=datetime.combine(start, datetime.min.time()),
            end=datetime.combine(end + timedelta(days=1), datetime.min.time()),
        )
