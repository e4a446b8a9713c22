from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..attendance.model import AttendanceRecord
from ..attendance.service import AttendanceLedger
from ..common.datetime_utils import now_utc
from ..common.validators import require_non_empty
from ..core.enums import ScanStatus
from ..core.exceptions import AlreadyOnSite, NotAuthorized
from ..grants.service import AuthorizationDirectory
from ..workers.model import Worker
from ..workers.service import WorkerService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScanOutcome:
    status: ScanStatus
    worker: Worker
    site_id: str
    record: Optional[AttendanceRecord]
    message: str

    @property
    def accepted(self) -> bool:
        return self.status == ScanStatus.ACCEPTED


class ValidationGateway:
    """Presented -> Resolved -> Authorized -> Opened.

    Unknown credentials and unauthorized operators raise; a duplicate scan of
    a worker who is already on site is a non-fatal DUPLICATE outcome. Only the
    ACCEPTED path writes an attendance record.
    """

    def __init__(self, workers: WorkerService, directory: AuthorizationDirectory, ledger: AttendanceLedger):
        self._workers = workers
        self._directory = directory
        self._ledger = ledger

    def present(
        self,
        *,
        operator_id: str,
        credential: str,
        site_id: str,
        now: datetime | None = None,
    ) -> ScanOutcome:
        site_id = require_non_empty(site_id, "Site")

        worker = self._workers.resolve(credential)

        if not self._directory.is_admin(operator_id, site_id):
            logger.warning("Scan at site %s refused: operator %s is not an admin", site_id, operator_id)
            raise NotAuthorized("Access denied")

        try:
            record = self._ledger.open(worker.worker_id, site_id, now or now_utc())
        except AlreadyOnSite:
            logger.info("Duplicate scan for worker %s at site %s", worker.worker_id, site_id)
            return ScanOutcome(
                status=ScanStatus.DUPLICATE,
                worker=worker,
                site_id=site_id,
                record=self._ledger.get_open(worker.worker_id, site_id),
                message=f"{worker.name} is already signed in at this site",
            )

        return ScanOutcome(
            status=ScanStatus.ACCEPTED,
            worker=worker,
            site_id=site_id,
            record=record,
            message=f"{worker.name} signed in",
        )
