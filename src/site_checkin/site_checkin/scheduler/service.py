from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from apscheduler.schedulers.background import BackgroundScheduler

from ..attendance.service import AttendanceLedger
from ..common.datetime_utils import cutoff_instant, latest_cutoff, local_date_of, now_utc
from ..core.constants import (
    DEFAULT_SWEEP_INTERVAL_SECONDS,
    DEFAULT_SWEEP_MAX_CATCHUP_DAYS,
    DEFAULT_SWEEP_RETRY_BASE_SECONDS,
    DEFAULT_SWEEP_RETRY_MAX_SECONDS,
)
from ..core.exceptions import DomainError, StoreUnavailable
from ..sites.model import Site
from ..sites.service import SiteRegistry
from .repository import SweepMarkerRepository

logger = logging.getLogger(__name__)

JOB_ID = "auto-signout-sweep"


@dataclass
class SweepReport:
    closed: Dict[str, int] = field(default_factory=dict)
    failed: List[str] = field(default_factory=list)
    deferred: List[str] = field(default_factory=list)

    @property
    def total_closed(self) -> int:
        return sum(self.closed.values())


@dataclass
class _Backoff:
    failures: int
    not_before: datetime


class AutoSignOutScheduler:
    """Close open attendance records once each site's daily cutoff passes.

    Work is discovered from state on every tick: for each site, the cutoffs
    between its persisted sweep marker and ``now`` are due. Closing is
    idempotent, so overlapping ticks or a second scheduler process only
    repeat no-ops. Cutoffs are evaluated in one canonical zone.
    """

    def __init__(
        self,
        sites: SiteRegistry,
        ledger: AttendanceLedger,
        markers: SweepMarkerRepository,
        *,
        zone,
        interval_seconds: int = DEFAULT_SWEEP_INTERVAL_SECONDS,
        max_catchup_days: int = DEFAULT_SWEEP_MAX_CATCHUP_DAYS,
        retry_base_seconds: int = DEFAULT_SWEEP_RETRY_BASE_SECONDS,
        retry_max_seconds: int = DEFAULT_SWEEP_RETRY_MAX_SECONDS,
    ):
        self._sites = sites
        self._ledger = ledger
        self._markers = markers
        self._zone = zone
        self._interval_seconds = max(1, int(interval_seconds))
        self._max_catchup_days = max(1, int(max_catchup_days))
        self._retry_base_seconds = max(1, int(retry_base_seconds))
        self._retry_max_seconds = max(self._retry_base_seconds, int(retry_max_seconds))
        self._backoff: Dict[str, _Backoff] = {}
        self._scheduler: Optional[BackgroundScheduler] = None

    # -- schedule math ------------------------------------------------------

    def due_cutoffs(self, site: Site, now: datetime, marker: Optional[datetime]) -> List[datetime]:
        """Cutoff instants still to sweep for ``site``, oldest first.

        Walks forward from the marker; a site that was never swept starts from
        the last cutoff before it was created. At most ``max_catchup_days``
        cutoffs are returned, so a long outage is worked off over several
        ticks without skipping a day.
        """

        latest = latest_cutoff(now, site.auto_signout_time, self._zone)
        if marker is None:
            marker = latest_cutoff(site.created_at, site.auto_signout_time, self._zone)
        if marker >= latest:
            return []

        day = local_date_of(marker, self._zone)
        due: List[datetime] = []
        while len(due) < self._max_catchup_days:
            instant = cutoff_instant(day, site.auto_signout_time, self._zone)
            if instant > latest:
                break
            if instant > marker:
                due.append(instant)
            day += timedelta(days=1)
        return due

    # -- sweeping -------------------------------------------------------------

    def sweep_site(self, site: Site, now: datetime) -> int:
        marker = self._markers.get(site.site_id)
        closed = 0
        for cutoff in self.due_cutoffs(site, now, marker):
            closed += self._ledger.close_all_open_before(site.site_id, cutoff)
            self._markers.advance(site_id=site.site_id, cutoff=cutoff, now=now)
        return closed

    def tick(self, now: datetime | None = None) -> SweepReport:
        """Sweep every site once. Never raises for a single site's failure."""

        now = now or now_utc()
        report = SweepReport()

        try:
            sites = list(self._sites.list_all())
        except StoreUnavailable as e:
            logger.warning("Auto sign-out tick skipped, sites unavailable: %s", e)
            return report

        for site in sites:
            backoff = self._backoff.get(site.site_id)
            if backoff and now < backoff.not_before:
                report.deferred.append(site.site_id)
                continue

            try:
                report.closed[site.site_id] = self.sweep_site(site, now)
            except StoreUnavailable as e:
                report.failed.append(site.site_id)
                self._defer(site.site_id, now)
                logger.warning("Auto sign-out for site %s failed, retrying later: %s", site.site_id, e)
            except DomainError as e:
                report.failed.append(site.site_id)
                logger.warning("Auto sign-out for site %s rejected: %s", site.site_id, e)
            except Exception:
                report.failed.append(site.site_id)
                logger.exception("Auto sign-out for site %s crashed", site.site_id)
            else:
                self._backoff.pop(site.site_id, None)

        if report.total_closed or report.failed:
            logger.info(
                "Auto sign-out tick: closed=%d failed=%d deferred=%d",
                report.total_closed,
                len(report.failed),
                len(report.deferred),
            )
        return report

    def _defer(self, site_id: str, now: datetime) -> None:
        failures = self._backoff[site_id].failures + 1 if site_id in self._backoff else 1
        delay = min(self._retry_base_seconds * (2 ** (failures - 1)), self._retry_max_seconds)
        self._backoff[site_id] = _Backoff(failures=failures, not_before=now + timedelta(seconds=delay))

    # -- lifecycle ----------------------------------------------------------

    def start(self) -> BackgroundScheduler:
        """Run ``tick`` every interval in a background thread.

        The first run fires immediately so cutoffs missed while the process
        was down are caught up on start.
        """

        if self._scheduler is not None:
            return self._scheduler

        scheduler = BackgroundScheduler(
            timezone=self._zone,
            job_defaults={
                "coalesce": True,
                "max_instances": 1,
                "misfire_grace_time": self._interval_seconds,
            },
        )
        scheduler.add_job(
            self.tick,
            "interval",
            seconds=self._interval_seconds,
            id=JOB_ID,
            next_run_time=datetime.now(self._zone),
        )
        scheduler.start()
        self._scheduler = scheduler
        logger.info("Auto sign-out scheduler started (every %ss)", self._interval_seconds)
        return scheduler

    def shutdown(self, *, wait: bool = True) -> None:
        if self._scheduler is None:
            return
        self._scheduler.shutdown(wait=wait)
        self._scheduler = None
        logger.info("Auto sign-out scheduler stopped")
