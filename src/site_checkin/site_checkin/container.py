from __future__ import annotations

from dataclasses import dataclass
from types import ModuleType
from typing import Any

from .accounts.mysql_principal_repository import MySQLPrincipalRepository
from .accounts.repository import PrincipalRepository
from .accounts.service import AuthService
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceLedger
from .common.datetime_utils import get_zone
from .core import constants
from .credentials.issuer import CredentialIssuer
from .database.connection import DBConfig, DatabaseConnection
from .gateway.service import ValidationGateway
from .grants.mysql_grant_repository import MySQLGrantRepository
from .grants.repository import GrantRepository
from .grants.service import AuthorizationDirectory
from .scheduler.mysql_sweep_repository import MySQLSweepMarkerRepository
from .scheduler.repository import SweepMarkerRepository
from .scheduler.service import AutoSignOutScheduler
from .sites.mysql_site_repository import MySQLSiteRepository
from .sites.repository import SiteRepository
from .sites.service import SiteRegistry
from .workers.mysql_worker_repository import MySQLWorkerRepository
from .workers.repository import WorkerRepository
from .workers.service import WorkerService


@dataclass(frozen=True)
class Container:
    principals_repo: PrincipalRepository
    workers_repo: WorkerRepository
    grants_repo: GrantRepository
    sites_repo: SiteRepository
    attendance_repo: AttendanceRepository
    sweeps_repo: SweepMarkerRepository

    auth_service: AuthService
    worker_service: WorkerService
    directory: AuthorizationDirectory
    site_registry: SiteRegistry
    ledger: AttendanceLedger
    gateway: ValidationGateway
    scheduler: AutoSignOutScheduler


def _setting(settings: ModuleType | None, name: str, default: Any) -> Any:
    return getattr(settings, name, default) if settings is not None else default


def wire(
    *,
    principals_repo: PrincipalRepository,
    workers_repo: WorkerRepository,
    grants_repo: GrantRepository,
    sites_repo: SiteRepository,
    attendance_repo: AttendanceRepository,
    sweeps_repo: SweepMarkerRepository,
    settings: ModuleType | None = None,
) -> Container:
    """Build services on top of any repository implementations."""

    directory = AuthorizationDirectory(grants_repo)
    issuer = CredentialIssuer(
        max_attempts=int(_setting(settings, "CREDENTIAL_MAX_ATTEMPTS", constants.DEFAULT_CREDENTIAL_MAX_ATTEMPTS))
    )
    worker_service = WorkerService(workers_repo, issuer)
    auth_service = AuthService(principals_repo, workers_repo, directory)
    site_registry = SiteRegistry(
        sites_repo,
        directory,
        default_cutoff=_setting(settings, "DEFAULT_AUTO_SIGNOUT_TIME", constants.DEFAULT_AUTO_SIGNOUT_TIME),
    )
    ledger = AttendanceLedger(attendance_repo, directory)
    gateway = ValidationGateway(worker_service, directory, ledger)
    scheduler = AutoSignOutScheduler(
        site_registry,
        ledger,
        sweeps_repo,
        zone=get_zone(str(_setting(settings, "SITE_TIMEZONE", constants.DEFAULT_SITE_TIMEZONE))),
        interval_seconds=int(_setting(settings, "SWEEP_INTERVAL_SECONDS", constants.DEFAULT_SWEEP_INTERVAL_SECONDS)),
        max_catchup_days=int(_setting(settings, "SWEEP_MAX_CATCHUP_DAYS", constants.DEFAULT_SWEEP_MAX_CATCHUP_DAYS)),
        retry_base_seconds=int(
            _setting(settings, "SWEEP_RETRY_BASE_SECONDS", constants.DEFAULT_SWEEP_RETRY_BASE_SECONDS)
        ),
        retry_max_seconds=int(_setting(settings, "SWEEP_RETRY_MAX_SECONDS", constants.DEFAULT_SWEEP_RETRY_MAX_SECONDS)),
    )

    return Container(
        principals_repo=principals_repo,
        workers_repo=workers_repo,
        grants_repo=grants_repo,
        sites_repo=sites_repo,
        attendance_repo=attendance_repo,
        sweeps_repo=sweeps_repo,
        auth_service=auth_service,
        worker_service=worker_service,
        directory=directory,
        site_registry=site_registry,
        ledger=ledger,
        gateway=gateway,
        scheduler=scheduler,
    )


def build_container(*, db_config: dict, settings: ModuleType | None = None) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection.get_instance(config)

    return wire(
        principals_repo=MySQLPrincipalRepository(conn),
        workers_repo=MySQLWorkerRepository(conn),
        grants_repo=MySQLGrantRepository(conn),
        sites_repo=MySQLSiteRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        sweeps_repo=MySQLSweepMarkerRepository(conn),
        settings=settings,
    )
