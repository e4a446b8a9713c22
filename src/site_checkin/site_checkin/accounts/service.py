from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import FrozenSet, Optional, Tuple

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.datetime_utils import now_utc
from ..common.validators import require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import SiteRole
from ..core.exceptions import AuthenticationError, InvalidInput
from ..grants.service import AuthorizationDirectory
from ..workers.model import Worker
from ..workers.repository import WorkerRepository
from .model import Principal
from .repository import PrincipalRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionPrincipal:
    """What we store into Flask session after login."""

    principal_id: str
    display_name: str


@dataclass(frozen=True)
class AccountView:
    """Explicit answer to "who is this principal?".

    A principal may be a worker, an administrator of some sites, both or
    neither; callers branch on these fields instead of probing for rows.
    """

    principal_id: str
    display_name: str
    worker: Optional[Worker]
    grants: FrozenSet[Tuple[str, SiteRole]]

    @property
    def is_worker(self) -> bool:
        return self.worker is not None

    @property
    def administered_site_ids(self) -> list[str]:
        return sorted(site_id for site_id, _ in self.grants)


class AuthService:
    """Use case: sign up, log in, describe the current principal."""

    def __init__(
        self,
        principals: PrincipalRepository,
        workers: WorkerRepository,
        directory: AuthorizationDirectory,
    ):
        self._principals = principals
        self._workers = workers
        self._directory = directory

    @staticmethod
    def _normalize_email(email: str) -> str:
        email = require_non_empty(email, "Email").lower()
        if "@" not in email or email.startswith("@") or email.endswith("@"):
            raise InvalidInput("Email is not valid")
        return email

    def sign_up(self, *, email: str, password: str, display_name: str, now: datetime | None = None) -> Principal:
        email = self._normalize_email(email)
        display_name = require_non_empty(display_name, "Name")
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        principal = self._principals.create(
            principal_id=str(uuid.uuid4()),
            email=email,
            password_hash=generate_password_hash(password),
            display_name=display_name,
            created_at=now or now_utc(),
        )
        logger.info("Principal %s signed up", principal.principal_id)
        return principal

    def authenticate(self, email: str, password: str) -> SessionPrincipal:
        principal = self._principals.get_by_email((email or "").strip().lower())
        if not principal:
            raise AuthenticationError("Wrong email or password")

        try:
            ok = check_password_hash(principal.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError("Wrong email or password")

        return SessionPrincipal(principal_id=principal.principal_id, display_name=principal.display_name)

    def describe(self, principal_id: str) -> AccountView:
        principal = self._principals.get_by_id(principal_id)
        if not principal:
            raise AuthenticationError("Unknown principal")

        return AccountView(
            principal_id=principal.principal_id,
            display_name=principal.display_name,
            worker=self._workers.get_by_id(principal.principal_id),
            grants=frozenset(self._directory.grants_for(principal.principal_id)),
        )
