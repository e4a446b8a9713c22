from __future__ import annotations

import logging
from datetime import datetime
from typing import Sequence, Set, Tuple

from ..common.datetime_utils import now_utc
from ..common.validators import require_non_empty
from ..core.enums import SiteRole
from ..core.exceptions import ConflictingGrant, InvalidInput, LastAdmin, NotAuthorized, NotFound
from .model import SiteGrant
from .repository import GrantRepository

logger = logging.getLogger(__name__)


def _as_role(role) -> SiteRole:
    if isinstance(role, SiteRole):
        return role
    try:
        return SiteRole(str(role))
    except ValueError:
        raise InvalidInput(f"Unknown role: {role!r}")


class AuthorizationDirectory:
    """Who may administer which site.

    Every answer is a direct lookup against the store; nothing is cached, so
    a revoke takes effect as soon as it is committed.
    """

    def __init__(self, grants: GrantRepository):
        self._grants = grants

    def grants_for(self, principal_id: str) -> Set[Tuple[str, SiteRole]]:
        return {(g.site_id, g.role) for g in self._grants.list_for_principal(principal_id)}

    def is_admin(self, principal_id: str, site_id: str) -> bool:
        if not principal_id or not site_id:
            return False
        return self._grants.get(site_id=site_id, principal_id=principal_id) is not None

    def role_on(self, principal_id: str, site_id: str) -> SiteRole | None:
        grant = self._grants.get(site_id=site_id, principal_id=principal_id)
        return grant.role if grant else None

    def require_admin(self, principal_id: str, site_id: str) -> None:
        if not self.is_admin(principal_id, site_id):
            raise NotAuthorized("Access denied")

    def grant(self, *, site_id: str, principal_id: str, role=SiteRole.ADMIN, now: datetime | None = None) -> SiteGrant:
        """Grant ``role`` on a site.

        Idempotent for an identical grant; a different existing role is an
        explicit ConflictingGrant, never an overwrite.
        """

        site_id = require_non_empty(site_id, "Site")
        principal_id = require_non_empty(principal_id, "Principal")
        role = _as_role(role)
        granted_at = now or now_utc()

        if self._grants.insert(site_id=site_id, principal_id=principal_id, role=role, granted_at=granted_at):
            logger.info("Granted %s on site %s to %s", role.value, site_id, principal_id)
            return SiteGrant(site_id=site_id, principal_id=principal_id, role=role, granted_at=granted_at)

        existing = self._grants.get(site_id=site_id, principal_id=principal_id)
        if existing is None:
            # Revoked between our insert and the read-back; let the caller retry.
            raise ConflictingGrant("Grant changed concurrently, please retry")
        if existing.role != role:
            raise ConflictingGrant(f"Principal already holds role '{existing.role.value}' on this site")
        return existing

    def invite(self, *, caller_id: str, site_id: str, principal_id: str, role=SiteRole.SUPERVISOR) -> SiteGrant:
        if self.role_on(caller_id, site_id) != SiteRole.ADMIN:
            raise NotAuthorized("Access denied")
        return self.grant(site_id=site_id, principal_id=principal_id, role=role)

    def revoke(self, *, caller_id: str, site_id: str, principal_id: str) -> None:
        if self.role_on(caller_id, site_id) != SiteRole.ADMIN:
            raise NotAuthorized("Access denied")

        result = self._grants.delete_keeping_an_admin(site_id=site_id, principal_id=principal_id)
        if result is None:
            raise LastAdmin("A site must keep at least one admin")
        if not result:
            raise NotFound("Grant not found")
        logger.info("Revoked grant on site %s from %s", site_id, principal_id)

    def list_for_site(self, *, caller_id: str, site_id: str) -> Sequence[SiteGrant]:
        self.require_admin(caller_id, site_id)
        return self._grants.list_for_site(site_id)
