from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import now_utc, parse_cutoff
from ..common.validators import optional_text, require_non_empty
from ..core.constants import DEFAULT_AUTO_SIGNOUT_TIME
from ..core.enums import SiteRole
from ..core.exceptions import SiteNotFound
from ..grants.service import AuthorizationDirectory
from .model import Site
from .repository import SiteRepository

logger = logging.getLogger(__name__)

_UNSET = object()


class SiteRegistry:
    """Use case: create and configure sites.

    A site is only ever created together with its creator's admin grant, so
    no site exists without an administrator.
    """

    def __init__(self, sites: SiteRepository, directory: AuthorizationDirectory, *, default_cutoff=DEFAULT_AUTO_SIGNOUT_TIME):
        self._sites = sites
        self._directory = directory
        self._default_cutoff = parse_cutoff(default_cutoff)

    def create(
        self,
        *,
        creator_id: str,
        name: str,
        address: Optional[str] = None,
        cutoff=None,
        now: datetime | None = None,
    ) -> Site:
        creator_id = require_non_empty(creator_id, "Creator")
        name = require_non_empty(name, "Site name")
        auto_signout_time = self._default_cutoff if cutoff is None else parse_cutoff(cutoff)

        site = self._sites.create_with_admin(
            site_id=str(uuid.uuid4()),
            name=name,
            address=optional_text(address),
            auto_signout_time=auto_signout_time,
            creator_id=creator_id,
            role=SiteRole.ADMIN,
            created_at=now or now_utc(),
        )
        logger.info("Site %s created by %s (auto sign-out %s)", site.site_id, creator_id, auto_signout_time)
        return site

    def update(
        self,
        *,
        caller_id: str,
        site_id: str,
        name=_UNSET,
        address=_UNSET,
        cutoff=_UNSET,
    ) -> Site:
        """Edit name/address/cutoff. Omitted fields keep their value."""

        self._directory.require_admin(caller_id, site_id)
        current = self.get(site_id)

        new_name = current.name if name is _UNSET else require_non_empty(name, "Site name")
        new_address = current.address if address is _UNSET else optional_text(address)
        new_cutoff = current.auto_signout_time if cutoff is _UNSET else parse_cutoff(cutoff)

        self._sites.update(
            site_id=site_id,
            name=new_name,
            address=new_address,
            auto_signout_time=new_cutoff,
        )
        logger.info("Site %s updated by %s", site_id, caller_id)
        return Site(
            site_id=current.site_id,
            name=new_name,
            address=new_address,
            auto_signout_time=new_cutoff,
            created_by=current.created_by,
            created_at=current.created_at,
        )

    def get(self, site_id: str) -> Site:
        site = self._sites.get_by_id(site_id)
        if not site:
            raise SiteNotFound("Site not found")
        return site

    def get_for(self, *, caller_id: str, site_id: str) -> Site:
        self._directory.require_admin(caller_id, site_id)
        return self.get(site_id)

    def list_for(self, principal_id: str) -> Sequence[Site]:
        site_ids = [site_id for site_id, _ in self._directory.grants_for(principal_id)]
        return self._sites.list_by_ids(site_ids)

    def list_all(self) -> Sequence[Site]:
        return self._sites.list_all()
